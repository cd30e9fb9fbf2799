"""Thermal video screens streaming from a drone.

``ThermalStreamScreen`` renders the raw thermal stream locally and mirrors
its rendering settings to the drone; ``EmbeddedThermalStreamScreen`` lets the
drone blend the thermal image itself. Both send their rendering settings once
per connection, when the drone is connected.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from functools import partial
from typing import Any, ClassVar

from groundctl.core.errors import PaletteLoadError
from groundctl.core.loader import load_palettes
from groundctl.core.model import (
    ConnectionState,
    DeviceState,
    PeripheralKind,
    ThermalMode,
    ThermalPalette,
    ThermalProcessing,
    ThermalRenderStatus,
)
from groundctl.core.projector import connection_label, palette_selector, thermal_sensor_for, thermal_stats
from groundctl.core.session import ReferenceGroup
from groundctl.core.surface import Surface
from groundctl.screens.base import Screen
from groundctl.sdk.base import GroundSdk

LOGGER = logging.getLogger(__name__)

STATS_WIDGETS = ("lowest_temperature", "highest_temperature", "probe_temperature", "probe_x", "probe_y")


def _connected(state: DeviceState | None) -> bool:
    return state is not None and state.connection_state is ConnectionState.CONNECTED


def show_thermal_stats(surface: Surface, status: ThermalRenderStatus | None) -> None:
    view = thermal_stats(status)
    values = (view.lowest, view.highest, view.probe, view.probe_x, view.probe_y)
    for widget, value in zip(STATS_WIDGETS, values):
        surface.set(widget, value)


class PaletteScreen(Screen):
    """Screen offering a selection among the palettes of the supported kinds."""

    palette_kinds: ClassVar[tuple[str, ...]] = ("relative", "absolute", "spot")

    def __init__(
        self,
        sdk: GroundSdk,
        surface: Surface | None = None,
        *,
        palettes: Mapping[str, ThermalPalette] | None = None,
        processing: ThermalProcessing | None = None,
    ) -> None:
        super().__init__(sdk, surface)
        if palettes is None:
            palettes = load_palettes().palettes
        self.palettes: tuple[ThermalPalette, ...] = tuple(
            palette
            for kind in self.palette_kinds
            for palette in palettes.values()
            if palette.kind == kind
        )
        if not self.palettes:
            kinds = ", ".join(self.palette_kinds)
            raise PaletteLoadError(f"Screen '{self.name}' needs at least one palette of kind: {kinds}")
        self.processing = processing or ThermalProcessing()
        self.palette_index = 0

    @property
    def palette_ids(self) -> tuple[str, ...]:
        return tuple(palette.id for palette in self.palettes)

    @property
    def palette(self) -> ThermalPalette:
        return self.palettes[self.palette_index]

    def on_select_palette(self, index: int) -> None:
        self.show_palette(index)
        LOGGER.debug("Screen %s: palette %s", self.name, self.palette.id)

    def show_palette(self, index: int) -> None:
        selector = palette_selector(self.palette_ids, index)
        self.palette_index = selector.index or 0
        self.surface.set("palette", selector)


class ThermalStreamScreen(PaletteScreen):
    name = "thermal_stream"
    title = "Thermal live stream rendered locally, with palettes and temperatures"
    selectors = ("palette",)

    thermal_mode: ClassVar[ThermalMode] = ThermalMode.STANDARD
    camera_kind: ClassVar[PeripheralKind] = PeripheralKind.THERMAL_CAMERA
    sends_processing: ClassVar[bool] = True
    shows_stats: ClassVar[bool] = True

    def __init__(
        self,
        sdk: GroundSdk,
        surface: Surface | None = None,
        *,
        palettes: Mapping[str, ThermalPalette] | None = None,
        processing: ThermalProcessing | None = None,
    ) -> None:
        super().__init__(sdk, surface, palettes=palettes, processing=processing)
        self._render_initialized = False
        self.drone_session = self.add_session(
            "drone", start=self._start_drone_monitors, reset=self.reset_ui
        )

    @property
    def render_initialized(self) -> bool:
        return self._render_initialized

    def reset_ui(self) -> None:
        self._render_initialized = False
        self.surface.set("drone_state", connection_label(None))
        self.surface.set("stream", None)
        self.surface.set("thermal_sensor", None)
        if self.shows_stats:
            show_thermal_stats(self.surface, None)
        self.show_palette(0)

    def on_auto_connection(self, auto_connection: Any) -> None:
        self.drone_session.update(auto_connection.drone)

    def on_select_palette(self, index: int) -> None:
        super().on_select_palette(index)
        control = self.drone_session.value("thermal_control")
        if control is None:
            return
        state = self.drone_session.value("state")
        if not self._render_initialized:
            self._send_render_settings(control, state)
        elif _connected(state):
            control.send_palette(self.palette)

    def render_status(self, status: ThermalRenderStatus | None) -> None:
        """Show the temperatures reported by the local thermal renderer."""
        if self.shows_stats:
            show_thermal_stats(self.surface, status)

    def _start_drone_monitors(self, drone: Any, refs: ReferenceGroup) -> None:
        refs["state"] = drone.get_state(partial(self._on_state, refs))
        refs["stream_server"] = drone.get_peripheral(
            PeripheralKind.STREAM_SERVER, partial(self._on_thermal_stream_server, drone, refs)
        )
        refs["thermal_control"] = drone.get_peripheral(
            PeripheralKind.THERMAL_CONTROL, partial(self._on_thermal_control, refs)
        )
        refs["thermal_camera"] = drone.get_peripheral(
            self.camera_kind, partial(self._on_thermal_camera, drone, refs)
        )

    def _on_state(self, refs: ReferenceGroup, state: DeviceState | None) -> None:
        if state is None:
            return
        self.surface.set("drone_state", connection_label(state))
        control = refs.value("thermal_control")
        if control is not None:
            self._send_render_settings(control, state)

    def _on_thermal_stream_server(self, drone: Any, refs: ReferenceGroup, stream_server: Any) -> None:
        if stream_server is None:
            return
        stream_server.enabled = self._camera_active(refs)
        if "live_stream" not in refs:
            refs["live_stream"] = stream_server.live(partial(self._on_thermal_live_stream, drone, refs))

    def _on_thermal_live_stream(self, drone: Any, refs: ReferenceGroup, stream: Any) -> None:
        if stream is not None and self._camera_active(refs):
            self._start_video(drone, refs, stream)
        self.surface.set("stream", stream)

    def _on_thermal_control(self, refs: ReferenceGroup, control: Any) -> None:
        if control is None:
            return
        setting = control.setting
        if setting.mode is not self.thermal_mode:
            setting.mode = self.thermal_mode
        self._send_render_settings(control, refs.value("state"))

    def _on_thermal_camera(self, drone: Any, refs: ReferenceGroup, camera: Any) -> None:
        stream = refs.value("live_stream")
        if stream is not None and camera is not None and camera.is_active:
            self._start_video(drone, refs, stream)

    def _start_video(self, drone: Any, refs: ReferenceGroup, stream: Any) -> None:
        stream_server = refs.value("stream_server")
        if stream_server is not None:
            stream_server.enabled = True
        self.surface.set("thermal_sensor", thermal_sensor_for(drone.model))
        stream.play()

    def _send_render_settings(self, control: Any, state: DeviceState | None) -> None:
        if self._render_initialized:
            return
        if not _connected(state):
            return
        control.send_rendering(self.processing.rendering)
        if self.sends_processing:
            control.send_emissivity(self.processing.emissivity)
            control.send_background_temperature(self.processing.background_temperature)
        control.send_palette(self.palette)
        self._render_initialized = True
        LOGGER.debug("Screen %s: thermal rendering sent with palette %s", self.name, self.palette.id)

    @staticmethod
    def _camera_active(refs: ReferenceGroup) -> bool:
        camera = refs.value("thermal_camera")
        return camera is not None and camera.is_active


class EmbeddedThermalStreamScreen(ThermalStreamScreen):
    """Thermal live stream blended on the drone."""

    name = "thermal_embedded"
    title = "Thermal live stream blended by the drone, with palettes"
    palette_kinds = ("relative", "spot")

    thermal_mode = ThermalMode.BLENDED
    camera_kind = PeripheralKind.BLENDED_THERMAL_CAMERA
    sends_processing = False
    shows_stats = False
