"""Camera sample: active state, camera mode, capture and white balance.

Works with both camera APIs. Each controller subscribes to the legacy and the
current camera peripheral; whichever the drone provides drives the view.
"""

from __future__ import annotations

from functools import partial
from typing import Any, ClassVar

from groundctl.core.camera import CAMERA_FACETS, CameraFacet
from groundctl.core.model import ButtonState, PickerState
from groundctl.core.projector import CAMERA_MODES, active_label, connection_label, mode_selector
from groundctl.core.session import ReferenceGroup
from groundctl.core.surface import Surface
from groundctl.screens.base import Screen
from groundctl.sdk.base import GroundSdk


class CameraController:
    """Follows the camera peripherals of one drone for a part of the screen."""

    prefix: ClassVar[str] = ""

    def __init__(self, surface: Surface) -> None:
        self.surface = surface
        self.facet: CameraFacet | None = None

    def start_monitoring(self, drone: Any, refs: ReferenceGroup) -> None:
        for facet_type in CAMERA_FACETS:
            refs[f"{self.prefix}.{facet_type.kind.value}"] = drone.get_peripheral(
                facet_type.kind, partial(self._on_camera, facet_type)
            )

    def stop_monitoring(self) -> None:
        self.facet = None
        self.reset_view()

    def reset_view(self) -> None:
        raise NotImplementedError

    def update_view(self, facet: CameraFacet) -> None:
        raise NotImplementedError

    def _on_camera(self, facet_type: type[CameraFacet], camera: Any) -> None:
        if camera is None:
            if self.facet is not None and self.facet.kind is facet_type.kind:
                self.stop_monitoring()
            return
        self.facet = facet_type(camera)
        self.update_view(self.facet)


class ActiveStateController(CameraController):
    """Shows whether the camera is active.

    An inactive camera cannot capture, but its parameters can still be
    configured.
    """

    prefix = "active"

    def reset_view(self) -> None:
        self.surface.set("camera_active", active_label(None))

    def update_view(self, facet: CameraFacet) -> None:
        self.surface.set("camera_active", active_label(facet.camera))


class CameraModeController(CameraController):
    prefix = "mode"

    def reset_view(self) -> None:
        self.surface.set("camera_mode", mode_selector(None, enabled=False))
        self.surface.set("capture", ButtonState(enabled=False))

    def update_view(self, facet: CameraFacet) -> None:
        view = facet.mode_view()
        self.surface.set("camera_mode", view.selector)
        self.surface.set("capture", view.capture)

    def set_mode(self, index: int) -> bool:
        if self.facet is None or not 0 <= index < len(CAMERA_MODES):
            return False
        return self.facet.set_mode(CAMERA_MODES[index])

    def start_stop(self) -> bool:
        if self.facet is None:
            return False
        return self.facet.start_stop()


class WhiteBalanceController(CameraController):
    prefix = "white_balance"

    def reset_view(self) -> None:
        self.surface.set("white_balance", PickerState(options=(), selected=None))
        self.surface.set("white_balance_button", "")
        self.hide()

    def update_view(self, facet: CameraFacet) -> None:
        picker = facet.white_balance_picker()
        self.surface.set("white_balance", picker)
        self.surface.set("white_balance_button", picker.selected or "")

    def show(self) -> None:
        self.surface.set("white_balance_hidden", False)

    def hide(self) -> None:
        self.surface.set("white_balance_hidden", True)

    def select(self, index: int) -> bool:
        sent = False
        if self.facet is not None:
            options = self.facet.white_balance_options()
            if 0 <= index < len(options):
                sent = self.facet.set_white_balance_temperature(options[index])
        self.hide()
        return sent


class CameraScreen(Screen):
    name = "camera"
    title = "Camera active state, mode, capture and white balance"
    actions = ("capture", "show_white_balance", "hide_white_balance")
    selectors = ("camera_mode", "white_balance")

    def __init__(self, sdk: GroundSdk, surface: Surface | None = None) -> None:
        super().__init__(sdk, surface)
        self.active_state = ActiveStateController(self.surface)
        self.camera_mode = CameraModeController(self.surface)
        self.white_balance = WhiteBalanceController(self.surface)
        self.controllers: tuple[CameraController, ...] = (
            self.active_state,
            self.camera_mode,
            self.white_balance,
        )
        self.drone_session = self.add_session(
            "drone", start=self._start_drone_monitors, reset=self._reset_drone_ui
        )
        self.remote_session = self.add_session(
            "remote_control",
            start=self._start_remote_monitors,
            reset=lambda: self.surface.set("remote_state", connection_label(None)),
        )

    def reset_ui(self) -> None:
        self._reset_drone_ui()
        self.surface.set("remote_state", connection_label(None))

    def on_auto_connection(self, auto_connection: Any) -> None:
        self.drone_session.update(auto_connection.drone)
        self.remote_session.update(auto_connection.remote_control)

    def on_capture(self) -> None:
        self.camera_mode.start_stop()

    def on_show_white_balance(self) -> None:
        self.white_balance.show()

    def on_hide_white_balance(self) -> None:
        self.white_balance.hide()

    def on_select_camera_mode(self, index: int) -> None:
        self.camera_mode.set_mode(index)

    def on_select_white_balance(self, index: int) -> None:
        self.white_balance.select(index)

    def _reset_drone_ui(self) -> None:
        self.surface.set("drone_state", connection_label(None))
        self.surface.set("stream", None)
        for controller in self.controllers:
            controller.stop_monitoring()

    def _start_drone_monitors(self, drone: Any, refs: ReferenceGroup) -> None:
        self.start_video_stream(drone, refs)
        self.monitor_state(drone, refs, "drone_state")
        for controller in self.controllers:
            controller.start_monitoring(drone, refs)

    def _start_remote_monitors(self, remote_control: Any, refs: ReferenceGroup) -> None:
        self.monitor_state(remote_control, refs, "remote_state")
