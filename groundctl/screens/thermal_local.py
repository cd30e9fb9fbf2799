"""Loop a local thermal video through the thermal renderer."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from groundctl.core.model import PlayState, ReplaySource, ThermalPalette, ThermalProcessing, ThermalRenderStatus
from groundctl.core.projector import probe_position_label, rendering_label
from groundctl.core.reference import Ref
from groundctl.core.surface import Surface
from groundctl.screens.thermal import PaletteScreen, show_thermal_stats
from groundctl.sdk.base import GroundSdk

LOGGER = logging.getLogger(__name__)

DEFAULT_REPLAY_SOURCE = ReplaySource(file="thermal_video.mp4")


class ThermalLocalScreen(PaletteScreen):
    """Plays a file replay in a loop.

    The host calls the ``tick`` action periodically (once per replay
    duration); each tick rewinds a finished replay and resumes playback.
    The rendering mode and probe position of ``processing`` are shown
    beside the stream.
    """

    name = "thermal_local"
    title = "Local thermal video replay with palettes and temperatures"
    actions = ("tick",)
    selectors = ("palette",)

    def __init__(
        self,
        sdk: GroundSdk,
        surface: Surface | None = None,
        *,
        palettes: Mapping[str, ThermalPalette] | None = None,
        processing: ThermalProcessing | None = None,
        source: ReplaySource = DEFAULT_REPLAY_SOURCE,
    ) -> None:
        super().__init__(sdk, surface, palettes=palettes, processing=processing)
        self.source = source
        self._replay_ref: Ref[Any] | None = None

    @property
    def replay(self) -> Any:
        return self._replay_ref.value if self._replay_ref is not None else None

    def open(self) -> None:
        if self.opened:
            return
        self._opened = True
        self.reset_ui()
        self._replay_ref = self.sdk.replay(self.source, self._on_replay)

    def close(self) -> None:
        if self._replay_ref is not None:
            self._replay_ref.release()
            self._replay_ref = None
        super().close()

    def live_count(self) -> int:
        replay = 1 if self._replay_ref is not None and not self._replay_ref.released else 0
        return replay + super().live_count()

    def reset_ui(self) -> None:
        self.surface.set("stream", None)
        self.surface.set("rendering", rendering_label(self.processing))
        self.surface.set("probe_position", probe_position_label(self.processing))
        show_thermal_stats(self.surface, None)
        self.show_palette(0)

    def on_tick(self) -> None:
        replay = self.replay
        if replay is None:
            return
        if replay.position >= replay.duration:
            replay.seek_to(0)
        if replay.play_state is not PlayState.PLAYING:
            replay.play()

    def render_status(self, status: ThermalRenderStatus | None) -> None:
        show_thermal_stats(self.surface, status)

    def _on_replay(self, replay: Any) -> None:
        if replay is None:
            LOGGER.debug("Replay of %s is not available", self.source.file)
        self.surface.set("stream", replay)
