"""Show the drone attitude carried in the metadata of each video frame."""

from __future__ import annotations

from typing import Any

from groundctl.core.model import FrameMetadata
from groundctl.core.projector import connection_label, quaternion_label
from groundctl.core.session import ReferenceGroup
from groundctl.core.surface import Surface
from groundctl.screens.base import Screen
from groundctl.sdk.base import GroundSdk


class FrameMetadataScreen(Screen):
    name = "frame_metadata"
    title = "Drone attitude quaternion read from live stream frame metadata"

    def __init__(self, sdk: GroundSdk, surface: Surface | None = None) -> None:
        super().__init__(sdk, surface)
        self.drone_session = self.add_session(
            "drone", start=self._start_drone_monitors, reset=self.reset_ui
        )

    def reset_ui(self) -> None:
        self.surface.set("drone_state", connection_label(None))
        self.surface.set("drone_quaternion", quaternion_label(None))
        self.surface.set("stream", None)

    def on_auto_connection(self, auto_connection: Any) -> None:
        self.drone_session.update(auto_connection.drone)

    def overlay(self, metadata: FrameMetadata) -> None:
        """Called from the rendering thread for every decoded frame.

        The label update is posted onto the SDK delivery context; frames of a
        drone that is no longer bound when it runs are ignored.
        """
        self.sdk.post(self._show_quaternion, self.drone_session.uid, metadata)

    def _show_quaternion(self, uid: str | None, metadata: FrameMetadata) -> None:
        if uid is None or uid != self.drone_session.uid:
            return
        self.surface.set("drone_quaternion", quaternion_label(metadata))

    def _start_drone_monitors(self, drone: Any, refs: ReferenceGroup) -> None:
        self.monitor_state(drone, refs, "drone_state")
        self.start_video_stream(drone, refs)
