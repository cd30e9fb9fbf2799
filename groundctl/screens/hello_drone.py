"""Connect to a drone and a remote control, show their state and fly.

Displays the connection state and battery level of both devices, plays the
drone's live stream and offers a take-off / land button driven by the manual
copter piloting interface.
"""

from __future__ import annotations

from typing import Any

from groundctl.core.commands import take_off_or_land
from groundctl.core.model import ButtonState, InstrumentKind, PilotingItfKind, PilotingItfState
from groundctl.core.projector import battery_label, connection_label, take_off_land_button
from groundctl.core.session import ReferenceGroup
from groundctl.core.surface import Surface
from groundctl.screens.base import Screen
from groundctl.sdk.base import GroundSdk


class HelloDroneScreen(Screen):
    name = "hello_drone"
    title = "Drone and remote control state, live stream, take off and land"
    actions = ("take_off_land",)

    def __init__(self, sdk: GroundSdk, surface: Surface | None = None) -> None:
        super().__init__(sdk, surface)
        self.drone_session = self.add_session(
            "drone", start=self._start_drone_monitors, reset=self._reset_drone_ui
        )
        self.remote_session = self.add_session(
            "remote_control", start=self._start_remote_monitors, reset=self._reset_remote_ui
        )

    def reset_ui(self) -> None:
        self._reset_drone_ui()
        self._reset_remote_ui()

    def on_auto_connection(self, auto_connection: Any) -> None:
        self.drone_session.update(auto_connection.drone)
        self.remote_session.update(auto_connection.remote_control)

    def on_take_off_land(self) -> None:
        take_off_or_land(self.drone_session.value("piloting_itf"))

    def _reset_drone_ui(self) -> None:
        self.surface.set("drone_state", connection_label(None))
        self.surface.set("drone_battery", battery_label(None))
        self.surface.set("take_off_land", ButtonState(enabled=False))
        self.surface.set("stream", None)

    def _reset_remote_ui(self) -> None:
        self.surface.set("remote_state", connection_label(None))
        self.surface.set("remote_battery", battery_label(None))

    def _start_drone_monitors(self, drone: Any, refs: ReferenceGroup) -> None:
        self.monitor_state(drone, refs, "drone_state")
        refs["battery_info"] = drone.get_instrument(
            InstrumentKind.BATTERY_INFO,
            lambda info: self.surface.set("drone_battery", battery_label(info)),
        )
        refs["piloting_itf"] = drone.get_piloting_itf(PilotingItfKind.MANUAL_COPTER, self._on_piloting_itf)
        self.start_video_stream(drone, refs)

    def _start_remote_monitors(self, remote_control: Any, refs: ReferenceGroup) -> None:
        self.monitor_state(remote_control, refs, "remote_state")
        refs["battery_info"] = remote_control.get_instrument(
            InstrumentKind.BATTERY_INFO,
            lambda info: self.surface.set("remote_battery", battery_label(info)),
        )

    def _on_piloting_itf(self, itf: Any) -> None:
        self.surface.set("take_off_land", take_off_land_button(itf))
        if itf is not None and itf.state is PilotingItfState.IDLE:
            itf.activate()
