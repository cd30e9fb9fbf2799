"""Playback of scripted scenarios against the in-memory SDK.

A scenario is a list of single-key steps. SDK steps (``connect``, ``state``,
``battery``...) change the simulated devices; UI steps (``press``,
``select``, ``render_status``, ``frame``) act on the screen. Queued
deliveries are settled after every step, and the rendered surface recorded.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from typing import Any

from groundctl.core.errors import GroundctlError, ScenarioStepError
from groundctl.core.loader import normalize_bool
from groundctl.core.model import (
    CameraMode,
    ConnectionState,
    DroneModel,
    FrameMetadata,
    InstrumentKind,
    PeripheralKind,
    PilotingItfKind,
    PilotingItfState,
    RemoteControlModel,
    ReplaySource,
    Scenario,
    StepResult,
    ThermalMode,
    ThermalRenderStatus,
    ThermalSpot,
    WhiteBalanceTemperature,
)
from groundctl.screens.base import Screen
from groundctl.sdk.memory import (
    MemoryBatteryInfo,
    MemoryDevice,
    MemoryDrone,
    MemoryFileReplay,
    MemoryGroundSdk,
    MemoryMainCamera,
    MemoryMainCamera2,
    MemoryManualCopterPilotingItf,
    MemoryRemoteControl,
    MemoryStreamServer,
    MemoryThermalCamera,
    MemoryThermalControl,
)

LOGGER = logging.getLogger(__name__)

_THERMAL_CAMERAS = (PeripheralKind.THERMAL_CAMERA, PeripheralKind.BLENDED_THERMAL_CAMERA)


def describe_step(name: str, args: Any) -> str:
    if isinstance(args, dict):
        details = " ".join(f"{key}={value}" for key, value in args.items())
    elif args is None:
        details = ""
    else:
        details = str(args)
    return f"{name} {details}".strip()


class ScenarioPlayer:
    """Plays one scenario on one screen bound to a ``MemoryGroundSdk``."""

    def __init__(self, scenario: Scenario, screen: Screen, sdk: MemoryGroundSdk) -> None:
        self.scenario = scenario
        self.screen = screen
        self.sdk = sdk
        self.replays: dict[str, MemoryFileReplay] = {}
        self._handlers: dict[str, Callable[[Any], None]] = {
            "connect": self._connect,
            "state": self._state,
            "battery": self._battery,
            "piloting": self._piloting,
            "stream_server": self._stream_server,
            "main_camera": self._main_camera,
            "main_camera2": self._main_camera2,
            "thermal": self._thermal,
            "remove": self._remove,
            "advance": self._advance,
            "render_status": self._render_status,
            "frame": self._frame,
            "press": self._press,
            "select": self._select,
        }

    def play(self) -> Iterator[StepResult]:
        for spec in self.scenario.devices:
            if spec.kind == "drone":
                self.sdk.add_drone(spec.uid, model=DroneModel(spec.model), name=spec.name)
            else:
                self.sdk.add_remote_control(spec.uid, model=RemoteControlModel(spec.model), name=spec.name)
        for file, duration in self.scenario.replays.items():
            self.replays[file] = self.sdk.add_replay(ReplaySource(file=file), duration)

        self.screen.open()
        self.sdk.settle()
        yield StepResult(index=0, step="open", surface=self.screen.surface.render())

        for index, step in enumerate(self.scenario.steps, start=1):
            name, args = next(iter(step.items()))
            description = describe_step(name, args)
            LOGGER.debug("Scenario %s step %d: %s", self.scenario.id, index, description)
            self.apply(index, name, args)
            self.sdk.settle()
            yield StepResult(index=index, step=description, surface=self.screen.surface.render())

        self.screen.close()
        self.sdk.close()
        yield StepResult(
            index=len(self.scenario.steps) + 1,
            step="close",
            surface=(f"live references: {self.screen.live_count()}",),
        )

    def apply(self, index: int, name: str, args: Any) -> None:
        handler = self._handlers.get(name)
        if handler is None:
            raise ScenarioStepError(f"Scenario '{self.scenario.id}' step {index}: unknown step '{name}'")
        try:
            handler(args)
        except GroundctlError as exc:
            raise ScenarioStepError(f"Scenario '{self.scenario.id}' step {index} ({name}): {exc}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise ScenarioStepError(
                f"Scenario '{self.scenario.id}' step {index} ({name}): invalid arguments {args!r}: {exc}"
            ) from exc

    def _device(self, uid: str) -> MemoryDevice:
        device = self.sdk.devices.get(uid)
        if device is None:
            raise ScenarioStepError(f"unknown device '{uid}'")
        return device

    def _drone(self, uid: str) -> MemoryDrone:
        device = self._device(uid)
        if not isinstance(device, MemoryDrone):
            raise ScenarioStepError(f"device '{uid}' is not a drone")
        return device

    def _flag(self, args: dict[str, Any], key: str, default: bool | None = None) -> bool | None:
        if key not in args:
            return default
        return normalize_bool(args[key], context=key, error=ScenarioStepError)

    def _connect(self, args: dict[str, Any]) -> None:
        auto_connection = self.sdk.auto_connection
        if "drone" in args:
            uid = args["drone"]
            auto_connection.set_drone(self._drone(uid) if uid is not None else None)
        if "remote_control" in args:
            uid = args["remote_control"]
            remote_control = self._device(uid) if uid is not None else None
            if remote_control is not None and not isinstance(remote_control, MemoryRemoteControl):
                raise ScenarioStepError(f"device '{uid}' is not a remote control")
            auto_connection.set_remote_control(remote_control)

    def _state(self, args: dict[str, Any]) -> None:
        self._device(args["device"]).set_connection_state(ConnectionState(args["connection"]))

    def _battery(self, args: dict[str, Any]) -> None:
        device = self._device(args["device"])
        battery = device.instrument(InstrumentKind.BATTERY_INFO)
        if battery is None:
            device.put_instrument(
                InstrumentKind.BATTERY_INFO, MemoryBatteryInfo(self.sdk.dispatcher, int(args["level"]))
            )
        else:
            battery.set_level(int(args["level"]))

    def _piloting(self, args: dict[str, Any]) -> None:
        drone = self._drone(args["device"])
        itf = drone.piloting_itf(PilotingItfKind.MANUAL_COPTER)
        if itf is None:
            itf = MemoryManualCopterPilotingItf(self.sdk.dispatcher, state=PilotingItfState.UNAVAILABLE)
            drone.put_piloting_itf(PilotingItfKind.MANUAL_COPTER, itf)
        itf.update(
            state=PilotingItfState(args["state"]) if "state" in args else None,
            can_take_off=self._flag(args, "can_take_off"),
            can_land=self._flag(args, "can_land"),
        )

    def _stream_server(self, args: dict[str, Any]) -> None:
        drone = self._drone(args["device"])
        if drone.peripheral(PeripheralKind.STREAM_SERVER) is None:
            drone.put_peripheral(PeripheralKind.STREAM_SERVER, MemoryStreamServer(self.sdk.dispatcher))

    def _main_camera(self, args: dict[str, Any]) -> None:
        drone = self._drone(args["device"])
        camera = drone.peripheral(PeripheralKind.MAIN_CAMERA)
        if camera is None:
            temperature = args.get("temperature")
            drone.put_peripheral(
                PeripheralKind.MAIN_CAMERA,
                MemoryMainCamera(
                    self.sdk.dispatcher,
                    active=bool(self._flag(args, "active", True)),
                    mode=CameraMode(args.get("mode", "photo")),
                    custom_temperature=(
                        WhiteBalanceTemperature.from_label(temperature)
                        if temperature is not None
                        else WhiteBalanceTemperature.K5000
                    ),
                ),
            )
        elif "active" in args:
            camera.set_active(bool(self._flag(args, "active")))

    def _main_camera2(self, args: dict[str, Any]) -> None:
        drone = self._drone(args["device"])
        camera = drone.peripheral(PeripheralKind.MAIN_CAMERA2)
        if camera is None:
            drone.put_peripheral(
                PeripheralKind.MAIN_CAMERA2,
                MemoryMainCamera2(self.sdk.dispatcher, active=bool(self._flag(args, "active", True))),
            )
        elif "active" in args:
            camera.set_active(bool(self._flag(args, "active")))

    def _thermal(self, args: dict[str, Any]) -> None:
        drone = self._drone(args["device"])
        if drone.peripheral(PeripheralKind.THERMAL_CONTROL) is None:
            drone.put_peripheral(
                PeripheralKind.THERMAL_CONTROL,
                MemoryThermalControl(self.sdk.dispatcher, mode=ThermalMode(args.get("mode", "disabled"))),
            )
        kind = PeripheralKind(args.get("camera", PeripheralKind.THERMAL_CAMERA.value))
        if kind not in _THERMAL_CAMERAS:
            raise ScenarioStepError(f"'{kind.value}' is not a thermal camera")
        active = bool(self._flag(args, "active", False))
        camera = drone.peripheral(kind)
        if camera is None:
            drone.put_peripheral(kind, MemoryThermalCamera(self.sdk.dispatcher, active=active))
        else:
            camera.set_active(active)

    def _remove(self, args: dict[str, Any]) -> None:
        device = self._device(args["device"])
        name = args["component"]
        if name == InstrumentKind.BATTERY_INFO.value:
            device.put_instrument(InstrumentKind.BATTERY_INFO, None)
        elif name == PilotingItfKind.MANUAL_COPTER.value:
            self._drone(args["device"]).put_piloting_itf(PilotingItfKind.MANUAL_COPTER, None)
        else:
            device.put_peripheral(PeripheralKind(name), None)

    def _advance(self, args: dict[str, Any]) -> None:
        replay = self.replays.get(args["file"])
        if replay is None:
            raise ScenarioStepError(f"unknown replay '{args['file']}'")
        replay.advance(float(args["seconds"]))

    def _render_status(self, args: dict[str, Any]) -> None:
        render_status = getattr(self.screen, "render_status", None)
        if render_status is None:
            raise ScenarioStepError(f"screen '{self.screen.name}' does not render thermal video")

        def spot(key: str) -> ThermalSpot | None:
            values = args.get(key)
            if values is None:
                return None
            temperature, x, y = values
            return ThermalSpot(temperature=float(temperature), x=float(x), y=float(y))

        render_status(ThermalRenderStatus(lowest=spot("lowest"), highest=spot("highest"), probe=spot("probe")))

    def _frame(self, args: dict[str, Any]) -> None:
        overlay = getattr(self.screen, "overlay", None)
        if overlay is None:
            raise ScenarioStepError(f"screen '{self.screen.name}' does not read frame metadata")
        x, y, z, w = (float(value) for value in args["quat"])
        overlay(FrameMetadata(drone_quat=(x, y, z, w)))

    def _press(self, action: str) -> None:
        self.screen.press(action)

    def _select(self, args: dict[str, Any]) -> None:
        self.screen.select(args["selector"], int(args["index"]))
