"""Drone SDK interfaces.

The SDK owns discovery, transport, decoding and thermal processing. This
package only observes its entities through references and issues
fire-and-forget requests; the resulting state always comes back through the
reference callbacks. Action methods return ``False`` when the request is
rejected immediately.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Protocol

from groundctl.core.model import (
    AutoConnectionState,
    Camera2Component,
    Camera2Param,
    CameraMode,
    ComponentState,
    DeviceState,
    DroneModel,
    FacilityKind,
    InstrumentKind,
    PeripheralKind,
    PilotingItfKind,
    PilotingItfState,
    PlayState,
    ReplaySource,
    ThermalMode,
    ThermalPalette,
    ThermalRendering,
    WhiteBalanceMode,
    WhiteBalanceTemperature,
)
from groundctl.core.reference import Ref

Observer = Callable[[Any], None]


class Device(Protocol):
    uid: str
    name: str

    def get_state(self, on_change: Callable[[DeviceState | None], None]) -> Ref[DeviceState]: ...

    def get_peripheral(self, kind: PeripheralKind, on_change: Observer) -> Ref[Any]: ...

    def get_instrument(self, kind: InstrumentKind, on_change: Observer) -> Ref[Any]: ...


class Drone(Device, Protocol):
    model: DroneModel

    def get_piloting_itf(self, kind: PilotingItfKind, on_change: Observer) -> Ref[Any]: ...


class RemoteControl(Device, Protocol):
    pass


class AutoConnection(Protocol):
    @property
    def state(self) -> AutoConnectionState: ...

    @property
    def drone(self) -> Drone | None: ...

    @property
    def remote_control(self) -> RemoteControl | None: ...

    def start(self) -> bool: ...


class BatteryInfo(Protocol):
    @property
    def battery_level(self) -> int: ...


class ManualCopterPilotingItf(Protocol):
    @property
    def state(self) -> PilotingItfState: ...

    @property
    def can_take_off(self) -> bool: ...

    @property
    def can_land(self) -> bool: ...

    def activate(self) -> bool: ...

    def take_off(self) -> bool: ...

    def land(self) -> bool: ...


class Stream(Protocol):
    @property
    def play_state(self) -> PlayState: ...

    def play(self) -> bool: ...


class FileReplay(Stream, Protocol):
    @property
    def duration(self) -> float: ...

    @property
    def position(self) -> float: ...

    def seek_to(self, position: float) -> bool: ...


class StreamServer(Protocol):
    enabled: bool

    def live(self, on_change: Callable[[Stream | None], None]) -> Ref[Stream]: ...


class ModeSetting(Protocol):
    mode: CameraMode

    @property
    def updating(self) -> bool: ...


class WhiteBalanceSettings(Protocol):
    mode: WhiteBalanceMode
    custom_temperature: WhiteBalanceTemperature

    @property
    def supported_custom_temperatures(self) -> frozenset[WhiteBalanceTemperature]: ...


class MainCamera(Protocol):
    """Legacy camera API."""

    @property
    def is_active(self) -> bool: ...

    @property
    def mode_setting(self) -> ModeSetting: ...

    @property
    def white_balance_settings(self) -> WhiteBalanceSettings: ...

    @property
    def can_start_photo_capture(self) -> bool: ...

    @property
    def can_stop_photo_capture(self) -> bool: ...

    @property
    def can_start_record(self) -> bool: ...

    @property
    def can_stop_record(self) -> bool: ...

    def start_photo_capture(self) -> bool: ...

    def stop_photo_capture(self) -> bool: ...

    def start_recording(self) -> bool: ...

    def stop_recording(self) -> bool: ...


class ConfigParam(Protocol):
    @property
    def value(self) -> Any: ...

    @property
    def overall_supported_values(self) -> tuple[Any, ...]: ...


class EditableParam(Protocol):
    value: Any

    @property
    def supported_values(self) -> tuple[Any, ...]: ...


class ConfigEditor(Protocol):
    """Draft of a camera configuration."""

    def get(self, param: Camera2Param) -> EditableParam | None: ...

    def auto_complete(self) -> None: ...

    def commit(self) -> bool: ...


class CameraConfig(Protocol):
    @property
    def updating(self) -> bool: ...

    def get(self, param: Camera2Param) -> ConfigParam | None: ...

    def edit(self, from_scratch: bool = False) -> ConfigEditor: ...


class CameraComponent(Protocol):
    @property
    def state(self) -> ComponentState: ...

    def start(self) -> bool: ...

    def stop(self) -> bool: ...


class MainCamera2(Protocol):
    """Current camera API: configuration drafts and capture components."""

    @property
    def is_active(self) -> bool: ...

    @property
    def config(self) -> CameraConfig: ...

    def get_component(self, kind: Camera2Component) -> CameraComponent | None: ...


class ThermalSetting(Protocol):
    mode: ThermalMode

    @property
    def supported_modes(self) -> frozenset[ThermalMode]: ...


class ThermalControl(Protocol):
    @property
    def setting(self) -> ThermalSetting: ...

    def send_rendering(self, rendering: ThermalRendering) -> None: ...

    def send_emissivity(self, emissivity: float) -> None: ...

    def send_background_temperature(self, temperature: float) -> None: ...

    def send_palette(self, palette: ThermalPalette) -> None: ...


class ThermalCamera(Protocol):
    @property
    def is_active(self) -> bool: ...


class GroundSdk(Protocol):
    """Explicitly constructed SDK session; owns the delivery context."""

    def get_facility(self, kind: FacilityKind, on_change: Observer) -> Ref[Any]: ...

    def replay(self, source: ReplaySource, on_change: Observer) -> Ref[Any]: ...

    def post(self, callback: Callable[..., Any], *args: Any) -> None: ...

    def close(self) -> None: ...
