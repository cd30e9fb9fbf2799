"""In-memory drone SDK used by tests, scenarios and demos.

Every entity behaves like its device-backed counterpart as seen from the
reference API: requests are accepted or rejected immediately, and their
effect is queued on the SDK's dispatcher so observers only learn about it on
the next ``MemoryGroundSdk.settle``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import partial
from typing import Any, TypeVar

from groundctl.core.dispatch import SerialDispatcher
from groundctl.core.model import (
    AutoConnectionState,
    Camera2Component,
    Camera2Param,
    CameraMode,
    ComponentState,
    ConnectionState,
    DeviceState,
    DroneModel,
    FacilityKind,
    InstrumentKind,
    PeripheralKind,
    PhotoMode,
    PilotingItfKind,
    PilotingItfState,
    PlayState,
    RemoteControlModel,
    ReplaySource,
    ThermalMode,
    ThermalPalette,
    ThermalRendering,
    WhiteBalanceMode,
    WhiteBalanceTemperature,
)
from groundctl.core.reference import Observable, Ref

K = TypeVar("K")
LOGGER = logging.getLogger(__name__)


class _Component:
    """Entity published through one observable slot."""

    def __init__(self, dispatcher: SerialDispatcher) -> None:
        self._dispatcher = dispatcher
        self._observable: Observable[Any] | None = None

    def notify_changed(self) -> None:
        observable = self._observable
        if observable is not None and observable.value is self:
            observable.publish(self)

    def _attach(self, observable: Observable[Any]) -> None:
        self._observable = observable

    def _later(self, change: Callable[[], None]) -> None:
        def apply() -> None:
            change()
            self.notify_changed()

        self._dispatcher.post(apply)


def _install(observable: Observable[Any], component: _Component | None) -> None:
    if component is not None:
        component._attach(observable)
    observable.publish(component)


class MemoryDevice:
    def __init__(self, uid: str, name: str, *, dispatcher: SerialDispatcher) -> None:
        self.uid = uid
        self.name = name
        self._dispatcher = dispatcher
        self._state: Observable[DeviceState] = Observable(
            dispatcher, DeviceState(), name=f"{uid}.state"
        )
        self._peripherals: dict[PeripheralKind, Observable[Any]] = {}
        self._instruments: dict[InstrumentKind, Observable[Any]] = {}

    def get_state(self, on_change: Callable[[DeviceState | None], None]) -> Ref[DeviceState]:
        return self._state.observe(on_change)

    def get_peripheral(self, kind: PeripheralKind, on_change: Callable[[Any], None]) -> Ref[Any]:
        return self._slot(self._peripherals, kind).observe(on_change)

    def get_instrument(self, kind: InstrumentKind, on_change: Callable[[Any], None]) -> Ref[Any]:
        return self._slot(self._instruments, kind).observe(on_change)

    @property
    def connection_state(self) -> ConnectionState:
        state = self._state.value
        return state.connection_state if state is not None else ConnectionState.DISCONNECTED

    def set_connection_state(self, state: ConnectionState) -> None:
        self._state.publish(DeviceState(connection_state=state))

    def peripheral(self, kind: PeripheralKind) -> Any:
        return self._slot(self._peripherals, kind).value

    def put_peripheral(self, kind: PeripheralKind, component: _Component | None) -> None:
        _install(self._slot(self._peripherals, kind), component)

    def instrument(self, kind: InstrumentKind) -> Any:
        return self._slot(self._instruments, kind).value

    def put_instrument(self, kind: InstrumentKind, component: _Component | None) -> None:
        _install(self._slot(self._instruments, kind), component)

    def observer_count(self) -> int:
        """Number of live references on this device, nested streams excluded."""
        return self._state.observer_count + sum(
            observable.observer_count for observable in self._observables()
        )

    def _observables(self) -> Iterable[Observable[Any]]:
        yield from self._peripherals.values()
        yield from self._instruments.values()

    def _slot(self, table: dict[K, Observable[Any]], kind: K) -> Observable[Any]:
        if kind not in table:
            table[kind] = Observable(self._dispatcher, name=f"{self.uid}.{kind.value}")  # type: ignore[attr-defined]
        return table[kind]

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.uid}>"


class MemoryDrone(MemoryDevice):
    def __init__(
        self,
        uid: str,
        name: str,
        *,
        model: DroneModel,
        dispatcher: SerialDispatcher,
    ) -> None:
        super().__init__(uid, name, dispatcher=dispatcher)
        self.model = model
        self._piloting_itfs: dict[PilotingItfKind, Observable[Any]] = {}

    def get_piloting_itf(self, kind: PilotingItfKind, on_change: Callable[[Any], None]) -> Ref[Any]:
        return self._slot(self._piloting_itfs, kind).observe(on_change)

    def piloting_itf(self, kind: PilotingItfKind) -> Any:
        return self._slot(self._piloting_itfs, kind).value

    def put_piloting_itf(self, kind: PilotingItfKind, component: _Component | None) -> None:
        _install(self._slot(self._piloting_itfs, kind), component)

    def _observables(self) -> Iterable[Observable[Any]]:
        yield from super()._observables()
        yield from self._piloting_itfs.values()


class MemoryRemoteControl(MemoryDevice):
    def __init__(
        self,
        uid: str,
        name: str,
        *,
        model: RemoteControlModel,
        dispatcher: SerialDispatcher,
    ) -> None:
        super().__init__(uid, name, dispatcher=dispatcher)
        self.model = model


class MemoryAutoConnection(_Component):
    def __init__(self, dispatcher: SerialDispatcher) -> None:
        super().__init__(dispatcher)
        self._state = AutoConnectionState.STOPPED
        self._drone: MemoryDrone | None = None
        self._remote_control: MemoryRemoteControl | None = None

    @property
    def state(self) -> AutoConnectionState:
        return self._state

    @property
    def drone(self) -> MemoryDrone | None:
        return self._drone

    @property
    def remote_control(self) -> MemoryRemoteControl | None:
        return self._remote_control

    def start(self) -> bool:
        if self._state is AutoConnectionState.STARTED:
            return False
        self._later(partial(self._set_state, AutoConnectionState.STARTED))
        return True

    def set_drone(self, drone: MemoryDrone | None) -> None:
        self._drone = drone
        self.notify_changed()

    def set_remote_control(self, remote_control: MemoryRemoteControl | None) -> None:
        self._remote_control = remote_control
        self.notify_changed()

    def _set_state(self, state: AutoConnectionState) -> None:
        self._state = state


class MemoryBatteryInfo(_Component):
    def __init__(self, dispatcher: SerialDispatcher, battery_level: int = 100) -> None:
        super().__init__(dispatcher)
        self._battery_level = battery_level

    @property
    def battery_level(self) -> int:
        return self._battery_level

    def set_level(self, battery_level: int) -> None:
        self._battery_level = battery_level
        self.notify_changed()


class MemoryManualCopterPilotingItf(_Component):
    def __init__(
        self,
        dispatcher: SerialDispatcher,
        *,
        state: PilotingItfState = PilotingItfState.IDLE,
        can_take_off: bool = False,
        can_land: bool = False,
    ) -> None:
        super().__init__(dispatcher)
        self._state = state
        self._can_take_off = can_take_off
        self._can_land = can_land

    @property
    def state(self) -> PilotingItfState:
        return self._state

    @property
    def can_take_off(self) -> bool:
        return self._can_take_off

    @property
    def can_land(self) -> bool:
        return self._can_land

    def activate(self) -> bool:
        if self._state is not PilotingItfState.IDLE:
            return False
        self._later(partial(self._apply, state=PilotingItfState.ACTIVE))
        return True

    def take_off(self) -> bool:
        if self._state is not PilotingItfState.ACTIVE or not self._can_take_off:
            return False
        self._later(partial(self._apply, can_take_off=False, can_land=True))
        return True

    def land(self) -> bool:
        if self._state is not PilotingItfState.ACTIVE or not self._can_land:
            return False
        self._later(partial(self._apply, can_take_off=True, can_land=False))
        return True

    def update(
        self,
        *,
        state: PilotingItfState | None = None,
        can_take_off: bool | None = None,
        can_land: bool | None = None,
    ) -> None:
        self._apply(state=state, can_take_off=can_take_off, can_land=can_land)
        self.notify_changed()

    def _apply(
        self,
        *,
        state: PilotingItfState | None = None,
        can_take_off: bool | None = None,
        can_land: bool | None = None,
    ) -> None:
        if state is not None:
            self._state = state
        if can_take_off is not None:
            self._can_take_off = can_take_off
        if can_land is not None:
            self._can_land = can_land


class MemoryCameraLive(_Component):
    def __init__(self, dispatcher: SerialDispatcher, name: str = "live") -> None:
        super().__init__(dispatcher)
        self.name = name
        self._play_state = PlayState.NONE

    @property
    def play_state(self) -> PlayState:
        return self._play_state

    def play(self) -> bool:
        if self._play_state is PlayState.PLAYING:
            return False
        self._later(partial(self._set_play_state, PlayState.PLAYING))
        return True

    def _set_play_state(self, play_state: PlayState) -> None:
        self._play_state = play_state

    def __str__(self) -> str:
        return f"{self.name} ({self._play_state.value})"


class MemoryFileReplay(MemoryCameraLive):
    def __init__(self, dispatcher: SerialDispatcher, source: ReplaySource, duration: float) -> None:
        super().__init__(dispatcher, name=source.file)
        self.source = source
        self._duration = duration
        self._position = 0.0

    @property
    def duration(self) -> float:
        return self._duration

    @property
    def position(self) -> float:
        return self._position

    def seek_to(self, position: float) -> bool:
        if position < 0 or position > self._duration:
            return False
        self._later(partial(self._set_position, position))
        return True

    def advance(self, seconds: float) -> None:
        """Move the playhead like the decoder would while playing."""
        if self._play_state is not PlayState.PLAYING:
            return
        self._position = min(self._duration, self._position + seconds)
        if self._position >= self._duration:
            self._play_state = PlayState.PAUSED
        self.notify_changed()

    def _set_position(self, position: float) -> None:
        self._position = position

    def __str__(self) -> str:
        return f"{self.name} ({self._play_state.value} {self._position:.1f}/{self._duration:.1f}s)"


class MemoryStreamServer(_Component):
    def __init__(self, dispatcher: SerialDispatcher, *, enabled: bool = False) -> None:
        super().__init__(dispatcher)
        self._enabled = enabled
        self.live_stream = MemoryCameraLive(dispatcher)
        self._live: Observable[Any] = Observable(dispatcher, self.live_stream, name="stream_server.live")
        self.live_stream._attach(self._live)

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        self.notify_changed()

    def live(self, on_change: Callable[[Any], None]) -> Ref[Any]:
        return self._live.observe(on_change)


class MemoryModeSetting:
    def __init__(self, camera: MemoryMainCamera, mode: CameraMode) -> None:
        self._camera = camera
        self._mode = mode
        self._updating = False

    @property
    def mode(self) -> CameraMode:
        return self._mode

    @mode.setter
    def mode(self, mode: CameraMode) -> None:
        if mode is self._mode:
            return
        self._updating = True
        self._camera.notify_changed()
        self._camera._later(partial(self._apply, mode))

    @property
    def updating(self) -> bool:
        return self._updating

    def _apply(self, mode: CameraMode) -> None:
        self._mode = mode
        self._updating = False
        self._camera._reset_captures()


class MemoryWhiteBalanceSettings:
    def __init__(
        self,
        camera: MemoryMainCamera,
        *,
        mode: WhiteBalanceMode,
        custom_temperature: WhiteBalanceTemperature,
        supported_custom_temperatures: Iterable[WhiteBalanceTemperature],
    ) -> None:
        self._camera = camera
        self._mode = mode
        self._custom_temperature = custom_temperature
        self._supported = frozenset(supported_custom_temperatures)

    @property
    def mode(self) -> WhiteBalanceMode:
        return self._mode

    @mode.setter
    def mode(self, mode: WhiteBalanceMode) -> None:
        if mode is not self._mode:
            self._camera._later(partial(setattr, self, "_mode", mode))

    @property
    def custom_temperature(self) -> WhiteBalanceTemperature:
        return self._custom_temperature

    @custom_temperature.setter
    def custom_temperature(self, temperature: WhiteBalanceTemperature) -> None:
        if temperature in self._supported and temperature is not self._custom_temperature:
            self._camera._later(partial(setattr, self, "_custom_temperature", temperature))

    @property
    def supported_custom_temperatures(self) -> frozenset[WhiteBalanceTemperature]:
        return self._supported


class MemoryMainCamera(_Component):
    """Camera exposing the legacy camera API."""

    def __init__(
        self,
        dispatcher: SerialDispatcher,
        *,
        active: bool = True,
        mode: CameraMode = CameraMode.PHOTO,
        custom_temperature: WhiteBalanceTemperature = WhiteBalanceTemperature.K5000,
        supported_custom_temperatures: Iterable[WhiteBalanceTemperature] | None = None,
    ) -> None:
        super().__init__(dispatcher)
        self._active = active
        self._recording = False
        self._capturing = False
        self.mode_setting = MemoryModeSetting(self, mode)
        self.white_balance_settings = MemoryWhiteBalanceSettings(
            self,
            mode=WhiteBalanceMode.AUTOMATIC,
            custom_temperature=custom_temperature,
            supported_custom_temperatures=supported_custom_temperatures or tuple(WhiteBalanceTemperature),
        )

    @property
    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = active
        if not active:
            self._reset_captures()
        self.notify_changed()

    @property
    def can_start_photo_capture(self) -> bool:
        return self._can(CameraMode.PHOTO) and not self._capturing

    @property
    def can_stop_photo_capture(self) -> bool:
        return self._can(CameraMode.PHOTO) and self._capturing

    @property
    def can_start_record(self) -> bool:
        return self._can(CameraMode.RECORDING) and not self._recording

    @property
    def can_stop_record(self) -> bool:
        return self._can(CameraMode.RECORDING) and self._recording

    def start_photo_capture(self) -> bool:
        if not self.can_start_photo_capture:
            return False
        self._later(partial(setattr, self, "_capturing", True))
        return True

    def stop_photo_capture(self) -> bool:
        if not self.can_stop_photo_capture:
            return False
        self._later(partial(setattr, self, "_capturing", False))
        return True

    def start_recording(self) -> bool:
        if not self.can_start_record:
            return False
        self._later(partial(setattr, self, "_recording", True))
        return True

    def stop_recording(self) -> bool:
        if not self.can_stop_record:
            return False
        self._later(partial(setattr, self, "_recording", False))
        return True

    def _can(self, mode: CameraMode) -> bool:
        return self._active and not self.mode_setting.updating and self.mode_setting.mode is mode

    def _reset_captures(self) -> None:
        self._recording = False
        self._capturing = False


@dataclass(frozen=True)
class ConfigRule:
    """When ``when_param`` takes one of ``when_values``, ``param`` must be in ``allowed``."""

    when_param: Camera2Param
    when_values: frozenset[Any]
    param: Camera2Param
    allowed: frozenset[Any]


DEFAULT_CAMERA2_RULES: tuple[ConfigRule, ...] = (
    ConfigRule(
        Camera2Param.MODE,
        frozenset({CameraMode.RECORDING}),
        Camera2Param.PHOTO_MODE,
        frozenset({PhotoMode.SINGLE}),
    ),
    ConfigRule(
        Camera2Param.PHOTO_MODE,
        frozenset({PhotoMode.BRACKETING, PhotoMode.BURST}),
        Camera2Param.MODE,
        frozenset({CameraMode.PHOTO}),
    ),
)


def default_camera2_params() -> dict[Camera2Param, tuple[Any, tuple[Any, ...]]]:
    return {
        Camera2Param.MODE: (CameraMode.PHOTO, tuple(CameraMode)),
        Camera2Param.PHOTO_MODE: (PhotoMode.SINGLE, tuple(PhotoMode)),
        Camera2Param.WHITE_BALANCE_MODE: (WhiteBalanceMode.AUTOMATIC, tuple(WhiteBalanceMode)),
        Camera2Param.WHITE_BALANCE_TEMPERATURE: (
            WhiteBalanceTemperature.K5000,
            (
                WhiteBalanceTemperature.K8000,
                WhiteBalanceTemperature.K3000,
                WhiteBalanceTemperature.K5000,
                WhiteBalanceTemperature.K6500,
                WhiteBalanceTemperature.K4000,
            ),
        ),
    }


class MemoryConfigParam:
    def __init__(self, config: MemoryCameraConfig, param: Camera2Param) -> None:
        self._config = config
        self._param = param

    @property
    def value(self) -> Any:
        return self._config._values[self._param]

    @property
    def overall_supported_values(self) -> tuple[Any, ...]:
        return self._config._supported[self._param]


class MemoryEditableParam:
    def __init__(self, editor: MemoryConfigEditor, param: Camera2Param) -> None:
        self._editor = editor
        self._param = param

    @property
    def value(self) -> Any:
        return self._editor._values[self._param]

    @value.setter
    def value(self, value: Any) -> None:
        self._editor._set(self._param, value)

    @property
    def supported_values(self) -> tuple[Any, ...]:
        return self._editor._config._supported[self._param]


class MemoryConfigEditor:
    """Draft of a camera configuration, resolved by ``auto_complete``."""

    def __init__(self, config: MemoryCameraConfig, *, from_scratch: bool) -> None:
        self._config = config
        self._values: dict[Camera2Param, Any] = {
            param: None if from_scratch else value for param, value in config._values.items()
        }
        self._edits: dict[Camera2Param, int] = {}

    def get(self, param: Camera2Param) -> MemoryEditableParam | None:
        if param not in self._values:
            return None
        return MemoryEditableParam(self, param)

    def __getitem__(self, param: Camera2Param) -> MemoryEditableParam:
        editable = self.get(param)
        if editable is None:
            raise KeyError(param)
        return editable

    @property
    def complete(self) -> bool:
        return all(value is not None for value in self._values.values())

    def auto_complete(self) -> None:
        for param, value in self._values.items():
            if value is None:
                self._values[param] = self._config._values[param]

        rules = self._config.rules
        for _ in range(len(rules) * len(self._values) + 1):
            violated = next((rule for rule in rules if self._violates(rule)), None)
            if violated is None:
                return
            self._resolve(violated)
        LOGGER.debug("Camera configuration draft did not converge: %s", self._values)

    def commit(self) -> bool:
        if not self.complete or any(self._violates(rule) for rule in self._config.rules):
            return False
        self._config._request(dict(self._values))
        return True

    def _set(self, param: Camera2Param, value: Any) -> None:
        if value not in self._config._supported[param]:
            raise ValueError(f"{value!r} is not a supported value for {param.value}")
        self._values[param] = value
        self._edits[param] = len(self._edits)

    def _violates(self, rule: ConfigRule) -> bool:
        if rule.when_param not in self._values or rule.param not in self._values:
            return False
        return (
            self._values[rule.when_param] in rule.when_values
            and self._values[rule.param] not in rule.allowed
        )

    def _resolve(self, rule: ConfigRule) -> None:
        # The most recent explicit edit wins; the other side is substituted.
        target_edit = self._edits.get(rule.param)
        trigger_edit = self._edits.get(rule.when_param)
        if target_edit is None or (trigger_edit is not None and target_edit < trigger_edit):
            self._values[rule.param] = self._first_supported(rule.param, lambda v: v in rule.allowed)
        else:
            self._values[rule.when_param] = self._first_supported(
                rule.when_param, lambda v: v not in rule.when_values
            )

    def _first_supported(self, param: Camera2Param, accept: Callable[[Any], bool]) -> Any:
        return next((v for v in self._config._supported[param] if accept(v)), None)


class MemoryCameraConfig:
    def __init__(
        self,
        camera: MemoryMainCamera2,
        params: Mapping[Camera2Param, tuple[Any, tuple[Any, ...]]],
        rules: tuple[ConfigRule, ...],
    ) -> None:
        self._camera = camera
        self._values = {param: value for param, (value, _) in params.items()}
        self._supported = {param: tuple(supported) for param, (_, supported) in params.items()}
        self.rules = rules
        self._updating = False

    @property
    def updating(self) -> bool:
        return self._updating

    def get(self, param: Camera2Param) -> MemoryConfigParam | None:
        if param not in self._values:
            return None
        return MemoryConfigParam(self, param)

    def __getitem__(self, param: Camera2Param) -> MemoryConfigParam:
        config_param = self.get(param)
        if config_param is None:
            raise KeyError(param)
        return config_param

    def value(self, param: Camera2Param) -> Any:
        return self._values.get(param)

    def edit(self, from_scratch: bool = False) -> MemoryConfigEditor:
        return MemoryConfigEditor(self, from_scratch=from_scratch)

    def _request(self, values: dict[Camera2Param, Any]) -> None:
        self._updating = True
        self._camera.notify_changed()
        self._camera._later(partial(self._apply, values))

    def _apply(self, values: dict[Camera2Param, Any]) -> None:
        mode_changed = values.get(Camera2Param.MODE) is not self._values.get(Camera2Param.MODE)
        self._values.update(values)
        self._updating = False
        if mode_changed:
            self._camera._reset_components()


class MemoryCameraComponent:
    def __init__(self, camera: MemoryMainCamera2, kind: Camera2Component) -> None:
        self._camera = camera
        self.kind = kind
        self._running = False

    @property
    def state(self) -> ComponentState:
        ready = self._camera.is_active and not self._camera.config.updating
        return ComponentState(can_start=ready and not self._running, can_stop=ready and self._running)

    def start(self) -> bool:
        if not self.state.can_start:
            return False
        self._camera._later(partial(setattr, self, "_running", True))
        return True

    def stop(self) -> bool:
        if not self.state.can_stop:
            return False
        self._camera._later(partial(setattr, self, "_running", False))
        return True


class MemoryMainCamera2(_Component):
    """Camera exposing the current camera API."""

    _COMPONENT_MODES = {
        Camera2Component.RECORDING: CameraMode.RECORDING,
        Camera2Component.PHOTO_CAPTURE: CameraMode.PHOTO,
    }

    def __init__(
        self,
        dispatcher: SerialDispatcher,
        *,
        active: bool = True,
        params: Mapping[Camera2Param, tuple[Any, tuple[Any, ...]]] | None = None,
        rules: tuple[ConfigRule, ...] = DEFAULT_CAMERA2_RULES,
    ) -> None:
        super().__init__(dispatcher)
        self._active = active
        self.config = MemoryCameraConfig(self, params if params is not None else default_camera2_params(), rules)
        self._components = {kind: MemoryCameraComponent(self, kind) for kind in self._COMPONENT_MODES}

    @property
    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = active
        if not active:
            self._reset_components()
        self.notify_changed()

    def get_component(self, kind: Camera2Component) -> MemoryCameraComponent | None:
        if self.config.value(Camera2Param.MODE) is not self._COMPONENT_MODES[kind]:
            return None
        return self._components[kind]

    def _reset_components(self) -> None:
        for component in self._components.values():
            component._running = False


class MemoryThermalSetting:
    def __init__(
        self,
        control: MemoryThermalControl,
        mode: ThermalMode,
        supported_modes: Iterable[ThermalMode],
    ) -> None:
        self._control = control
        self._mode = mode
        self._supported = frozenset(supported_modes)

    @property
    def mode(self) -> ThermalMode:
        return self._mode

    @mode.setter
    def mode(self, mode: ThermalMode) -> None:
        if mode in self._supported and mode is not self._mode:
            self._control._later(partial(setattr, self, "_mode", mode))

    @property
    def supported_modes(self) -> frozenset[ThermalMode]:
        return self._supported


class MemoryThermalControl(_Component):
    def __init__(
        self,
        dispatcher: SerialDispatcher,
        *,
        mode: ThermalMode = ThermalMode.DISABLED,
        supported_modes: Iterable[ThermalMode] | None = None,
    ) -> None:
        super().__init__(dispatcher)
        self.setting = MemoryThermalSetting(self, mode, supported_modes or tuple(ThermalMode))
        self.sent: list[tuple[str, Any]] = []

    def send_rendering(self, rendering: ThermalRendering) -> None:
        self.sent.append(("rendering", rendering))

    def send_emissivity(self, emissivity: float) -> None:
        self.sent.append(("emissivity", emissivity))

    def send_background_temperature(self, temperature: float) -> None:
        self.sent.append(("background_temperature", temperature))

    def send_palette(self, palette: ThermalPalette) -> None:
        self.sent.append(("palette", palette))

    def sent_of(self, kind: str) -> list[Any]:
        return [value for sent_kind, value in self.sent if sent_kind == kind]


class MemoryThermalCamera(_Component):
    def __init__(self, dispatcher: SerialDispatcher, *, active: bool = False) -> None:
        super().__init__(dispatcher)
        self._active = active

    @property
    def is_active(self) -> bool:
        return self._active

    def set_active(self, active: bool) -> None:
        self._active = active
        self.notify_changed()


class MemoryGroundSdk:
    """Simulated SDK session with its own serial delivery context."""

    def __init__(self, dispatcher: SerialDispatcher | None = None) -> None:
        self.dispatcher = dispatcher or SerialDispatcher()
        self.auto_connection = MemoryAutoConnection(self.dispatcher)
        self._facilities: dict[FacilityKind, Observable[Any]] = {
            FacilityKind.AUTO_CONNECTION: Observable(
                self.dispatcher, self.auto_connection, name=FacilityKind.AUTO_CONNECTION.value
            ),
        }
        self.auto_connection._attach(self._facilities[FacilityKind.AUTO_CONNECTION])
        self._replays: dict[str, Observable[Any]] = {}
        self.devices: dict[str, MemoryDevice] = {}
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def get_facility(self, kind: FacilityKind, on_change: Callable[[Any], None]) -> Ref[Any]:
        if kind not in self._facilities:
            self._facilities[kind] = Observable(self.dispatcher, name=kind.value)
        return self._facilities[kind].observe(on_change)

    def replay(self, source: ReplaySource, on_change: Callable[[Any], None]) -> Ref[Any]:
        return self._replay_slot(source.file).observe(on_change)

    def post(self, callback: Callable[..., Any], *args: Any) -> None:
        self.dispatcher.post(callback, *args)

    def settle(self) -> int:
        """Deliver every queued change on the calling thread."""
        return self.dispatcher.run_pending()

    def add_drone(
        self,
        uid: str,
        *,
        model: DroneModel = DroneModel.ANAFI_4K,
        name: str | None = None,
    ) -> MemoryDrone:
        drone = MemoryDrone(uid, name or uid, model=model, dispatcher=self.dispatcher)
        self.devices[uid] = drone
        return drone

    def add_remote_control(
        self,
        uid: str,
        *,
        model: RemoteControlModel = RemoteControlModel.SKY_CONTROLLER_4,
        name: str | None = None,
    ) -> MemoryRemoteControl:
        remote_control = MemoryRemoteControl(uid, name or uid, model=model, dispatcher=self.dispatcher)
        self.devices[uid] = remote_control
        return remote_control

    def add_replay(self, source: ReplaySource, duration: float) -> MemoryFileReplay:
        replay = MemoryFileReplay(self.dispatcher, source, duration)
        _install(self._replay_slot(source.file), replay)
        return replay

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        for observable in (*self._facilities.values(), *self._replays.values()):
            observable.publish(None)
        self.settle()

    def _replay_slot(self, file: str) -> Observable[Any]:
        if file not in self._replays:
            self._replays[file] = Observable(self.dispatcher, name=f"replay:{file}")
        return self._replays[file]

    def __enter__(self) -> MemoryGroundSdk:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
