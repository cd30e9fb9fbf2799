"""Pure projections from observed values to presentation state.

Every function here accepts ``None`` for any observed input and returns the
cleared projection for it; none of them look at anything but their
arguments.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, TypeVar

from groundctl.core.model import (
    ButtonState,
    Camera2Component,
    Camera2Param,
    CameraMode,
    CameraModeView,
    ConnectionState,
    DeviceState,
    DroneModel,
    FrameMetadata,
    PickerState,
    PilotingItfState,
    SelectorState,
    ThermalProcessing,
    ThermalRenderStatus,
    ThermalSensor,
    ThermalSpot,
    ThermalStatsView,
    WhiteBalanceTemperature,
)

T = TypeVar("T")

TAKE_OFF = "TakeOff"
LAND = "Land"
START_PHOTO_CAPTURE = "Start photo capture"
STOP_PHOTO_CAPTURE = "Stop photo capture"
START_RECORDING = "Start recording"
STOP_RECORDING = "Stop recording"
CAMERA_MODES: tuple[CameraMode, ...] = (CameraMode.PHOTO, CameraMode.RECORDING)


def select_first(options: Iterable[tuple[bool, T]]) -> T | None:
    """Return the item paired with the first true predicate, in order."""
    for predicate, item in options:
        if predicate:
            return item
    return None


def capture_button(
    can_start_photo: bool,
    can_stop_photo: bool,
    can_start_record: bool,
    can_stop_record: bool,
    *,
    enabled: bool = True,
) -> ButtonState:
    title = select_first(
        (
            (can_start_photo, START_PHOTO_CAPTURE),
            (can_stop_photo, STOP_PHOTO_CAPTURE),
            (can_start_record, START_RECORDING),
            (can_stop_record, STOP_RECORDING),
        )
    )
    return ButtonState(enabled=enabled and title is not None, title=title)


def connection_label(state: DeviceState | None) -> str:
    if state is None:
        return ConnectionState.DISCONNECTED.value
    return state.connection_state.value


def battery_label(battery_info: Any) -> str:
    if battery_info is None:
        return ""
    return f"{battery_info.battery_level}%"


def take_off_land_button(itf: Any) -> ButtonState:
    if itf is None or itf.state is not PilotingItfState.ACTIVE:
        return ButtonState(enabled=False)
    title = select_first(((itf.can_take_off, TAKE_OFF), (itf.can_land, LAND)))
    return ButtonState(enabled=title is not None, title=title)


def active_label(camera: Any) -> str:
    if camera is None:
        return ""
    return str(camera.is_active).lower()


def mode_selector(mode: CameraMode | None, *, enabled: bool) -> SelectorState:
    index = CAMERA_MODES.index(mode) if mode in CAMERA_MODES else None
    return SelectorState(
        options=tuple(m.value for m in CAMERA_MODES),
        index=index,
        enabled=enabled,
    )


def legacy_camera_mode_view(camera: Any) -> CameraModeView:
    """Camera mode selector and capture button for the legacy camera API."""
    if camera is None:
        return CameraModeView(selector=mode_selector(None, enabled=False), capture=ButtonState(enabled=False))
    updating = camera.mode_setting.updating
    return CameraModeView(
        selector=mode_selector(camera.mode_setting.mode, enabled=not updating),
        capture=capture_button(
            camera.can_start_photo_capture,
            camera.can_stop_photo_capture,
            camera.can_start_record,
            camera.can_stop_record,
            enabled=camera.is_active and not updating,
        ),
    )


def current_camera_mode_view(camera: Any) -> CameraModeView:
    """Camera mode selector and capture button for the current camera API."""
    if camera is None:
        return CameraModeView(selector=mode_selector(None, enabled=False), capture=ButtonState(enabled=False))
    updating = camera.config.updating
    mode_param = camera.config.get(Camera2Param.MODE)
    photo = camera.get_component(Camera2Component.PHOTO_CAPTURE)
    recording = camera.get_component(Camera2Component.RECORDING)
    photo_state = photo.state if photo is not None else None
    recording_state = recording.state if recording is not None else None
    return CameraModeView(
        selector=mode_selector(mode_param.value if mode_param is not None else None, enabled=not updating),
        capture=capture_button(
            photo_state is not None and photo_state.can_start,
            photo_state is not None and photo_state.can_stop,
            recording_state is not None and recording_state.can_start,
            recording_state is not None and recording_state.can_stop,
            enabled=camera.is_active and not updating,
        ),
    )


def temperature_options(temperatures: Iterable[WhiteBalanceTemperature]) -> tuple[WhiteBalanceTemperature, ...]:
    return tuple(sorted(temperatures, key=lambda t: t.value))


def legacy_white_balance_picker(camera: Any) -> PickerState:
    if camera is None:
        return PickerState(options=(), selected=None)
    settings = camera.white_balance_settings
    options = temperature_options(settings.supported_custom_temperatures)
    return PickerState(
        options=tuple(t.label for t in options),
        selected=settings.custom_temperature.label,
    )


def current_white_balance_picker(camera: Any) -> PickerState:
    if camera is None:
        return PickerState(options=(), selected=None)
    param = camera.config.get(Camera2Param.WHITE_BALANCE_TEMPERATURE)
    if param is None:
        return PickerState(options=(), selected=None)
    options = temperature_options(param.overall_supported_values)
    selected = param.value.label if param.value is not None else None
    return PickerState(options=tuple(t.label for t in options), selected=selected)


def temperature_label(spot: ThermalSpot | None) -> str:
    if spot is None:
        return ""
    return str(int(spot.temperature))


def thermal_stats(status: ThermalRenderStatus | None) -> ThermalStatsView:
    if status is None:
        return ThermalStatsView(lowest="", highest="", probe="", probe_x="", probe_y="")
    probe = status.probe
    return ThermalStatsView(
        lowest=temperature_label(status.lowest),
        highest=temperature_label(status.highest),
        probe=temperature_label(probe),
        probe_x=f"{probe.x:.2f}" if probe is not None else "",
        probe_y=f"{probe.y:.2f}" if probe is not None else "",
    )


def thermal_sensor_for(model: DroneModel | None) -> ThermalSensor:
    if model in (DroneModel.ANAFI_UA, DroneModel.ANAFI_USA):
        return ThermalSensor.BOSON
    return ThermalSensor.LEPTON


def quaternion_label(metadata: FrameMetadata | None) -> str:
    if metadata is None:
        return ""
    x, y, z, w = metadata.drone_quat
    return f"x: {x:.2f} y: {y:.2f} z: {z:.2f} w: {w:.2f}"


def palette_selector(palette_ids: tuple[str, ...], index: int) -> SelectorState:
    return SelectorState(options=palette_ids, index=index if 0 <= index < len(palette_ids) else 0)


def rendering_label(processing: ThermalProcessing | None) -> str:
    if processing is None:
        return ""
    rendering = processing.rendering
    return f"{rendering.mode.value} ({rendering.blending_rate:.2f})"


def probe_position_label(processing: ThermalProcessing | None) -> str:
    if processing is None:
        return ""
    return f"{processing.probe_x:.2f}, {processing.probe_y:.2f}"
