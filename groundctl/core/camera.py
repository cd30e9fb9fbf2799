"""Camera facets over the two camera APIs.

A drone exposes either the legacy camera peripheral or the current one. Each
facet wraps one of them and carries the projections and requests for its
API, so screens pick the facet type once when they subscribe to a peripheral
kind and never inspect the camera type afterwards.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, Union

from groundctl.core.commands import edit_config
from groundctl.core.model import (
    Camera2Component,
    Camera2Param,
    CameraMode,
    CameraModeView,
    PeripheralKind,
    PickerState,
    WhiteBalanceMode,
    WhiteBalanceTemperature,
)
from groundctl.core.projector import (
    current_camera_mode_view,
    current_white_balance_picker,
    legacy_camera_mode_view,
    legacy_white_balance_picker,
    select_first,
    temperature_options,
)


class LegacyCameraFacet:
    kind = PeripheralKind.MAIN_CAMERA

    def __init__(self, camera: Any) -> None:
        self.camera = camera

    @property
    def is_active(self) -> bool:
        return self.camera.is_active

    def mode_view(self) -> CameraModeView:
        return legacy_camera_mode_view(self.camera)

    def white_balance_picker(self) -> PickerState:
        return legacy_white_balance_picker(self.camera)

    def white_balance_options(self) -> tuple[WhiteBalanceTemperature, ...]:
        return temperature_options(self.camera.white_balance_settings.supported_custom_temperatures)

    def start_stop(self) -> bool:
        camera = self.camera
        action: Callable[[], bool] | None = select_first(
            (
                (camera.can_start_photo_capture, camera.start_photo_capture),
                (camera.can_stop_photo_capture, camera.stop_photo_capture),
                (camera.can_start_record, camera.start_recording),
                (camera.can_stop_record, camera.stop_recording),
            )
        )
        return action() if action is not None else False

    def set_mode(self, mode: CameraMode) -> bool:
        self.camera.mode_setting.mode = mode
        return True

    def set_white_balance_temperature(self, temperature: WhiteBalanceTemperature) -> bool:
        settings = self.camera.white_balance_settings
        settings.mode = WhiteBalanceMode.CUSTOM
        settings.custom_temperature = temperature
        return True


class CurrentCameraFacet:
    kind = PeripheralKind.MAIN_CAMERA2

    def __init__(self, camera: Any) -> None:
        self.camera = camera

    @property
    def is_active(self) -> bool:
        return self.camera.is_active

    def mode_view(self) -> CameraModeView:
        return current_camera_mode_view(self.camera)

    def white_balance_picker(self) -> PickerState:
        return current_white_balance_picker(self.camera)

    def white_balance_options(self) -> tuple[WhiteBalanceTemperature, ...]:
        param = self.camera.config.get(Camera2Param.WHITE_BALANCE_TEMPERATURE)
        if param is None:
            return ()
        return temperature_options(param.overall_supported_values)

    def start_stop(self) -> bool:
        photo = self.camera.get_component(Camera2Component.PHOTO_CAPTURE)
        recording = self.camera.get_component(Camera2Component.RECORDING)
        action: Callable[[], bool] | None = select_first(
            (
                (photo is not None and photo.state.can_start, photo and photo.start),
                (photo is not None and photo.state.can_stop, photo and photo.stop),
                (recording is not None and recording.state.can_start, recording and recording.start),
                (recording is not None and recording.state.can_stop, recording and recording.stop),
            )
        )
        return action() if action is not None else False

    def set_mode(self, mode: CameraMode) -> bool:
        return edit_config(self.camera.config, {Camera2Param.MODE: mode})

    def set_white_balance_temperature(self, temperature: WhiteBalanceTemperature) -> bool:
        return edit_config(
            self.camera.config,
            {
                Camera2Param.WHITE_BALANCE_MODE: WhiteBalanceMode.CUSTOM,
                Camera2Param.WHITE_BALANCE_TEMPERATURE: temperature,
            },
        )


CameraFacet = Union[LegacyCameraFacet, CurrentCameraFacet]
CAMERA_FACETS: tuple[type[LegacyCameraFacet] | type[CurrentCameraFacet], ...] = (
    LegacyCameraFacet,
    CurrentCameraFacet,
)
