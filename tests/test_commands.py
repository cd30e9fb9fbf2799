from __future__ import annotations

import logging

import pytest

from groundctl.core.commands import edit_config, take_off_or_land
from groundctl.core.dispatch import SerialDispatcher
from groundctl.core.model import (
    Camera2Param,
    CameraMode,
    PhotoMode,
    PilotingItfState,
    WhiteBalanceMode,
    WhiteBalanceTemperature,
)
from groundctl.sdk.memory import MemoryMainCamera2, MemoryManualCopterPilotingItf


def _camera(params=None) -> tuple[SerialDispatcher, MemoryMainCamera2]:
    dispatcher = SerialDispatcher()
    return dispatcher, MemoryMainCamera2(dispatcher, params=params)


def test_edit_config_commits_and_applies_on_next_delivery() -> None:
    dispatcher, camera = _camera()

    assert edit_config(camera.config, {Camera2Param.MODE: CameraMode.RECORDING})
    assert camera.config.updating
    assert camera.config.value(Camera2Param.MODE) is CameraMode.PHOTO

    dispatcher.run_pending()

    assert not camera.config.updating
    assert camera.config.value(Camera2Param.MODE) is CameraMode.RECORDING


def test_edit_config_round_trip() -> None:
    dispatcher, camera = _camera()

    edit_config(camera.config, {Camera2Param.MODE: CameraMode.RECORDING})
    dispatcher.run_pending()
    edit_config(camera.config, {Camera2Param.MODE: CameraMode.PHOTO})
    dispatcher.run_pending()

    assert camera.config.value(Camera2Param.MODE) is CameraMode.PHOTO


def test_auto_complete_substitutes_conflicting_parameter() -> None:
    dispatcher, camera = _camera()
    edit_config(camera.config, {Camera2Param.PHOTO_MODE: PhotoMode.BURST})
    dispatcher.run_pending()
    assert camera.config.value(Camera2Param.PHOTO_MODE) is PhotoMode.BURST

    assert edit_config(camera.config, {Camera2Param.MODE: CameraMode.RECORDING})
    dispatcher.run_pending()

    assert camera.config.value(Camera2Param.MODE) is CameraMode.RECORDING
    assert camera.config.value(Camera2Param.PHOTO_MODE) is PhotoMode.SINGLE


def test_most_recent_edit_wins_within_one_draft() -> None:
    dispatcher, camera = _camera()
    editor = camera.config.edit()
    editor[Camera2Param.MODE].value = CameraMode.RECORDING
    editor[Camera2Param.PHOTO_MODE].value = PhotoMode.BRACKETING

    editor.auto_complete()

    assert editor[Camera2Param.PHOTO_MODE].value is PhotoMode.BRACKETING
    assert editor[Camera2Param.MODE].value is CameraMode.PHOTO
    assert editor.commit()


def test_edit_config_skips_missing_param(caplog: pytest.LogCaptureFixture) -> None:
    dispatcher, camera = _camera(
        params={Camera2Param.MODE: (CameraMode.PHOTO, tuple(CameraMode))},
    )

    with caplog.at_level(logging.DEBUG, logger="groundctl.core.commands"):
        applied = edit_config(
            camera.config,
            {
                Camera2Param.WHITE_BALANCE_MODE: WhiteBalanceMode.CUSTOM,
                Camera2Param.MODE: CameraMode.RECORDING,
            },
        )
    dispatcher.run_pending()

    assert applied
    assert camera.config.value(Camera2Param.MODE) is CameraMode.RECORDING
    assert "white_balance_mode" in caplog.text


def test_edit_config_without_any_known_param_commits_nothing() -> None:
    dispatcher, camera = _camera(
        params={Camera2Param.MODE: (CameraMode.PHOTO, tuple(CameraMode))},
    )

    assert not edit_config(camera.config, {Camera2Param.WHITE_BALANCE_TEMPERATURE: WhiteBalanceTemperature.K3000})
    assert not camera.config.updating
    assert dispatcher.pending == 0


def test_unsupported_value_is_rejected_by_the_draft() -> None:
    _, camera = _camera()
    editor = camera.config.edit()
    with pytest.raises(ValueError):
        editor[Camera2Param.WHITE_BALANCE_TEMPERATURE].value = WhiteBalanceTemperature.K1500


def test_edit_config_skips_unsupported_value_and_commits_nothing() -> None:
    dispatcher, camera = _camera(
        params={Camera2Param.MODE: (CameraMode.PHOTO, (CameraMode.PHOTO,))},
    )

    assert not edit_config(camera.config, {Camera2Param.MODE: CameraMode.RECORDING})
    assert not camera.config.updating
    assert dispatcher.pending == 0
    assert camera.config.value(Camera2Param.MODE) is CameraMode.PHOTO


def test_edit_config_applies_the_supported_values_only() -> None:
    dispatcher, camera = _camera()

    assert edit_config(
        camera.config,
        {
            Camera2Param.WHITE_BALANCE_MODE: WhiteBalanceMode.CUSTOM,
            Camera2Param.WHITE_BALANCE_TEMPERATURE: WhiteBalanceTemperature.K1500,
        },
    )
    dispatcher.run_pending()

    assert camera.config.value(Camera2Param.WHITE_BALANCE_MODE) is WhiteBalanceMode.CUSTOM
    assert camera.config.value(Camera2Param.WHITE_BALANCE_TEMPERATURE) is WhiteBalanceTemperature.K5000


def test_take_off_or_land_follows_capabilities() -> None:
    dispatcher = SerialDispatcher()
    itf = MemoryManualCopterPilotingItf(dispatcher, state=PilotingItfState.ACTIVE, can_take_off=True)

    assert take_off_or_land(itf)
    dispatcher.run_pending()
    assert itf.can_land and not itf.can_take_off

    assert take_off_or_land(itf)
    dispatcher.run_pending()
    assert itf.can_take_off and not itf.can_land


def test_take_off_or_land_without_interface_or_capability() -> None:
    dispatcher = SerialDispatcher()
    assert not take_off_or_land(None)
    assert not take_off_or_land(MemoryManualCopterPilotingItf(dispatcher, state=PilotingItfState.ACTIVE))
