"""Stable public API for building tooling on top of groundctl.

This module is the supported integration surface for third-party callers.
Avoid importing from private/internal modules unless intentionally depending on
non-stable internals.
"""

from __future__ import annotations

from groundctl.core.dispatch import SerialDispatcher
from groundctl.core.errors import (
    GroundctlError,
    PaletteLoadError,
    PaletteValidationError,
    ScenarioLoadError,
    ScenarioStepError,
    ScenarioValidationError,
    ScreenResolutionError,
)
from groundctl.core.model import (
    AbsolutePalette,
    ButtonState,
    PickerState,
    RelativePalette,
    Scenario,
    SelectorState,
    SpotPalette,
    StepResult,
    ThermalPalette,
    ThermalStatsView,
)
from groundctl.core.reference import Observable, Ref
from groundctl.core.service import GroundService
from groundctl.core.session import ReferenceGroup, SessionManager, SessionState
from groundctl.core.surface import Surface
from groundctl.screens import Screen
from groundctl.sdk.memory import MemoryGroundSdk

__all__ = [
    "GroundctlError",
    "PaletteLoadError",
    "PaletteValidationError",
    "ScenarioLoadError",
    "ScenarioStepError",
    "ScenarioValidationError",
    "ScreenResolutionError",
    "AbsolutePalette",
    "ButtonState",
    "PickerState",
    "RelativePalette",
    "Scenario",
    "SelectorState",
    "SpotPalette",
    "StepResult",
    "ThermalPalette",
    "ThermalStatsView",
    "Observable",
    "Ref",
    "ReferenceGroup",
    "SerialDispatcher",
    "SessionManager",
    "SessionState",
    "Surface",
    "Screen",
    "MemoryGroundSdk",
    "Client",
]


class Client:
    """Public client for interacting with groundctl core capabilities.

    A `Client` instance wraps palette and scenario loading, screen lookup and
    scenario playback behind a stable API intended for third-party tools
    (GUI/TUI/services/scripts).
    """

    def __init__(self) -> None:
        self._service = GroundService()

    @property
    def load_warnings(self) -> tuple[str, ...]:
        return self._service.load_warnings

    def list_screens(self) -> list[type[Screen]]:
        return self._service.list_screens()

    def list_palettes(self) -> list[ThermalPalette]:
        return self._service.list_palettes()

    def list_scenarios(self, *, screen: str | None = None) -> list[Scenario]:
        return self._service.list_scenarios(screen)

    def open_screen(self, name: str, sdk: MemoryGroundSdk) -> Screen:
        """Build the named screen against ``sdk`` and open it."""
        screen = self._service.build_screen(name, sdk)
        screen.open()
        return screen

    def run_scenario(self, screen: str, *, scenario_id: str | None = None) -> list[StepResult]:
        return list(self._service.run_scenario(screen, scenario_id))
