"""Service layer used by the CLI and the public API."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from groundctl.core.errors import ScenarioValidationError, ScreenResolutionError
from groundctl.core.loader import load_palettes, load_scenarios
from groundctl.core.model import ReplaySource, Scenario, StepResult, ThermalPalette
from groundctl.core.scenario import ScenarioPlayer
from groundctl.screens import SCREENS, Screen
from groundctl.screens.thermal import PaletteScreen
from groundctl.screens.thermal_local import ThermalLocalScreen
from groundctl.sdk.memory import MemoryGroundSdk


class GroundService:
    def __init__(self) -> None:
        loaded_palettes = load_palettes()
        loaded_scenarios = load_scenarios()
        self.palettes = loaded_palettes.palettes
        self.scenarios = loaded_scenarios.scenarios
        self.load_warnings = loaded_palettes.warnings + loaded_scenarios.warnings

    def list_screens(self) -> list[type[Screen]]:
        return [SCREENS[name] for name in sorted(SCREENS)]

    def list_palettes(self) -> list[ThermalPalette]:
        return sorted(self.palettes.values(), key=lambda p: p.id)

    def list_scenarios(self, screen: str | None = None) -> list[Scenario]:
        scenarios = sorted(self.scenarios.values(), key=lambda s: s.id)
        if screen is not None:
            scenarios = [s for s in scenarios if s.screen == screen]
        return scenarios

    def resolve_screen(self, name: str) -> type[Screen]:
        screen_cls = SCREENS.get(name)
        if screen_cls is None:
            available = ", ".join(sorted(SCREENS))
            raise ScreenResolutionError(f"Unknown screen '{name}'. Available: {available}")
        return screen_cls

    def resolve_scenario(self, screen: str, scenario_id: str | None = None) -> Scenario:
        self.resolve_screen(screen)
        if scenario_id is None:
            candidates = self.list_scenarios(screen)
            if not candidates:
                raise ScreenResolutionError(
                    f"No scenario available for screen '{screen}'. Use --scenario to choose one."
                )
            if len(candidates) > 1:
                ids = ", ".join(s.id for s in candidates)
                raise ScreenResolutionError(
                    f"Multiple scenarios found for screen '{screen}': {ids}. Use --scenario to choose one."
                )
            return candidates[0]

        scenario = self.scenarios.get(scenario_id)
        if scenario is None:
            raise ScreenResolutionError(
                f"Unknown scenario '{scenario_id}'. Use 'groundctl scenarios' to inspect available scenarios."
            )
        if scenario.screen != screen:
            raise ScenarioValidationError(
                f"Scenario '{scenario_id}' targets screen '{scenario.screen}', not '{screen}'"
            )
        return scenario

    def build_screen(self, name: str, sdk: Any, scenario: Scenario | None = None) -> Screen:
        screen_cls = self.resolve_screen(name)
        if issubclass(screen_cls, ThermalLocalScreen) and scenario is not None and scenario.replays:
            source = ReplaySource(file=next(iter(scenario.replays)))
            return screen_cls(sdk, palettes=self.palettes, source=source)
        if issubclass(screen_cls, PaletteScreen):
            return screen_cls(sdk, palettes=self.palettes)
        return screen_cls(sdk)

    def run_scenario(self, screen: str, scenario_id: str | None = None) -> Iterator[StepResult]:
        """Play a scenario on a fresh in-memory SDK, yielding the surface after each step."""
        scenario = self.resolve_scenario(screen, scenario_id)
        sdk = MemoryGroundSdk()
        player = ScenarioPlayer(scenario, self.build_screen(screen, sdk, scenario), sdk)
        yield from player.play()
