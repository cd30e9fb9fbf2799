from __future__ import annotations

from typer.testing import CliRunner

from groundctl import cli
from groundctl.core.model import RelativePalette, Scenario, StepResult, ThermalColor
from groundctl.screens import CameraScreen, HelloDroneScreen


class FakeService:
    def __init__(self) -> None:
        self.load_warnings = ()
        self.palettes = {
            "relative": RelativePalette(
                id="relative",
                name="Relative blue to red",
                colors=(ThermalColor(0.0, 0.0, 1.0, 0.0), ThermalColor(1.0, 0.0, 0.0, 1.0)),
            )
        }
        self.scenarios = {
            "camera": Scenario(
                id="camera",
                name="Capture",
                screen="camera",
                description="",
                devices=(),
                replays={},
                steps=({"press": "capture"},),
            )
        }

    def list_screens(self):
        return [CameraScreen, HelloDroneScreen]

    def list_palettes(self):
        return list(self.palettes.values())

    def list_scenarios(self, screen=None):
        return [s for s in self.scenarios.values() if screen is None or s.screen == screen]

    def run_scenario(self, screen, scenario_id=None):
        yield StepResult(index=0, step="open", surface=("capture: [-] disabled",))
        yield StepResult(index=1, step="press capture", surface=("capture: [-] disabled",))


runner = CliRunner()


def test_screens_command(monkeypatch):
    monkeypatch.setattr(cli, "GroundService", FakeService)
    result = runner.invoke(cli.app, ["screens"])
    assert result.exit_code == 0
    assert "camera: Camera active state" in result.stdout
    assert "actions: capture, show_white_balance, hide_white_balance" in result.stdout
    assert "actions: take_off_land" in result.stdout


def test_palettes_command(monkeypatch):
    monkeypatch.setattr(cli, "GroundService", FakeService)
    result = runner.invoke(cli.app, ["palettes"])
    assert result.exit_code == 0
    assert "relative: Relative blue to red (relative, 2 colors)" in result.stdout


def test_scenarios_command(monkeypatch):
    monkeypatch.setattr(cli, "GroundService", FakeService)
    result = runner.invoke(cli.app, ["scenarios", "--screen", "camera"])
    assert result.exit_code == 0
    assert "camera [camera]: Capture (1 steps)" in result.stdout


def test_run_command_prints_surface_after_each_step(monkeypatch):
    monkeypatch.setattr(cli, "GroundService", FakeService)
    result = runner.invoke(cli.app, ["run", "camera"])
    assert result.exit_code == 0
    assert "[0] open" in result.stdout
    assert "[1] press capture" in result.stdout
    assert "  capture: [-] disabled" in result.stdout


def test_run_command_error_is_clean(monkeypatch):
    class FailingService(FakeService):
        def run_scenario(self, screen, scenario_id=None):
            from groundctl.core.errors import ScreenResolutionError

            raise ScreenResolutionError("Unknown screen 'map'")
            yield

    monkeypatch.setattr(cli, "GroundService", FailingService)
    result = runner.invoke(cli.app, ["run", "map"])
    assert result.exit_code == 1
    assert "Error: Unknown screen 'map'" in result.stderr
    assert "Traceback" not in result.stdout
    assert "Traceback" not in result.stderr


def test_load_warning_is_printed(monkeypatch):
    class WarnService(FakeService):
        def __init__(self) -> None:
            super().__init__()
            self.load_warnings = ("User palette 'spot' overrides packaged palette",)

    monkeypatch.setattr(cli, "GroundService", WarnService)
    result = runner.invoke(cli.app, ["palettes"])
    assert result.exit_code == 0
    assert "Warning: User palette 'spot' overrides packaged palette" in result.stderr


def test_debug_option_is_accepted(monkeypatch):
    monkeypatch.setattr(cli, "GroundService", FakeService)
    result = runner.invoke(cli.app, ["--debug", "palettes"])
    assert result.exit_code == 0


def test_run_against_packaged_scenario(monkeypatch, tmp_path):
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    result = runner.invoke(cli.app, ["run", "hello_drone"])
    assert result.exit_code == 0
    assert "take_off_land: [Land] enabled" in result.stdout
    assert "live references: 0" in result.stdout
