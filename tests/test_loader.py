from __future__ import annotations

from pathlib import Path

import pytest

from groundctl.core.errors import PaletteValidationError, ScenarioValidationError
from groundctl.core.loader import load_palettes, load_scenarios
from groundctl.core.model import AbsolutePalette, OutsideColorization, RelativePalette, SpotPalette, SpotType


@pytest.fixture(autouse=True)
def _isolated_user_dirs(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_load_packaged_palettes() -> None:
    loaded = load_palettes()
    assert set(loaded.palettes) == {"relative", "absolute", "spot"}
    assert loaded.warnings == ()

    relative = loaded.palettes["relative"]
    assert isinstance(relative, RelativePalette)
    assert relative.locked is False
    assert (relative.colors[0].blue, relative.colors[-1].red) == (1.0, 1.0)

    absolute = loaded.palettes["absolute"]
    assert isinstance(absolute, AbsolutePalette)
    assert (absolute.lowest_temp, absolute.highest_temp) == (300.0, 310.0)
    assert absolute.outside_colorization is OutsideColorization.LIMITED
    assert len(absolute.colors) == 3

    spot = loaded.palettes["spot"]
    assert isinstance(spot, SpotPalette)
    assert spot.spot_type is SpotType.HOT
    assert spot.threshold == 0.6


def test_user_palette_overrides_packaged(tmp_path: Path) -> None:
    _write(
        tmp_path / "cfg" / "groundctl" / "palettes" / "spot.yaml",
        """
id: spot
name: Cold spots
kind: spot
spot_type: cold
threshold: 0.2
colors:
  - {red: 0.0, green: 0.0, blue: 1.0, position: 0.0}
  - {red: 1.0, green: 1.0, blue: 1.0, position: 1.0}
""",
    )

    loaded = load_palettes()

    assert loaded.palettes["spot"].spot_type is SpotType.COLD
    assert loaded.warnings == ("User palette 'spot' overrides packaged palette",)


@pytest.mark.parametrize(
    "body",
    [
        # channel out of range
        """
id: bad
name: Bad
kind: relative
colors:
  - {red: 1.5, green: 0.0, blue: 0.0, position: 0.0}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 1.0}
""",
        # positions going backwards
        """
id: bad
name: Bad
kind: relative
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.8}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 0.2}
""",
        # a single color
        """
id: bad
name: Bad
kind: relative
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.0}
""",
        # inverted absolute range
        """
id: bad
name: Bad
kind: absolute
lowest_temp: 320
highest_temp: 310
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.0}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 1.0}
""",
        # absolute without range
        """
id: bad
name: Bad
kind: absolute
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.0}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 1.0}
""",
        # spot threshold out of range
        """
id: bad
name: Bad
kind: spot
threshold: 2
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.0}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 1.0}
""",
        # duplicate key
        """
id: bad
id: worse
name: Bad
kind: relative
colors:
  - {red: 0.0, green: 0.0, blue: 0.0, position: 0.0}
  - {red: 1.0, green: 0.0, blue: 0.0, position: 1.0}
""",
        # not a mapping
        "- just\n- a list\n",
    ],
)
def test_invalid_palette_rejected(tmp_path: Path, body: str) -> None:
    _write(tmp_path / "data" / "groundctl" / "palettes" / "bad.yaml", body)
    with pytest.raises(PaletteValidationError):
        load_palettes()


def test_load_packaged_scenarios() -> None:
    loaded = load_scenarios()
    screens = {scenario.screen for scenario in loaded.scenarios.values()}
    assert screens == {"hello_drone", "camera", "thermal_stream", "thermal_embedded", "thermal_local", "frame_metadata"}

    hello = loaded.scenarios["hello_drone"]
    assert [device.uid for device in hello.devices] == ["anafi-1", "skyctrl-1"]
    assert hello.steps[0] == {"connect": {"drone": "anafi-1", "remote_control": "skyctrl-1"}}
    assert loaded.scenarios["thermal_local"].replays == {"thermal_video.mp4": 12.0}


def test_scenario_with_unknown_step_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "cfg" / "groundctl" / "scenarios" / "bad.yaml",
        """
id: bad
name: Bad
screen: hello_drone
steps:
  - teleport: {device: anafi-1}
""",
    )
    with pytest.raises(ScenarioValidationError):
        load_scenarios()


def test_scenario_with_unknown_model_rejected(tmp_path: Path) -> None:
    _write(
        tmp_path / "cfg" / "groundctl" / "scenarios" / "bad.yaml",
        """
id: bad
name: Bad
screen: hello_drone
devices:
  - {uid: x-1, kind: drone, model: bebop}
steps:
  - connect: {drone: x-1}
""",
    )
    with pytest.raises(ScenarioValidationError):
        load_scenarios()
