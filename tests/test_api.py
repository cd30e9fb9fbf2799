from __future__ import annotations

from pathlib import Path

import pytest

from groundctl.api import Client, MemoryGroundSdk, StepResult
from groundctl.core.model import ConnectionState


@pytest.fixture
def client(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Client:
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "cfg"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    return Client()


def test_public_client_lists_catalogs(client: Client) -> None:
    assert client.load_warnings == ()
    assert "hello_drone" in [screen.name for screen in client.list_screens()]
    assert [p.id for p in client.list_palettes()] == ["absolute", "relative", "spot"]
    assert [s.id for s in client.list_scenarios(screen="thermal_local")] == ["thermal_local"]


def test_public_client_runs_scenario(client: Client) -> None:
    results = client.run_scenario("frame_metadata")
    assert all(isinstance(result, StepResult) for result in results)
    assert "drone_quaternion: x: 0.00 y: 0.00 z: 0.38 w: 0.92" in results[4].surface


def test_public_client_opens_screen_on_caller_sdk(client: Client) -> None:
    sdk = MemoryGroundSdk()
    drone = sdk.add_drone("anafi-1")
    drone.set_connection_state(ConnectionState.CONNECTED)

    screen = client.open_screen("thermal_stream", sdk)
    sdk.auto_connection.set_drone(drone)
    sdk.settle()

    assert screen.surface["drone_state"] == "connected"
    screen.close()
    assert screen.live_count() == 0
