"""Sample screens, keyed by name."""

from groundctl.screens.base import Screen
from groundctl.screens.camera import CameraScreen
from groundctl.screens.frame_metadata import FrameMetadataScreen
from groundctl.screens.hello_drone import HelloDroneScreen
from groundctl.screens.thermal import EmbeddedThermalStreamScreen, ThermalStreamScreen
from groundctl.screens.thermal_local import ThermalLocalScreen

SCREENS: dict[str, type[Screen]] = {
    screen.name: screen
    for screen in (
        HelloDroneScreen,
        CameraScreen,
        ThermalStreamScreen,
        EmbeddedThermalStreamScreen,
        ThermalLocalScreen,
        FrameMetadataScreen,
    )
}

__all__ = [
    "SCREENS",
    "CameraScreen",
    "EmbeddedThermalStreamScreen",
    "FrameMetadataScreen",
    "HelloDroneScreen",
    "Screen",
    "ThermalLocalScreen",
    "ThermalStreamScreen",
]
