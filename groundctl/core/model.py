"""Core data models shared by the SDK boundary, projectors, screens and CLI."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class DroneModel(Enum):
    ANAFI_4K = "anafi_4k"
    ANAFI_THERMAL = "anafi_thermal"
    ANAFI_UA = "anafi_ua"
    ANAFI_USA = "anafi_usa"
    ANAFI_2 = "anafi_2"


class RemoteControlModel(Enum):
    SKY_CONTROLLER_3 = "sky_controller_3"
    SKY_CONTROLLER_4 = "sky_controller_4"


class ConnectionState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    DISCONNECTING = "disconnecting"


class AutoConnectionState(Enum):
    STOPPED = "stopped"
    STARTED = "started"


class FacilityKind(Enum):
    AUTO_CONNECTION = "auto_connection"


class PeripheralKind(Enum):
    STREAM_SERVER = "stream_server"
    MAIN_CAMERA = "main_camera"
    MAIN_CAMERA2 = "main_camera2"
    THERMAL_CONTROL = "thermal_control"
    THERMAL_CAMERA = "thermal_camera"
    BLENDED_THERMAL_CAMERA = "blended_thermal_camera"


class InstrumentKind(Enum):
    BATTERY_INFO = "battery_info"


class PilotingItfKind(Enum):
    MANUAL_COPTER = "manual_copter"


class PilotingItfState(Enum):
    UNAVAILABLE = "unavailable"
    IDLE = "idle"
    ACTIVE = "active"


class PlayState(Enum):
    NONE = "none"
    PLAYING = "playing"
    PAUSED = "paused"


class CameraMode(Enum):
    PHOTO = "photo"
    RECORDING = "recording"


class PhotoMode(Enum):
    SINGLE = "single"
    BRACKETING = "bracketing"
    BURST = "burst"


class WhiteBalanceMode(Enum):
    AUTOMATIC = "automatic"
    CUSTOM = "custom"


class WhiteBalanceTemperature(Enum):
    """Custom white balance temperatures, valued in kelvin."""

    K1500 = 1500
    K2000 = 2000
    K2500 = 2500
    K3000 = 3000
    K3500 = 3500
    K4000 = 4000
    K4500 = 4500
    K5000 = 5000
    K5500 = 5500
    K6000 = 6000
    K6500 = 6500
    K7000 = 7000
    K8000 = 8000
    K10000 = 10000

    @property
    def label(self) -> str:
        return f"{self.value}K"

    @classmethod
    def from_label(cls, label: str | int) -> WhiteBalanceTemperature:
        """Accept ``5000``, ``"5000"`` or ``"5000K"``."""
        return cls(int(str(label).strip().upper().removesuffix("K")))


class Camera2Param(Enum):
    MODE = "mode"
    PHOTO_MODE = "photo_mode"
    WHITE_BALANCE_MODE = "white_balance_mode"
    WHITE_BALANCE_TEMPERATURE = "white_balance_temperature"


class Camera2Component(Enum):
    RECORDING = "recording"
    PHOTO_CAPTURE = "photo_capture"


class ThermalMode(Enum):
    DISABLED = "disabled"
    STANDARD = "standard"
    BLENDED = "blended"


class ThermalRenderingMode(Enum):
    VISIBLE = "visible"
    THERMAL = "thermal"
    BLENDED = "blended"
    MONOCHROME = "monochrome"


class ThermalSensor(Enum):
    LEPTON = "lepton"
    BOSON = "boson"


class OutsideColorization(Enum):
    LIMITED = "limited"
    EXTENDED = "extended"


class SpotType(Enum):
    HOT = "hot"
    COLD = "cold"


@dataclass(frozen=True)
class DeviceState:
    connection_state: ConnectionState = ConnectionState.DISCONNECTED


@dataclass(frozen=True)
class ComponentState:
    can_start: bool = False
    can_stop: bool = False


@dataclass(frozen=True)
class ReplaySource:
    file: str
    track: str = "thermal_unblended"


@dataclass(frozen=True)
class ThermalColor:
    red: float
    green: float
    blue: float
    position: float


@dataclass(frozen=True)
class RelativePalette:
    id: str
    name: str
    colors: tuple[ThermalColor, ...]
    locked: bool = False
    lowest_temp: float = 0.0
    highest_temp: float = 0.0

    kind = "relative"


@dataclass(frozen=True)
class AbsolutePalette:
    id: str
    name: str
    colors: tuple[ThermalColor, ...]
    lowest_temp: float
    highest_temp: float
    outside_colorization: OutsideColorization = OutsideColorization.LIMITED

    kind = "absolute"


@dataclass(frozen=True)
class SpotPalette:
    id: str
    name: str
    colors: tuple[ThermalColor, ...]
    spot_type: SpotType = SpotType.HOT
    threshold: float = 0.5

    kind = "spot"


ThermalPalette = Union[RelativePalette, AbsolutePalette, SpotPalette]


@dataclass(frozen=True)
class ThermalRendering:
    mode: ThermalRenderingMode = ThermalRenderingMode.BLENDED
    blending_rate: float = 0.5


@dataclass(frozen=True)
class ThermalProcessing:
    """Local rendering settings mirrored to the drone's thermal control."""

    rendering: ThermalRendering = ThermalRendering()
    emissivity: float = 0.95
    background_temperature: float = 293.15
    probe_x: float = 0.5
    probe_y: float = 0.5


@dataclass(frozen=True)
class ThermalSpot:
    temperature: float
    x: float
    y: float


@dataclass(frozen=True)
class ThermalRenderStatus:
    lowest: ThermalSpot | None = None
    highest: ThermalSpot | None = None
    probe: ThermalSpot | None = None


@dataclass(frozen=True)
class FrameMetadata:
    drone_quat: tuple[float, float, float, float]


@dataclass(frozen=True)
class ButtonState:
    enabled: bool
    title: str | None = None


@dataclass(frozen=True)
class SelectorState:
    options: tuple[str, ...]
    index: int | None
    enabled: bool = True


@dataclass(frozen=True)
class PickerState:
    options: tuple[str, ...]
    selected: str | None


@dataclass(frozen=True)
class CameraModeView:
    selector: SelectorState
    capture: ButtonState


@dataclass(frozen=True)
class ThermalStatsView:
    lowest: str
    highest: str
    probe: str
    probe_x: str
    probe_y: str


@dataclass(frozen=True)
class DeviceSpec:
    uid: str
    kind: str
    model: str
    name: str


@dataclass(frozen=True)
class Scenario:
    id: str
    name: str
    screen: str
    description: str
    devices: tuple[DeviceSpec, ...]
    replays: dict[str, float]
    steps: tuple[dict[str, Any], ...]


@dataclass(frozen=True)
class StepResult:
    index: int
    step: str
    surface: tuple[str, ...] = field(default_factory=tuple)
