"""Domain-specific errors for groundctl.

Absence of a device or facet and unsupported configuration parameters are not
errors: they surface as ``None`` values and disabled UI state. The classes
below cover configuration files, scenario playback and screen lookup.
"""


class GroundctlError(Exception):
    """Base error for groundctl."""


class PaletteLoadError(GroundctlError):
    """Raised when reading palette sources fails."""


class PaletteValidationError(GroundctlError):
    """Raised when a palette file does not conform to schema or semantics."""


class ScenarioLoadError(GroundctlError):
    """Raised when reading scenario sources fails."""


class ScenarioValidationError(GroundctlError):
    """Raised when a scenario file does not conform to schema or semantics."""


class ScenarioStepError(GroundctlError):
    """Raised when a scenario step cannot be applied to the simulated SDK."""


class ScreenResolutionError(GroundctlError):
    """Raised when a screen, action or widget name cannot be resolved."""
