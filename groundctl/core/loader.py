"""Loading and validation of YAML palette and scenario files."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from importlib import resources
from importlib.resources.abc import Traversable
from pathlib import Path
from typing import Any, TypeVar

import yaml
from jsonschema import ValidationError, validators

from groundctl.core.errors import (
    GroundctlError,
    PaletteLoadError,
    PaletteValidationError,
    ScenarioLoadError,
    ScenarioValidationError,
)
from groundctl.core.model import (
    AbsolutePalette,
    DeviceSpec,
    DroneModel,
    OutsideColorization,
    RelativePalette,
    RemoteControlModel,
    Scenario,
    SpotPalette,
    SpotType,
    ThermalColor,
    ThermalPalette,
)

T = TypeVar("T")
LOGGER = logging.getLogger(__name__)


class DuplicateKeyError(yaml.YAMLError):
    """Raised by ``UniqueKeyLoader`` on a repeated mapping key."""


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


UniqueKeyLoader.yaml_implicit_resolvers = {
    key: list(value) for key, value in yaml.SafeLoader.yaml_implicit_resolvers.items()
}

for first_char, mappings in list(UniqueKeyLoader.yaml_implicit_resolvers.items()):
    UniqueKeyLoader.yaml_implicit_resolvers[first_char] = [
        (tag, regexp)
        for tag, regexp in mappings
        if tag != "tag:yaml.org,2002:bool"
    ]


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[Any, Any]:
    mapping: dict[Any, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise DuplicateKeyError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class LoadedPalettes:
    palettes: dict[str, ThermalPalette]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class LoadedScenarios:
    scenarios: dict[str, Scenario]
    warnings: tuple[str, ...]


@dataclass(frozen=True)
class _Source:
    """Where one kind of document lives and how its failures are reported."""

    kind: str
    schema: str
    load_error: type[GroundctlError]
    validation_error: type[GroundctlError]


_PALETTES = _Source("palettes", "palette.schema.json", PaletteLoadError, PaletteValidationError)
_SCENARIOS = _Source("scenarios", "scenario.schema.json", ScenarioLoadError, ScenarioValidationError)


def _load_schema_validator(schema_name: str) -> Any:
    schema_text = resources.files("groundctl.schemas").joinpath(schema_name).read_text(encoding="utf-8")
    schema = json.loads(schema_text)
    validator_cls = validators.validator_for(schema)
    validator_cls.check_schema(schema)
    return validator_cls(schema)


def _user_dirs(kind: str) -> tuple[Path, Path]:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    xdg_data = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local/share"))
    return xdg_config / "groundctl" / kind, xdg_data / "groundctl" / kind


def _read_yaml(path: Path | Traversable, source: _Source) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise source.load_error(f"Could not read {source.kind} file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise source.validation_error(f"Invalid YAML in {path}: {exc}") from exc

    if not isinstance(loaded, dict):
        raise source.validation_error(f"File {path} must contain a mapping at root")
    return loaded


def _validate(doc: dict[str, Any], path: Path | Traversable, source: _Source) -> None:
    validator = _load_schema_validator(source.schema)
    try:
        validator.validate(doc)
    except ValidationError as exc:
        where_path = ".".join(str(p) for p in exc.path)
        where = f" ({where_path})" if where_path else ""
        raise source.validation_error(f"Schema validation failed for {path}{where}: {exc.message}") from exc


def normalize_bool(
    value: Any,
    *,
    context: str,
    error: type[GroundctlError] = PaletteValidationError,
) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    raise error(f"{context} must be boolean true/false")


def _unit_interval(value: float, *, context: str) -> float:
    value = float(value)
    if not 0.0 <= value <= 1.0:
        raise PaletteValidationError(f"{context} must be within [0, 1], got {value}")
    return value


def _build_colors(doc: dict[str, Any]) -> tuple[ThermalColor, ...]:
    colors: list[ThermalColor] = []
    for index, spec in enumerate(doc["colors"]):
        context = f"{doc['id']}.colors[{index}]"
        colors.append(
            ThermalColor(
                red=_unit_interval(spec["red"], context=f"{context}.red"),
                green=_unit_interval(spec["green"], context=f"{context}.green"),
                blue=_unit_interval(spec["blue"], context=f"{context}.blue"),
                position=_unit_interval(spec["position"], context=f"{context}.position"),
            )
        )

    positions = [color.position for color in colors]
    if positions != sorted(positions):
        raise PaletteValidationError(f"{doc['id']}.colors positions must be non-decreasing")
    return tuple(colors)


def _build_palette(doc: dict[str, Any], path: Path | Traversable) -> ThermalPalette:
    _validate(doc, path, _PALETTES)
    colors = _build_colors(doc)
    palette_id, name = doc["id"], doc["name"]

    if doc["kind"] == "relative":
        return RelativePalette(
            id=palette_id,
            name=name,
            colors=colors,
            locked=normalize_bool(doc.get("locked", False), context=f"{palette_id}.locked"),
        )
    if doc["kind"] == "absolute":
        lowest, highest = float(doc["lowest_temp"]), float(doc["highest_temp"])
        if lowest >= highest:
            raise PaletteValidationError(
                f"{palette_id}.lowest_temp must be lower than highest_temp ({lowest} >= {highest})"
            )
        return AbsolutePalette(
            id=palette_id,
            name=name,
            colors=colors,
            lowest_temp=lowest,
            highest_temp=highest,
            outside_colorization=OutsideColorization(doc.get("outside_colorization", "limited")),
        )
    if doc["kind"] == "spot":
        return SpotPalette(
            id=palette_id,
            name=name,
            colors=colors,
            spot_type=SpotType(doc.get("spot_type", "hot")),
            threshold=_unit_interval(doc.get("threshold", 0.5), context=f"{palette_id}.threshold"),
        )
    raise PaletteValidationError(f"Unsupported palette kind '{doc['kind']}' in {path}")


_DEVICE_MODELS: dict[str, Callable[[str], Any]] = {
    "drone": DroneModel,
    "remote_control": RemoteControlModel,
}


def _build_scenario(doc: dict[str, Any], path: Path | Traversable) -> Scenario:
    _validate(doc, path, _SCENARIOS)

    devices: list[DeviceSpec] = []
    seen: set[str] = set()
    for spec in doc.get("devices", []):
        uid = spec["uid"]
        if uid in seen:
            raise ScenarioValidationError(f"{doc['id']}: device '{uid}' declared twice")
        seen.add(uid)
        kind = spec["kind"]
        default_model = "anafi_4k" if kind == "drone" else "sky_controller_4"
        model = spec.get("model", default_model)
        try:
            _DEVICE_MODELS[kind](model)
        except ValueError as exc:
            raise ScenarioValidationError(f"{doc['id']}: unknown {kind} model '{model}'") from exc
        devices.append(DeviceSpec(uid=uid, kind=kind, model=model, name=spec.get("name", uid)))

    return Scenario(
        id=doc["id"],
        name=doc["name"],
        screen=doc["screen"],
        description=doc.get("description", ""),
        devices=tuple(devices),
        replays={file: float(duration) for file, duration in doc.get("replays", {}).items()},
        steps=tuple(doc["steps"]),
    )


def _iter_packaged_paths(package: str) -> list[Traversable]:
    root = resources.files(package)
    return [item for item in root.iterdir() if item.name.endswith((".yml", ".yaml"))]


def _iter_user_paths(kind: str) -> list[Path]:
    paths: list[Path] = []
    for directory in _user_dirs(kind):
        if not directory.exists() or not directory.is_dir():
            continue
        paths.extend(sorted(p for p in directory.iterdir() if p.suffix in {".yml", ".yaml"}))
    return paths


def _load_all(
    source: _Source,
    build: Callable[[dict[str, Any], Path | Traversable], T],
) -> tuple[dict[str, T], tuple[str, ...]]:
    items: dict[str, T] = {}
    warnings: list[str] = []

    for path in sorted(_iter_packaged_paths(f"groundctl.{source.kind}"), key=lambda p: p.name):
        item = build(_read_yaml(path, source), path)
        items[item.id] = item  # type: ignore[attr-defined]

    label = source.kind.rstrip("s")
    for path in _iter_user_paths(source.kind):
        item = build(_read_yaml(path, source), path)
        item_id = item.id  # type: ignore[attr-defined]
        if item_id in items:
            warning = f"User {label} '{item_id}' overrides packaged {label}"
            LOGGER.warning(warning)
            warnings.append(warning)
        items[item_id] = item

    return items, tuple(warnings)


def load_palettes() -> LoadedPalettes:
    palettes, warnings = _load_all(_PALETTES, _build_palette)
    return LoadedPalettes(palettes=palettes, warnings=warnings)


def load_scenarios() -> LoadedScenarios:
    scenarios, warnings = _load_all(_SCENARIOS, _build_scenario)
    return LoadedScenarios(scenarios=scenarios, warnings=warnings)
