"""Load carry-check configurations from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
import math
from pathlib import Path
from typing import Any
import tomllib

from domain.carry.conditions import CarryThresholds
from domain.carry.registry import get_all
from domain.history import TRIALS_ACTIVITY_MODE
from domain.stats.aggregator import TRIALS_OF_OSIRIS_MODE


@dataclass(frozen=True)
class SourceSettings:
    game_mode: str = TRIALS_OF_OSIRIS_MODE
    activity_mode: str = TRIALS_ACTIVITY_MODE
    timeout_seconds: float = 10.0
    max_workers: int = 1


@dataclass(frozen=True)
class CarryCheckConfig:
    """One named heuristic/source configuration."""

    name: str
    description: str | None
    file_path: Path
    thresholds: CarryThresholds
    conditions: tuple[str, ...]
    sources: SourceSettings

    def as_config_json(self) -> dict[str, Any]:
        return {
            "elo_spread": self.thresholds.elo_spread,
            "kdr_spread": self.thresholds.kdr_spread,
            "flawless_low": self.thresholds.flawless_low,
            "flawless_high": self.thresholds.flawless_high,
            "conditions": list(self.conditions),
            "game_mode": self.sources.game_mode,
            "activity_mode": self.sources.activity_mode,
            "timeout_seconds": self.sources.timeout_seconds,
            "max_workers": self.sources.max_workers,
        }


def load_carry_check_configs(config_dir: Path) -> list[CarryCheckConfig]:
    """Load all TOML files in a directory with duplicate-name validation."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    configs = [load_carry_check_config(file_path) for file_path in config_files]

    names = [config.name for config in configs]
    if len(names) != len(set(names)):
        raise ValueError(f"Duplicate carry-check config names found in {config_dir}: {names}")

    return configs


def load_carry_check_config(file_path: Path) -> CarryCheckConfig:
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return _parse_carry_check_config(raw, file_path)


def _parse_carry_check_config(raw: dict[str, Any], file_path: Path) -> CarryCheckConfig:
    system_raw = raw.get("system", {})
    thresholds_raw = raw.get("thresholds", {})
    heuristics_raw = raw.get("heuristics", {})
    sources_raw = raw.get("sources", {})

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)

    thresholds = CarryThresholds(
        elo_spread=_float_value(file_path, "thresholds", thresholds_raw, "elo_spread", 500.0),
        kdr_spread=_float_value(file_path, "thresholds", thresholds_raw, "kdr_spread", 1.0),
        flawless_low=_int_value(file_path, "thresholds", thresholds_raw, "flawless_low", 5),
        flawless_high=_int_value(file_path, "thresholds", thresholds_raw, "flawless_high", 20),
    )
    _validate_thresholds(file_path=file_path, thresholds=thresholds)

    registered = [descriptor.name for descriptor in get_all()]
    enabled = heuristics_raw.get("enabled", registered)
    if not isinstance(enabled, list) or not all(isinstance(item, str) for item in enabled):
        raise ValueError(f"{file_path}: [heuristics].enabled must be a list of names")
    conditions = tuple(item.strip().lower() for item in enabled)
    unknown = [item for item in conditions if item not in registered]
    if unknown:
        raise ValueError(
            f"{file_path}: [heuristics].enabled has unknown conditions {unknown}; "
            f"available: {registered}"
        )
    if len(conditions) != len(set(conditions)):
        raise ValueError(f"{file_path}: [heuristics].enabled lists a condition twice")

    sources = SourceSettings(
        game_mode=str(sources_raw.get("game_mode", TRIALS_OF_OSIRIS_MODE)),
        activity_mode=str(sources_raw.get("activity_mode", TRIALS_ACTIVITY_MODE)),
        timeout_seconds=_float_value(file_path, "sources", sources_raw, "timeout_seconds", 10.0),
        max_workers=_int_value(file_path, "sources", sources_raw, "max_workers", 1),
    )
    _validate_sources(file_path=file_path, sources=sources)

    return CarryCheckConfig(
        name=name,
        description=description,
        file_path=file_path,
        thresholds=thresholds,
        conditions=conditions,
        sources=sources,
    )


def _float_value(file_path: Path, section: str, raw: dict[str, Any], key: str, default: float) -> float:
    value = raw.get(key, default)
    not_numeric = isinstance(value, bool) or not isinstance(value, (int, float))
    if not_numeric or (isinstance(value, float) and not math.isfinite(value)):
        raise ValueError(f"{file_path}: [{section}].{key} must be a number, got {value!r}")
    return float(value)


def _int_value(file_path: Path, section: str, raw: dict[str, Any], key: str, default: int) -> int:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer, got {value!r}")
    return value


def _validate_thresholds(*, file_path: Path, thresholds: CarryThresholds) -> None:
    if thresholds.elo_spread <= 0.0:
        raise ValueError(f"{file_path}: [thresholds].elo_spread must be > 0")
    if thresholds.kdr_spread <= 0.0:
        raise ValueError(f"{file_path}: [thresholds].kdr_spread must be > 0")
    if thresholds.flawless_low < 0:
        raise ValueError(f"{file_path}: [thresholds].flawless_low must be >= 0")
    if thresholds.flawless_high <= thresholds.flawless_low:
        raise ValueError(f"{file_path}: [thresholds].flawless_high must be > flawless_low")


def _validate_sources(*, file_path: Path, sources: SourceSettings) -> None:
    if not sources.game_mode.strip():
        raise ValueError(f"{file_path}: [sources].game_mode must not be empty")
    if not sources.activity_mode.strip():
        raise ValueError(f"{file_path}: [sources].activity_mode must not be empty")
    if sources.timeout_seconds <= 0.0:
        raise ValueError(f"{file_path}: [sources].timeout_seconds must be > 0")
    if sources.max_workers < 1:
        raise ValueError(f"{file_path}: [sources].max_workers must be >= 1")


__all__ = [
    "CarryCheckConfig",
    "SourceSettings",
    "load_carry_check_config",
    "load_carry_check_configs",
]
