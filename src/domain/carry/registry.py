"""Registry of available carry conditions."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from domain.carry.conditions import (
    CarryCondition,
    CarryThresholds,
    make_elo_spread,
    make_flawless_mix,
    make_kdr_spread,
)

ConditionFactory = Callable[[CarryThresholds], CarryCondition]


@dataclass(frozen=True)
class ConditionDescriptor:
    """Everything required to build one named carry condition."""

    name: str
    factory: ConditionFactory
    summary: str


_REGISTRY: dict[str, ConditionDescriptor] = {}


def register(descriptor: ConditionDescriptor) -> None:
    """Register one condition descriptor."""
    key = descriptor.name.lower()
    if key in _REGISTRY:
        raise ValueError(f"Duplicate carry condition registration for name={key}")
    _REGISTRY[key] = descriptor


def get_all() -> list[ConditionDescriptor]:
    """Return all registered descriptors in registration order."""
    return list(_REGISTRY.values())


def get(name: str) -> ConditionDescriptor:
    """Get one registered descriptor by name."""
    try:
        return _REGISTRY[name.lower()]
    except KeyError as exc:
        available = ", ".join(_REGISTRY.keys())
        raise KeyError(
            f"No carry condition registered for {name}. Available: {available}"
        ) from exc


def build_conditions(
    thresholds: CarryThresholds,
    names: Sequence[str] | None = None,
) -> list[CarryCondition]:
    """Instantiate conditions for ``names`` (default: every registered one) in order."""
    descriptors = get_all() if names is None else [get(name) for name in names]
    return [descriptor.factory(thresholds) for descriptor in descriptors]


# (name, factory, summary)
_CONDITIONS: list[tuple[str, ConditionFactory, str]] = [
    ("elo_spread", make_elo_spread, "max-min ELO across the opposing roster"),
    ("kdr_spread", make_kdr_spread, "max-min K/D across the opposing roster"),
    ("flawless_mix", make_flawless_mix, "inexperienced player teamed with a flawless veteran"),
]


def _register_defaults() -> None:
    if _REGISTRY:
        return
    for name, factory, summary in _CONDITIONS:
        register(ConditionDescriptor(name=name, factory=factory, summary=summary))


_register_defaults()

__all__ = [
    "ConditionDescriptor",
    "build_conditions",
    "get",
    "get_all",
    "register",
]
