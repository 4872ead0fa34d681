"""Evaluate every registered carry condition against an opposing roster."""

from __future__ import annotations

from collections.abc import Sequence

from domain.carry.conditions import CarryCondition, CarryThresholds
from domain.carry.registry import build_conditions
from domain.common import PlayerStats


class CarryHeuristicEngine:
    """Holds an ordered set of named conditions and runs each one independently.

    The engine never combines results into a verdict; callers decide what a
    non-empty set of triggered names means.
    """

    def __init__(self, conditions: Sequence[CarryCondition]) -> None:
        names = [condition.name for condition in conditions]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate carry condition names: {names}")
        self._conditions = tuple(conditions)

    @classmethod
    def from_thresholds(
        cls,
        thresholds: CarryThresholds | None = None,
        names: Sequence[str] | None = None,
    ) -> CarryHeuristicEngine:
        return cls(build_conditions(thresholds or CarryThresholds(), names))

    @property
    def condition_names(self) -> tuple[str, ...]:
        return tuple(condition.name for condition in self._conditions)

    def evaluate(self, roster: Sequence[PlayerStats]) -> tuple[str, ...]:
        """Return names of triggered conditions, in engine order."""
        if not roster:
            return ()
        return tuple(condition.name for condition in self._conditions if condition(roster))


__all__ = ["CarryHeuristicEngine"]
