"""Built-in carry conditions: pure predicates over an opposing roster."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass

from domain.common import PlayerStats

CarryPredicate = Callable[[Sequence[PlayerStats]], bool]


@dataclass(frozen=True)
class CarryThresholds:
    elo_spread: float = 500.0
    kdr_spread: float = 1.0
    flawless_low: int = 5
    flawless_high: int = 20


@dataclass(frozen=True)
class CarryCondition:
    """A named, stateless predicate registered once and shared read-only."""

    name: str
    predicate: CarryPredicate
    description: str = ""

    def __call__(self, roster: Sequence[PlayerStats]) -> bool:
        return self.predicate(roster)


def _spread(values: Sequence[float]) -> float:
    return max(values) - min(values)


def elo_spread(roster: Sequence[PlayerStats], *, threshold: float = 500.0) -> bool:
    """Max minus min ELO among players with skill data reaches ``threshold``."""
    elos = [player.elo for player in roster if player.has_skill_data]
    if len(elos) < 2:
        return False
    return _spread(elos) >= threshold


def kdr_spread(roster: Sequence[PlayerStats], *, threshold: float = 1.0) -> bool:
    """Max minus min KDR reaches ``threshold``; undefined KDRs are left out."""
    kdrs = [
        player.kdr
        for player in roster
        if player.has_skill_data and player.kdr is not None
    ]
    if len(kdrs) < 2:
        return False
    return _spread(kdrs) >= threshold


def flawless_mix(
    roster: Sequence[PlayerStats],
    *,
    low: int = 5,
    high: int = 20,
) -> bool:
    """A low-experience player (<= ``low``) teamed with a veteran (>= ``high``)."""
    counts = [player.flawless for player in roster if player.has_trials_data]
    has_low = any(count <= low for count in counts)
    has_high = any(count >= high for count in counts)
    return has_low and has_high


def make_elo_spread(thresholds: CarryThresholds) -> CarryCondition:
    return CarryCondition(
        name="elo_spread",
        predicate=lambda roster: elo_spread(roster, threshold=thresholds.elo_spread),
        description=f"ELO spread >= {thresholds.elo_spread:g}",
    )


def make_kdr_spread(thresholds: CarryThresholds) -> CarryCondition:
    return CarryCondition(
        name="kdr_spread",
        predicate=lambda roster: kdr_spread(roster, threshold=thresholds.kdr_spread),
        description=f"K/D spread >= {thresholds.kdr_spread:g}",
    )


def make_flawless_mix(thresholds: CarryThresholds) -> CarryCondition:
    return CarryCondition(
        name="flawless_mix",
        predicate=lambda roster: flawless_mix(
            roster,
            low=thresholds.flawless_low,
            high=thresholds.flawless_high,
        ),
        description=(
            f"flawless <= {thresholds.flawless_low} alongside "
            f"flawless >= {thresholds.flawless_high}"
        ),
    )


__all__ = [
    "CarryCondition",
    "CarryPredicate",
    "CarryThresholds",
    "elo_spread",
    "flawless_mix",
    "kdr_spread",
    "make_elo_spread",
    "make_flawless_mix",
    "make_kdr_spread",
]
