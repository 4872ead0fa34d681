"""Shared types for match history, rosters and aggregated player stats."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class Platform(int, Enum):
    """Bungie membership types the tool can look players up on."""

    XBOX = 1
    PSN = 2


class SourceStatus(str, Enum):
    """Outcome of one upstream lookup feeding a PlayerStats record."""

    OK = "ok"
    DEGRADED = "degraded"
    FAILED = "failed"


@dataclass(frozen=True)
class MatchRecord:
    """One played match from the local player's activity history."""

    match_id: str
    standing: float
    period: datetime | None = None
    character_id: str | None = None
    mode: int | None = None


@dataclass(frozen=True)
class RosterEntry:
    """One participant taken from a post-game report."""

    membership_id: str
    standing: float
    display_name: str = ""
    character_id: str | None = None
    character_class: str | None = None
    character_level: int | None = None
    light_level: int | None = None


@dataclass(frozen=True)
class TeamStanding:
    team_id: int
    standing: float
    score: float


@dataclass(frozen=True)
class MatchReport:
    """Canonical post-game report: every participant plus per-team aggregates."""

    match_id: str
    entries: tuple[RosterEntry, ...]
    teams: tuple[TeamStanding, ...] = ()


@dataclass(frozen=True)
class ModeRating:
    elo: float = 0.0
    kills: int = 0
    deaths: int = 0
    games_played: int = 0
    wins: int = 0


@dataclass(frozen=True)
class SkillRating:
    """Skill-rating payload keyed by game-mode identifier."""

    name: str
    modes: dict[str, ModeRating] = field(default_factory=dict)


@dataclass(frozen=True)
class TrialsRecord:
    """Trials-record payload with flawless runs per tracked season."""

    display_name: str = ""
    flawless_by_season: dict[str, int] = field(default_factory=dict)

    @property
    def total_flawless(self) -> int:
        return sum(self.flawless_by_season.values())


def kdr_from(kills: int, deaths: int) -> float | None:
    """Kill/death ratio, or None when the ratio is undefined (zero deaths)."""
    if deaths <= 0:
        return None
    return kills / float(deaths)


@dataclass(frozen=True)
class PlayerStats:
    """Canonical per-player record merged from the skill-rating and trials sources.

    Fields a failed source would have supplied keep their defaults: empty
    name, ``elo=0.0``, ``kdr=None`` and ``flawless=0``. The per-source
    statuses tell heuristics which of those values are real.
    """

    membership_id: str
    name: str = ""
    elo: float = 0.0
    kdr: float | None = None
    flawless: int = 0
    skill_status: SourceStatus = SourceStatus.OK
    trials_status: SourceStatus = SourceStatus.OK

    @property
    def has_skill_data(self) -> bool:
        return self.skill_status is SourceStatus.OK

    @property
    def has_trials_data(self) -> bool:
        return self.trials_status is SourceStatus.OK

    @property
    def is_partial(self) -> bool:
        return not (self.has_skill_data and self.has_trials_data)


@dataclass(frozen=True)
class SourceResult:
    """Typed result of one upstream call made by the aggregator."""

    status: SourceStatus
    value: object | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is SourceStatus.OK


__all__ = [
    "MatchRecord",
    "MatchReport",
    "ModeRating",
    "Platform",
    "PlayerStats",
    "RosterEntry",
    "SkillRating",
    "SourceResult",
    "SourceStatus",
    "TeamStanding",
    "TrialsRecord",
    "kdr_from",
]
