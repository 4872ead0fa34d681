"""Evaluation events and the plain-text report that renders them."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from domain.common import PlayerStats


@dataclass(frozen=True)
class PlayerStatsReported:
    match_id: str
    stats: PlayerStats


@dataclass(frozen=True)
class ConditionTriggered:
    match_id: str
    condition: str


@dataclass(frozen=True)
class MatchSkipped:
    match_id: str
    reason: str


@dataclass(frozen=True)
class MatchCompleted:
    match_id: str
    triggered: tuple[str, ...]

    @property
    def flagged(self) -> bool:
        return bool(self.triggered)


EvaluationEvent = PlayerStatsReported | ConditionTriggered | MatchSkipped | MatchCompleted

TAB_SIZE = 8


def format_player_stats(stats: PlayerStats) -> str:
    kdr = "n/a" if stats.kdr is None else f"{stats.kdr:.2f}"
    name = stats.name or stats.membership_id
    return f"{name}\telo: {stats.elo:.0f},\tkdr: {kdr},\tflawless: {stats.flawless}"


def render_event(event: EvaluationEvent) -> list[str]:
    """Return the report lines for one event."""
    if isinstance(event, PlayerStatsReported):
        return [format_player_stats(event.stats)]
    if isinstance(event, ConditionTriggered):
        return [f"maybe a carry based on {event.condition}"]
    if isinstance(event, MatchSkipped):
        return [f"skipped match {event.match_id}: {event.reason}", "---"]
    if isinstance(event, MatchCompleted):
        return ["---"]
    raise TypeError(f"Unsupported evaluation event: {event!r}")


def render_summary(total_matches: int, total_flagged: int) -> list[str]:
    return [
        "",
        f"total games:\t{total_matches}",
        f"total potential carries:\t{total_flagged}",
    ]


class TextReport:
    """Streaming sink: writes each event's lines through ``echo`` as it arrives."""

    def __init__(self, echo: Callable[[str], None], *, tab_size: int = TAB_SIZE) -> None:
        self.echo = echo
        self.tab_size = tab_size

    def __call__(self, event: EvaluationEvent) -> None:
        for line in render_event(event):
            self.echo(line.expandtabs(self.tab_size))

    def summary(self, total_matches: int, total_flagged: int) -> None:
        for line in render_summary(total_matches, total_flagged):
            self.echo(line.expandtabs(self.tab_size))


__all__ = [
    "ConditionTriggered",
    "EvaluationEvent",
    "MatchCompleted",
    "MatchSkipped",
    "PlayerStatsReported",
    "TextReport",
    "format_player_stats",
    "render_event",
    "render_summary",
]
