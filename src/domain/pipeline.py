"""Match evaluation pipeline: rosters -> opponent stats -> carry heuristics."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass

from domain.carry.engine import CarryHeuristicEngine
from domain.common import MatchRecord, PlayerStats, RosterEntry
from domain.errors import UpstreamError
from domain.report import (
    ConditionTriggered,
    EvaluationEvent,
    MatchCompleted,
    MatchSkipped,
    PlayerStatsReported,
)
from domain.roster import RosterResolver
from domain.stats.aggregator import StatsAggregator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchEvaluation:
    """Outcome for one evaluated match."""

    match_id: str
    opponents: tuple[PlayerStats, ...]
    triggered: tuple[str, ...]
    skipped_reason: str | None = None

    @property
    def flagged(self) -> bool:
        return bool(self.triggered)


@dataclass(frozen=True)
class EvaluationSummary:
    """Totals for one evaluation run."""

    total_matches: int
    total_flagged: int
    skipped_matches: int
    matches: tuple[MatchEvaluation, ...] = ()


class MatchEvaluator:
    """Evaluate matches one at a time and stream events as each one finishes.

    With ``max_workers > 1`` the stats of a match's opponents are fetched
    concurrently; events still follow roster order.
    """

    def __init__(
        self,
        rosters: RosterResolver,
        aggregator: StatsAggregator,
        engine: CarryHeuristicEngine,
        *,
        max_workers: int = 1,
        on_event: Callable[[EvaluationEvent], None] | None = None,
    ) -> None:
        if max_workers <= 0:
            raise ValueError("max_workers must be greater than 0")
        self.rosters = rosters
        self.aggregator = aggregator
        self.engine = engine
        self.max_workers = max_workers
        self.on_event = on_event

    def evaluate(self, matches: Sequence[MatchRecord]) -> EvaluationSummary:
        if self.max_workers == 1:
            evaluations = [self._evaluate_match(match, executor=None) for match in matches]
        else:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                evaluations = [self._evaluate_match(match, executor=executor) for match in matches]

        return EvaluationSummary(
            total_matches=len(evaluations),
            total_flagged=sum(1 for evaluation in evaluations if evaluation.flagged),
            skipped_matches=sum(1 for evaluation in evaluations if evaluation.skipped_reason),
            matches=tuple(evaluations),
        )

    def _evaluate_match(
        self,
        match: MatchRecord,
        *,
        executor: ThreadPoolExecutor | None,
    ) -> MatchEvaluation:
        try:
            opposing = self.rosters.opposing_entries(match)
        except UpstreamError as exc:
            logger.warning("match_id=%s roster unavailable: %s", match.match_id, exc)
            self._emit(MatchSkipped(match_id=match.match_id, reason=str(exc)))
            return MatchEvaluation(
                match_id=match.match_id,
                opponents=(),
                triggered=(),
                skipped_reason=str(exc),
            )

        opponents = self._opponent_stats(opposing, executor=executor)
        for stats in opponents:
            self._emit(PlayerStatsReported(match_id=match.match_id, stats=stats))

        triggered = self.engine.evaluate(opponents)
        for condition in triggered:
            self._emit(ConditionTriggered(match_id=match.match_id, condition=condition))
        self._emit(MatchCompleted(match_id=match.match_id, triggered=triggered))

        return MatchEvaluation(match_id=match.match_id, opponents=opponents, triggered=triggered)

    def _opponent_stats(
        self,
        opposing: Sequence[RosterEntry],
        *,
        executor: ThreadPoolExecutor | None,
    ) -> tuple[PlayerStats, ...]:
        identities = [entry.membership_id for entry in opposing]
        if executor is None:
            return tuple(self.aggregator.stats_for(identity) for identity in identities)
        return tuple(executor.map(self.aggregator.stats_for, identities))

    def _emit(self, event: EvaluationEvent) -> None:
        if self.on_event is not None:
            self.on_event(event)


__all__ = ["EvaluationSummary", "MatchEvaluation", "MatchEvaluator"]
