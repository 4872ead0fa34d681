"""Merge skill-rating and trials-record lookups into one PlayerStats record."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import cast

from domain.common import (
    PlayerStats,
    SkillRating,
    SourceResult,
    SourceStatus,
    TrialsRecord,
    kdr_from,
)
from domain.errors import MalformedResponse, UpstreamUnavailable
from domain.protocol import SkillRatingService, TrialsRecordService
from domain.stats.cache import StatsCache

logger = logging.getLogger(__name__)

TRIALS_OF_OSIRIS_MODE = "14"


class StatsAggregator:
    """Owns the cache-fill path for canonical per-player stats.

    Upstream failures never escape ``aggregate``: a source that raised
    ``UpstreamUnavailable`` is recorded as FAILED, one that raised
    ``MalformedResponse`` (or lacks the requested game mode) as DEGRADED, and
    the fields it would have supplied keep their PlayerStats defaults.
    """

    def __init__(
        self,
        skill_ratings: SkillRatingService,
        trials_records: TrialsRecordService,
        *,
        cache: StatsCache | None = None,
        game_mode: str = TRIALS_OF_OSIRIS_MODE,
    ) -> None:
        self.skill_ratings = skill_ratings
        self.trials_records = trials_records
        self.cache = cache if cache is not None else StatsCache()
        self.game_mode = game_mode

    def stats_for(self, identity: str) -> PlayerStats:
        """Cached entry point: aggregate at most once per identity."""
        return self.cache.get_or_compute(identity, self.aggregate)

    def aggregate(self, identity: str) -> PlayerStats:
        skill = _fetch("skill_rating", self.skill_ratings.fetch_player, identity)
        trials = _fetch("trials_record", self.trials_records.fetch_player, identity)

        name = ""
        elo = 0.0
        kdr: float | None = None
        skill_status = skill.status
        if skill.ok:
            rating = cast(SkillRating, skill.value)
            name = rating.name
            mode = rating.modes.get(self.game_mode)
            if mode is None:
                skill_status = SourceStatus.DEGRADED
                logger.warning(
                    "skill_rating: identity=%s has no data for game_mode=%s",
                    identity,
                    self.game_mode,
                )
            else:
                elo = mode.elo
                kdr = kdr_from(mode.kills, mode.deaths)

        flawless = 0
        if trials.ok:
            record = cast(TrialsRecord, trials.value)
            flawless = record.total_flawless
            if not name:
                name = record.display_name

        return PlayerStats(
            membership_id=identity,
            name=name,
            elo=elo,
            kdr=kdr,
            flawless=flawless,
            skill_status=skill_status,
            trials_status=trials.status,
        )


def _fetch(source: str, fetch: Callable[[str], object], identity: str) -> SourceResult:
    try:
        return SourceResult(status=SourceStatus.OK, value=fetch(identity))
    except UpstreamUnavailable as exc:
        logger.warning("%s unavailable for identity=%s: %s", source, identity, exc.detail)
        return SourceResult(status=SourceStatus.FAILED, error=str(exc))
    except MalformedResponse as exc:
        logger.warning("%s malformed for identity=%s: %s", source, identity, exc.detail)
        return SourceResult(status=SourceStatus.DEGRADED, error=str(exc))


__all__ = ["StatsAggregator", "TRIALS_OF_OSIRIS_MODE"]
