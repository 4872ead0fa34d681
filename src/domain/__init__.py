"""Carry-check domain modules."""

from domain.common import MatchRecord, Platform, PlayerStats, RosterEntry
from domain.protocol import (
    IdentityResolver,
    MatchHistoryService,
    MatchReportService,
    SkillRatingService,
    TrialsRecordService,
)

__all__ = [
    "IdentityResolver",
    "MatchHistoryService",
    "MatchRecord",
    "MatchReportService",
    "Platform",
    "PlayerStats",
    "RosterEntry",
    "SkillRatingService",
    "TrialsRecordService",
]
