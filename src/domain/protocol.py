"""Collaborator contracts the carry-check core depends on."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from domain.common import MatchRecord, MatchReport, Platform, SkillRating, TrialsRecord


@runtime_checkable
class MatchHistoryService(Protocol):
    """Paged activity history for one character."""

    def fetch_matches(
        self,
        account_id: str,
        character_id: str,
        count: int,
        mode: str,
        *,
        platform: Platform = Platform.PSN,
        page: int = 0,
    ) -> list[MatchRecord]: ...


@runtime_checkable
class MatchReportService(Protocol):
    """Post-game report lookups."""

    def fetch_report(self, match_id: str) -> MatchReport: ...


@runtime_checkable
class SkillRatingService(Protocol):
    def fetch_player(self, account_id: str) -> SkillRating: ...


@runtime_checkable
class TrialsRecordService(Protocol):
    def fetch_player(self, account_id: str) -> TrialsRecord: ...


@runtime_checkable
class IdentityResolver(Protocol):
    """Handle -> account id and account id -> character ids."""

    def resolve_handle(self, handle: str, platform: Platform) -> str: ...

    def list_characters(self, account_id: str, platform: Platform) -> Sequence[str]: ...


__all__ = [
    "IdentityResolver",
    "MatchHistoryService",
    "MatchReportService",
    "SkillRatingService",
    "TrialsRecordService",
]
