"""Resolve match rosters and split them into own and opposing teams."""

from __future__ import annotations

import logging

from domain.common import MatchRecord, MatchReport, RosterEntry
from domain.errors import MalformedResponse
from domain.protocol import MatchReportService

logger = logging.getLogger(__name__)


class RosterResolver:
    """Glue between match records and the post-game report service.

    Team membership is inferred from standings: a match has exactly two
    distinct standing values, and entries whose standing differs from the
    local player's recorded standing form the opposing team.
    """

    def __init__(self, reports: MatchReportService) -> None:
        self.reports = reports

    def resolve(self, match: MatchRecord) -> MatchReport:
        return self.reports.fetch_report(match.match_id)

    def opposing_entries(self, match: MatchRecord) -> tuple[RosterEntry, ...]:
        """Fetch the report for ``match`` and return the opposing team's entries."""
        return split_opposing(match, self.resolve(match))


def split_opposing(match: MatchRecord, report: MatchReport) -> tuple[RosterEntry, ...]:
    standings = {entry.standing for entry in report.entries}
    if len(standings) > 2:
        raise MalformedResponse(
            "match_report",
            f"match_id={match.match_id} has {len(standings)} distinct standings, expected 2",
        )
    if len(standings) == 2 and match.standing not in standings:
        raise MalformedResponse(
            "match_report",
            f"match_id={match.match_id} standing={match.standing:g} matches neither team",
        )

    opposing: list[RosterEntry] = []
    for entry in report.entries:
        if entry.standing == match.standing:
            continue
        if not entry.membership_id:
            logger.warning(
                "match_id=%s skipping opposing entry without membership id (name=%r)",
                match.match_id,
                entry.display_name,
            )
            continue
        opposing.append(entry)
    return tuple(opposing)


__all__ = ["RosterResolver", "split_opposing"]
