"""destinytrialsreport.com flawless-run lookups."""

from __future__ import annotations

from typing import Any

import requests

from domain.common import TrialsRecord
from domain.errors import MalformedResponse
from repositories.base import DEFAULT_TIMEOUT_SECONDS, JsonApiClient, as_int, lookup

TRIALS_REPORT_BASE_URL = "https://api.destinytrialsreport.com"


class TrialsReportRepository(JsonApiClient):
    """Implements TrialsRecordService.

    The player endpoint answers with a one-element list. ``flawless`` is an
    empty list for players without flawless runs, otherwise an object keyed
    by year/season.
    """

    source = "trials_report"

    def __init__(
        self,
        session: requests.Session,
        *,
        base_url: str = TRIALS_REPORT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(session, base_url=base_url, timeout=timeout)

    def fetch_player(self, account_id: str) -> TrialsRecord:
        payload = self._get_json(f"player/{account_id}")
        if not isinstance(payload, list) or not payload or not isinstance(payload[0], dict):
            raise MalformedResponse(self.source, f"player={account_id} payload is not a player list")
        player = payload[0]
        return TrialsRecord(
            display_name=str(lookup(player, "displayName", default="") or ""),
            flawless_by_season=self._parse_flawless(lookup(player, "flawless")),
        )

    def _parse_flawless(self, raw: Any) -> dict[str, int]:
        if raw is None or raw == []:
            return {}
        years = lookup(raw, "years")
        if not isinstance(years, dict):
            raise MalformedResponse(self.source, "flawless.years is not an object")
        return {
            str(season): as_int(self.source, lookup(value, "count"), f"flawless.years.{season}")
            for season, value in years.items()
        }


__all__ = ["TRIALS_REPORT_BASE_URL", "TrialsReportRepository"]
