"""guardian.gg skill-rating lookups."""

from __future__ import annotations

from typing import Any

import requests

from domain.common import ModeRating, SkillRating
from domain.errors import MalformedResponse
from repositories.base import DEFAULT_TIMEOUT_SECONDS, JsonApiClient, as_float, as_int, lookup

GUARDIAN_GG_BASE_URL = "https://api.guardian.gg/v2"


class GuardianGGRepository(JsonApiClient):
    """Implements SkillRatingService: name plus per-mode ELO and kill/death totals."""

    source = "guardian_gg"

    def __init__(
        self,
        session: requests.Session,
        *,
        base_url: str = GUARDIAN_GG_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(session, base_url=base_url, timeout=timeout)

    def fetch_player(self, account_id: str) -> SkillRating:
        payload = self._get_json(f"players/{account_id}")
        data = lookup(payload, "data")
        if not isinstance(data, dict):
            raise MalformedResponse(self.source, f"player={account_id} payload has no data")

        modes_raw = lookup(data, "modes", default={})
        if not isinstance(modes_raw, dict):
            raise MalformedResponse(self.source, f"player={account_id} modes is not an object")

        return SkillRating(
            name=str(lookup(data, "name", default="") or ""),
            modes={str(key): self._parse_mode(value) for key, value in modes_raw.items()},
        )

    def _parse_mode(self, raw: Any) -> ModeRating:
        return ModeRating(
            elo=as_float(self.source, lookup(raw, "elo"), "elo"),
            kills=as_int(self.source, lookup(raw, "kills"), "kills"),
            deaths=as_int(self.source, lookup(raw, "deaths"), "deaths"),
            games_played=as_int(self.source, lookup(raw, "gamesPlayed"), "gamesPlayed"),
            wins=as_int(self.source, lookup(raw, "wins"), "wins"),
        )


__all__ = ["GUARDIAN_GG_BASE_URL", "GuardianGGRepository"]
