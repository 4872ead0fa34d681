"""Bungie.net platform API: identity, activity history and post-game reports."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any

import requests

from domain.common import MatchRecord, MatchReport, Platform, RosterEntry, TeamStanding
from domain.errors import IdentityResolutionError, MalformedResponse, UpstreamUnavailable
from repositories.base import (
    DEFAULT_TIMEOUT_SECONDS,
    JsonApiClient,
    as_float,
    as_int,
    lookup,
    require,
)

logger = logging.getLogger(__name__)

BUNGIE_BASE_URL = "https://www.bungie.net/Platform/Destiny"

# Bungie wraps every payload in an envelope; 1 means success.
_SUCCESS_CODE = 1


class BungieRepository(JsonApiClient):
    """Implements IdentityResolver, MatchHistoryService and MatchReportService."""

    source = "bungie"

    def __init__(
        self,
        session: requests.Session,
        *,
        base_url: str = BUNGIE_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        super().__init__(session, base_url=base_url, timeout=timeout)

    def resolve_handle(self, handle: str, platform: Platform) -> str:
        response = self._get_response(f"SearchDestinyPlayer/{int(platform)}/{handle}/")
        if not isinstance(response, list) or not response:
            raise IdentityResolutionError(f"no {platform.name.lower()} account found for {handle!r}")
        membership_id = lookup(response[0], "membershipId")
        if not membership_id:
            raise MalformedResponse(self.source, f"search result for {handle!r} has no membershipId")
        return str(membership_id)

    def list_characters(self, account_id: str, platform: Platform) -> list[str]:
        response = self._get_response(f"{int(platform)}/Account/{account_id}/Summary/")
        characters = lookup(response, "data", "characters", default=[])
        if not isinstance(characters, list):
            raise MalformedResponse(self.source, f"account={account_id} characters is not a list")
        character_ids: list[str] = []
        for character in characters:
            character_id = lookup(character, "characterBase", "characterId")
            if character_id:
                character_ids.append(str(character_id))
        return character_ids

    def fetch_matches(
        self,
        account_id: str,
        character_id: str,
        count: int,
        mode: str,
        *,
        platform: Platform = Platform.PSN,
        page: int = 0,
    ) -> list[MatchRecord]:
        response = self._get_response(
            f"Stats/ActivityHistory/{int(platform)}/{account_id}/{character_id}/",
            params={"page": page, "count": count, "mode": mode},
        )
        activities = lookup(response, "data", "activities", default=[])
        if not isinstance(activities, list):
            raise MalformedResponse(self.source, f"character={character_id} activities is not a list")
        return [_parse_activity(activity, character_id) for activity in activities]

    def fetch_report(self, match_id: str) -> MatchReport:
        response = self._get_response(f"Stats/PostGameCarnageReport/{match_id}/")
        data = require(self.source, response, "data")
        entries = lookup(data, "entries", default=[])
        teams = lookup(data, "teams", default=[])
        if not isinstance(entries, list) or not isinstance(teams, list):
            raise MalformedResponse(self.source, f"match_id={match_id} report has no roster")
        if not entries:
            raise MalformedResponse(self.source, f"match_id={match_id} report has an empty roster")
        return MatchReport(
            match_id=str(match_id),
            entries=tuple(_parse_entry(entry) for entry in entries),
            teams=tuple(_parse_team(team) for team in teams),
        )

    def _get_response(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        envelope = self._get_json(path, params)
        error_code = lookup(envelope, "ErrorCode", default=_SUCCESS_CODE)
        if error_code != _SUCCESS_CODE:
            status = lookup(envelope, "ErrorStatus", default="unknown")
            message = lookup(envelope, "Message", default="")
            throttle = lookup(envelope, "ThrottleSeconds", default=0)
            detail = f"{path} ErrorCode={error_code} ErrorStatus={status} {message}".strip()
            if throttle:
                detail += f" ThrottleSeconds={throttle}"
            raise UpstreamUnavailable(self.source, detail)
        return lookup(envelope, "Response")


def _parse_period(value: Any) -> datetime | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        logger.debug("unparseable activity period %r", value)
        return None


def _parse_activity(activity: Any, character_id: str) -> MatchRecord:
    instance_id = require("bungie", activity, "activityDetails", "instanceId")
    standing = lookup(activity, "values", "standing", "basic", "value")
    mode = lookup(activity, "activityDetails", "mode")
    return MatchRecord(
        match_id=str(instance_id),
        standing=as_float("bungie", standing, "standing"),
        period=_parse_period(lookup(activity, "period")),
        character_id=character_id,
        mode=None if mode is None else as_int("bungie", mode, "mode"),
    )


def _parse_entry(entry: Any) -> RosterEntry:
    user_info = lookup(entry, "player", "destinyUserInfo", default={})
    level = lookup(entry, "player", "characterLevel")
    light = lookup(entry, "player", "lightLevel")
    character_id = lookup(entry, "characterId")
    return RosterEntry(
        membership_id=str(lookup(user_info, "membershipId") or ""),
        standing=as_float("bungie", lookup(entry, "standing"), "standing"),
        display_name=str(lookup(user_info, "displayName") or ""),
        character_id=None if character_id is None else str(character_id),
        character_class=lookup(entry, "player", "characterClass"),
        character_level=None if level is None else as_int("bungie", level, "characterLevel"),
        light_level=None if light is None else as_int("bungie", light, "lightLevel"),
    )


def _parse_team(team: Any) -> TeamStanding:
    return TeamStanding(
        team_id=as_int("bungie", lookup(team, "teamId"), "teamId"),
        standing=as_float("bungie", lookup(team, "standing", "basic", "value"), "standing"),
        score=as_float("bungie", lookup(team, "score", "basic", "value"), "score"),
    )


__all__ = ["BUNGIE_BASE_URL", "BungieRepository"]
