"""Collect the local player's recent matches across every character."""

from __future__ import annotations

import logging

from domain.common import MatchRecord, Platform
from domain.errors import IdentityResolutionError, UpstreamError
from domain.protocol import IdentityResolver, MatchHistoryService

logger = logging.getLogger(__name__)

TRIALS_ACTIVITY_MODE = "TrialsOfOsiris"


def collect_recent_matches(
    identity: IdentityResolver,
    history: MatchHistoryService,
    *,
    handle: str,
    platform: Platform,
    count: int,
    mode: str = TRIALS_ACTIVITY_MODE,
) -> list[MatchRecord]:
    """Resolve ``handle`` and fetch ``count`` matches for each of its characters.

    Identity failures are fatal and raise ``IdentityResolutionError``; a
    character whose history cannot be fetched is logged and skipped.
    """
    if count <= 0:
        raise ValueError("count must be greater than 0")

    try:
        account_id = identity.resolve_handle(handle, platform)
        character_ids = list(identity.list_characters(account_id, platform))
    except UpstreamError as exc:
        raise IdentityResolutionError(f"could not resolve {handle!r}: {exc}") from exc

    if not character_ids:
        raise IdentityResolutionError(f"account {account_id} for {handle!r} has no characters")

    matches: list[MatchRecord] = []
    for character_id in character_ids:
        try:
            matches.extend(
                history.fetch_matches(account_id, character_id, count, mode, platform=platform)
            )
        except UpstreamError as exc:
            logger.warning(
                "history unavailable for account=%s character=%s: %s",
                account_id,
                character_id,
                exc,
            )
    return matches


__all__ = ["TRIALS_ACTIVITY_MODE", "collect_recent_matches"]
