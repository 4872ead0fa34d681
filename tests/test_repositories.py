"""Payload parsing and error mapping for the HTTP repositories (no network)."""

from __future__ import annotations

import json
from typing import Any

import pytest
import requests

from domain.common import MatchRecord, Platform, SourceStatus
from domain.errors import IdentityResolutionError, MalformedResponse, UpstreamUnavailable
from domain.roster import split_opposing
from domain.stats.aggregator import StatsAggregator
from http_session import create_http_session
from repositories.bungie import BungieRepository
from repositories.guardian_gg import GuardianGGRepository
from repositories.trials_report import TrialsReportRepository


class FakeResponse:
    def __init__(self, payload: Any = None, *, status_code: int = 200, body: bytes | None = None) -> None:
        self.status_code = status_code
        self.content = json.dumps(payload).encode() if body is None else body

    def json(self) -> Any:
        return json.loads(self.content)


class FakeSession:
    def __init__(self, routes: dict[str, FakeResponse | Exception]) -> None:
        self.routes = routes
        self.requests: list[tuple[str, Any, float]] = []

    def get(self, url: str, params: Any = None, timeout: float | None = None) -> FakeResponse:
        self.requests.append((url, params, timeout))
        result = self.routes[url]
        if isinstance(result, Exception):
            raise result
        return result


def _bungie(routes: dict[str, FakeResponse | Exception]) -> tuple[BungieRepository, FakeSession]:
    session = FakeSession(routes)
    return BungieRepository(session, base_url="https://bungie.test", timeout=3.0), session  # type: ignore[arg-type]


def _envelope(response: Any, *, error_code: int = 1, **extra: Any) -> FakeResponse:
    return FakeResponse({"Response": response, "ErrorCode": error_code, "ErrorStatus": "Success", **extra})


def test_http_session_only_sends_api_key_when_given() -> None:
    keyed = create_http_session("secret")
    anonymous = create_http_session()

    assert keyed.headers["X-API-Key"] == "secret"
    assert "X-API-Key" not in anonymous.headers


def test_resolve_handle_and_list_characters() -> None:
    repository, session = _bungie(
        {
            "https://bungie.test/SearchDestinyPlayer/2/guardian/": _envelope(
                [{"membershipType": 2, "membershipId": "4611686018", "displayName": "guardian"}]
            ),
            "https://bungie.test/2/Account/4611686018/Summary/": _envelope(
                {"data": {"characters": [
                    {"characterBase": {"characterId": "111"}},
                    {"characterBase": {"characterId": "222"}},
                ]}}
            ),
        }
    )

    account_id = repository.resolve_handle("guardian", Platform.PSN)

    assert account_id == "4611686018"
    assert repository.list_characters(account_id, Platform.PSN) == ["111", "222"]
    assert all(timeout == 3.0 for _, _, timeout in session.requests)


def test_unknown_handle_is_identity_error() -> None:
    repository, _ = _bungie({"https://bungie.test/SearchDestinyPlayer/1/nobody/": _envelope([])})
    with pytest.raises(IdentityResolutionError, match="no xbox account"):
        repository.resolve_handle("nobody", Platform.XBOX)


def test_fetch_matches_parses_activity_history() -> None:
    url = "https://bungie.test/Stats/ActivityHistory/2/acct/111/"
    repository, session = _bungie(
        {
            url: _envelope(
                {"data": {"activities": [
                    {
                        "period": "2017-03-18T19:02:11Z",
                        "activityDetails": {"instanceId": "6057196310", "mode": 14},
                        "values": {"standing": {"basic": {"value": 1.0, "displayValue": "Defeat"}}},
                    }
                ]}}
            )
        }
    )

    matches = repository.fetch_matches("acct", "111", 5, "TrialsOfOsiris")

    assert len(matches) == 1
    match = matches[0]
    assert match.match_id == "6057196310"
    assert match.standing == 1.0
    assert match.mode == 14
    assert match.character_id == "111"
    assert match.period is not None and match.period.year == 2017
    assert session.requests[0][1] == {"page": 0, "count": 5, "mode": "TrialsOfOsiris"}


def test_fetch_report_parses_entries_and_teams() -> None:
    repository, _ = _bungie(
        {
            "https://bungie.test/Stats/PostGameCarnageReport/99/": _envelope(
                {"data": {
                    "entries": [
                        {
                            "standing": 0,
                            "characterId": "111",
                            "player": {
                                "destinyUserInfo": {"membershipId": "1", "displayName": "me"},
                                "characterClass": "Hunter",
                                "characterLevel": 40,
                                "lightLevel": 400,
                            },
                        },
                        {
                            "standing": 1,
                            "player": {"destinyUserInfo": {"membershipId": "2", "displayName": "them"}},
                        },
                    ],
                    "teams": [
                        {"teamId": 16, "standing": {"basic": {"value": 0}}, "score": {"basic": {"value": 5}}},
                        {"teamId": 17, "standing": {"basic": {"value": 1}}, "score": {"basic": {"value": 3}}},
                    ],
                }}
            )
        }
    )

    report = repository.fetch_report("99")

    assert [entry.membership_id for entry in report.entries] == ["1", "2"]
    assert report.entries[0].character_class == "Hunter"
    assert report.entries[0].light_level == 400
    assert report.entries[1].standing == 1.0
    assert report.teams[0].team_id == 16
    assert report.teams[0].score == 5.0


def test_empty_report_roster_is_malformed() -> None:
    repository, _ = _bungie(
        {"https://bungie.test/Stats/PostGameCarnageReport/99/": _envelope({"data": {"entries": []}})}
    )
    with pytest.raises(MalformedResponse, match="empty roster"):
        repository.fetch_report("99")


def test_bungie_error_envelope_is_unavailable() -> None:
    repository, _ = _bungie(
        {
            "https://bungie.test/Stats/PostGameCarnageReport/99/": FakeResponse(
                {"ErrorCode": 36, "ErrorStatus": "ThrottleLimitExceeded", "ThrottleSeconds": 10}
            )
        }
    )
    with pytest.raises(UpstreamUnavailable, match="ThrottleLimitExceeded.*ThrottleSeconds=10"):
        repository.fetch_report("99")


def test_transport_errors_and_bad_bodies_are_unavailable() -> None:
    repository, _ = _bungie(
        {
            "https://bungie.test/Stats/PostGameCarnageReport/1/": requests.ConnectionError("refused"),
            "https://bungie.test/Stats/PostGameCarnageReport/2/": FakeResponse(status_code=503, body=b"down"),
            "https://bungie.test/Stats/PostGameCarnageReport/3/": FakeResponse(body=b""),
            "https://bungie.test/Stats/PostGameCarnageReport/4/": FakeResponse(body=b"<html>"),
        }
    )

    for match_id, message in [("1", "failed"), ("2", "HTTP 503"), ("3", "empty body"), ("4", "invalid JSON")]:
        with pytest.raises(UpstreamUnavailable, match=message):
            repository.fetch_report(match_id)


def test_guardian_gg_parses_modes_case_insensitively() -> None:
    session = FakeSession(
        {
            "https://gg.test/players/42": FakeResponse(
                {"StatusCode": 200, "Data": {"Name": "Saladin", "Modes": {
                    "14": {"ELO": 1712.5, "Kills": 240, "Deaths": 120, "GamesPlayed": 30, "Wins": 20},
                }}}
            )
        }
    )
    repository = GuardianGGRepository(session, base_url="https://gg.test")  # type: ignore[arg-type]

    rating = repository.fetch_player("42")

    assert rating.name == "Saladin"
    assert rating.modes["14"].elo == pytest.approx(1712.5)
    assert rating.modes["14"].kills == 240
    assert rating.modes["14"].deaths == 120
    assert rating.modes["14"].wins == 20


def test_guardian_gg_without_data_is_malformed() -> None:
    session = FakeSession({"https://gg.test/players/42": FakeResponse({"StatusCode": 404})})
    repository = GuardianGGRepository(session, base_url="https://gg.test")  # type: ignore[arg-type]
    with pytest.raises(MalformedResponse, match="has no data"):
        repository.fetch_player("42")


def test_trials_report_sums_flawless_seasons() -> None:
    session = FakeSession(
        {
            "https://dtr.test/player/42": FakeResponse(
                [{"displayName": "Saint", "flawless": {"years": {
                    "1": {"count": 3, "characters": {}},
                    "2": {"count": 12},
                    "3": {"count": 7},
                }}}]
            ),
            "https://dtr.test/player/43": FakeResponse([{"displayName": "Rookie", "flawless": []}]),
        }
    )
    repository = TrialsReportRepository(session, base_url="https://dtr.test")  # type: ignore[arg-type]

    veteran = repository.fetch_player("42")
    rookie = repository.fetch_player("43")

    assert veteran.flawless_by_season == {"1": 3, "2": 12, "3": 7}
    assert veteran.total_flawless == 22
    assert rookie.display_name == "Rookie"
    assert rookie.total_flawless == 0


def test_trials_report_rejects_non_list_payload() -> None:
    session = FakeSession({"https://dtr.test/player/42": FakeResponse({"error": "not found"})})
    repository = TrialsReportRepository(session, base_url="https://dtr.test")  # type: ignore[arg-type]
    with pytest.raises(MalformedResponse, match="not a player list"):
        repository.fetch_player("42")


def test_null_membership_id_is_parsed_as_missing_and_skipped() -> None:
    repository, _ = _bungie(
        {
            "https://bungie.test/Stats/PostGameCarnageReport/99/": _envelope(
                {"data": {"entries": [
                    {"standing": 0, "player": {"destinyUserInfo": {"membershipId": "1", "displayName": "me"}}},
                    {"standing": 1, "player": {"destinyUserInfo": {"membershipId": None, "displayName": None}}},
                    {"standing": 1, "player": {"destinyUserInfo": {"membershipId": "3", "displayName": "them"}}},
                ]}}
            )
        }
    )

    report = repository.fetch_report("99")

    assert report.entries[1].membership_id == ""
    assert report.entries[1].display_name == ""
    opponents = split_opposing(MatchRecord(match_id="99", standing=0.0), report)
    assert [entry.membership_id for entry in opponents] == ["3"]


def test_non_finite_guardian_gg_numbers_are_malformed() -> None:
    session = FakeSession(
        {
            "https://gg.test/players/1": FakeResponse(
                body=b'{"data":{"name":"x","modes":{"14":{"elo":1500,"kills":NaN,"deaths":3}}}}'
            ),
            "https://gg.test/players/2": FakeResponse(
                body=b'{"data":{"name":"y","modes":{"14":{"elo":Infinity,"kills":3,"deaths":3}}}}'
            ),
            "https://gg.test/players/3": FakeResponse(
                {"data": {"name": "z", "modes": {"14": {"elo": 1500, "kills": "1e400", "deaths": 3}}}}
            ),
        }
    )
    repository = GuardianGGRepository(session, base_url="https://gg.test")  # type: ignore[arg-type]

    for account_id in ["1", "2", "3"]:
        with pytest.raises(MalformedResponse, match="is not a finite number"):
            repository.fetch_player(account_id)


def test_non_finite_source_numbers_degrade_the_player_record() -> None:
    guardian_session = FakeSession(
        {
            "https://gg.test/players/1": FakeResponse(
                body=b'{"data":{"name":"x","modes":{"14":{"elo":1500,"kills":NaN,"deaths":3}}}}'
            ),
        }
    )
    trials_session = FakeSession(
        {
            "https://dtr.test/player/1": FakeResponse(
                body=b'[{"displayName":"x","flawless":{"years":{"1":{"count":Infinity}}}}]'
            ),
        }
    )
    aggregator = StatsAggregator(
        GuardianGGRepository(guardian_session, base_url="https://gg.test"),  # type: ignore[arg-type]
        TrialsReportRepository(trials_session, base_url="https://dtr.test"),  # type: ignore[arg-type]
    )

    stats = aggregator.aggregate("1")

    assert stats.skill_status is SourceStatus.DEGRADED
    assert stats.trials_status is SourceStatus.DEGRADED
    assert stats.elo == 0.0
    assert stats.kdr is None
    assert stats.flawless == 0
