"""Tests for the plain-text carry report."""

from __future__ import annotations

from domain.common import PlayerStats
from domain.report import (
    ConditionTriggered,
    MatchCompleted,
    MatchSkipped,
    PlayerStatsReported,
    TextReport,
    format_player_stats,
    render_event,
    render_summary,
)


def test_player_line_matches_classic_layout() -> None:
    stats = PlayerStats(membership_id="1", name="Saladin", elo=1649.6, kdr=2.456, flawless=12)
    assert format_player_stats(stats) == "Saladin\telo: 1650,\tkdr: 2.46,\tflawless: 12"


def test_undefined_kdr_and_missing_name_render_placeholders() -> None:
    stats = PlayerStats(membership_id="4611686018", elo=0.0, kdr=None)
    assert format_player_stats(stats) == "4611686018\telo: 0,\tkdr: n/a,\tflawless: 0"


def test_render_event_lines() -> None:
    assert render_event(ConditionTriggered(match_id="m1", condition="elo_spread")) == [
        "maybe a carry based on elo_spread"
    ]
    assert render_event(MatchCompleted(match_id="m1", triggered=())) == ["---"]
    assert render_event(MatchSkipped(match_id="m2", reason="bungie: HTTP 503")) == [
        "skipped match m2: bungie: HTTP 503",
        "---",
    ]


def test_summary_lines() -> None:
    assert render_summary(6, 2) == ["", "total games:\t6", "total potential carries:\t2"]


def test_text_report_expands_tabs_as_it_streams() -> None:
    lines: list[str] = []
    report = TextReport(lines.append, tab_size=4)

    report(PlayerStatsReported(match_id="m1", stats=PlayerStats(membership_id="1", name="ab", kdr=1.0)))
    report(MatchCompleted(match_id="m1", triggered=()))
    report.summary(1, 0)

    assert lines == [
        "ab  elo: 0, kdr: 1.00,  flawless: 0",
        "---",
        "",
        "total games:    1",
        "total potential carries:    0",
    ]
