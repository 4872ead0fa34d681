#!/usr/bin/env python3
"""Check a player's recent matches for statistically suspicious opposing rosters."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from domain.carry.engine import CarryHeuristicEngine
from domain.carry.registry import get_all
from domain.common import Platform
from domain.config import CarryCheckConfig, load_carry_check_configs
from domain.errors import IdentityResolutionError
from domain.history import collect_recent_matches
from domain.pipeline import MatchEvaluator
from domain.report import TextReport
from domain.roster import RosterResolver
from domain.stats.aggregator import StatsAggregator
from domain.stats.cache import StatsCache
from http_session import create_http_session
from repositories.bungie import BungieRepository
from repositories.guardian_gg import GuardianGGRepository
from repositories.trials_report import TrialsReportRepository

DEFAULT_CONFIG_DIR = ROOT_DIR / "configs" / "carry"
DEFAULT_CONFIG_NAME = "default.toml"

PLATFORMS = {"xbox": Platform.XBOX, "psn": Platform.PSN}

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Trials carry detection commands.",
)


def _select_config(config_dir: Path, config_name: str) -> CarryCheckConfig:
    configs = load_carry_check_configs(config_dir)
    for config in configs:
        if config.file_path.name == config_name:
            return config
    raise typer.BadParameter(
        f"No config named '{config_name}' found in {config_dir}",
        param_hint="--config-name",
    )


def run_carry_check(
    *,
    gamertag: str,
    platform: Platform,
    count: int,
    api_key: str,
    config: CarryCheckConfig,
    max_workers: int,
) -> None:
    """Fetch recent matches for ``gamertag`` and stream the carry report."""
    timeout = config.sources.timeout_seconds
    bungie = BungieRepository(create_http_session(api_key), timeout=timeout)
    third_party_session = create_http_session()
    aggregator = StatsAggregator(
        GuardianGGRepository(third_party_session, timeout=timeout),
        TrialsReportRepository(third_party_session, timeout=timeout),
        cache=StatsCache(),
        game_mode=config.sources.game_mode,
    )
    engine = CarryHeuristicEngine.from_thresholds(config.thresholds, config.conditions)
    report = TextReport(typer.echo)

    matches = collect_recent_matches(
        bungie,
        bungie,
        handle=gamertag,
        platform=platform,
        count=count,
        mode=config.sources.activity_mode,
    )

    evaluator = MatchEvaluator(
        RosterResolver(bungie),
        aggregator,
        engine,
        max_workers=max_workers,
        on_event=report,
    )
    summary = evaluator.evaluate(matches)
    report.summary(summary.total_matches, summary.total_flagged)
    if summary.skipped_matches:
        typer.echo(f"skipped matches: {summary.skipped_matches}", err=True)


@app.command()
def check(
    gamertag: Annotated[
        str,
        typer.Option("--gamertag", help="Your gamertag / PSN id."),
    ],
    platform: Annotated[
        str,
        typer.Option("--platform", help="The platform you play on (psn, xbox)."),
    ] = "psn",
    count: Annotated[
        int,
        typer.Option("--count", help="How many games to check on each character."),
    ] = 1,
    api_key: Annotated[
        str,
        typer.Option("--api-key", envvar="BNETAPI", help="Bungie.net API key."),
    ] = "",
    config_dir: Annotated[
        Path,
        typer.Option("--config-dir", help="Directory of carry-check TOML configs."),
    ] = DEFAULT_CONFIG_DIR,
    config_name: Annotated[
        str,
        typer.Option("--config-name", help="Config filename inside --config-dir."),
    ] = DEFAULT_CONFIG_NAME,
    workers: Annotated[
        int | None,
        typer.Option("--workers", help="Parallel stat lookups per match (overrides config)."),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Log upstream requests and degraded lookups."),
    ] = False,
) -> None:
    """Check recent matches for likely carries."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if count <= 0:
        raise typer.BadParameter("--count must be greater than 0")
    if not api_key:
        raise typer.BadParameter("an API key is required (--api-key or BNETAPI)")
    try:
        selected_platform = PLATFORMS[platform.lower()]
    except KeyError as exc:
        raise typer.BadParameter(
            f"Unsupported platform '{platform}'. Choose one of: {', '.join(PLATFORMS)}.",
            param_hint="--platform",
        ) from exc

    config = _select_config(config_dir, config_name)
    max_workers = config.sources.max_workers if workers is None else workers
    if max_workers <= 0:
        raise typer.BadParameter("--workers must be greater than 0")

    try:
        run_carry_check(
            gamertag=gamertag,
            platform=selected_platform,
            count=count,
            api_key=api_key,
            config=config,
            max_workers=max_workers,
        )
    except IdentityResolutionError as exc:
        typer.echo(f"error: {exc}", err=True)
        raise typer.Exit(code=1) from exc


@app.command()
def list_conditions() -> None:
    """Print all registered carry conditions."""
    for descriptor in get_all():
        typer.echo(f"{descriptor.name} {descriptor.summary}")


if __name__ == "__main__":
    app()
