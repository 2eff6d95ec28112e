#!/usr/bin/env python3
"""
FPL Studio CLI.

Commands:
- squad: Build a starting XI under a budget with the greedy squad allocator
- period: Aggregate top players' stats over a gameweek range
- rankings: Differential, bonus, defensive and ICT ranking tables
- summary: Active gameweek and top scorer

Usage:
    python scripts/optimal_squad.py squad --budget 83.0 --metric form --formation 3-4-3
    python scripts/optimal_squad.py period --from-gw 10 --to-gw 14 --top-n 50
    python scripts/optimal_squad.py period --top-n 20
    python scripts/optimal_squad.py rankings --limit 10
    python scripts/optimal_squad.py summary
"""

import sys
from pathlib import Path
from typing import Optional

import typer
from loguru import logger

# Add project root
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from fpl_studio.adapters import FPLApiPlayerRepository  # noqa: E402
from fpl_studio.config import config  # noqa: E402
from fpl_studio.domain.models import Role  # noqa: E402
from fpl_studio.domain.services import (  # noqa: E402
    PeriodAnalysisService,
    PlayerRankingsService,
    SquadOptimizerService,
)

app = typer.Typer(
    help="FPL Studio: squad optimizer and statistics tables",
    add_completion=False,
)


def build_repository() -> FPLApiPlayerRepository:
    return FPLApiPlayerRepository()


def _fail(message: str) -> None:
    logger.error(f"❌ {message}")
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


# =============================================================================
# SQUAD OPTIMIZER
# =============================================================================


@app.command("squad")
def squad(
    budget: float = typer.Option(
        config.allocator.default_budget, help="Budget in millions"
    ),
    metric: str = typer.Option(
        config.allocator.default_metric, help="total_points, form or value"
    ),
    formation: str = typer.Option(
        config.allocator.default_formation, help="Outfield formation, e.g. 3-4-3"
    ),
):
    """Generate a starting XI that tries to fit the budget."""
    repo = build_repository()
    service = SquadOptimizerService(player_repo=repo)

    result = service.generate_squad_from_repository(
        budget=budget, metric=metric, formation=formation
    )
    if result.is_failure:
        _fail(result.error.message)

    allocation = result.value
    teams_result = repo.get_teams()
    teams = teams_result.value if teams_result.is_success else None

    typer.echo(
        f"Formation {allocation.formation} | metric {allocation.metric_label} | "
        f"cost £{allocation.total_cost:.1f}m / £{allocation.budget:.1f}m | "
        f"score {allocation.total_score:.1f}"
    )
    typer.echo(service.roster_dataframe(allocation, teams).to_string(index=False))
    if allocation.over_budget:
        typer.echo(
            f"Warning: budget exceeded by £{allocation.overage:.1f}m "
            "(no cheaper same-position swap available)"
        )


# =============================================================================
# PERIOD ANALYSIS
# =============================================================================


@app.command("period")
def period(
    from_gw: Optional[int] = typer.Option(
        None, help="First gameweek (default: start of the recent window)"
    ),
    to_gw: Optional[int] = typer.Option(
        None, help="Last gameweek (default: latest gameweek with results)"
    ),
    top_n: Optional[int] = typer.Option(None, min=0, help="Players to analyse"),
):
    """Median, consistency and totals between two gameweeks."""
    service = PeriodAnalysisService(build_repository())
    if to_gw is None:
        range_result = service.current_range()
        if range_result.is_failure:
            _fail(range_result.error.message)
        to_gw = range_result.value["to_gw"]
    if from_gw is None:
        from_gw = service.default_range(to_gw)["from_gw"]

    result = service.analyze_period(from_gw, to_gw, top_n=top_n)
    if result.is_failure:
        _fail(result.error.message)

    frame = result.value
    if frame.empty:
        typer.echo(f"No appearances between GW{from_gw} and GW{to_gw}")
        return
    typer.echo(frame.to_string(index=False))


# =============================================================================
# RANKING TABLES
# =============================================================================


@app.command("rankings")
def rankings(
    limit: Optional[int] = typer.Option(None, min=0, help="Rows per table"),
):
    """Differentials, bonus kings, defensive leaders and ICT leaders."""
    repo = build_repository()
    players_result = repo.get_current_players()
    if players_result.is_failure:
        _fail(players_result.error.message)
    teams_result = repo.get_teams()
    teams = teams_result.value if teams_result.is_success else None

    service = PlayerRankingsService(players_result.value, teams)
    columns = ["web_name", "team", "price"]

    differentials = service.differentials(limit=limit)
    for name, frame in differentials.items():
        typer.echo(f"\n== Differentials ({name.replace('_', ' ')}) ==")
        typer.echo(frame[columns + ["ownership", "form"]].to_string(index=False))

    typer.echo("\n== Bonus points system ==")
    typer.echo(
        service.bonus_leaders(limit)[columns + ["bps", "bonus"]].to_string(index=False)
    )

    for role in (Role.DEF, Role.GKP):
        typer.echo(f"\n== Defensive leaders ({role.value}) ==")
        typer.echo(
            service.defensive_leaders(role, limit)[
                columns + ["clean_sheets", "saves", "defensive_points"]
            ].to_string(index=False)
        )

    for component, frame in service.ict_leaders(limit).items():
        typer.echo(f"\n== {component.title()} ==")
        typer.echo(frame[columns + [component]].to_string(index=False))


# =============================================================================
# SEASON SUMMARY
# =============================================================================


@app.command("summary")
def summary():
    """Active gameweek and the season's top scorer."""
    repo = build_repository()
    gameweek_result = repo.get_current_gameweek()
    if gameweek_result.is_failure:
        _fail(gameweek_result.error.message)
    players_result = repo.get_current_players()
    if players_result.is_failure:
        _fail(players_result.error.message)
    teams_result = repo.get_teams()
    teams = teams_result.value if teams_result.is_success else None

    event = gameweek_result.value
    label = "Current Gameweek" if event.is_current else "Next Gameweek"
    typer.echo(f"{label}: {event.name}")
    if event.deadline_time is not None:
        typer.echo(f"Deadline: {event.deadline_time:%a %d %b %H:%M} UTC")

    top = PlayerRankingsService(players_result.value, teams).top_scorers(limit=1)
    if not top.empty:
        leader = top.iloc[0]
        typer.echo(
            f"Top scorer: {leader['web_name']} ({leader['team']}) "
            f"{leader['total_points']} pts"
        )


if __name__ == "__main__":
    app()
