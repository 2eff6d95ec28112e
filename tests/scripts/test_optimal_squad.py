"""Tests for optimal_squad.py CLI script."""

import sys
from pathlib import Path
import importlib.util

import pytest
import typer.testing

from fpl_studio.domain.common.result import DomainError, Result
from fpl_studio.domain.models.gameweek import GameweekEvent
from fpl_studio.domain.models.player import GameweekRecord, PlayerDomain, Role
from fpl_studio.domain.models.team import TeamDomain
from fpl_studio.domain.repositories.player_repository import PlayerRepository

# Add project and scripts to path
project_root = Path(__file__).parent.parent.parent
sys.path.insert(0, str(project_root))
sys.path.insert(0, str(project_root / "scripts"))

# Import the script module
spec = importlib.util.spec_from_file_location(
    "optimal_squad",
    project_root / "scripts" / "optimal_squad.py",
)
optimal_squad = importlib.util.module_from_spec(spec)
spec.loader.exec_module(optimal_squad)

app = optimal_squad.app


class StubRepository(PlayerRepository):
    def __init__(self, players, fail=False, active=None):
        self.players = players
        self.fail = fail
        self.active = active or GameweekEvent(
            gameweek=6,
            name="Gameweek 6",
            deadline_time="2025-09-27T10:00:00Z",
            is_current=True,
        )
        self.history_ranges = []

    def get_current_players(self):
        if self.fail:
            return Result.failure(
                DomainError.external_api_error("FPL API error: 503")
            )
        return Result.success(self.players)

    def get_teams(self):
        return Result.success(
            [TeamDomain(team_id=i, name=f"Club {i}", short_name=f"C{i:02d}") for i in range(1, 21)]
        )

    def get_current_gameweek(self):
        return Result.success(self.active)

    def get_player_history(self, player_id, from_gw=None, to_gw=None):
        self.history_ranges.append((from_gw, to_gw))
        return Result.success(
            [
                GameweekRecord(player_id=player_id, round=gw, total_points=player_id % 7)
                for gw in range(from_gw, to_gw + 1)
            ]
        )


@pytest.fixture
def players():
    squad = []
    pid = 1
    for role, count, base_cost in [
        (Role.GKP, 2, 45),
        (Role.DEF, 5, 45),
        (Role.MID, 5, 60),
        (Role.FWD, 4, 65),
    ]:
        for i in range(count):
            squad.append(
                PlayerDomain(
                    player_id=pid,
                    web_name=f"{role.value}{i + 1}",
                    team_id=pid,
                    position=role,
                    now_cost=base_cost + 10 * i,
                    total_points=50 + 15 * i,
                    form=str(1.5 + i),
                    clean_sheets=i,
                    saves=3 * i,
                    bps=100 + pid,
                    selected_by_percent=float(5 * pid % 60),
                )
            )
            pid += 1
    return squad


@pytest.fixture
def runner():
    return typer.testing.CliRunner()


class TestOptimalSquadCLI:
    """Test optimal_squad.py CLI functionality."""

    def test_squad_within_budget(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(
            app, ["squad", "--budget", "100", "--metric", "total_points"]
        )

        assert result.exit_code == 0
        assert "Formation 3-4-3" in result.stdout
        assert "metric Pts" in result.stdout
        assert "GKP2" in result.stdout
        assert "budget exceeded" not in result.stdout

    def test_squad_over_budget_warns(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["squad", "--budget", "20"])

        assert result.exit_code == 0
        assert "Warning: budget exceeded" in result.stdout

    def test_squad_insufficient_pool_exits(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players[:6])
        )

        result = runner.invoke(app, ["squad"])

        assert result.exit_code == 1

    def test_squad_invalid_metric_exits(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["squad", "--metric", "xg"])

        assert result.exit_code == 1

    def test_squad_api_failure_exits(self, runner, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository([], fail=True)
        )

        result = runner.invoke(app, ["squad"])

        assert result.exit_code == 1

    def test_period_table(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(
            app, ["period", "--from-gw", "3", "--to-gw", "5", "--top-n", "4"]
        )

        assert result.exit_code == 0
        assert "median_points" in result.stdout

    def test_period_reversed_range_exits(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["period", "--from-gw", "5", "--to-gw", "3"])

        assert result.exit_code == 1

    def test_rankings_tables(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["rankings", "--limit", "3"])

        assert result.exit_code == 0
        assert "Bonus points system" in result.stdout
        assert "Defensive leaders (GKP)" in result.stdout
        assert "Threat" in result.stdout

    @pytest.mark.parametrize("budget", ["nan", "inf"])
    def test_squad_non_finite_budget_exits(self, runner, players, monkeypatch, budget):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["squad", "--budget", budget])

        assert result.exit_code == 1

    def test_period_defaults_to_recent_window(self, runner, players, monkeypatch):
        repo = StubRepository(players)
        monkeypatch.setattr(optimal_squad, "build_repository", lambda: repo)

        result = runner.invoke(app, ["period", "--top-n", "2"])

        assert result.exit_code == 0
        assert set(repo.history_ranges) == {(2, 6)}

    def test_period_between_gameweeks_ends_at_last_played(
        self, runner, players, monkeypatch
    ):
        repo = StubRepository(
            players, active=GameweekEvent(gameweek=6, name="Gameweek 6", is_next=True)
        )
        monkeypatch.setattr(optimal_squad, "build_repository", lambda: repo)

        result = runner.invoke(app, ["period", "--top-n", "1"])

        assert result.exit_code == 0
        assert repo.history_ranges == [(1, 5)]

    def test_period_zero_top_n(self, runner, players, monkeypatch):
        repo = StubRepository(players)
        monkeypatch.setattr(optimal_squad, "build_repository", lambda: repo)

        result = runner.invoke(
            app, ["period", "--from-gw", "1", "--to-gw", "3", "--top-n", "0"]
        )

        assert result.exit_code == 0
        assert "No appearances between GW1 and GW3" in result.stdout
        assert repo.history_ranges == []

    def test_summary(self, runner, players, monkeypatch):
        monkeypatch.setattr(
            optimal_squad, "build_repository", lambda: StubRepository(players)
        )

        result = runner.invoke(app, ["summary"])

        assert result.exit_code == 0
        assert "Current Gameweek: Gameweek 6" in result.stdout
        assert "Deadline: Sat 27 Sep 10:00 UTC" in result.stdout
        # DEF5 and MID5 tie on 110 points; the earlier player wins
        assert "Top scorer: DEF5 (C07) 110 pts" in result.stdout
