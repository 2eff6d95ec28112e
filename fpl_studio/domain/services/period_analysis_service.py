"""Period analysis service: aggregate player performance over a gameweek range."""

from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional

import numpy as np
import pandas as pd
from loguru import logger

from fpl_studio.config import AnalysisConfig, config

from ..common.result import DomainError, Result
from ..models.player import GameweekRecord, PlayerDomain
from ..models.team import TeamDomain
from ..repositories.player_repository import PlayerRepository

PERIOD_COLUMNS = [
    "player_id",
    "web_name",
    "team",
    "position",
    "ownership",
    "matches_played",
    "total_points",
    "median_points",
    "consistency",
    "goals",
    "assists",
    "clean_sheets",
    "bonus",
]


class PeriodAnalysisService:
    """
    Aggregates gameweek history over a range for the top players.

    Median and consistency (share of rounds above the return threshold)
    separate steady performers from one-off hauls.
    """

    def __init__(
        self,
        player_repo: PlayerRepository,
        settings: Optional[AnalysisConfig] = None,
        max_workers: Optional[int] = None,
    ):
        self.player_repo = player_repo
        self.settings = settings or config.analysis
        self.max_workers = max_workers or config.api.max_workers

    def default_range(self, current_gw: int) -> Dict[str, int]:
        """The last ``default_period_length`` gameweeks up to ``current_gw``."""
        from_gw = max(1, current_gw - self.settings.default_period_length + 1)
        return {"from_gw": from_gw, "to_gw": current_gw}

    def current_range(self) -> Result[Dict[str, int]]:
        """Default window ending at the latest gameweek with results."""
        return self.player_repo.get_current_gameweek().flat_map(
            lambda event: Result.success(self.default_range(event.last_played))
        )

    def summarize_history(
        self,
        player: PlayerDomain,
        history: List[GameweekRecord],
        team_names: Optional[Dict[int, str]] = None,
    ) -> Optional[Dict]:
        """Aggregate one player's rounds; None when there are none."""
        if not history:
            return None

        points = [record.total_points for record in history]
        returns = sum(1 for p in points if p > self.settings.return_threshold)
        return {
            "player_id": player.player_id,
            "web_name": player.web_name,
            "team": (team_names or {}).get(player.team_id, "UNK"),
            "position": player.position.value,
            "ownership": player.selected_by_percent,
            "matches_played": len(history),
            "total_points": sum(points),
            "median_points": float(np.median(points)),
            "consistency": returns / len(history) * 100,
            "goals": sum(record.goals_scored for record in history),
            "assists": sum(record.assists for record in history),
            "clean_sheets": sum(record.clean_sheets for record in history),
            "bonus": sum(record.bonus for record in history),
        }

    def analyze_period(
        self,
        from_gw: int,
        to_gw: int,
        top_n: Optional[int] = None,
    ) -> Result[pd.DataFrame]:
        """Aggregate stats between two gameweeks (inclusive) for the top-N players.

        Args:
            from_gw: First gameweek
            to_gw: Last gameweek
            top_n: Players to analyse, ranked by season points
                (default: ``period_top_n``)

        Returns:
            Result with a DataFrame sorted by total points, or an error if the
            range is invalid or the player list cannot be loaded. Individual
            history failures are logged and skipped.
        """
        if from_gw > to_gw:
            return Result.failure(
                DomainError.validation_error(
                    "Start gameweek must be before end gameweek",
                    field_errors={"from_gw": str(from_gw), "to_gw": str(to_gw)},
                )
            )
        if top_n is None:
            top_n = self.settings.period_top_n
        if top_n < 0:
            return Result.failure(
                DomainError.validation_error(
                    "top_n must be non-negative", field_errors={"top_n": str(top_n)}
                )
            )

        players_result = self.player_repo.get_current_players()
        if players_result.is_failure:
            return Result.failure(players_result.error)

        teams_result = self.player_repo.get_teams()
        teams: List[TeamDomain] = teams_result.value if teams_result.is_success else []
        team_names = {team.team_id: team.short_name for team in teams}

        top_players = sorted(
            players_result.value, key=lambda p: p.total_points, reverse=True
        )[:top_n]
        logger.info(
            f"📊 Analysing GW{from_gw}-{to_gw} for top {len(top_players)} players"
        )

        rows = []
        failures = 0
        with ThreadPoolExecutor(
            max_workers=min(self.max_workers, max(1, len(top_players)))
        ) as executor:
            futures = {
                executor.submit(
                    self.player_repo.get_player_history,
                    player.player_id,
                    from_gw,
                    to_gw,
                ): player
                for player in top_players
            }
            for future in as_completed(futures):
                player = futures[future]
                history_result = future.result()
                if history_result.is_failure:
                    failures += 1
                    logger.warning(
                        f"⚠️ Failed to fetch history for {player.web_name}: "
                        f"{history_result.error.message}"
                    )
                    continue
                row = self.summarize_history(
                    player, history_result.value, team_names
                )
                if row is not None:
                    rows.append(row)

        if failures:
            logger.warning(f"⚠️ {failures} history fetches failed")

        frame = pd.DataFrame(rows, columns=PERIOD_COLUMNS)
        if not frame.empty:
            frame = frame.sort_values(
                ["total_points", "player_id"], ascending=[False, True]
            ).reset_index(drop=True)
        return Result.success(frame)
