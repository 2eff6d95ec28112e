"""Player ranking tables: differentials, bonus, defensive and ICT leaders."""

from typing import Dict, List, Optional

import pandas as pd

from fpl_studio.config import AnalysisConfig, config

from ..models.player import PlayerDomain, Role
from ..models.squad import ScoringMetric
from ..models.team import TeamDomain
from .optimization import score_player


class PlayerRankingsService:
    """Derives ranking tables from the bootstrap player list."""

    def __init__(
        self,
        players: List[PlayerDomain],
        teams: Optional[List[TeamDomain]] = None,
        settings: Optional[AnalysisConfig] = None,
    ):
        self.settings = settings or config.analysis
        team_names = {team.team_id: team.short_name for team in teams or []}
        self.players_df = pd.DataFrame(
            [
                {
                    "player_id": p.player_id,
                    "web_name": p.web_name,
                    "team": team_names.get(p.team_id, str(p.team_id)),
                    "position": p.position.value,
                    "price": p.price,
                    "form": score_player(p, ScoringMetric.FORM),
                    "total_points": p.total_points,
                    "ownership": p.selected_by_percent,
                    "bps": p.bps,
                    "bonus": p.bonus,
                    "clean_sheets": p.clean_sheets,
                    "saves": p.saves,
                    "penalties_saved": p.penalties_saved,
                    "influence": p.influence,
                    "creativity": p.creativity,
                    "threat": p.threat,
                }
                for p in players
            ]
        )

    @staticmethod
    def _limit(limit: Optional[int], default: int) -> int:
        if limit is None:
            return default
        if limit < 0:
            raise ValueError(f"Ranking limit must be non-negative, got {limit}")
        return limit

    def _top(self, frame: pd.DataFrame, column: str, limit: int) -> pd.DataFrame:
        if frame.empty:
            return frame
        # mergesort keeps input order on ties
        return (
            frame.sort_values(column, ascending=False, kind="mergesort")
            .head(limit)
            .reset_index(drop=True)
        )

    def differentials(
        self,
        form_threshold: Optional[float] = None,
        ownership_split: Optional[float] = None,
        limit: Optional[int] = None,
    ) -> Dict[str, pd.DataFrame]:
        """In-form players split by ownership, each sorted by form.

        Returns:
            Dict with 'low_ownership' (below the split) and 'high_ownership'
        """
        form_threshold = (
            self.settings.differential_form_threshold
            if form_threshold is None
            else form_threshold
        )
        ownership_split = (
            self.settings.ownership_split if ownership_split is None else ownership_split
        )
        limit = self._limit(limit, self.settings.ranking_limit)

        df = self.players_df
        if df.empty:
            return {"low_ownership": df, "high_ownership": df}

        in_form = df[df["form"] > form_threshold]
        return {
            "low_ownership": self._top(
                in_form[in_form["ownership"] < ownership_split], "form", limit
            ),
            "high_ownership": self._top(
                in_form[in_form["ownership"] >= ownership_split], "form", limit
            ),
        }

    def top_scorers(self, limit: Optional[int] = None) -> pd.DataFrame:
        """Players with the most season points."""
        return self._top(
            self.players_df,
            "total_points",
            self._limit(limit, self.settings.ranking_limit),
        )

    def bonus_leaders(self, limit: Optional[int] = None) -> pd.DataFrame:
        """Players with the highest bonus points system score."""
        return self._top(
            self.players_df, "bps", self._limit(limit, self.settings.ranking_limit)
        )

    def defensive_leaders(
        self, position: Role = Role.DEF, limit: Optional[int] = None
    ) -> pd.DataFrame:
        """DEF or GKP ranked by points from clean sheets, saves and penalty saves.

        Defensive points = 4 per clean sheet + 1 per 3 saves + 5 per penalty save.
        """
        if position not in (Role.DEF, Role.GKP):
            raise ValueError(f"Defensive leaders are for DEF or GKP, got {position}")

        df = self.players_df
        if df.empty:
            return df
        df = df[df["position"] == position.value].copy()
        df["defensive_points"] = (
            df["clean_sheets"] * 4 + df["saves"] // 3 + df["penalties_saved"] * 5
        )
        return self._top(
            df, "defensive_points", self._limit(limit, self.settings.ranking_limit)
        )

    def ict_leaders(self, limit: Optional[int] = None) -> Dict[str, pd.DataFrame]:
        """Top players for each ICT component."""
        limit = self._limit(limit, self.settings.ict_limit)
        return {
            component: self._top(self.players_df, component, limit)
            for component in ("influence", "creativity", "threat")
        }
