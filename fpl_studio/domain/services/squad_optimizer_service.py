"""Squad optimizer service: Result-returning facade over the squad allocator.

Converts allocator exceptions into DomainErrors so frontends only ever
inspect a Result. A roster that ends over budget is still a success; the
flag on the AllocationResult is for display.
"""

import math
from typing import Iterable, List, Optional, Union

import pandas as pd
from loguru import logger
from pydantic import ValidationError

from fpl_studio.config import AllocatorConfig, config

from ..common.result import DomainError, Result
from ..models.player import PlayerDomain
from ..models.squad import AllocationResult, FormationTarget, ScoringMetric
from ..models.team import TeamDomain
from ..repositories.player_repository import PlayerRepository
from .optimization import InsufficientPoolError, allocate_squad, efficiency


class SquadOptimizerService:
    """Service for generating a budget-constrained starting XI."""

    def __init__(
        self,
        player_repo: Optional[PlayerRepository] = None,
        settings: Optional[AllocatorConfig] = None,
    ):
        """Initialize squad optimizer service.

        Args:
            player_repo: Optional repository for ``generate_squad_from_repository``
            settings: Optional allocator configuration override
        """
        self.player_repo = player_repo
        self.settings = settings or config.allocator

    def generate_squad(
        self,
        players: Iterable[PlayerDomain],
        budget: Optional[float] = None,
        metric: Optional[Union[ScoringMetric, str]] = None,
        formation: Optional[Union[FormationTarget, str]] = None,
    ) -> Result[AllocationResult]:
        """Allocate a squad, filling unset arguments from configuration.

        Args:
            players: Player collection to select from
            budget: Budget in millions (default: ``default_budget``)
            metric: ScoringMetric or its value string (default: ``default_metric``)
            formation: FormationTarget or a label like '3-4-3'
                (default: ``default_formation``)

        Returns:
            Result with the AllocationResult, or a validation_error /
            insufficient_pool DomainError
        """
        budget = self.settings.default_budget if budget is None else budget
        try:
            metric = ScoringMetric(metric or self.settings.default_metric)
            if formation is None or isinstance(formation, str):
                formation = FormationTarget.from_label(
                    formation or self.settings.default_formation
                )
        except (ValueError, ValidationError) as e:
            return Result.failure(
                DomainError.validation_error(f"Invalid squad request: {e}")
            )

        if not math.isfinite(budget) or budget < 0:
            return Result.failure(
                DomainError.validation_error(
                    "Budget must be a finite non-negative amount",
                    field_errors={"budget": str(budget)},
                )
            )

        logger.info(
            f"🧮 Generating {formation.label} squad by {metric.value} "
            f"with £{budget:.1f}m budget"
        )
        try:
            result = allocate_squad(
                players,
                budget=budget,
                metric=metric,
                formation=formation,
                settings=self.settings,
            )
        except InsufficientPoolError as e:
            return Result.failure(
                DomainError.insufficient_pool(
                    str(e),
                    details={
                        "required": e.required,
                        "admitted": e.admitted,
                        "pool_size": e.pool_size,
                    },
                )
            )
        return Result.success(result)

    def generate_squad_from_repository(
        self,
        budget: Optional[float] = None,
        metric: Optional[Union[ScoringMetric, str]] = None,
        formation: Optional[Union[FormationTarget, str]] = None,
    ) -> Result[AllocationResult]:
        """Fetch current players from the repository, then allocate."""
        if self.player_repo is None:
            return Result.failure(
                DomainError.validation_error("No player repository configured")
            )
        return self.player_repo.get_current_players().flat_map(
            lambda players: self.generate_squad(
                players, budget=budget, metric=metric, formation=formation
            )
        )

    def roster_dataframe(
        self,
        result: AllocationResult,
        teams: Optional[List[TeamDomain]] = None,
    ) -> pd.DataFrame:
        """One row per roster member in role order, for tables and pitch views.

        Args:
            result: Allocation to display
            teams: Optional clubs for short names; falls back to the club ID

        Returns:
            DataFrame with player_id, web_name, position, team, price, score,
            efficiency columns
        """
        team_names = {team.team_id: team.short_name for team in teams or []}
        rows = [
            {
                "player_id": member.player_id,
                "web_name": member.player.web_name,
                "position": member.role.value,
                "team": team_names.get(member.team_id, str(member.team_id)),
                "price": member.player.price,
                "score": member.score,
                "efficiency": round(
                    efficiency(
                        member.score, member.now_cost, self.settings.cost_exponent
                    ),
                    3,
                ),
            }
            for member in result.roster
        ]
        return pd.DataFrame(
            rows,
            columns=[
                "player_id",
                "web_name",
                "position",
                "team",
                "price",
                "score",
                "efficiency",
            ],
        )
