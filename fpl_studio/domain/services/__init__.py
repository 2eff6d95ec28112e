"""Domain services for business logic."""

from .period_analysis_service import PeriodAnalysisService
from .player_rankings_service import PlayerRankingsService
from .squad_optimizer_service import SquadOptimizerService

__all__ = [
    "PeriodAnalysisService",
    "PlayerRankingsService",
    "SquadOptimizerService",
]
