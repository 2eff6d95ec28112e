"""Domain models for FPL Studio."""

from .gameweek import GameweekEvent
from .player import AvailabilityStatus, GameweekRecord, PlayerDomain, Role
from .squad import (
    DEFAULT_FORMATION,
    AllocationResult,
    FormationTarget,
    ScoredPlayer,
    ScoringMetric,
    SquadSwap,
    TerminationReason,
)
from .team import TeamDomain

__all__ = [
    "GameweekEvent",
    "AvailabilityStatus",
    "GameweekRecord",
    "PlayerDomain",
    "Role",
    "TeamDomain",
    "DEFAULT_FORMATION",
    "AllocationResult",
    "FormationTarget",
    "ScoredPlayer",
    "ScoringMetric",
    "SquadSwap",
    "TerminationReason",
]
