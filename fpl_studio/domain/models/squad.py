"""Squad allocation domain models: formations, scored players and results."""

from enum import Enum
from typing import Dict, List, Mapping, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .player import PlayerDomain, Role


class ScoringMetric(str, Enum):
    """Ranking functions selectable for squad allocation."""

    TOTAL_POINTS = "total_points"
    FORM = "form"
    VALUE = "value"

    @property
    def label(self) -> str:
        """Short label for display next to a player's score."""
        return {
            ScoringMetric.TOTAL_POINTS: "Pts",
            ScoringMetric.FORM: "Form",
            ScoringMetric.VALUE: "Val",
        }[self]


class FormationTarget(BaseModel):
    """Required number of players per role. Sums to the roster size."""

    model_config = ConfigDict(frozen=True)

    counts: Dict[Role, int] = Field(..., description="Role -> required count")

    @field_validator("counts")
    @classmethod
    def validate_counts(cls, v: Dict[Role, int]) -> Dict[Role, int]:
        missing = [role.value for role in Role if role not in v]
        if missing:
            raise ValueError(f"Formation missing roles: {missing}")
        if any(count < 0 for count in v.values()):
            raise ValueError("Formation counts must be non-negative")
        if sum(v.values()) == 0:
            raise ValueError("Formation must select at least one player")
        return v

    @classmethod
    def from_label(cls, label: str) -> "FormationTarget":
        """Parse '3-4-3' (one keeper implied) or '1-3-4-3'."""
        try:
            parts = [int(part) for part in label.strip().split("-")]
        except ValueError:
            raise ValueError(f"Invalid formation label: {label!r}")
        if len(parts) == 3:
            parts = [1] + parts
        if len(parts) != 4:
            raise ValueError(
                f"Formation label must have 3 or 4 parts, got {label!r}"
            )
        return cls(counts=dict(zip(Role, parts)))

    @classmethod
    def from_counts(cls, counts: Mapping[Union[Role, str], int]) -> "FormationTarget":
        return cls(counts={Role(role): count for role, count in counts.items()})

    @property
    def roster_size(self) -> int:
        return sum(self.counts.values())

    @property
    def label(self) -> str:
        """Outfield label like '3-4-3'; the keeper count is shown only when it is not 1."""
        outfield = [str(self.counts[role]) for role in (Role.DEF, Role.MID, Role.FWD)]
        if self.counts[Role.GKP] != 1:
            outfield.insert(0, str(self.counts[Role.GKP]))
        return "-".join(outfield)


DEFAULT_FORMATION = FormationTarget.from_label("3-4-3")


class ScoredPlayer(BaseModel):
    """A player paired with its score under the active metric."""

    model_config = ConfigDict(frozen=True)

    player: PlayerDomain
    score: float

    @property
    def player_id(self) -> int:
        return self.player.player_id

    @property
    def role(self) -> Role:
        return self.player.position

    @property
    def team_id(self) -> int:
        return self.player.team_id

    @property
    def now_cost(self) -> int:
        return self.player.now_cost


class SquadSwap(BaseModel):
    """A single budget reconciliation swap."""

    model_config = ConfigDict(frozen=True)

    outgoing: ScoredPlayer
    incoming: ScoredPlayer

    @property
    def cost_saved(self) -> float:
        """Saving in millions."""
        return (self.outgoing.now_cost - self.incoming.now_cost) / 10


class TerminationReason(str, Enum):
    """Why the budget reconciliation loop stopped."""

    WITHIN_BUDGET = "within_budget"
    NO_IMPROVING_SWAP = "no_improving_swap"
    ITERATION_CAP = "iteration_cap"


class AllocationResult(BaseModel):
    """
    Finalized squad allocation.

    ``over_budget`` is a warning for display, not an error: the reconciler
    is best effort and may stop above the budget when no cheaper same-role
    replacement exists.
    """

    model_config = ConfigDict(frozen=True)

    roster: Tuple[ScoredPlayer, ...] = Field(..., description="Role-grouped roster")
    metric: ScoringMetric
    formation: str = Field(..., description="Effective formation label")
    budget: float = Field(..., ge=0.0, description="Budget in millions")
    total_cost: float = Field(..., ge=0.0, description="Roster cost in millions")
    total_score: float
    over_budget: bool
    overage: float = Field(..., ge=0.0, description="Millions above budget")
    iterations: int = Field(..., ge=0)
    swaps: Tuple[SquadSwap, ...] = Field(default_factory=tuple)
    termination: TerminationReason
    relaxed_fill: bool = Field(
        default=False, description="Whether the relaxed per-role caps were needed"
    )

    @property
    def player_ids(self) -> List[int]:
        return [member.player_id for member in self.roster]

    @property
    def metric_label(self) -> str:
        return self.metric.label

    def players_by_role(self) -> Dict[Role, List[ScoredPlayer]]:
        """Roster members keyed by role, every role present."""
        grouped: Dict[Role, List[ScoredPlayer]] = {role: [] for role in Role}
        for member in self.roster:
            grouped[member.role].append(member)
        return grouped
