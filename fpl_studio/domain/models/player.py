"""Player domain model with FPL validation."""

from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """FPL player positions, in display order."""

    GKP = "GKP"
    DEF = "DEF"
    MID = "MID"
    FWD = "FWD"

    @property
    def element_type(self) -> int:
        """FPL API element_type code (1-4)."""
        return _ROLE_ORDER.index(self) + 1

    @property
    def order(self) -> int:
        return _ROLE_ORDER.index(self)

    @classmethod
    def from_element_type(cls, element_type: int) -> "Role":
        """Map an FPL element_type code to a Role."""
        if not 1 <= element_type <= len(_ROLE_ORDER):
            raise ValueError(f"Unknown element_type: {element_type}")
        return _ROLE_ORDER[element_type - 1]


_ROLE_ORDER = (Role.GKP, Role.DEF, Role.MID, Role.FWD)


class AvailabilityStatus(str, Enum):
    """Player availability status."""

    AVAILABLE = "a"
    DOUBTFUL = "d"
    INJURED = "i"
    SUSPENDED = "s"
    UNAVAILABLE = "u"
    UNKNOWN = "n"  # Sometimes appears in FPL data


UNAVAILABLE_STATUSES = frozenset(
    {
        AvailabilityStatus.INJURED,
        AvailabilityStatus.SUSPENDED,
        AvailabilityStatus.UNAVAILABLE,
    }
)


class PlayerDomain(BaseModel):
    """
    Domain model for an FPL player as delivered by bootstrap-static.

    ``form`` is kept as the raw API value (the API sends it as a string) so
    that scoring can decide how to treat values that do not parse.
    """

    model_config = ConfigDict(frozen=True)

    player_id: int = Field(..., gt=0, description="Unique FPL player ID")
    web_name: str = Field(..., min_length=1, max_length=50, description="Display name")
    team_id: int = Field(..., ge=1, description="Club ID")
    position: Role = Field(..., description="Player position")
    now_cost: int = Field(..., gt=0, description="Price in 0.1m units")
    total_points: int = Field(default=0, description="Season points (can be negative)")
    form: Optional[Union[str, float]] = Field(
        default="0.0", description="Recent form as sent by the API"
    )
    status: AvailabilityStatus = Field(
        default=AvailabilityStatus.AVAILABLE, description="Availability status"
    )
    selected_by_percent: float = Field(
        default=0.0, ge=0.0, le=100.0, description="Selection percentage"
    )

    # Season statistics used by the ranking tables
    minutes: int = Field(default=0, ge=0)
    goals_scored: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    penalties_saved: int = Field(default=0, ge=0)
    bonus: int = Field(default=0, ge=0)
    bps: int = Field(default=0, description="Bonus points system score (can be negative)")
    influence: float = Field(default=0.0, ge=0.0)
    creativity: float = Field(default=0.0, ge=0.0)
    threat: float = Field(default=0.0, ge=0.0)

    @property
    def price(self) -> float:
        """Price in millions."""
        return self.now_cost / 10

    @property
    def is_available(self) -> bool:
        """Injured, suspended and unavailable players cannot be selected."""
        return self.status not in UNAVAILABLE_STATUSES


class GameweekRecord(BaseModel):
    """One round of a player's element-summary history."""

    model_config = ConfigDict(frozen=True)

    player_id: int = Field(..., gt=0)
    round: int = Field(..., ge=1, le=38)
    total_points: int = Field(...)
    minutes: int = Field(default=0, ge=0)
    goals_scored: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    bonus: int = Field(default=0, ge=0)
