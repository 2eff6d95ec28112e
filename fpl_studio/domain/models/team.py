"""Team domain model."""

from pydantic import BaseModel, ConfigDict, Field


class TeamDomain(BaseModel):
    """Domain model for FPL teams."""

    model_config = ConfigDict(frozen=True)

    team_id: int = Field(..., ge=1, description="Club ID")
    name: str = Field(..., min_length=1, max_length=100, description="Full team name")
    short_name: str = Field(
        ..., min_length=2, max_length=3, description="3-letter team code"
    )
