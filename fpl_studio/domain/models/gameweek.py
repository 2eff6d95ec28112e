"""Gameweek (FPL "event") domain model."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class GameweekEvent(BaseModel):
    """One gameweek from bootstrap-static ``events``."""

    model_config = ConfigDict(frozen=True)

    gameweek: int = Field(..., ge=1, le=38, description="Gameweek number")
    name: str = Field(..., min_length=1)
    deadline_time: Optional[datetime] = Field(None, description="Transfer deadline")
    is_current: bool = Field(default=False)
    is_next: bool = Field(default=False)
    finished: bool = Field(default=False)

    @property
    def last_played(self) -> int:
        """Latest gameweek with results: this one if it is live, else the one before."""
        if self.is_current:
            return self.gameweek
        return max(1, self.gameweek - 1)
