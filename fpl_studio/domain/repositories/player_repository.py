"""Repository interface for player data access."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..common.result import Result
from ..models.gameweek import GameweekEvent
from ..models.player import GameweekRecord, PlayerDomain
from ..models.team import TeamDomain


class PlayerRepository(ABC):
    """
    Abstract repository for player data access.

    Provides a consistent interface for accessing player data regardless
    of the underlying data source (API, cache, fixtures in tests, etc.).
    """

    @abstractmethod
    def get_current_players(self) -> Result[List[PlayerDomain]]:
        """
        Get all current players for the season.

        Returns:
            Result containing list of players or error information
        """
        pass

    @abstractmethod
    def get_teams(self) -> Result[List[TeamDomain]]:
        """
        Get all clubs in the league.

        Returns:
            Result containing list of teams or error information
        """
        pass

    @abstractmethod
    def get_player_history(
        self,
        player_id: int,
        from_gw: Optional[int] = None,
        to_gw: Optional[int] = None,
    ) -> Result[List[GameweekRecord]]:
        """
        Get per-round history for one player.

        Args:
            player_id: The player's FPL ID
            from_gw: First gameweek to include (inclusive), None for all
            to_gw: Last gameweek to include (inclusive), None for all

        Returns:
            Result containing the player's rounds in order or error information
        """
        pass

    @abstractmethod
    def get_current_gameweek(self) -> Result[GameweekEvent]:
        """
        Get the live gameweek, or the next one between gameweeks.

        Returns:
            Result containing the active gameweek or error information
        """
        pass
