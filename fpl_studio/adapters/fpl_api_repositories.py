"""FPL public API client and repository implementation."""

import threading
from typing import Any, Dict, List, Optional, Union

import requests
from loguru import logger
from pydantic import BaseModel, Field, ValidationError

from fpl_studio.config import ApiConfig, config
from fpl_studio.domain.common.result import DomainError, Result
from fpl_studio.domain.models.gameweek import GameweekEvent
from fpl_studio.domain.models.player import (
    AvailabilityStatus,
    GameweekRecord,
    PlayerDomain,
    Role,
)
from fpl_studio.domain.models.team import TeamDomain
from fpl_studio.domain.repositories.player_repository import PlayerRepository


class FPLApiError(Exception):
    """Raised when the FPL API is unreachable or returns an unusable response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class FPLApiClient:
    """Thin JSON client for fantasy.premierleague.com/api.

    ``requests.Session`` is not documented as thread-safe, so each thread
    gets its own session unless one is injected.
    """

    def __init__(
        self,
        api_config: Optional[ApiConfig] = None,
        session: Optional[requests.Session] = None,
    ):
        self.api_config = api_config or config.api
        self.headers = {
            "User-Agent": self.api_config.user_agent,
            "Accept": "application/json",
        }
        self._shared_session = session
        if session is not None:
            session.headers.update(self.headers)
        self._local = threading.local()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(self.headers)
            self._local.session = session
        return session

    def _get(self, path: str) -> Any:
        url = path if path.startswith("http") else f"{self.api_config.base_url}{path}"
        try:
            response = self.session.get(url, timeout=self.api_config.timeout_seconds)
        except requests.RequestException as e:
            raise FPLApiError(f"FPL API request failed for {url}: {e}") from e

        if not response.ok:
            raise FPLApiError(
                f"FPL API error: {response.status_code} for {url}",
                status_code=response.status_code,
            )
        try:
            return response.json()
        except ValueError as e:
            raise FPLApiError(f"FPL API returned invalid JSON for {url}") from e

    def get_bootstrap_static(self) -> Dict[str, Any]:
        """Players (``elements``), clubs (``teams``) and gameweeks (``events``)."""
        return self._get("/bootstrap-static/")

    def get_element_summary(self, player_id: int) -> Dict[str, Any]:
        """Fixtures and per-round ``history`` for one player."""
        return self._get(f"/element-summary/{player_id}/")


class RawElementData(BaseModel):
    """Pydantic model for validating a bootstrap-static element."""

    id: int = Field(..., gt=0)
    web_name: str = Field(..., min_length=1)
    team: int = Field(..., ge=1)
    element_type: int = Field(..., ge=1, le=4)
    now_cost: int = Field(..., gt=0, description="Price in 0.1m units")
    total_points: int = Field(default=0)
    form: Optional[Union[str, float]] = Field("0.0")
    status: str = Field(default="a")
    selected_by_percent: float = Field(default=0.0, ge=0.0, le=100.0)

    minutes: int = Field(default=0, ge=0)
    goals_scored: int = Field(default=0, ge=0)
    assists: int = Field(default=0, ge=0)
    clean_sheets: int = Field(default=0, ge=0)
    saves: int = Field(default=0, ge=0)
    penalties_saved: int = Field(default=0, ge=0)
    bonus: int = Field(default=0, ge=0)
    bps: int = Field(default=0)
    influence: float = Field(default=0.0, ge=0.0)
    creativity: float = Field(default=0.0, ge=0.0)
    threat: float = Field(default=0.0, ge=0.0)

    def to_domain(self) -> PlayerDomain:
        try:
            status = AvailabilityStatus(self.status)
        except ValueError:
            status = AvailabilityStatus.UNKNOWN

        return PlayerDomain(
            player_id=self.id,
            web_name=self.web_name,
            team_id=self.team,
            position=Role.from_element_type(self.element_type),
            now_cost=self.now_cost,
            total_points=self.total_points,
            form=self.form,
            status=status,
            selected_by_percent=self.selected_by_percent,
            minutes=self.minutes,
            goals_scored=self.goals_scored,
            assists=self.assists,
            clean_sheets=self.clean_sheets,
            saves=self.saves,
            penalties_saved=self.penalties_saved,
            bonus=self.bonus,
            bps=self.bps,
            influence=self.influence,
            creativity=self.creativity,
            threat=self.threat,
        )


class FPLApiPlayerRepository(PlayerRepository):
    """PlayerRepository backed by the live FPL API."""

    def __init__(self, client: Optional[FPLApiClient] = None):
        self.client = client or FPLApiClient()
        self._bootstrap: Optional[Dict[str, Any]] = None

    def _load_bootstrap(self) -> Dict[str, Any]:
        if self._bootstrap is None:
            logger.info("🌐 Fetching bootstrap-static from FPL API")
            self._bootstrap = self.client.get_bootstrap_static()
        return self._bootstrap

    def get_current_players(self) -> Result[List[PlayerDomain]]:
        try:
            elements = self._load_bootstrap().get("elements", [])
        except FPLApiError as e:
            return Result.failure(
                DomainError.external_api_error(
                    f"Failed to load players: {e}",
                    details={"status_code": e.status_code},
                )
            )

        players = []
        skipped = 0
        for element in elements:
            try:
                players.append(RawElementData(**element).to_domain())
            except ValidationError as e:
                skipped += 1
                logger.warning(
                    f"⚠️ Skipping malformed element {element.get('id', '?')}: {e}"
                )

        if not players:
            return Result.failure(
                DomainError.data_not_found(
                    "FPL API returned no valid players",
                    details={"skipped": skipped},
                )
            )

        logger.info(f"✅ Loaded {len(players)} players ({skipped} skipped)")
        return Result.success(players)

    def get_teams(self) -> Result[List[TeamDomain]]:
        try:
            raw_teams = self._load_bootstrap().get("teams", [])
            teams = [
                TeamDomain(
                    team_id=team["id"],
                    name=team["name"],
                    short_name=team["short_name"],
                )
                for team in raw_teams
            ]
        except FPLApiError as e:
            return Result.failure(
                DomainError.external_api_error(f"Failed to load teams: {e}")
            )
        except (KeyError, ValidationError) as e:
            return Result.failure(
                DomainError.validation_error(f"Malformed team data: {e}")
            )
        return Result.success(teams)

    def get_player_history(
        self,
        player_id: int,
        from_gw: Optional[int] = None,
        to_gw: Optional[int] = None,
    ) -> Result[List[GameweekRecord]]:
        try:
            summary = self.client.get_element_summary(player_id)
            records = [
                GameweekRecord(
                    player_id=row.get("element", player_id),
                    round=row["round"],
                    total_points=row["total_points"],
                    minutes=row.get("minutes", 0),
                    goals_scored=row.get("goals_scored", 0),
                    assists=row.get("assists", 0),
                    clean_sheets=row.get("clean_sheets", 0),
                    bonus=row.get("bonus", 0),
                )
                for row in summary.get("history", [])
            ]
        except FPLApiError as e:
            return Result.failure(
                DomainError.external_api_error(
                    f"Failed to load history for player {player_id}: {e}",
                    details={"player_id": player_id, "status_code": e.status_code},
                )
            )
        except (KeyError, ValidationError) as e:
            return Result.failure(
                DomainError.validation_error(
                    f"Malformed history for player {player_id}: {e}",
                    details={"player_id": player_id},
                )
            )

        records = [
            record
            for record in records
            if (from_gw is None or record.round >= from_gw)
            and (to_gw is None or record.round <= to_gw)
        ]
        records.sort(key=lambda record: record.round)
        return Result.success(records)

    def get_current_gameweek(self) -> Result[GameweekEvent]:
        try:
            events = [
                GameweekEvent(
                    gameweek=event["id"],
                    name=event.get("name") or f"Gameweek {event['id']}",
                    deadline_time=event.get("deadline_time"),
                    is_current=bool(event.get("is_current")),
                    is_next=bool(event.get("is_next")),
                    finished=bool(event.get("finished")),
                )
                for event in self._load_bootstrap().get("events", [])
            ]
        except FPLApiError as e:
            return Result.failure(
                DomainError.external_api_error(f"Failed to load gameweeks: {e}")
            )
        except (KeyError, ValidationError) as e:
            return Result.failure(
                DomainError.validation_error(f"Malformed gameweek data: {e}")
            )

        active = next((event for event in events if event.is_current), None) or next(
            (event for event in events if event.is_next), None
        )
        if active is None:
            return Result.failure(
                DomainError.data_not_found(
                    "No current or upcoming gameweek", details={"events": len(events)}
                )
            )
        logger.debug(f"📅 Active gameweek: {active.name}")
        return Result.success(active)
