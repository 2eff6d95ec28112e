"""Tests for PlayerDomain, GameweekRecord and TeamDomain models."""

import pytest
from pydantic import ValidationError

from fpl_studio.domain.models.player import (
    AvailabilityStatus,
    GameweekRecord,
    PlayerDomain,
    Role,
)
from fpl_studio.domain.models.team import TeamDomain


class TestRole:
    """Test FPL element_type mapping."""

    @pytest.mark.parametrize(
        "element_type,role",
        [(1, Role.GKP), (2, Role.DEF), (3, Role.MID), (4, Role.FWD)],
    )
    def test_from_element_type(self, element_type, role):
        assert Role.from_element_type(element_type) == role
        assert role.element_type == element_type

    @pytest.mark.parametrize("element_type", [0, 5, -1])
    def test_unknown_element_type(self, element_type):
        with pytest.raises(ValueError, match="Unknown element_type"):
            Role.from_element_type(element_type)

    def test_display_order(self):
        assert sorted(Role, key=lambda role: role.order) == [
            Role.GKP,
            Role.DEF,
            Role.MID,
            Role.FWD,
        ]


class TestPlayerDomain:
    """Test PlayerDomain model validation."""

    def test_valid_player_creation(self):
        """Test creating a valid player."""
        player = PlayerDomain(
            player_id=1,
            web_name="Haaland",
            team_id=13,
            position=Role.FWD,
            now_cost=150,
            total_points=224,
            form="8.2",
            selected_by_percent=55.2,
        )

        assert player.price == 15.0
        assert player.status == AvailabilityStatus.AVAILABLE
        assert player.is_available is True
        assert player.form == "8.2"

    @pytest.mark.parametrize(
        "status,available",
        [
            (AvailabilityStatus.AVAILABLE, True),
            (AvailabilityStatus.DOUBTFUL, True),
            (AvailabilityStatus.UNKNOWN, True),
            (AvailabilityStatus.INJURED, False),
            (AvailabilityStatus.SUSPENDED, False),
            (AvailabilityStatus.UNAVAILABLE, False),
        ],
    )
    def test_availability(self, status, available):
        player = PlayerDomain(
            player_id=2,
            web_name="Test",
            team_id=1,
            position=Role.MID,
            now_cost=55,
            status=status,
        )

        assert player.is_available is available

    def test_negative_points_allowed(self):
        player = PlayerDomain(
            player_id=3,
            web_name="Test",
            team_id=1,
            position=Role.DEF,
            now_cost=40,
            total_points=-2,
            bps=-5,
        )

        assert player.total_points == -2

    @pytest.mark.parametrize(
        "overrides",
        [
            {"now_cost": 0},
            {"player_id": 0},
            {"team_id": 0},
            {"web_name": ""},
            {"selected_by_percent": 101.0},
        ],
    )
    def test_invalid_fields(self, overrides):
        data = {
            "player_id": 4,
            "web_name": "Test",
            "team_id": 1,
            "position": Role.GKP,
            "now_cost": 45,
        }
        data.update(overrides)

        with pytest.raises(ValidationError):
            PlayerDomain(**data)

    def test_frozen(self):
        player = PlayerDomain(
            player_id=5, web_name="Test", team_id=1, position=Role.GKP, now_cost=45
        )

        with pytest.raises(ValidationError):
            player.now_cost = 50


class TestGameweekRecord:
    def test_round_bounds(self):
        GameweekRecord(player_id=1, round=38, total_points=2)

        with pytest.raises(ValidationError):
            GameweekRecord(player_id=1, round=39, total_points=2)
        with pytest.raises(ValidationError):
            GameweekRecord(player_id=1, round=0, total_points=2)


class TestTeamDomain:
    def test_short_name_length(self):
        assert TeamDomain(team_id=1, name="Arsenal", short_name="ARS").short_name == "ARS"

        with pytest.raises(ValidationError):
            TeamDomain(team_id=1, name="Arsenal", short_name="ARSE")
