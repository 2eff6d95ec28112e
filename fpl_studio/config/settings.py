"""
Global Configuration System for FPL Studio

Centralized configuration for the squad allocator, the FPL API client and the
analysis views. Provides type-safe configuration with validation and
environment variable support.
"""

import json
import os
import re
from typing import Dict, Optional
from pathlib import Path

from loguru import logger
from pydantic import BaseModel, Field, field_validator, model_validator

VALID_METRICS = ("total_points", "form", "value")
VALID_ROLES = ("GKP", "DEF", "MID", "FWD")
FORMATION_PATTERN = re.compile(r"^\d+-\d+-\d+$")


class AllocatorConfig(BaseModel):
    """Squad Allocator Configuration"""

    default_budget: float = Field(
        default=83.0,
        description="Starting XI budget in millions (100 minus a cheap bench)",
        ge=0.0,
        le=200.0,
    )
    default_metric: str = Field(
        default="form", description="Scoring metric: total_points, form or value"
    )
    default_formation: str = Field(
        default="3-4-3", description="Outfield formation DEF-MID-FWD, plus 1 GKP"
    )
    group_cap: int = Field(
        default=3, description="Maximum players from one club", ge=1, le=11
    )

    # Reconciliation tunables
    cost_exponent: float = Field(
        default=1.5,
        description="Exponent on price in score / price^k efficiency",
        gt=0.0,
        le=3.0,
    )
    max_iterations: int = Field(
        default=1000, description="Reconciliation loop iteration cap", ge=1, le=100000
    )

    # Relaxed fill
    allow_relaxed_fill: bool = Field(
        default=True,
        description="Fall back to per-role maximum caps when the target cannot be filled",
    )
    relaxed_role_caps: Dict[str, int] = Field(
        default_factory=lambda: {"GKP": 1, "DEF": 5, "MID": 5, "FWD": 3},
        description="Maximum players per role during the relaxed fill",
    )

    @field_validator("default_metric")
    @classmethod
    def validate_metric(cls, v: str) -> str:
        if v not in VALID_METRICS:
            raise ValueError(f"default_metric must be one of {VALID_METRICS}, got {v}")
        return v

    @field_validator("default_formation")
    @classmethod
    def validate_formation(cls, v: str) -> str:
        if not FORMATION_PATTERN.match(v):
            raise ValueError(f"Formation must look like '3-4-3', got {v}")
        return v

    @field_validator("relaxed_role_caps")
    @classmethod
    def validate_role_caps(cls, v: Dict[str, int]) -> Dict[str, int]:
        missing = [role for role in VALID_ROLES if role not in v]
        if missing:
            raise ValueError(f"relaxed_role_caps missing roles: {missing}")
        if any(count < 0 for count in v.values()):
            raise ValueError("relaxed_role_caps must be non-negative")
        return v


class ApiConfig(BaseModel):
    """FPL API Client Configuration"""

    base_url: str = Field(
        default="https://fantasy.premierleague.com/api",
        description="FPL public API root",
    )
    user_agent: str = Field(
        default="FPL-Studio", description="User-Agent header sent with requests"
    )
    timeout_seconds: float = Field(
        default=10.0, description="Per-request timeout", gt=0.0, le=120.0
    )
    max_workers: int = Field(
        default=8, description="Parallel history fetches", ge=1, le=32
    )

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class AnalysisConfig(BaseModel):
    """Period Analysis and Ranking Table Configuration"""

    period_top_n: int = Field(
        default=50, description="Players fetched for period analysis", ge=1, le=800
    )
    default_period_length: int = Field(
        default=5, description="Gameweeks in the default analysis window", ge=1, le=38
    )
    return_threshold: int = Field(
        default=2, description="Points above which a round counts as a return"
    )
    differential_form_threshold: float = Field(
        default=2.0, description="Minimum form for differential candidates", ge=0.0
    )
    ownership_split: float = Field(
        default=20.0,
        description="Ownership % separating differentials from template picks",
        ge=0.0,
        le=100.0,
    )
    ranking_limit: int = Field(
        default=10, description="Rows in ranking tables", ge=1, le=100
    )
    ict_limit: int = Field(
        default=5, description="Rows per ICT component table", ge=1, le=50
    )


class StudioConfig(BaseModel):
    """Master FPL Studio Configuration Container"""

    allocator: AllocatorConfig = Field(
        default_factory=AllocatorConfig, description="Squad Allocator Configuration"
    )
    api: ApiConfig = Field(
        default_factory=ApiConfig, description="FPL API Client Configuration"
    )
    analysis: AnalysisConfig = Field(
        default_factory=AnalysisConfig, description="Analysis Configuration"
    )

    @model_validator(mode="after")
    def validate_config_consistency(self):
        """Validate cross-field consistency"""
        outfield = [int(n) for n in self.allocator.default_formation.split("-")]
        # 1 GKP plus outfield must fit inside a 15-man FPL squad
        if sum(outfield) + 1 > 15:
            raise ValueError(
                f"allocator.default_formation {self.allocator.default_formation} "
                "exceeds 15 players"
            )
        return self


def _coerce_env_value(value: str):
    """Best-effort conversion of an environment string to bool/int/float."""
    if value.lower() in ("true", "false"):
        return value.lower() == "true"
    if value.isdigit() or (value.startswith("-") and value[1:].isdigit()):
        return int(value)
    try:
        if "." in value:
            return float(value)
    except ValueError:
        pass
    return value


def load_config(
    config_path: Optional[Path] = None, config_data: Optional[Dict] = None
) -> StudioConfig:
    """
    Load configuration with environment variable overrides and optional config file

    Args:
        config_path: Optional path to a JSON configuration file
        config_data: Optional dictionary of configuration data

    Environment variables can override any config value using the pattern:
    FPL_{SECTION}_{FIELD} = value

    Example: FPL_ALLOCATOR_COST_EXPONENT=1.2
    """
    config_dict: Dict = {}

    if config_path and config_path.exists():
        try:
            with open(config_path, "r") as f:
                if config_path.suffix.lower() == ".json":
                    config_dict = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"⚠️ Failed to load config file {config_path}: {e}")

    if config_data:
        for section, fields in config_data.items():
            if isinstance(fields, dict):
                config_dict.setdefault(section, {}).update(fields)
            else:
                config_dict[section] = fields

    section_names = set(StudioConfig.model_fields)
    for env_var, value in os.environ.items():
        if not env_var.startswith("FPL_"):
            continue
        parts = env_var.split("_")[1:]
        if len(parts) < 2:
            continue
        section = parts[0].lower()
        if section not in section_names:
            continue
        field = "_".join(parts[1:]).lower()
        config_dict.setdefault(section, {})[field] = _coerce_env_value(value)

    try:
        return StudioConfig(**config_dict)
    except ValueError as e:
        logger.warning(f"⚠️ Configuration validation failed: {e}")
        logger.warning("Using default configuration...")
        return StudioConfig()


# Global configuration instance
config = load_config()
