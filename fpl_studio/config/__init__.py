"""
FPL Studio Configuration Module

Provides centralized configuration management for the entire application.
Import the global config instance to access all configuration values.

Usage:
    from fpl_studio.config import config

    # Access allocator configuration
    budget = config.allocator.default_budget

    # Access API client configuration
    timeout = config.api.timeout_seconds
"""

from .settings import (
    StudioConfig,
    AllocatorConfig,
    ApiConfig,
    AnalysisConfig,
    config,
    load_config,
)

__all__ = [
    "StudioConfig",
    "AllocatorConfig",
    "ApiConfig",
    "AnalysisConfig",
    "config",
    "load_config",
]
