"""Infrastructure adapters for repository pattern implementations."""

from .fpl_api_repositories import FPLApiClient, FPLApiError, FPLApiPlayerRepository

__all__ = ["FPLApiClient", "FPLApiError", "FPLApiPlayerRepository"]
