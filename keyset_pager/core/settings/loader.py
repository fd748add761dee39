"""Process-wide settings instance."""

from __future__ import annotations

from functools import lru_cache

from .pagination import PaginationSettings


@lru_cache(maxsize=1)
def get_pagination_settings() -> PaginationSettings:
    """Load pagination settings once; later calls return the same instance."""
    return PaginationSettings()


def clear_settings_cache() -> None:
    """Forget the loaded settings so the next call re-reads the environment."""
    get_pagination_settings.cache_clear()
