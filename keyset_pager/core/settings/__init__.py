"""Pydantic Settings v2 configuration.

Import settings via the cached loaders:
    from keyset_pager.core.settings import get_pagination_settings

    settings = get_pagination_settings()
    print(settings.max_limit)
"""

from __future__ import annotations

from .loader import clear_settings_cache, get_pagination_settings
from .pagination import PaginationSettings

__all__ = [
    "PaginationSettings",
    "clear_settings_cache",
    "get_pagination_settings",
]
