"""Page size limits, read from ``PAGINATION_*`` environment variables.

Example: PAGINATION_CURSOR_PAGE_SIZE=25, PAGINATION_MAX_LIMIT=200
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Page size limits for the HTTP pagination dependencies.

    Attributes:
        max_limit: Upper bound for ``first``, ``last`` and ``results_per_page``.
        cursor_page_size: ``first`` used when a cursor request names neither
            ``first`` nor ``last``.
        offset_default_limit: ``results_per_page`` used when an offset
            request omits it.
    """

    max_limit: int = Field(default=100, ge=1, le=10000)
    cursor_page_size: int = Field(default=50, ge=1)
    offset_default_limit: int = Field(default=20, ge=1)

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        env_file=".env",
        env_file_encoding="utf-8",
        frozen=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _defaults_within_max(self) -> PaginationSettings:
        for name in ("cursor_page_size", "offset_default_limit"):
            if getattr(self, name) > self.max_limit:
                msg = f"{name} ({getattr(self, name)}) exceeds max_limit ({self.max_limit})"
                raise ValueError(msg)
        return self
