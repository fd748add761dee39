"""FastAPI dependencies."""

from keyset_pager.core.dependencies.pagination import (
    CursorPagination,
    OffsetPagination,
    get_cursor_pagination,
    get_offset_pagination,
)

__all__ = [
    "CursorPagination",
    "OffsetPagination",
    "get_cursor_pagination",
    "get_offset_pagination",
]
