"""Cursor-based (keyset) pagination.

Keyset pagination is:
- Stable: rows don't shift or repeat when data changes between pages
- Performant: indexed seeks instead of OFFSET scans
- Flexible: any number of sort keys, each ascending or descending

Usage:
    from keyset_pager.core.pagination import Paginator
    from keyset_pager.core.database import SQLAlchemyQueryExecutor

    paginator = Paginator(SQLAlchemyQueryExecutor(session, select(Item)))
    page = await paginator.paginate(
        ["field", {"field": "id", "direction": "DESC"}],
        first=50,
        after=cursor_from_request,
    )

    # REST style
    return page.to_cursor_page()

Cursors are opaque URL-safe strings that clients pass back unchanged,
together with the same ordering that produced them.
"""

from keyset_pager.core.pagination.cursor import CursorCodec, CursorData, encode_cursor
from keyset_pager.core.pagination.filters import CursorFilter, build_seek_condition
from keyset_pager.core.pagination.order import (
    OrderBySource,
    OrderSpec,
    SortKey,
    normalize_order_by,
)
from keyset_pager.core.pagination.paginator import (
    PagePlan,
    Paginator,
    finish_page,
    plan_page,
)
from keyset_pager.core.pagination.protocols import (
    QueryExecutor,
    QueryResult,
    SeekCondition,
)
from keyset_pager.core.pagination.schemas import (
    Connection,
    CursorPage,
    Edge,
    OffsetPage,
    OffsetPageRequest,
    PageInfo,
    PaginationRequest,
)

__all__ = [
    # Schemas
    "Connection",
    "CursorPage",
    "Edge",
    "OffsetPage",
    "OffsetPageRequest",
    "PageInfo",
    "PaginationRequest",
    # Cursors
    "CursorCodec",
    "CursorData",
    "encode_cursor",
    # Ordering
    "OrderBySource",
    "OrderSpec",
    "SortKey",
    "normalize_order_by",
    # Seek conditions
    "CursorFilter",
    "build_seek_condition",
    # Paginator
    "PagePlan",
    "Paginator",
    "QueryExecutor",
    "QueryResult",
    "SeekCondition",
    "finish_page",
    "plan_page",
]
