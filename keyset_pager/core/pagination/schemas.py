"""Pagination request and response schemas.

Two cursor response styles are provided:

1. Connection pattern (GraphQL Relay style):
   - ``result_count``: rows in the directional window
   - ``page_info``: forward/backward page flags
   - ``edges``: ``{node, cursor}`` pairs in presentation order

2. Simple REST style (``CursorPage``):
   - items, next/prev cursors and a has_more flag

Field names are snake_case in Python and camelCase when serialized with
``by_alias=True`` (``resultCount``, ``pageInfo``, ``hasNextPage``...).

Offset pagination uses ``OffsetPageRequest``/``OffsetPage``.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class PaginationRequest(BaseModel):
    """Cursor pagination arguments.

    ``first`` bounds the page from the front, ``last`` from the back; both
    may be given. ``after``/``before`` restrict the window to rows strictly
    after/before the given cursors.

    Attributes:
        first: Maximum rows counted from the start of the window
        last: Maximum rows counted from the end of the window
        after: Cursor of the row the window starts after
        before: Cursor of the row the window ends before
    """

    first: int | None = Field(default=None, ge=0, description="Rows from the start")
    last: int | None = Field(default=None, ge=0, description="Rows from the end")
    after: str | None = Field(default=None, description="Exclusive start cursor")
    before: str | None = Field(default=None, description="Exclusive end cursor")

    model_config = ConfigDict(frozen=True)


class PageInfo(BaseModel):
    """Page navigation metadata.

    The flags are derived from ``result_count`` of the directional window:
    ``has_next_page`` is ``result_count > first`` and ``has_previous_page``
    is ``result_count > last``; each is False when its bound is absent or 0.

    Attributes:
        has_next_page: Whether more rows follow this page
        has_previous_page: Whether more rows precede this page
        start_cursor: Cursor of the first edge
        end_cursor: Cursor of the last edge
    """

    has_next_page: bool = Field(description="Whether more items exist")
    has_previous_page: bool = Field(description="Whether previous items exist")
    start_cursor: str | None = Field(default=None, description="Cursor of the first item")
    end_cursor: str | None = Field(default=None, description="Cursor of the last item")

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Edge(BaseModel, Generic[T]):
    """A row together with its cursor.

    Attributes:
        node: The row
        cursor: Cursor of the row under the requested ordering
    """

    node: T = Field(description="The data item")
    cursor: str = Field(description="Cursor for this item")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class Connection(BaseModel, Generic[T]):
    """Connection-style cursor pagination result.

    Client navigation:
        # First page
        GET /items?first=10

        # Next page (end_cursor of the previous response)
        GET /items?first=10&after=<end_cursor>

        # Previous page (start_cursor of the current response)
        GET /items?last=10&before=<start_cursor>

    Attributes:
        result_count: Rows matching the directional window, ignoring limits
        page_info: Navigation metadata
        edges: Edges in presentation order
    """

    result_count: int = Field(ge=0, description="Rows in the directional window")
    page_info: PageInfo = Field(description="Pagination metadata")
    edges: list[Edge[T]] = Field(
        default_factory=list,
        description="List of edges (items with cursors)",
    )

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )

    @property
    def nodes(self) -> list[T]:
        """Rows without edge wrappers."""
        return [edge.node for edge in self.edges]

    def to_cursor_page(self) -> CursorPage[T]:
        """Convert to simple REST-style pagination."""
        return CursorPage(
            items=self.nodes,
            next_cursor=self.page_info.end_cursor if self.page_info.has_next_page else None,
            prev_cursor=self.page_info.start_cursor if self.page_info.has_previous_page else None,
            has_more=self.page_info.has_next_page,
            total_count=self.result_count,
        )


class CursorPage(BaseModel, Generic[T]):
    """Simple REST-style cursor pagination response.

    Attributes:
        items: Rows of this page
        next_cursor: Cursor for the next page (None if no more)
        prev_cursor: Cursor for the previous page (None if at start)
        has_more: Whether more items exist after this page
        total_count: Rows in the directional window
    """

    items: list[T] = Field(default_factory=list, description="List of items")
    next_cursor: str | None = Field(default=None, description="Cursor to fetch next page")
    prev_cursor: str | None = Field(default=None, description="Cursor to fetch previous page")
    has_more: bool = Field(default=False, description="Whether more items exist")
    total_count: int | None = Field(default=None, description="Total count (optional)")

    model_config = ConfigDict(arbitrary_types_allowed=True)


class OffsetPageRequest(BaseModel):
    """Offset pagination arguments (1-indexed pages)."""

    page: int = Field(default=1, ge=1, description="Page number (1-indexed)")
    results_per_page: int = Field(ge=1, description="Rows per page")

    model_config = ConfigDict(frozen=True)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.results_per_page


class OffsetPage(BaseModel, Generic[T]):
    """Offset pagination result.

    Attributes:
        results: Rows of this page
        result_count: Rows matching the query, ignoring the page window
        page_count: Number of pages
        current_page: The returned page number
    """

    results: list[T] = Field(default_factory=list)
    result_count: int = Field(ge=0)
    page_count: int = Field(ge=0)
    current_page: int = Field(ge=1)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        arbitrary_types_allowed=True,
    )


def page_count(result_count: int, results_per_page: int) -> int:
    """Number of pages needed for ``result_count`` rows."""
    return -(-result_count // results_per_page)


__all__ = [
    "Connection",
    "CursorPage",
    "Edge",
    "OffsetPage",
    "OffsetPageRequest",
    "PageInfo",
    "PaginationRequest",
    "page_count",
]
