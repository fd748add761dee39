"""Reusable pagination dependencies for FastAPI routes.

Two styles are provided:
    - CursorPagination: first/last/after/before query parameters
    - OffsetPagination: page/results_per_page query parameters

Usage:
    from keyset_pager.core.dependencies.pagination import CursorPagination

    @router.get("/items", response_model=Connection[ItemResponse])
    async def list_items(
        pagination: CursorPagination,
        session: AsyncSession = Depends(get_session),
    ) -> Connection[Item]:
        return await item_repo.paginate_cursor(
            session, order_by=["field", "id"], request=pagination
        )
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Query

from keyset_pager.core.pagination.schemas import OffsetPageRequest, PaginationRequest
from keyset_pager.core.settings import get_pagination_settings


def get_cursor_pagination(
    first: Annotated[
        int | None,
        Query(ge=0, description="Number of items from the start of the window"),
    ] = None,
    last: Annotated[
        int | None,
        Query(ge=0, description="Number of items from the end of the window"),
    ] = None,
    after: Annotated[
        str | None,
        Query(description="Return items after this cursor"),
    ] = None,
    before: Annotated[
        str | None,
        Query(description="Return items before this cursor"),
    ] = None,
) -> PaginationRequest:
    """Get cursor pagination parameters.

    ``first`` and ``last`` are clamped to the configured maximum. When
    neither is given, ``first`` defaults to the configured cursor page size
    so a request never scans the whole table.

    Returns:
        PaginationRequest with validated parameters.
    """
    settings = get_pagination_settings()

    if first is None and last is None:
        first = settings.cursor_page_size
    if first is not None:
        first = min(first, settings.max_limit)
    if last is not None:
        last = min(last, settings.max_limit)

    return PaginationRequest(first=first, last=last, after=after, before=before)


def get_offset_pagination(
    page: Annotated[
        int,
        Query(ge=1, description="Page number (1-indexed)"),
    ] = 1,
    results_per_page: Annotated[
        int | None,
        Query(ge=1, description="Number of items per page"),
    ] = None,
) -> OffsetPageRequest:
    """Get offset pagination parameters.

    Uses the settings default page size and enforces the maximum.

    Returns:
        OffsetPageRequest with validated page and page size.
    """
    settings = get_pagination_settings()
    per_page = results_per_page or settings.offset_default_limit
    return OffsetPageRequest(page=page, results_per_page=min(per_page, settings.max_limit))


# Type aliases for cleaner route signatures
CursorPagination = Annotated[PaginationRequest, Depends(get_cursor_pagination)]
OffsetPagination = Annotated[OffsetPageRequest, Depends(get_offset_pagination)]
