"""Keyset pagination over a query executor.

Each call runs in two phases around a single executor round trip:

1. ``plan_page`` picks the scan direction, decodes the cursors into seek
   conditions and chooses the row limit.
2. ``finish_page`` trims and reorders the fetched rows, derives the page
   flags and builds the edges.

A request with ``last`` but no ``first`` scans backward (every key's
direction flipped) so the LIMIT picks the rows nearest the end of the
window; the rows are reversed back into presentation order afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from keyset_pager.core.pagination.cursor import CursorCodec
from keyset_pager.core.pagination.order import normalize_order_by, scan_order
from keyset_pager.core.pagination.protocols import SeekCondition
from keyset_pager.core.pagination.schemas import (
    Connection,
    Edge,
    PageInfo,
    PaginationRequest,
)
from keyset_pager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from keyset_pager.core.pagination.order import OrderBySource, OrderSpec
    from keyset_pager.core.pagination.protocols import QueryExecutor

_lazy = get_lazy_logger(__name__)


@dataclass(frozen=True, slots=True)
class PagePlan:
    """Query side of a pagination call.

    Attributes:
        order_by: Declared ordering (used for cursors)
        order: Scan ordering, flipped when scanning backward
        conditions: Seek conditions for after/before
        limit: Row limit in scan direction (None for no limit)
        is_ascending: Whether the scan runs in declared direction
        first: Requested ``first``
        last: Requested ``last``
    """

    order_by: OrderSpec
    order: OrderSpec
    conditions: tuple[SeekCondition, ...]
    limit: int | None
    is_ascending: bool
    first: int | None
    last: int | None


def plan_page(order_by: OrderSpec, request: PaginationRequest) -> PagePlan:
    """Build the query plan for one page.

    Raises:
        MalformedCursorError: If ``after`` or ``before`` cannot be decoded
            against ``order_by``
    """
    first, last = request.first, request.last
    # a zero count is treated as absent
    is_ascending = not (bool(last) and not first)

    conditions: list[SeekCondition] = []
    if request.after:
        values = CursorCodec.decode(order_by, request.after)
        conditions.append(SeekCondition(order_by, values, is_greater_than=True))
    if request.before:
        values = CursorCodec.decode(order_by, request.before)
        conditions.append(SeekCondition(order_by, values, is_greater_than=False))

    return PagePlan(
        order_by=order_by,
        order=scan_order(order_by, is_ascending=is_ascending),
        conditions=tuple(conditions),
        limit=first if is_ascending else last,
        is_ascending=is_ascending,
        first=first,
        last=last,
    )


def finish_page[T](plan: PagePlan, rows: Sequence[T], result_count: int) -> Connection[T]:
    """Turn fetched rows into a connection.

    Args:
        plan: The plan the rows were fetched with
        rows: Rows in scan order
        result_count: Rows matching the conditions, ignoring the limit

    Returns:
        Connection with edges in presentation order
    """
    page = list(rows)
    last = plan.last

    # `first` bounded the fetch; `last` trims the far end of what came back
    if last and last < len(page):
        page = page[len(page) - last :] if plan.is_ascending else page[:last]

    if not plan.is_ascending:
        page.reverse()

    edges: list[Edge[T]] = [
        Edge(node=row, cursor=CursorCodec.encode(plan.order_by, row)) for row in page
    ]

    page_info = PageInfo(
        has_previous_page=bool(last) and result_count > last,
        has_next_page=bool(plan.first) and result_count > plan.first,
        start_cursor=edges[0].cursor if edges else None,
        end_cursor=edges[-1].cursor if edges else None,
    )
    return Connection(result_count=result_count, page_info=page_info, edges=edges)


class Paginator[T]:
    """Cursor pagination against a ``QueryExecutor``.

    Stateless apart from the executor; one executor call per page.

    Example:
        paginator = Paginator(SQLAlchemyQueryExecutor(session, select(Item)))
        page = await paginator.paginate(["field", "id"], first=20)

        for edge in page.edges:
            print(edge.node, edge.cursor)

        if page.page_info.has_next_page:
            next_page = await paginator.paginate(
                ["field", "id"], first=20, after=page.page_info.end_cursor
            )
    """

    __slots__ = ("executor",)

    def __init__(self, executor: QueryExecutor[T]) -> None:
        self.executor = executor

    async def paginate(
        self,
        order_by: OrderBySource,
        request: PaginationRequest | None = None,
        *,
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> Connection[T]:
        """Fetch one page.

        Args:
            order_by: Order declaration (field name, descriptor, or list)
            request: Pagination arguments; built from the keyword
                arguments when omitted
            first: Rows from the start of the window
            last: Rows from the end of the window
            after: Exclusive start cursor
            before: Exclusive end cursor

        Returns:
            Connection with result count, page info and edges

        Raises:
            MalformedCursorError: If a cursor does not decode against ``order_by``
            InvalidOrderSpecError: If ``order_by`` is empty or malformed
        """
        if request is None:
            request = PaginationRequest(first=first, last=last, after=after, before=before)

        plan = plan_page(normalize_order_by(order_by), request)
        result = await self.executor.execute(plan.conditions, plan.order, plan.limit)
        connection = finish_page(plan, result.results, result.result_count)

        _lazy.debug(
            lambda: (
                f"paginate: {_describe(plan)} -> {len(connection.edges)} edges, "
                f"result_count={connection.result_count}, "
                f"has_next={connection.page_info.has_next_page}, "
                f"has_prev={connection.page_info.has_previous_page}"
            )
        )
        return connection


def _describe(plan: PagePlan) -> str:
    order = ", ".join(f"{key.field} {key.direction}" for key in plan.order)
    return f"ORDER BY {order} LIMIT {plan.limit} ({len(plan.conditions)} seek conditions)"


__all__ = ["PagePlan", "Paginator", "finish_page", "plan_page"]
