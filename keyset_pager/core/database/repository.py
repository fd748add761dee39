"""Minimal generic repository for paginated reads.

Provides cursor (keyset) and offset pagination plus a result count over
caller-built SQLAlchemy statements, with explicit session passing.
For anything else, use the session directly - this is a convenience, not a cage.

Example:
    from keyset_pager.core.database import BaseRepository

    class ItemRepository(BaseRepository[Item]):
        async def page_by_field(self, session: AsyncSession, **kwargs) -> Connection[Item]:
            return await self.paginate_cursor(session, order_by=["field", "id"], **kwargs)

    item_repo = ItemRepository(Item)
    page = await item_repo.paginate_cursor(session, order_by="id", first=20)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select

from keyset_pager.core.database.exceptions import MalformedCursorError
from keyset_pager.core.database.executor import SQLAlchemyQueryExecutor
from keyset_pager.core.database.filters import LimitOffset
from keyset_pager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from sqlalchemy import Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from keyset_pager.core.pagination import (
        Connection,
        OffsetPage,
        OrderBySource,
        PaginationRequest,
    )


class BaseRepository[T]:
    """Minimal generic repository for paginated reads.

    Provides:
        - paginate_cursor(session, statement, order_by, first/last/after/before) -> Connection[T]
        - paginate_offset(session, statement, page, results_per_page) -> OffsetPage[T]
        - count(session, statement) -> int

    Session is always explicit - no hidden state. The statement defaults to
    ``select(model)``; pass your own to add filters or joins.
    """

    __slots__ = ("model", "_logger", "_lazy")

    def __init__(self, model: type[T]) -> None:
        """Initialize repository with model class.

        Args:
            model: SQLAlchemy model class (e.g., Item)
        """
        self.model = model
        # Standard logger for INFO/WARNING/ERROR
        self._logger = logging.getLogger(f"repository.{model.__name__}")
        # Lazy logger for DEBUG (zero overhead when DEBUG disabled)
        self._lazy = get_lazy_logger(f"repository.{model.__name__}")

    def _statement(self, statement: Select[Any] | None) -> Select[Any]:
        return statement if statement is not None else select(self.model)

    async def count(
        self,
        session: AsyncSession,
        statement: Select[Any] | None = None,
    ) -> int:
        """Count rows matching a statement, ignoring any limit or order.

        Args:
            session: Database session
            statement: Statement to count (defaults to all rows)

        Returns:
            Number of matching rows
        """
        stmt = self._statement(statement).limit(None).offset(None).order_by(None)
        count_stmt = select(func.count()).select_from(stmt.subquery())
        total = (await session.execute(count_stmt)).scalar_one()

        self._lazy.debug(lambda: f"db.count: {self.model.__name__} -> {total}")
        return total

    async def paginate_cursor(
        self,
        session: AsyncSession,
        statement: Select[Any] | None = None,
        *,
        order_by: OrderBySource,
        request: PaginationRequest | None = None,
        first: int | None = None,
        last: int | None = None,
        after: str | None = None,
        before: str | None = None,
    ) -> Connection[T]:
        """Execute cursor-paginated query.

        Args:
            session: Database session
            statement: SQLAlchemy select statement (without pagination)
            order_by: Order declaration, e.g. ``["field", {"field": "id", "direction": "DESC"}]``
            request: Pagination arguments (overrides the keyword arguments)
            first: Rows from the start of the window
            last: Rows from the end of the window
            after: Exclusive start cursor
            before: Exclusive end cursor

        Returns:
            Connection[T] with result_count, page_info and edges

        Raises:
            MalformedCursorError: If a cursor does not decode against ``order_by``
            UnknownFieldError: If a sort field is not on the statement

        Example:
            stmt = select(Item).where(Item.field == "foo")
            page = await repo.paginate_cursor(
                session,
                stmt,
                order_by=[{"field": "created_at", "direction": "DESC"}, "id"],
                first=50,
                after=cursor_from_request,
            )

            for edge in page.edges:
                print(edge.node, edge.cursor)

            if page.page_info.has_next_page:
                next_cursor = page.page_info.end_cursor
        """
        from keyset_pager.core.pagination import Paginator

        executor: SQLAlchemyQueryExecutor[T] = SQLAlchemyQueryExecutor(
            session, self._statement(statement)
        )
        try:
            connection = await Paginator(executor).paginate(
                order_by,
                request,
                first=first,
                last=last,
                after=after,
                before=before,
            )
        except MalformedCursorError as e:
            self._logger.info(
                "Rejected malformed cursor",
                extra={
                    "entity": self.model.__name__,
                    "operation": "db.paginate_cursor",
                    "details": e.details,
                },
            )
            raise

        self._lazy.debug(
            lambda: (
                f"db.paginate_cursor: {self.model.__name__} -> {len(connection.edges)} items, "
                f"has_next={connection.page_info.has_next_page}"
            )
        )
        return connection

    async def paginate_offset(
        self,
        session: AsyncSession,
        statement: Select[Any] | None = None,
        *,
        page: int = 1,
        results_per_page: int,
    ) -> OffsetPage[T]:
        """Execute page-numbered query with result and page counts.

        Apply ordering to the statement before calling; offset pages
        without a stable order are not repeatable.

        Args:
            session: Database session
            statement: SQLAlchemy select statement (filters and ORDER BY applied)
            page: 1-indexed page number
            results_per_page: Page size

        Returns:
            OffsetPage with results, result_count, page_count and current_page

        Example:
            stmt = select(Item).order_by(Item.id)
            page = await repo.paginate_offset(session, stmt, page=2, results_per_page=20)
            print(f"Page {page.current_page}/{page.page_count}")
        """
        from keyset_pager.core.pagination import OffsetPage, OffsetPageRequest
        from keyset_pager.core.pagination.schemas import page_count

        request = OffsetPageRequest(page=page, results_per_page=results_per_page)
        stmt = self._statement(statement)

        result_count = await self.count(session, stmt)
        window = LimitOffset.for_page(request.page, request.results_per_page)
        result = await session.execute(window.apply(stmt))
        results = list(result.scalars().all())

        offset_page: OffsetPage[T] = OffsetPage(
            results=results,
            result_count=result_count,
            page_count=page_count(result_count, request.results_per_page),
            current_page=request.page,
        )
        self._lazy.debug(
            lambda: (
                f"db.paginate_offset: {self.model.__name__}(page={page}, per_page={results_per_page}) "
                f"-> {len(results)}/{result_count} items, {offset_page.page_count} pages"
            )
        )
        return offset_page


__all__ = ["BaseRepository"]
