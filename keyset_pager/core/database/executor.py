"""SQLAlchemy query executor for keyset pagination.

Runs the paginator's seek conditions, ordering and limit against a base
``Select`` on an ``AsyncSession``. Two statements are issued per page:

    SELECT ... WHERE <caller filters> AND <seek> ORDER BY <scan order> LIMIT n
    SELECT count(*) FROM (SELECT ... WHERE <caller filters> AND <seek>)

Database errors propagate unchanged; session lifecycle belongs to the caller.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import func, select
from sqlalchemy.orm import QueryableAttribute

from keyset_pager.core.database.exceptions import UnknownFieldError
from keyset_pager.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy import ColumnElement, Select
    from sqlalchemy.ext.asyncio import AsyncSession

    from keyset_pager.core.pagination.order import SortKey
    from keyset_pager.core.pagination.protocols import QueryResult, SeekCondition

_lazy = get_lazy_logger(__name__)


class SQLAlchemyQueryExecutor[T]:
    """Execute paginated queries for a base statement.

    Field names resolve against the primary ORM entity's mapped attributes
    when the statement selects that entity, otherwise against the selected
    columns (labels included). A caller LIMIT or OFFSET on the base statement
    is dropped.

    Statements selecting a single ORM entity return instances; any other
    statement returns result ``Row`` objects.

    Example:
        executor = SQLAlchemyQueryExecutor(session, select(Item).where(Item.active))
        page = await Paginator(executor).paginate("id", first=10)
    """

    __slots__ = ("session", "statement")

    def __init__(self, session: AsyncSession, statement: Select[Any]) -> None:
        """Initialize executor.

        Args:
            session: Database session
            statement: Base select statement (caller filters applied, no pagination)
        """
        self.session = session
        self.statement = statement

    async def execute(
        self,
        conditions: Sequence[SeekCondition],
        order: Sequence[SortKey],
        limit: int | None,
    ) -> QueryResult[T]:
        """Run the page query and its count.

        Raises:
            UnknownFieldError: If a sort field does not resolve on the statement
        """
        from keyset_pager.core.pagination.filters import CursorFilter
        from keyset_pager.core.pagination.protocols import QueryResult

        fields = {key.field for key in order}
        for condition in conditions:
            fields.update(key.field for key in condition.order_by)

        cursor_filter = CursorFilter(
            {field: self.resolve(field) for field in fields},
            order=order,
            conditions=conditions,
            limit=limit,
        )

        # the window replaces any caller LIMIT/OFFSET
        base = self.statement.limit(None).offset(None)
        filtered = cursor_filter.apply_seek(base)
        count_stmt = select(func.count()).select_from(filtered.order_by(None).subquery())
        result_count = (await self.session.execute(count_stmt)).scalar_one()

        page_stmt = cursor_filter.apply(base)
        result = await self.session.execute(page_stmt)
        rows = result.scalars().all() if self._selects_entity() else result.all()

        _lazy.debug(
            lambda: f"db.paginate: {len(rows)} rows (limit={limit}) of {result_count} matching"
        )
        return QueryResult(results=list(rows), result_count=result_count)

    def resolve(self, field: str) -> ColumnElement[Any]:
        """Resolve a field name to a column expression.

        Raises:
            UnknownFieldError: If nothing on the statement matches ``field``
        """
        if self._selects_entity():
            entity = self.statement.column_descriptions[0]["entity"]
            attr = getattr(entity, field, None)
            if isinstance(attr, QueryableAttribute):
                return attr

        # non-entity selects only sort by what they return
        columns = self.statement.selected_columns
        if field in columns:
            return columns[field]

        raise UnknownFieldError(field, source="statement")

    def _selects_entity(self) -> bool:
        descriptions = self.statement.column_descriptions
        if len(descriptions) != 1:
            return False
        entity = descriptions[0].get("entity")
        return entity is not None and descriptions[0].get("expr") is entity


__all__ = ["SQLAlchemyQueryExecutor"]
