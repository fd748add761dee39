"""Query executor contract used by the paginator.

The paginator never talks to a database directly. It hands a
``QueryExecutor`` the seek conditions, the scan ordering and the row limit,
and gets back the rows plus the number of rows matching the conditions
with the limit ignored.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from keyset_pager.core.pagination.order import OrderSpec, SortKey


@dataclass(frozen=True, slots=True)
class SeekCondition:
    """Select rows strictly after (or before) a key tuple.

    Attributes:
        order_by: Declared ordering the values are aligned with
        values: Decoded cursor values, one per SortKey
        is_greater_than: ``True`` for rows after the tuple in presentation
            order, ``False`` for rows before it
    """

    order_by: OrderSpec
    values: tuple[Any, ...]
    is_greater_than: bool


@dataclass(frozen=True, slots=True)
class QueryResult[T]:
    """Rows returned by an executor.

    Attributes:
        results: Rows in scan order, at most ``limit`` of them
        result_count: Rows matching the conditions, ignoring the limit
    """

    results: Sequence[T]
    result_count: int


@runtime_checkable
class QueryExecutor[T](Protocol):
    """Runs one filtered, ordered, limited query plus its count."""

    async def execute(
        self,
        conditions: Sequence[SeekCondition],
        order: Sequence[SortKey],
        limit: int | None,
    ) -> QueryResult[T]:
        """Run the query.

        Args:
            conditions: Seek conditions, combined with AND
            order: Scan ordering with effective directions
            limit: Maximum rows to return (None for no limit)

        Returns:
            QueryResult with rows and the unlimited match count
        """
        ...


__all__ = ["QueryExecutor", "QueryResult", "SeekCondition"]
