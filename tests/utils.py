"""Test utilities and helper functions.

Usage:
    from tests.utils import Item, InMemoryQueryExecutor, ROWS

    executor = InMemoryQueryExecutor(ROWS)
    page = await Paginator(executor).paginate("id", first=2)
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from keyset_pager.core.pagination import QueryResult

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from keyset_pager.core.pagination import SeekCondition, SortKey


class Base(DeclarativeBase):
    """Declarative base for test models."""


class Item(Base):
    """Row shape used across the pagination tests."""

    __tablename__ = "items"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    unique: Mapped[str] = mapped_column(String(32), unique=True)
    field: Mapped[str] = mapped_column(String(32))
    created_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    def as_dict(self) -> dict[str, Any]:
        return {"id": self.id, "unique": self.unique, "field": self.field}


# two "foo" rows around one "bar"; ids follow insertion order
A = {"id": 1, "unique": "a", "field": "foo"}
B = {"id": 2, "unique": "b", "field": "bar"}
C = {"id": 3, "unique": "c", "field": "foo"}
ROWS = [A, B, C]


def ids(rows: Iterable[Any]) -> list[int]:
    """Ids of dict rows or model instances, in order."""
    return [row["id"] if isinstance(row, dict) else row.id for row in rows]


def _is_past(row: dict[str, Any], condition: SeekCondition) -> bool:
    """Lexicographic comparison of a row against a seek condition."""
    for key, value in zip(condition.order_by, condition.values, strict=True):
        current = row[key.field]
        if current == value:
            continue
        after = current > value if key.ascending else current < value
        return after if condition.is_greater_than else not after
    return False


class InMemoryQueryExecutor:
    """QueryExecutor over a list of dict rows.

    Records every call so tests can assert on the plan the paginator sent.
    """

    def __init__(self, rows: Iterable[dict[str, Any]]) -> None:
        self.rows = list(rows)
        self.calls: list[tuple[tuple[SeekCondition, ...], tuple[SortKey, ...], int | None]] = []

    async def execute(
        self,
        conditions: Sequence[SeekCondition],
        order: Sequence[SortKey],
        limit: int | None,
    ) -> QueryResult[dict[str, Any]]:
        self.calls.append((tuple(conditions), tuple(order), limit))

        matching = [row for row in self.rows if all(_is_past(row, c) for c in conditions)]
        # stable sorts, least significant key first
        for key in reversed(order):
            matching.sort(key=lambda row, f=key.field: row[f], reverse=not key.ascending)

        results = matching if limit is None else matching[:limit]
        return QueryResult(results=results, result_count=len(matching))


class FailingQueryExecutor:
    """QueryExecutor that raises the given error on every call."""

    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls = 0

    async def execute(self, conditions: Any, order: Any, limit: Any) -> QueryResult[Any]:
        self.calls += 1
        raise self.error
