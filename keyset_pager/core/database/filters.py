"""Query filtering utilities for SQLAlchemy.

These filters work directly with SQLAlchemy statements without hiding the
query. They're utility helpers, not an abstraction layer.

Usage:
    from sqlalchemy import select
    from keyset_pager.core.database.filters import LimitOffset, WhereIfDefined

    stmt = select(Item)
    stmt = WhereIfDefined(Item.field, field_param).apply(stmt)
    stmt = LimitOffset(limit=20, offset=40).apply(stmt)
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from sqlalchemy import ColumnElement, Select


class StatementFilter(ABC):
    """A reusable transformation of a ``Select``.

    Filters never execute anything; ``apply`` returns a new statement and
    leaves the input untouched, so filters compose by chaining.
    """

    @abstractmethod
    def apply(self, statement: Select[Any]) -> Select[Any]: ...


class WhereIfDefined(StatementFilter):
    """Equality filter that is skipped when the value is None.

    Example:
        # Only filters when the query parameter was supplied
        stmt = WhereIfDefined(Item.field, request_field).apply(stmt)
    """

    def __init__(self, column: ColumnElement[Any], value: Any) -> None:
        self.column = column
        self.value = value

    def apply(self, statement: Select[Any]) -> Select[Any]:
        if self.value is None:
            return statement
        return statement.where(self.column == self.value)


class LimitOffset(StatementFilter):
    """Offset pagination window.

    Example:
        stmt = LimitOffset(limit=20, offset=40).apply(stmt)  # page 3
    """

    def __init__(self, limit: int, offset: int = 0) -> None:
        self.limit = limit
        self.offset = offset

    @classmethod
    def for_page(cls, page: int, results_per_page: int) -> LimitOffset:
        """Window for a 1-indexed page."""
        return cls(limit=results_per_page, offset=(page - 1) * results_per_page)

    def apply(self, statement: Select[Any]) -> Select[Any]:
        return statement.limit(self.limit).offset(self.offset)


__all__ = ["LimitOffset", "StatementFilter", "WhereIfDefined"]
