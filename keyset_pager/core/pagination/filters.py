"""Keyset seek conditions for SQLAlchemy queries.

Instead of OFFSET, keyset pagination filters with a WHERE clause that
selects the rows sorting strictly after (or before) the cursor's key tuple.

For ORDER BY (a ASC, b DESC, c ASC) and a cursor at (v1, v2, v3), the rows
after the cursor are:

    (a > v1)
    OR (a = v1 AND b < v2)
    OR (a = v1 AND b = v2 AND c > v3)

One disjunct per position at which a row can first diverge from the cursor
tuple. The comparison at each position is ``>`` when the key's declared
direction agrees with the seek direction and ``<`` otherwise.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any
from uuid import UUID

from sqlalchemy import and_, or_

from keyset_pager.core.database.exceptions import MalformedCursorError, UnknownFieldError
from keyset_pager.core.database.filters import StatementFilter

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy import ColumnElement, Select

    from keyset_pager.core.pagination.order import OrderSpec, SortKey
    from keyset_pager.core.pagination.protocols import SeekCondition


def seeks_greater(key: SortKey, *, is_greater_than: bool) -> bool:
    """Whether ``key`` is compared with ``>`` for the given seek direction."""
    return key.ascending == is_greater_than


def build_seek_condition(
    columns: Sequence[ColumnElement[Any]],
    values: Sequence[Any],
    order_by: OrderSpec,
    *,
    is_greater_than: bool,
) -> ColumnElement[bool]:
    """Build the lexicographic tuple comparison against a cursor.

    Args:
        columns: Column per SortKey, aligned with ``order_by``
        values: Cursor values, aligned with ``order_by``
        order_by: Declared ordering
        is_greater_than: ``True`` selects rows after the cursor in
            presentation order, ``False`` rows before it

    Returns:
        OR of one disjunct per prefix length

    Raises:
        MalformedCursorError: If the three sequences differ in length
    """
    if not len(columns) == len(values) == len(order_by):
        raise MalformedCursorError(
            "Cursor does not match the ordering",
            expected=len(order_by),
            actual=len(values),
        )

    disjuncts: list[ColumnElement[bool]] = []
    for i, key in enumerate(order_by):
        equalities = [columns[j] == values[j] for j in range(i)]
        if seeks_greater(key, is_greater_than=is_greater_than):
            compare = columns[i] > values[i]
        else:
            compare = columns[i] < values[i]
        disjuncts.append(and_(*equalities, compare) if equalities else compare)

    return or_(*disjuncts)


def coerce_cursor_value(column: ColumnElement[Any], value: Any) -> Any:
    """Convert a decoded cursor value to the column's Python type.

    Default cursor serialization turns datetimes, UUIDs and decimals into
    strings; this turns them back so comparisons bind with the right type.
    Values already of the right type, and columns without a known Python
    type, pass through unchanged.
    """
    if value is None:
        return None

    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value

    if isinstance(value, python_type):
        return value

    try:
        if python_type is datetime and isinstance(value, str):
            return datetime.fromisoformat(value)
        if python_type is date and isinstance(value, str):
            return date.fromisoformat(value)
        if python_type is time and isinstance(value, str):
            return time.fromisoformat(value)
        if python_type is UUID and isinstance(value, str):
            return UUID(value)
        if python_type is Decimal:
            return Decimal(str(value))
        if python_type in (int, float) and isinstance(value, str):
            return python_type(value)
    except (ValueError, InvalidOperation) as e:
        raise MalformedCursorError(
            f"Cursor value {value!r} is not a valid {python_type.__name__}"
        ) from e

    return value


class CursorFilter(StatementFilter):
    """Apply keyset pagination to a SQLAlchemy query.

    Adds, in order:
    1. One seek condition per cursor (after/before), ANDed with the
       statement's existing WHERE clauses
    2. ORDER BY for the scan ordering (replacing any existing ORDER BY)
    3. LIMIT, when one is given

    Example:
        stmt = CursorFilter(
            {"created_at": Item.created_at, "id": Item.id},
            order=normalize_order_by([{"field": "created_at", "direction": "DESC"}, "id"]),
            conditions=[SeekCondition(order_by, decoded_after, is_greater_than=True)],
            limit=50,
        ).apply(select(Item))

    Attributes:
        columns: Column per field name
        order: Scan ordering (effective directions)
        conditions: Seek conditions with decoded cursor values
        limit: Row limit (None for no limit)
    """

    def __init__(
        self,
        columns: Mapping[str, ColumnElement[Any]],
        *,
        order: Sequence[SortKey],
        conditions: Sequence[SeekCondition] = (),
        limit: int | None = None,
    ) -> None:
        self.columns = columns
        self.order = order
        self.conditions = conditions
        self.limit = limit

    def apply(self, statement: Select[Any]) -> Select[Any]:
        """Apply seek conditions, ordering and limit to statement."""
        statement = self.apply_seek(statement)
        statement = self.apply_ordering(statement)
        if self.limit is not None:
            statement = statement.limit(self.limit)
        return statement

    def apply_seek(self, statement: Select[Any]) -> Select[Any]:
        """Apply only the seek conditions (used for the count query)."""
        for condition in self.conditions:
            statement = statement.where(self.seek_clause(condition))
        return statement

    def apply_ordering(self, statement: Select[Any]) -> Select[Any]:
        """Apply ORDER BY for the scan ordering."""
        statement = statement.order_by(None)
        for key in self.order:
            column = self._column(key.field)
            statement = statement.order_by(column.asc() if key.ascending else column.desc())
        return statement

    def seek_clause(self, condition: SeekCondition) -> ColumnElement[bool]:
        """Build the WHERE clause for one seek condition."""
        columns = [self._column(key.field) for key in condition.order_by]
        values = [
            coerce_cursor_value(column, value)
            for column, value in zip(columns, condition.values, strict=False)
        ]
        return build_seek_condition(
            columns,
            values,
            condition.order_by,
            is_greater_than=condition.is_greater_than,
        )

    def _column(self, field: str) -> ColumnElement[Any]:
        try:
            return self.columns[field]
        except KeyError:
            raise UnknownFieldError(field, source="statement") from None


__all__ = [
    "CursorFilter",
    "build_seek_condition",
    "coerce_cursor_value",
    "seeks_greater",
]
