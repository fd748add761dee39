"""Cursor encoding and decoding for pagination.

Cursors are opaque strings that encode the position of a row in an
ordered result set: the values of its sort keys, in ordering order.

The cursor format is:
1. JSON object ``{"v": <format version>, "k": [<key values>]}``
2. URL-safe base64 with the padding stripped

Storing the key values as a JSON array keeps the encoding free of
delimiter collisions, whatever the field values contain.

Example cursor payload for ORDER BY created_at, id:
    {"v":1,"k":["2025-01-15T10:30:00+00:00",42]}
"""

from __future__ import annotations

import base64
from collections.abc import Mapping
from datetime import date, datetime, time
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

from keyset_pager.core.database.exceptions import MalformedCursorError, UnknownFieldError
from keyset_pager.core.pagination.order import normalize_order_by

if TYPE_CHECKING:
    from keyset_pager.core.pagination.order import OrderBySource, OrderSpec, SortKey

CURSOR_VERSION = 1

type CursorValue = str | int | float | bool | None


class CursorData(BaseModel):
    """Decoded cursor payload.

    Attributes:
        version: Cursor format version
        values: Serialized sort key values, one per SortKey
    """

    version: int = Field(
        default=CURSOR_VERSION,
        alias="v",
        description="Cursor format version",
    )
    values: tuple[CursorValue, ...] = Field(
        alias="k",
        description="Sort key values in ordering order (JSON scalars only)",
    )

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CursorCodec:
    """Encode and decode pagination cursors.

    Cursors are always produced and consumed against an ``OrderSpec``:
    each SortKey contributes one value, passed through its ``serialize``
    hook on encode and its ``deserialize`` hook on decode.

    Usage:
        order_by = normalize_order_by(["created_at", "id"])

        cursor = CursorCodec.encode(order_by, row)
        created_at, row_id = CursorCodec.decode(order_by, cursor)
    """

    @staticmethod
    def encode(order_by: OrderSpec, row: Any) -> str:
        """Encode the position of ``row`` under ``order_by``.

        Args:
            order_by: Normalized ordering
            row: Mapping, ORM instance, or result Row

        Returns:
            URL-safe base64 cursor string

        Raises:
            UnknownFieldError: If a sort field is missing from the row
        """
        values = tuple(
            _serialize_value(key, read_field(row, key.field)) for key in order_by
        )
        return CursorCodec.dump(CursorData(values=values))

    @staticmethod
    def decode(order_by: OrderSpec, cursor: str) -> tuple[Any, ...]:
        """Decode a cursor into sort key values aligned with ``order_by``.

        Args:
            order_by: Normalized ordering the cursor was produced with
            cursor: Cursor string

        Returns:
            Tuple of values, deserialized per SortKey

        Raises:
            MalformedCursorError: If the cursor is corrupted, of another
                format version, or holds a different number of values than
                ``order_by`` has keys
        """
        data = CursorCodec.load(cursor)

        if len(data.values) != len(order_by):
            raise MalformedCursorError(
                "Cursor does not match the ordering",
                cursor=cursor,
                expected=len(order_by),
                actual=len(data.values),
            )

        try:
            return tuple(
                key.deserialize(value) if key.deserialize else value
                for key, value in zip(order_by, data.values, strict=True)
            )
        except (TypeError, ValueError) as e:
            raise MalformedCursorError(
                f"Cannot deserialize cursor value: {e}", cursor=cursor
            ) from e

    @staticmethod
    def dump(data: CursorData) -> str:
        """Encode cursor payload to an opaque string."""
        json_str = data.model_dump_json(by_alias=True)
        return base64.urlsafe_b64encode(json_str.encode()).decode().rstrip("=")

    @staticmethod
    def load(cursor: str) -> CursorData:
        """Decode an opaque string to its cursor payload.

        Raises:
            MalformedCursorError: If the cursor is invalid or of an unknown version
        """
        try:
            padded = cursor + "=" * (-len(cursor) % 4)
            data = CursorData.model_validate_json(base64.urlsafe_b64decode(padded))
        except ValueError as e:
            raise MalformedCursorError(f"Invalid cursor: {e}", cursor=cursor) from e

        if data.version != CURSOR_VERSION:
            raise MalformedCursorError(
                "Unsupported cursor version",
                cursor=cursor,
                version=data.version,
            )
        return data


def encode_cursor(order_by: OrderBySource, row: Any) -> str:
    """Encode a cursor for ``row`` from a raw order declaration.

    Example:
        cursor = encode_cursor(["field", {"field": "id", "direction": "DESC"}], row)
    """
    return CursorCodec.encode(normalize_order_by(order_by), row)


def read_field(row: Any, field: str) -> Any:
    """Read a sort field from a mapping, ORM instance, or result Row."""
    if isinstance(row, Mapping):
        try:
            return row[field]
        except KeyError:
            raise UnknownFieldError(field, source="row") from None
    try:
        return getattr(row, field)
    except AttributeError:
        raise UnknownFieldError(field, source=type(row).__name__) from None


def _serialize_value(key: SortKey, value: Any) -> Any:
    if key.serialize is not None:
        value = key.serialize(value)
    return _to_json_compatible(value)


def _to_json_compatible(value: Any) -> Any:
    """Serialize a value to JSON-compatible form.

    JSON natives pass through unchanged; temporal values use ISO format and
    everything else its string form.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, Enum):
        return _to_json_compatible(value.value)
    return str(value)


__all__ = ["CURSOR_VERSION", "CursorCodec", "CursorData", "encode_cursor", "read_field"]
