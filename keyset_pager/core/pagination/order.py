"""Sort order declarations.

An order declaration may be a field name, a descriptor mapping, a
``SortKey``, or a list mixing those forms:

    "id"
    {"field": "created_at", "direction": "DESC"}
    ["field", {"field": "id", "direction": "DESC"}]

``normalize_order_by`` turns any of these into an ``OrderSpec``: a tuple of
``SortKey`` with the primary key first and tie-breakers after. Field names
are not checked here; an unknown field surfaces when the statement is built.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, Literal

from keyset_pager.core.database.exceptions import InvalidOrderSpecError


@dataclass(frozen=True, slots=True)
class SortKey:
    """One axis of a multi-key ordering.

    Attributes:
        field: Column or attribute name
        ascending: Declared direction (``False`` for DESC)
        serialize: Optional hook turning the row value into its cursor form
        deserialize: Optional hook turning the cursor form back into a value
    """

    field: str
    ascending: bool = True
    serialize: Callable[[Any], Any] | None = None
    deserialize: Callable[[Any], Any] | None = None

    @property
    def direction(self) -> Literal["asc", "desc"]:
        return "asc" if self.ascending else "desc"

    def flipped(self) -> SortKey:
        """Same key scanned in the opposite direction."""
        return replace(self, ascending=not self.ascending)


OrderSpec = tuple[SortKey, ...]

type OrderByItem = str | SortKey | Mapping[str, Any]
type OrderBySource = OrderByItem | Sequence[OrderByItem]


def normalize_order_by(raw: OrderBySource) -> OrderSpec:
    """Normalize an order declaration into an ``OrderSpec``.

    Args:
        raw: Field name, descriptor, SortKey, or a list of those

    Returns:
        Tuple of SortKey in declaration order

    Raises:
        InvalidOrderSpecError: If the declaration is empty or not one of the
            supported shapes

    Example:
        spec = normalize_order_by(["field", {"field": "id", "direction": "DESC"}])
        # (SortKey(field="field"), SortKey(field="id", ascending=False))
    """
    if isinstance(raw, (str, SortKey, Mapping)):
        items: list[Any] = [raw]
    elif isinstance(raw, Sequence):
        items = list(raw)
    else:
        raise InvalidOrderSpecError(
            f"Unsupported order declaration of type {type(raw).__name__}",
            order_by=raw,
        )

    if not items:
        raise InvalidOrderSpecError("Order declaration must name at least one field")

    return tuple(_to_sort_key(item) for item in items)


def _to_sort_key(item: Any) -> SortKey:
    if isinstance(item, SortKey):
        return item
    if isinstance(item, str):
        return SortKey(field=item)
    if isinstance(item, Mapping):
        if "field" not in item:
            raise InvalidOrderSpecError("Sort descriptor is missing 'field'", order_by=dict(item))
        direction = item.get("direction") or "ASC"
        return SortKey(
            field=item["field"],
            ascending=str(direction).upper() != "DESC",
            serialize=item.get("serialize"),
            deserialize=item.get("deserialize"),
        )
    raise InvalidOrderSpecError(
        f"Unsupported sort key of type {type(item).__name__}",
        order_by=item,
    )


def scan_order(order_by: OrderSpec, *, is_ascending: bool) -> OrderSpec:
    """Effective ordering for a scan; every key flips when scanning backward."""
    if is_ascending:
        return order_by
    return tuple(key.flipped() for key in order_by)


__all__ = [
    "OrderBySource",
    "OrderSpec",
    "SortKey",
    "normalize_order_by",
    "scan_order",
]
