"""Sort orders: how the data of a table is sorted."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

from icebergmeta.partition import Transform

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return data[key]


def _int32(data: Any, key: str) -> int:
    value = _field(data, key)
    if isinstance(value, bool) or not isinstance(value, int) or not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field {key!r} must be a 32-bit integer, got {value!r}")
    return value


class SortDirection(str, Enum):
    """Direction in which a field is sorted."""

    ASCENDING = "asc"
    DESCENDING = "desc"


class NullOrder(str, Enum):
    """Where nulls are placed when a field is sorted."""

    FIRST = "nulls-first"
    LAST = "nulls-last"


@dataclass(frozen=True)
class SortField:
    """How one source column takes part in a sort."""

    source_id: int
    transform: Transform
    direction: SortDirection
    null_order: NullOrder

    @classmethod
    def from_dict(cls, data: Any) -> SortField:
        direction = _field(data, "direction")
        null_order = _field(data, "null-order")
        try:
            parsed_direction = SortDirection(direction)
        except ValueError:
            raise ValueError(f"unknown sort direction {direction!r}") from None
        try:
            parsed_null_order = NullOrder(null_order)
        except ValueError:
            raise ValueError(f"unknown null order {null_order!r}") from None
        return cls(
            source_id=_int32(data, "source-id"),
            transform=Transform.parse(_field(data, "transform")),
            direction=parsed_direction,
            null_order=parsed_null_order,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source-id": self.source_id,
            "transform": self.transform.to_json(),
            "direction": self.direction.value,
            "null-order": self.null_order.value,
        }


@dataclass
class SortOrder:
    """An ordered list of sort fields; order id 0 means unsorted."""

    order_id: int
    fields: list[SortField]

    @classmethod
    def from_dict(cls, data: Any) -> SortOrder:
        fields = _field(data, "fields")
        if not isinstance(fields, list):
            raise ValueError(f"field 'fields' must be a list, got {fields!r}")
        return cls(
            order_id=_int32(data, "order-id"),
            fields=[SortField.from_dict(item) for item in fields],
        )

    def to_dict(self) -> dict[str, Any]:
        return {"order-id": self.order_id, "fields": [item.to_dict() for item in self.fields]}