"""Partition specs: how partition values are derived from source columns."""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

_U32_MAX = 2**32 - 1
_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1


class TransformKind(str, Enum):
    """The kinds of transformation applied to a source column."""

    VOID = "void"
    IDENTITY = "identity"
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    BUCKET = "bucket"
    TRUNCATE = "truncate"


_PARAMETERISED = {
    TransformKind.BUCKET: re.compile(r"bucket\[(?P<n>\d+)\]"),
    TransformKind.TRUNCATE: re.compile(r"truncate\[(?P<n>\d+)\]"),
}


@dataclass(frozen=True)
class Transform:
    """A transformation producing a partition or sort value from a source column.

    ``argument`` holds the bucket count or the truncation width and is
    ``None`` for every other kind.
    """

    kind: TransformKind
    argument: int | None = None

    def __post_init__(self) -> None:
        kind = TransformKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind in _PARAMETERISED:
            value = self.argument
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U32_MAX:
                raise ValueError(f"{kind.value} transform needs an unsigned 32-bit argument, got {value!r}")
        elif self.argument is not None:
            raise ValueError(f"{kind.value} transform takes no argument")

    @classmethod
    def parse(cls, text: Any) -> Transform:
        """Parse the JSON string form, e.g. ``"day"`` or ``"bucket[16]"``."""
        if not isinstance(text, str):
            raise ValueError(f"transform must be a string, got {text!r}")
        for kind, pattern in _PARAMETERISED.items():
            if text.startswith(kind.value):
                match = pattern.fullmatch(text)
                if match is None:
                    raise ValueError(f"Invalid {kind.value} format {text}")
                value = int(match["n"])
                if value > _U32_MAX:
                    raise ValueError(f"{kind.value} not u32")
                return cls(kind, value)
        try:
            kind = TransformKind(text)
        except ValueError:
            raise ValueError(f"unknown transform {text!r}") from None
        return cls(kind)

    @classmethod
    def bucket(cls, n: int) -> Transform:
        """Hash of the value, modulo ``n``."""
        return cls(TransformKind.BUCKET, n)

    @classmethod
    def truncate(cls, width: int) -> Transform:
        """The value truncated to ``width``."""
        return cls(TransformKind.TRUNCATE, width)

    def to_json(self) -> str:
        """Return the JSON string form of the transform."""
        if self.kind in _PARAMETERISED:
            return f"{self.kind.value}[{self.argument}]"
        return self.kind.value

    def __str__(self) -> str:
        return self.to_json()


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return data[key]


def _int32(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field {key!r} must be a 32-bit integer, got {value!r}")
    return value


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {value!r}")
    return value


@dataclass
class PartitionField:
    """One field of a partition spec."""

    source_id: int
    field_id: int
    name: str
    transform: Transform

    @classmethod
    def from_dict(cls, data: Any) -> PartitionField:
        return cls(
            source_id=_int32(_field(data, "source-id"), "source-id"),
            field_id=_int32(_field(data, "field-id"), "field-id"),
            name=_str(_field(data, "name"), "name"),
            transform=Transform.parse(_field(data, "transform")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "source-id": self.source_id,
            "field-id": self.field_id,
            "name": self.name,
            "transform": self.transform.to_json(),
        }


@dataclass
class PartitionSpec:
    """How partition values are derived from data fields."""

    spec_id: int
    fields: list[PartitionField]

    @classmethod
    def from_dict(cls, data: Any) -> PartitionSpec:
        return cls(
            spec_id=_int32(_field(data, "spec-id"), "spec-id"),
            fields=[PartitionField.from_dict(item) for item in _list(_field(data, "fields"), "fields")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "spec-id": self.spec_id,
            "fields": [item.to_dict() for item in self.fields],
        }