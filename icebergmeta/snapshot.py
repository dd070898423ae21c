"""Snapshots of a table and the named references (branches and tags) to them."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


def _mapping(data: Any) -> Mapping:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    return data


def _field(data: Any, key: str) -> Any:
    data = _mapping(data)
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return data[key]


def _int(value: Any, key: str, low: int, high: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"field {key!r} must be an integer in [{low}, {high}], got {value!r}")
    return value


def _int32(data: Any, key: str) -> int:
    return _int(_field(data, key), key, _I32_MIN, _I32_MAX)


def _int64(data: Any, key: str) -> int:
    return _int(_field(data, key), key, _I64_MIN, _I64_MAX)


def _optional_int64(data: Any, key: str) -> int | None:
    value = _mapping(data).get(key)
    return None if value is None else _int(value, key, _I64_MIN, _I64_MAX)


class Operation(str, Enum):
    """The kind of change a snapshot made, letting readers skip some snapshots."""

    APPEND = "append"
    REPLACE = "replace"
    OVERWRITE = "overwrite"
    DELETE = "delete"


@dataclass
class Summary:
    """The operation of a snapshot together with any other summary entries."""

    operation: Operation | None = None
    other: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> Summary:
        data = _mapping(data)
        raw = data.get("operation")
        try:
            operation = None if raw is None else Operation(raw)
        except ValueError:
            raise ValueError(f"unknown operation {raw!r}") from None
        other: dict[str, str] = {}
        for key, value in data.items():
            if key == "operation":
                continue
            if not isinstance(value, str):
                raise ValueError(f"summary entry {key!r} must be a string, got {value!r}")
            other[key] = value
        return cls(operation=operation, other=other)

    def to_dict(self) -> dict[str, Any]:
        return {
            "operation": None if self.operation is None else self.operation.value,
            **self.other,
        }


@dataclass
class SnapshotV2:
    """A version 2 snapshot pointing at its manifest list."""

    snapshot_id: int
    sequence_number: int
    timestamp_ms: int
    manifest_list: str
    summary: Summary
    parent_snapshot_id: int | None = None
    schema_id: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SnapshotV2:
        manifest_list = _field(data, "manifest-list")
        if not isinstance(manifest_list, str):
            raise ValueError(f"field 'manifest-list' must be a string, got {manifest_list!r}")
        return cls(
            snapshot_id=_int64(data, "snapshot-id"),
            parent_snapshot_id=_optional_int64(data, "parent-snapshot-id"),
            sequence_number=_int64(data, "sequence-number"),
            timestamp_ms=_int64(data, "timestamp-ms"),
            manifest_list=manifest_list,
            summary=Summary.from_dict(_field(data, "summary")),
            schema_id=_optional_int64(data, "schema-id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "snapshot-id": self.snapshot_id,
            "parent-snapshot-id": self.parent_snapshot_id,
            "sequence-number": self.sequence_number,
            "timestamp-ms": self.timestamp_ms,
            "manifest-list": self.manifest_list,
            "summary": self.summary.to_dict(),
            "schema-id": self.schema_id,
        }


@dataclass(frozen=True)
class Branch:
    """Retention policy of a branch reference."""

    min_snapshots_to_keep: int
    max_snapshot_age_ms: int
    max_ref_age_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "branch",
            "min-snapshots-to-keep": self.min_snapshots_to_keep,
            "max-snapshot-age-ms": self.max_snapshot_age_ms,
            "max-ref-age-ms": self.max_ref_age_ms,
        }


@dataclass(frozen=True)
class Tag:
    """Retention policy of a tag reference."""

    max_ref_age_ms: int

    def to_dict(self) -> dict[str, Any]:
        return {"type": "tag", "max-ref-age-ms": self.max_ref_age_ms}


Retention = Union[Branch, Tag]


def parse_retention(data: Any) -> Retention:
    """Parse a retention policy, choosing the variant by its ``type`` entry."""
    kind = _field(data, "type")
    if kind == "branch":
        return Branch(
            min_snapshots_to_keep=_int32(data, "min-snapshots-to-keep"),
            max_snapshot_age_ms=_int64(data, "max-snapshot-age-ms"),
            max_ref_age_ms=_int64(data, "max-ref-age-ms"),
        )
    if kind == "tag":
        return Tag(max_ref_age_ms=_int64(data, "max-ref-age-ms"))
    raise ValueError(f"unknown retention type {kind!r}, expected 'branch' or 'tag'")


@dataclass
class Reference:
    """A named pointer to a snapshot, either a branch or a tag."""

    snapshot_id: int
    retention: Retention

    @classmethod
    def from_dict(cls, data: Any) -> Reference:
        return cls(snapshot_id=_int64(data, "snapshot-id"), retention=parse_retention(data))

    def to_dict(self) -> dict[str, Any]:
        return {"snapshot-id": self.snapshot_id, **self.retention.to_dict()}