"""Table metadata, version 2: the document describing a whole table."""

from __future__ import annotations

import json
import uuid
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from icebergmeta.partition import PartitionSpec
from icebergmeta.schema import SchemaV2
from icebergmeta.snapshot import Reference, SnapshotV2
from icebergmeta.sort import SortOrder

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1
FORMAT_VERSION = 2

_T = TypeVar("_T")


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


def _str(data: Any, key: str) -> str:
    value = _field(data, key)
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _list_of(value: Any, key: str, parse: Callable[[Any], _T]) -> list[_T]:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {value!r}")
    return [parse(item) for item in value]


def _string_map(value: Any, key: str) -> dict[str, str]:
    value = _mapping(value)
    result: dict[str, str] = {}
    for name, entry in value.items():
        if not isinstance(entry, str):
            raise ValueError(f"entry {name!r} of {key!r} must be a string, got {entry!r}")
        result[name] = entry
    return result


def _uuid(data: Any, key: str) -> uuid.UUID:
    text = _str(data, key)
    try:
        return uuid.UUID(text)
    except ValueError:
        raise ValueError(f"field {key!r} is not a valid UUID: {text!r}") from None


@dataclass
class MetadataLog:
    """An earlier metadata file of the table and when it was written."""

    metadata_file: str
    timestamp_ms: int

    @classmethod
    def from_dict(cls, data: Any) -> MetadataLog:
        return cls(metadata_file=_str(data, "metadata-file"), timestamp_ms=_int64(data, "timestamp-ms"))

    def to_dict(self) -> dict[str, Any]:
        return {"metadata-file": self.metadata_file, "timestamp-ms": self.timestamp_ms}


@dataclass
class SnapshotLog:
    """When a snapshot became the current one."""

    snapshot_id: int
    timestamp_ms: int

    @classmethod
    def from_dict(cls, data: Any) -> SnapshotLog:
        return cls(snapshot_id=_int64(data, "snapshot-id"), timestamp_ms=_int64(data, "timestamp-ms"))

    def to_dict(self) -> dict[str, Any]:
        return {"snapshot-id": self.snapshot_id, "timestamp-ms": self.timestamp_ms}


@dataclass
class TableMetadataV2:
    """Version 2 table metadata."""

    table_uuid: uuid.UUID
    location: str
    last_sequence_number: int
    last_updated_ms: int
    last_column_id: int
    schemas: list[SchemaV2]
    current_schema_id: int
    partition_specs: list[PartitionSpec]
    default_spec_id: int
    last_partition_id: int
    sort_orders: list[SortOrder]
    default_sort_order_id: int
    properties: dict[str, str] | None = None
    current_snapshot_id: int | None = None
    snapshots: list[SnapshotV2] | None = None
    snapshot_log: list[SnapshotLog] | None = None
    metadata_log: list[MetadataLog] | None = None
    refs: dict[str, Reference] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> TableMetadataV2:
        version = _field(data, "format-version")
        if isinstance(version, bool) or not isinstance(version, int) or version != FORMAT_VERSION:
            raise ValueError(f"unsupported format-version {version!r}, expected {FORMAT_VERSION}")
        data = _mapping(data)

        properties = data.get("properties")
        current_snapshot_id = data.get("current-snapshot-id")
        snapshots = data.get("snapshots")
        snapshot_log = data.get("snapshot-log")
        metadata_log = data.get("metadata-log")
        refs = data.get("refs")

        return cls(
            table_uuid=_uuid(data, "table-uuid"),
            location=_str(data, "location"),
            last_sequence_number=_int64(data, "last-sequence-number"),
            last_updated_ms=_int64(data, "last-updated-ms"),
            last_column_id=_int32(data, "last-column-id"),
            schemas=_list_of(_field(data, "schemas"), "schemas", SchemaV2.from_dict),
            current_schema_id=_int32(data, "current-schema-id"),
            partition_specs=_list_of(
                _field(data, "partition-specs"), "partition-specs", PartitionSpec.from_dict
            ),
            default_spec_id=_int32(data, "default-spec-id"),
            last_partition_id=_int32(data, "last-partition-id"),
            properties=None if properties is None else _string_map(properties, "properties"),
            current_snapshot_id=(
                None
                if current_snapshot_id is None
                else _int(current_snapshot_id, "current-snapshot-id", _I64_MIN, _I64_MAX)
            ),
            snapshots=None if snapshots is None else _list_of(snapshots, "snapshots", SnapshotV2.from_dict),
            snapshot_log=(
                None if snapshot_log is None else _list_of(snapshot_log, "snapshot-log", SnapshotLog.from_dict)
            ),
            metadata_log=(
                None if metadata_log is None else _list_of(metadata_log, "metadata-log", MetadataLog.from_dict)
            ),
            sort_orders=_list_of(_field(data, "sort-orders"), "sort-orders", SortOrder.from_dict),
            default_sort_order_id=_int64(data, "default-sort-order-id"),
            refs=(
                None
                if refs is None
                else {name: Reference.from_dict(ref) for name, ref in _mapping(refs).items()}
            ),
        )

    def to_dict(self) -> dict[str, Any]:
        def items(values: list | None) -> list | None:
            return None if values is None else [value.to_dict() for value in values]

        return {
            "format-version": FORMAT_VERSION,
            "table-uuid": str(self.table_uuid),
            "location": self.location,
            "last-sequence-number": self.last_sequence_number,
            "last-updated-ms": self.last_updated_ms,
            "last-column-id": self.last_column_id,
            "schemas": items(self.schemas),
            "current-schema-id": self.current_schema_id,
            "partition-specs": items(self.partition_specs),
            "default-spec-id": self.default_spec_id,
            "last-partition-id": self.last_partition_id,
            "properties": None if self.properties is None else dict(self.properties),
            "current-snapshot-id": self.current_snapshot_id,
            "snapshots": items(self.snapshots),
            "snapshot-log": items(self.snapshot_log),
            "metadata-log": items(self.metadata_log),
            "sort-orders": items(self.sort_orders),
            "default-sort-order-id": self.default_sort_order_id,
            "refs": None if self.refs is None else {name: ref.to_dict() for name, ref in self.refs.items()},
        }

    @classmethod
    def from_json(cls, text: str | bytes) -> TableMetadataV2:
        """Parse a table metadata JSON document."""
        return cls.from_dict(json.loads(text))

    def to_json(self) -> str:
        """Return the table metadata as a JSON document."""
        return json.dumps(self.to_dict())