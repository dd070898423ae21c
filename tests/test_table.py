import copy
import json
import uuid

import pytest

from icebergmeta.partition import Transform
from icebergmeta.schema import PrimitiveType
from icebergmeta.snapshot import Branch, Operation, Reference, SnapshotV2, Summary
from icebergmeta.table import MetadataLog, SnapshotLog, TableMetadataV2

TABLE_UUID = "fb072c92-a02b-11e9-ae9c-1bb7bc9eca94"

_FIELD = {"id": 1, "name": "struct_name", "required": True, "field_type": "fixed[1]"}
_SCHEMA = {"schema-id": 1, "type": "struct", "fields": [_FIELD]}
_PARTITION_FIELD = dict(
    zip(("source-id", "field-id", "name", "transform"), (4, 1000, "ts_day", "day"))
)
_METADATA_ENTRY = {"metadata-file": "s3://bucket/.../v1.json", "timestamp-ms": 1515100}

_BASE_DOCUMENT = {
    "format-version": 2,
    "table-uuid": TABLE_UUID,
    "location": "s3://b/wh/data.db/table",
    "last-sequence-number": 1,
    "last-updated-ms": 1515100955770,
    "last-column-id": 1,
    "schemas": [_SCHEMA],
    "current-schema-id": 1,
    "partition-specs": [{"spec-id": 1, "fields": [_PARTITION_FIELD]}],
    "default-spec-id": 1,
    "last-partition-id": 1,
    "properties": {"commit.retry.num-retries": "1"},
    "metadata-log": [_METADATA_ENTRY],
    "sort-orders": [],
    "default-sort-order-id": 0,
}


def table_document():
    return copy.deepcopy(_BASE_DOCUMENT)


def table_json():
    return json.dumps(table_document(), indent=2)


def test_deserialize_table_data_v2():
    metadata = TableMetadataV2.from_json(table_json())
    assert metadata.table_uuid == uuid.UUID(TABLE_UUID)
    assert metadata.location == "s3://b/wh/data.db/table"
    assert metadata.last_updated_ms == 1515100955770
    assert metadata.schemas[0].struct_fields.fields[0].field_type == PrimitiveType.fixed(1)
    assert metadata.partition_specs[0].fields[0].transform == Transform.parse("day")
    assert metadata.properties == {"commit.retry.num-retries": "1"}
    assert metadata.metadata_log == [MetadataLog("s3://bucket/.../v1.json", 1515100)]
    assert metadata.sort_orders == []
    assert metadata.snapshots is None
    assert metadata.refs is None


def test_round_trip():
    metadata = TableMetadataV2.from_json(table_json())
    metadata_two = TableMetadataV2.from_json(metadata.to_json())
    assert metadata == metadata_two


def test_round_trip_with_snapshots_and_refs():
    metadata = TableMetadataV2.from_json(table_json())
    metadata.current_snapshot_id = 5
    metadata.snapshots = [
        SnapshotV2(
            snapshot_id=5,
            sequence_number=1,
            timestamp_ms=10,
            manifest_list="s3://b/m.avro",
            summary=Summary(Operation.APPEND),
        )
    ]
    metadata.snapshot_log = [SnapshotLog(snapshot_id=5, timestamp_ms=10)]
    metadata.refs = {"main": Reference(5, Branch(1, 2, 3))}
    assert TableMetadataV2.from_json(metadata.to_json()) == metadata


def test_to_dict_format_version_and_uuid():
    document = json.loads(TableMetadataV2.from_json(table_json()).to_json())
    assert document["format-version"] == 2
    assert document["table-uuid"] == TABLE_UUID


def test_invalid_table_uuid():
    text = json.dumps({"format-version": 2, "table-uuid": "xxxx"})
    with pytest.raises(ValueError):
        TableMetadataV2.from_json(text)


def test_invalid_uuid_in_full_document():
    document = table_document()
    document["table-uuid"] = "not-a-uuid"
    with pytest.raises(ValueError):
        TableMetadataV2.from_dict(document)


def test_deserialize_table_data_v2_invalid_format_version():
    with pytest.raises(ValueError):
        TableMetadataV2.from_json(json.dumps({"format-version": 1}))


def test_wrong_format_version_in_full_document():
    document = table_document()
    document["format-version"] = 1
    with pytest.raises(ValueError):
        TableMetadataV2.from_dict(document)


def test_log_entries_round_trip():
    entry = SnapshotLog.from_dict({"snapshot-id": 3, "timestamp-ms": 4})
    assert entry == SnapshotLog(3, 4)
    assert entry.to_dict() == {"snapshot-id": 3, "timestamp-ms": 4}
    log = MetadataLog.from_dict({"metadata-file": "s3://b/v2.json", "timestamp-ms": 9})
    assert log.to_dict() == {"metadata-file": "s3://b/v2.json", "timestamp-ms": 9}