import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from icebergmeta.partition import PartitionField, PartitionSpec, Transform, TransformKind

ALL_TRANSFORMS = [
    Transform(TransformKind.VOID),
    Transform(TransformKind.IDENTITY),
    Transform(TransformKind.YEAR),
    Transform(TransformKind.MONTH),
    Transform(TransformKind.DAY),
    Transform(TransformKind.HOUR),
    Transform.bucket(10),
    Transform.truncate(10),
]


def test_partition_field():
    data = """
        {
            "source-id": 4,
            "field-id": 1000,
            "name": "ts_day",
            "transform": "day"
        }
    """
    field = PartitionField.from_dict(json.loads(data))
    assert field.source_id == 4
    assert field.field_id == 1000
    assert field.name == "ts_day"
    assert field.transform == Transform(TransformKind.DAY)


@pytest.mark.parametrize("transform", ALL_TRANSFORMS)
def test_all_transforms(transform):
    field = PartitionField(source_id=4, field_id=1000, name="ts_day", transform=transform)
    text = json.dumps(field.to_dict())
    result = PartitionField.from_dict(json.loads(text))
    assert result.source_id == 4
    assert result.field_id == 1000
    assert result.name == "ts_day"
    assert result.transform == transform


@pytest.mark.parametrize(
    "transform, expected",
    [
        (Transform.bucket(10), "bucket[10]"),
        (Transform.truncate(3), "truncate[3]"),
        (Transform(TransformKind.HOUR), "hour"),
        (Transform(TransformKind.VOID), "void"),
    ],
)
def test_to_json(transform, expected):
    assert transform.to_json() == expected
    assert str(transform) == expected


def test_parse_bucket_and_truncate():
    assert Transform.parse("bucket[16]") == Transform(TransformKind.BUCKET, 16)
    assert Transform.parse("truncate[4294967295]").argument == 4294967295


@pytest.mark.parametrize(
    "text",
    ["bucket", "bucket[x]", "bucket[]", "bucket[-1]", "bucket[4294967296]", "truncate[1.5]",
     "bucket[4]\n", "Day", "weekly", ""],
)
def test_parse_invalid(text):
    with pytest.raises(ValueError):
        Transform.parse(text)


def test_parse_non_string():
    with pytest.raises(ValueError):
        Transform.parse(4)


def test_constructor_validation():
    with pytest.raises(ValueError):
        Transform(TransformKind.BUCKET)
    with pytest.raises(ValueError):
        Transform(TransformKind.DAY, 3)
    with pytest.raises(ValueError):
        Transform.truncate(2**32)


def test_kind_from_string():
    assert Transform("month").kind is TransformKind.MONTH


@given(st.integers(min_value=0, max_value=2**32 - 1))
def test_bucket_round_trip(n):
    assert Transform.parse(Transform.bucket(n).to_json()) == Transform.bucket(n)


def test_partition_spec_round_trip():
    data = {
        "spec-id": 1,
        "fields": [
            {"source-id": 4, "field-id": 1000, "name": "ts_day", "transform": "day"},
            {"source-id": 1, "field-id": 1001, "name": "id_bucket", "transform": "bucket[16]"},
        ],
    }
    spec = PartitionSpec.from_dict(data)
    assert spec.spec_id == 1
    assert [f.name for f in spec.fields] == ["ts_day", "id_bucket"]
    assert spec.to_dict() == data
    assert PartitionSpec.from_dict(json.loads(json.dumps(spec.to_dict()))) == spec


def test_partition_field_missing_key():
    with pytest.raises(ValueError, match="field-id"):
        PartitionField.from_dict({"source-id": 4, "name": "x", "transform": "day"})


def test_partition_field_bad_types():
    with pytest.raises(ValueError):
        PartitionField.from_dict({"source-id": "4", "field-id": 1, "name": "x", "transform": "day"})
    with pytest.raises(ValueError):
        PartitionField.from_dict({"source-id": 2**31, "field-id": 1, "name": "x", "transform": "day"})


def test_partition_spec_not_an_object():
    with pytest.raises(ValueError):
        PartitionSpec.from_dict([1, 2])