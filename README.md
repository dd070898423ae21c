# icebergmeta

This package gives dataclass models for Iceberg table metadata documents in
format version 2. It parses the JSON into Python objects and writes the objects
back as JSON. A document that is written out and read back in compares equal to
the original object.

The package has no dependencies outside the standard library.

## Installation

```
pip install icebergmeta
```

To install the test extras, run `pip install "icebergmeta[test]"`. The extras
are pytest and hypothesis.

## Reading table metadata

```python
from icebergmeta.table import TableMetadataV2

with open("v2.metadata.json") as handle:
    metadata = TableMetadataV2.from_json(handle.read())

print(metadata.table_uuid)          # a uuid.UUID
print(metadata.location)
print(metadata.current_schema_id)
for spec in metadata.partition_specs:
    for field in spec.fields:
        print(field.name, field.transform.to_json())

assert TableMetadataV2.from_json(metadata.to_json()) == metadata
```

`from_json` takes either `str` or `bytes`. If the JSON is already decoded, use
`from_dict` and `to_dict`, which work on plain dictionaries and use the
kebab-case keys of the document, such as `"last-updated-ms"`.

A malformed document raises `ValueError`. The following are all malformed:

- a `format-version` other than `2`
- a `table-uuid` that is not a valid UUID
- a missing required key
- an integer outside its 32-bit or 64-bit range
- an unknown type, transform, operation, sort direction or null order

When an object is written out, optional fields that are not set appear as
`null`. When a document is read, a `null` value and a missing key are treated
the same way.

## Modules

- `icebergmeta.table` holds `TableMetadataV2` (with `from_json` and `to_json`),
  `MetadataLog` and `SnapshotLog`.
- `icebergmeta.schema` covers schemas and types:
  - `SchemaV2`, `Struct`, `StructField`, `ListType` and `MapType`.
  - `PrimitiveType` with its `PrimitiveKind`. This includes `decimal(p,s)` and
    `fixed[n]`.
  - `NameMappings` and `NameMapping`.
  - `parse_type` converts any type from its JSON form, and `type_to_json`
    converts it back.
  - Struct fields give their type under the key `field_type`.
- `icebergmeta.partition` holds `PartitionSpec`, `PartitionField`, `Transform`
  and `TransformKind`. The transforms are `void`, `identity`, `year`, `month`,
  `day`, `hour`, `bucket[n]` and `truncate[w]`.
- `icebergmeta.sort` holds `SortOrder`, `SortField`, `SortDirection` (`asc` and
  `desc`) and `NullOrder` (`nulls-first` and `nulls-last`).
- `icebergmeta.snapshot` holds `SnapshotV2`, `Summary` and `Operation`. It also
  has `Reference`, whose retention is either `Branch` or `Tag`, and
  `parse_retention`, which chooses between the two by the `type` key.

## Transforms and types

```python
from icebergmeta.partition import Transform
from icebergmeta.schema import PrimitiveType, parse_type

Transform.parse("bucket[16]") == Transform.bucket(16)          # True
Transform.truncate(10).to_json()                               # "truncate[10]"
PrimitiveType.parse("decimal(10,2)") == PrimitiveType.decimal(10, 2)  # True
PrimitiveType.fixed(16).to_json()                              # "fixed[16]"

parse_type({"type": "list", "element-id": 3,
            "element-required": True, "element": "string"})
```

## What it does not do

The package works only on the metadata document. It does not:

- read or write data files, manifests or manifest lists
- talk to a catalog or to object storage
- check that the IDs inside a document agree with each other, for example that
  `current-schema-id` names an existing schema
- support format version 1