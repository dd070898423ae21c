"""Table schemas: named columns whose types are primitives, structs, lists or maps.

A whole table metadata document can be read with
``icebergmeta.table.TableMetadataV2.from_json``; this module models the
``schemas`` part of it.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

_I32_MIN = -(2**31)
_I32_MAX = 2**31 - 1
_U8_MAX = 2**8 - 1
_U64_MAX = 2**64 - 1

_DECIMAL = re.compile(r"decimal\((?P<p>\d+),(?P<s>\d+)\)")
_FIXED = re.compile(r"fixed\[(?P<l>\d+)\]")


class PrimitiveKind(str, Enum):
    """The primitive types a schema field may have."""

    BOOLEAN = "boolean"
    INT = "int"
    LONG = "long"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATE = "date"
    TIME = "time"
    TIMESTAMP = "timestamp"
    TIMESTAMPZ = "timestampz"
    STRING = "string"
    UUID = "uuid"
    FIXED = "fixed"
    BINARY = "binary"


def _check_int(value: Any, what: str, low: int, high: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or not low <= value <= high:
        raise ValueError(f"{what} must be an integer in [{low}, {high}], got {value!r}")


@dataclass(frozen=True)
class PrimitiveType:
    """A primitive type; decimals carry precision and scale, fixed carries a length."""

    kind: PrimitiveKind
    precision: int | None = None
    scale: int | None = None
    length: int | None = None

    def __post_init__(self) -> None:
        kind = PrimitiveKind(self.kind)
        object.__setattr__(self, "kind", kind)
        if kind is PrimitiveKind.DECIMAL:
            _check_int(self.precision, "precision", _I32_MIN, _I32_MAX)
            _check_int(self.scale, "scale", 0, _U8_MAX)
            if self.length is not None:
                raise ValueError("decimal takes no length")
        elif kind is PrimitiveKind.FIXED:
            _check_int(self.length, "length", 0, _U64_MAX)
            if self.precision is not None or self.scale is not None:
                raise ValueError("fixed takes no precision or scale")
        elif (self.precision, self.scale, self.length) != (None, None, None):
            raise ValueError(f"{kind.value} takes no parameters")

    @classmethod
    def parse(cls, text: Any) -> PrimitiveType:
        """Parse the JSON string form, e.g. ``"long"``, ``"decimal(9,2)"``, ``"fixed[16]"``."""
        if not isinstance(text, str):
            raise ValueError(f"primitive type must be a string, got {text!r}")
        if text.startswith("decimal"):
            match = _DECIMAL.fullmatch(text)
            if match is None:
                raise ValueError(f"Invalid decimal format {text}")
            precision, scale = int(match["p"]), int(match["s"])
            if precision > _I32_MAX:
                raise ValueError("precision not i32")
            if scale > _U8_MAX:
                raise ValueError("scale not u8")
            return cls.decimal(precision, scale)
        if text.startswith("fixed"):
            match = _FIXED.fullmatch(text)
            if match is None:
                raise ValueError(f"Invalid fixed format {text}")
            length = int(match["l"])
            if length > _U64_MAX:
                raise ValueError("length not u64")
            return cls.fixed(length)
        try:
            kind = PrimitiveKind(text)
        except ValueError:
            raise ValueError(f"unknown primitive type {text!r}") from None
        return cls(kind)

    @classmethod
    def decimal(cls, precision: int, scale: int) -> PrimitiveType:
        return cls(PrimitiveKind.DECIMAL, precision=precision, scale=scale)

    @classmethod
    def fixed(cls, length: int) -> PrimitiveType:
        return cls(PrimitiveKind.FIXED, length=length)

    def to_json(self) -> str:
        """Return the JSON string form of the type."""
        if self.kind is PrimitiveKind.DECIMAL:
            return f"decimal({self.precision},{self.scale})"
        if self.kind is PrimitiveKind.FIXED:
            return f"fixed[{self.length}]"
        return self.kind.value

    def __str__(self) -> str:
        return self.to_json()


def _field(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"missing field {key!r}")
    return data[key]


def _optional(data: Any, key: str) -> Any:
    if not isinstance(data, Mapping):
        raise ValueError(f"expected an object, got {type(data).__name__}")
    return data.get(key)


def _int32(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not _I32_MIN <= value <= _I32_MAX:
        raise ValueError(f"field {key!r} must be a 32-bit integer, got {value!r}")
    return value


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"field {key!r} must be a boolean, got {value!r}")
    return value


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string, got {value!r}")
    return value


def _list(value: Any, key: str) -> list:
    if not isinstance(value, list):
        raise ValueError(f"field {key!r} must be a list, got {value!r}")
    return value


def parse_type(data: Any) -> AllType:
    """Parse any schema type: a primitive string or a struct, list or map object."""
    if isinstance(data, str):
        return PrimitiveType.parse(data)
    if isinstance(data, Mapping):
        for candidate in (Struct, ListType, MapType):
            try:
                return candidate.from_dict(data)
            except ValueError:
                continue
    raise ValueError(f"data did not match any schema type: {data!r}")


def type_to_json(value: AllType) -> Any:
    """Return the JSON form of any schema type."""
    if isinstance(value, PrimitiveType):
        return value.to_json()
    return value.to_dict()


@dataclass
class StructField:
    """A named, typed field of a struct."""

    id: int
    name: str
    required: bool
    field_type: AllType
    doc: str | None = None

    @classmethod
    def from_dict(cls, data: Any) -> StructField:
        doc = _optional(data, "doc")
        return cls(
            id=_int32(_field(data, "id"), "id"),
            name=_str(_field(data, "name"), "name"),
            required=_bool(_field(data, "required"), "required"),
            field_type=parse_type(_field(data, "field_type")),
            doc=None if doc is None else _str(doc, "doc"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "required": self.required,
            "field_type": type_to_json(self.field_type),
            "doc": self.doc,
        }


@dataclass
class Struct:
    """A tuple of named, typed fields."""

    fields: list[StructField]

    @classmethod
    def from_dict(cls, data: Any) -> Struct:
        return cls(fields=[StructField.from_dict(item) for item in _list(_field(data, "fields"), "fields")])

    def to_dict(self) -> dict[str, Any]:
        return {"type": "struct", "fields": [item.to_dict() for item in self.fields]}


@dataclass
class ListType:
    """A list whose elements all have one type."""

    element_id: int
    element_required: bool
    element: AllType

    @classmethod
    def from_dict(cls, data: Any) -> ListType:
        return cls(
            element_id=_int32(_field(data, "element-id"), "element-id"),
            element_required=_bool(_field(data, "element-required"), "element-required"),
            element=parse_type(_field(data, "element")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "list",
            "element-id": self.element_id,
            "element-required": self.element_required,
            "element": type_to_json(self.element),
        }


@dataclass
class MapType:
    """A collection of key-value pairs with a key type and a value type."""

    key_id: int
    key: AllType
    value_id: int
    value_required: bool
    value: AllType

    @classmethod
    def from_dict(cls, data: Any) -> MapType:
        return cls(
            key_id=_int32(_field(data, "key-id"), "key-id"),
            key=parse_type(_field(data, "key")),
            value_id=_int32(_field(data, "value-id"), "value-id"),
            value_required=_bool(_field(data, "value-required"), "value-required"),
            value=parse_type(_field(data, "value")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": "map",
            "key-id": self.key_id,
            "key": type_to_json(self.key),
            "value-id": self.value_id,
            "value-required": self.value_required,
            "value": type_to_json(self.value),
        }


AllType = Union[PrimitiveType, Struct, ListType, MapType]


@dataclass
class NameMapping:
    """Fallback field id for a set of names, with optional child mappings."""

    field_id: int | None
    names: list[str]
    fields: list[NameMapping] | None = None

    @classmethod
    def from_dict(cls, data: Any) -> NameMapping:
        field_id = _optional(data, "field-id")
        fields = _optional(data, "fields")
        return cls(
            field_id=None if field_id is None else _int32(field_id, "field-id"),
            names=[_str(name, "names") for name in _list(_field(data, "names"), "names")],
            fields=None if fields is None else [cls.from_dict(item) for item in _list(fields, "fields")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "field-id": self.field_id,
            "names": list(self.names),
            "fields": None if self.fields is None else [item.to_dict() for item in self.fields],
        }


@dataclass
class NameMappings:
    """The default name mappings of a schema."""

    default: list[NameMapping]

    @classmethod
    def from_dict(cls, data: Any) -> NameMappings:
        return cls(default=[NameMapping.from_dict(item) for item in _list(_field(data, "default"), "default")])

    def to_dict(self) -> dict[str, Any]:
        return {"default": [item.to_dict() for item in self.default]}


@dataclass
class SchemaV2:
    """Names and types of the fields in a table."""

    schema_id: int
    struct_fields: Struct
    identifier_field_ids: list[int] | None = None
    name_mapping: NameMappings | None = None

    @classmethod
    def from_dict(cls, data: Any) -> SchemaV2:
        ids = _optional(data, "identifier-field-ids")
        mapping = _optional(data, "name-mapping")
        return cls(
            schema_id=_int32(_field(data, "schema-id"), "schema-id"),
            struct_fields=Struct.from_dict(data),
            identifier_field_ids=(
                None if ids is None
                else [_int32(item, "identifier-field-ids") for item in _list(ids, "identifier-field-ids")]
            ),
            name_mapping=None if mapping is None else NameMappings.from_dict(mapping),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema-id": self.schema_id,
            "identifier-field-ids": None if self.identifier_field_ids is None else list(self.identifier_field_ids),
            "name-mapping": None if self.name_mapping is None else self.name_mapping.to_dict(),
            **self.struct_fields.to_dict(),
        }