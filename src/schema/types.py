"""
Primitive types - width-specific aliases and the schema type/format tables.

Python only has `int` and `float`, so fixed-width aliases are provided as
`typing.NewType`s. Their canonical name is the bare alias name (e.g. "int32").
"""

from typing import NewType

int8 = NewType("int8", int)
int16 = NewType("int16", int)
int32 = NewType("int32", int)
int64 = NewType("int64", int)
uint8 = NewType("uint8", int)
uint16 = NewType("uint16", int)
uint32 = NewType("uint32", int)
uint64 = NewType("uint64", int)
float32 = NewType("float32", float)
float64 = NewType("float64", float)
byte = NewType("byte", int)
rune = NewType("rune", int)

# NewType -> canonical name
PRIMITIVE_ALIASES = {
    alias: alias.__name__
    for alias in (
        int8, int16, int32, int64,
        uint8, uint16, uint32, uint64,
        float32, float64, byte, rune,
    )
}

PRIMITIVE_NAMES = frozenset([
    "uint8", "uint16", "uint32", "uint64",
    "int", "int8", "int16", "int32", "int64",
    "float", "float32", "float64",
    "bool", "str", "string", "byte", "rune", "bytes",
    "datetime.datetime", "datetime.date", "datetime.time",
    "decimal.Decimal", "uuid.UUID",
])

# see also http://json-schema.org/latest/json-schema-core.html#anchor8
SCHEMA_TYPES = {
    "uint8": "integer",
    "uint16": "integer",
    "uint32": "integer",
    "uint64": "integer",

    "int": "integer",
    "int8": "integer",
    "int16": "integer",
    "int32": "integer",
    "int64": "integer",

    "byte": "integer",
    "rune": "integer",
    "float": "number",
    "float64": "number",
    "float32": "number",
    "decimal.Decimal": "number",
    "bool": "boolean",
    "str": "string",
    "bytes": "string",
    "datetime.datetime": "string",
    "datetime.date": "string",
    "datetime.time": "string",
    "uuid.UUID": "string",
}

SCHEMA_FORMATS = {
    "int": "int64",
    "int32": "int32",
    "int64": "int64",
    "byte": "byte",
    "uint8": "byte",
    "bytes": "byte",
    "float": "double",
    "float64": "double",
    "float32": "float",
    "datetime.datetime": "date-time",
    "datetime.date": "date",
    "uuid.UUID": "uuid",
}


def is_primitive_type(model_name: str) -> bool:
    """True if the canonical name never becomes a referenced Model"""
    return model_name in PRIMITIVE_NAMES


def json_schema_type(model_name: str) -> str:
    """Abstract schema type for a primitive, or the name as is (custom or struct)"""
    return SCHEMA_TYPES.get(model_name, model_name)


def json_schema_format(model_name: str) -> str:
    """Format refinement for a primitive, "" when there is none"""
    return SCHEMA_FORMATS.get(model_name, "")
