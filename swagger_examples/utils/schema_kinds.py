"""Schema kind classification for Swagger/OpenAPI schema nodes.

Maps the loosely-typed schema dictionaries found in API descriptions onto a
small set of tagged kinds so example synthesis can dispatch on one value
instead of probing individual keys.
"""

from enum import Enum
from typing import Any


class SchemaKind(Enum):
    """Tagged kinds a schema node can take."""

    REFERENCE = "reference"
    STRING = "string"
    INTEGER32 = "integer32"
    INTEGER64 = "integer64"
    DOUBLE = "double"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    UNTYPED = "untyped"

    @property
    def is_primitive(self) -> bool:
        """True for kinds that never recurse."""
        return self in PRIMITIVE_KINDS


PRIMITIVE_KINDS = frozenset(
    {
        SchemaKind.STRING,
        SchemaKind.INTEGER32,
        SchemaKind.INTEGER64,
        SchemaKind.DOUBLE,
        SchemaKind.BOOLEAN,
    },
)

# Shorthand type names used by some generators alongside type/format pairs
_SHORTHAND_TYPES = {
    "integer(32)": SchemaKind.INTEGER32,
    "integer(64)": SchemaKind.INTEGER64,
    "double": SchemaKind.DOUBLE,
    "boolean": SchemaKind.BOOLEAN,
    "array": SchemaKind.ARRAY,
}

_INTEGER_FORMATS = {
    "int32": SchemaKind.INTEGER32,
    "int64": SchemaKind.INTEGER64,
}


def classify(node: dict[str, Any]) -> SchemaKind:
    """Classify a schema node.

    A ``$ref`` wins over everything else. A node without ``type`` is
    UNTYPED. Any type not recognised as a primitive or array is treated as
    an object.

    Args:
        node: Schema node dictionary

    Returns:
        The node's SchemaKind
    """
    if isinstance(node.get("$ref"), str):
        return SchemaKind.REFERENCE

    schema_type = node.get("type")
    if not schema_type or not isinstance(schema_type, str):
        return SchemaKind.UNTYPED

    if schema_type.startswith("string"):
        return SchemaKind.STRING

    if schema_type == "integer":
        schema_format = node.get("format")
        if isinstance(schema_format, str):
            return _INTEGER_FORMATS.get(schema_format, SchemaKind.OBJECT)
        return SchemaKind.OBJECT

    return _SHORTHAND_TYPES.get(schema_type, SchemaKind.OBJECT)
