"""Unit tests for schema kind classification."""

import pytest

from swagger_examples.utils.schema_kinds import SchemaKind, classify


class TestClassify:
    """Test classify() over the supported schema shapes."""

    @pytest.mark.parametrize(
        ("node", "expected"),
        [
            ({"type": "string"}, SchemaKind.STRING),
            ({"type": "string", "format": "date-time"}, SchemaKind.STRING),
            ({"type": "string(255)"}, SchemaKind.STRING),
            ({"type": "integer(32)"}, SchemaKind.INTEGER32),
            ({"type": "integer", "format": "int32"}, SchemaKind.INTEGER32),
            ({"type": "integer"}, SchemaKind.OBJECT),
            ({"type": "integer(64)"}, SchemaKind.INTEGER64),
            ({"type": "integer", "format": "int64"}, SchemaKind.INTEGER64),
            ({"type": "double"}, SchemaKind.DOUBLE),
            ({"type": "number"}, SchemaKind.OBJECT),
            ({"type": "number", "format": "double"}, SchemaKind.OBJECT),
            ({"type": "integer", "format": "int16"}, SchemaKind.OBJECT),
            ({"type": "boolean"}, SchemaKind.BOOLEAN),
            ({"type": "array", "items": {"type": "string"}}, SchemaKind.ARRAY),
            ({"type": "object", "properties": {}}, SchemaKind.OBJECT),
            ({"type": "Widget"}, SchemaKind.OBJECT),
            ({"properties": {"a": {"type": "string"}}}, SchemaKind.UNTYPED),
            ({}, SchemaKind.UNTYPED),
        ],
    )
    def test_classify(self, node, expected):
        """Test each schema shape maps to its kind."""
        assert classify(node) is expected

    def test_reference_wins_over_type(self):
        """Test a $ref node is a reference even with sibling keys."""
        assert classify({"$ref": "#/definitions/Pet", "type": "string"}) is SchemaKind.REFERENCE

    def test_non_string_ref_is_ignored(self):
        """Test a non-string $ref value is not treated as a reference."""
        assert classify({"$ref": {"type": "string"}, "type": "boolean"}) is SchemaKind.BOOLEAN


class TestSchemaKind:
    """Test SchemaKind helpers."""

    def test_primitive_kinds(self):
        """Test primitive kinds are flagged as primitive."""
        for kind in (
            SchemaKind.STRING,
            SchemaKind.INTEGER32,
            SchemaKind.INTEGER64,
            SchemaKind.DOUBLE,
            SchemaKind.BOOLEAN,
        ):
            assert kind.is_primitive

    def test_structured_kinds_are_not_primitive(self):
        """Test array, object, reference and untyped kinds recurse or resolve."""
        for kind in (
            SchemaKind.ARRAY,
            SchemaKind.OBJECT,
            SchemaKind.REFERENCE,
            SchemaKind.UNTYPED,
        ):
            assert not kind.is_primitive
