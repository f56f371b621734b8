"""
Unit tests for schema trees and field path extraction

Tests:
- SchemaNode: parsing, invariants, serialization
- extract_fields: nested objects, arrays, determinism
"""

import pytest

from schema_bridge.exceptions import SchemaError
from schema_bridge.introspection import DataType, SchemaNode, extract_fields, iter_field_paths


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def order_schema():
    """Customer schema with nested object and arrays"""
    return {
        "type": "object",
        "properties": {
            "id": {"type": "integer"},
            "name": {"type": "string"},
            "address": {
                "type": "object",
                "properties": {
                    "city": {"type": "string"},
                    "zip": {"type": "string"},
                },
            },
            "tags": {"type": "array", "items": {"type": "string"}},
            "orders": {
                "type": "array",
                "items": {
                    "type": "object",
                    "properties": {
                        "sku": {"type": "string"},
                        "qty": {"type": "integer"},
                    },
                },
            },
        },
    }


# ============================================================================
# SCHEMA NODE TESTS
# ============================================================================


class TestSchemaNode:
    """Test SchemaNode parsing and invariants"""

    def test_missing_type_defaults_to_object(self):
        """Test node without type is an object"""
        node = SchemaNode.from_dict({"properties": {"a": {"type": "string"}}})

        assert node.type == DataType.OBJECT
        assert node.properties["a"].type == DataType.STRING

    def test_nullable_type_list(self):
        """Test ["string", "null"] resolves to string"""
        node = SchemaNode.from_dict({"type": ["null", "string"]})

        assert node.type == DataType.STRING

    def test_unknown_type_rejected(self):
        """Test unknown type name raises SchemaError"""
        with pytest.raises(SchemaError):
            SchemaNode.from_dict({"type": "widget"})

    def test_properties_on_non_object_rejected(self):
        """Test properties are only allowed on objects"""
        with pytest.raises(SchemaError):
            SchemaNode.from_dict({"type": "string", "properties": {"a": {"type": "string"}}})

    def test_items_on_non_array_rejected(self):
        """Test items are only allowed on arrays"""
        with pytest.raises(SchemaError):
            SchemaNode.from_dict({"type": "object", "items": {"type": "string"}})

    def test_dotted_property_name_rejected(self):
        """Test property names cannot contain the path delimiter"""
        with pytest.raises(SchemaError):
            SchemaNode.from_dict({"type": "object", "properties": {"a.b": {"type": "string"}}})

    def test_to_dict(self):
        """Test serialization keeps only set attributes"""
        raw = {
            "type": "object",
            "properties": {"email": {"type": "string", "format": "email"}},
            "required": ["email"],
        }

        assert SchemaNode.from_dict(raw).to_dict() == raw


# ============================================================================
# FIELD PATH TESTS
# ============================================================================


class TestExtractFields:
    """Test flattening schema trees into field paths"""

    def test_nested_paths(self, order_schema):
        """Test objects and arrays produce dot and bracket paths"""
        paths = [f.path for f in extract_fields(order_schema)]

        assert paths == [
            "id",
            "name",
            "address",
            "address.city",
            "address.zip",
            "tags",
            "tags[]",
            "orders",
            "orders[]",
            "orders[].sku",
            "orders[].qty",
        ]

    def test_field_types(self, order_schema):
        """Test each path carries its node type"""
        types = {f.path: f.type for f in extract_fields(order_schema)}

        assert types["id"] == DataType.INTEGER
        assert types["address"] == DataType.OBJECT
        assert types["tags"] == DataType.ARRAY
        assert types["tags[]"] == DataType.STRING
        assert types["orders[].qty"] == DataType.INTEGER

    def test_top_level_array(self):
        """Test array root yields the bare item marker"""
        schema = {
            "type": "array",
            "items": {"type": "object", "properties": {"a": {"type": "string"}}},
        }

        assert [f.path for f in extract_fields(schema)] == ["[]", "[].a"]

    def test_leaf_and_empty_nodes(self):
        """Test nodes without children yield nothing"""
        assert extract_fields({"type": "object"}) == []
        assert extract_fields({"type": "string"}) == []
        assert extract_fields({"type": "array"}) == []

    def test_deterministic_and_unique(self, order_schema):
        """Test repeated walks agree and contain no duplicates"""
        node = SchemaNode.from_dict(order_schema)

        first = [f.path for f in iter_field_paths(node)]
        second = [f.path for f in iter_field_paths(node)]

        assert first == second
        assert len(first) == len(set(first))

    def test_accepts_schema_node(self, order_schema):
        """Test SchemaNode and dict inputs give the same paths"""
        from_dict = [f.path for f in extract_fields(order_schema)]
        from_node = [f.path for f in extract_fields(SchemaNode.from_dict(order_schema))]

        assert from_dict == from_node


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
