"""
Unit tests for PayloadBuilder

Tests:
- Path helpers: get_path/set_path and the MISSING sentinel
- transform: rules, required/optional/null fields, nested paths, errors
- Unmapped field warnings
- Example payload generation
"""

import copy

import pytest

from schema_bridge.builder import MISSING, PayloadBuilder, get_path, set_path
from schema_bridge.exceptions import PathConflictError
from schema_bridge.mapper import EndpointReference, FieldCorrespondence, MappingConfiguration


# ============================================================================
# FIXTURES
# ============================================================================


@pytest.fixture
def builder():
    """PayloadBuilder instance"""
    return PayloadBuilder()


def make_config(*field_mappings, **overrides):
    """Mapping configuration dictionary with the given correspondences"""
    config = {
        "id": "test-mapping",
        "name": "Test mapping",
        "sourceEndpoint": {"system": "A", "path": "/in", "method": "POST"},
        "targetEndpoint": {"system": "B", "path": "/out", "method": "POST"},
        "fieldMappings": list(field_mappings),
    }
    config.update(overrides)
    return config


def correspondence(source, target, transformation=None, required=False, source_type="string", target_type="string"):
    """Field correspondence dictionary"""
    return {
        "sourceField": source,
        "targetField": target,
        "sourceType": source_type,
        "targetType": target_type,
        "transformation": transformation,
        "required": required,
    }


# ============================================================================
# PATH HELPER TESTS
# ============================================================================


class TestPaths:
    """Test nested path access"""

    def test_get_nested(self):
        """Test reading through nested objects"""
        assert get_path({"a": {"b": {"c": 1}}}, "a.b.c") == 1

    def test_get_missing_vs_null(self):
        """Test absent keys and explicit nulls differ"""
        assert get_path({"a": None}, "a") is None
        assert get_path({"a": None}, "a.b") is MISSING
        assert get_path({}, "a") is MISSING

    def test_get_through_non_object(self):
        """Test reading through a scalar is MISSING"""
        assert get_path({"a": "text"}, "a.b") is MISSING

    def test_set_creates_intermediates(self):
        """Test writing creates intermediate objects"""
        payload = {"a": {"x": 1}}
        set_path(payload, "a.b.c", 2)

        assert payload == {"a": {"x": 1, "b": {"c": 2}}}

    def test_set_conflict(self):
        """Test writing through a scalar is a conflict"""
        with pytest.raises(PathConflictError):
            set_path({"a": "text"}, "a.b", 1)

    def test_empty_path(self):
        """Test empty path is rejected"""
        with pytest.raises(ValueError):
            get_path({}, "")


# ============================================================================
# TRANSFORM TESTS
# ============================================================================


class TestTransform:
    """Test whole-payload transformation"""

    def test_direct_rename(self, builder):
        """Test direct rule renames a field"""
        config = make_config(correspondence("FirstName", "first_name", {"type": "direct"}, required=True))

        result = builder.transform({"FirstName": "Jane"}, config)

        assert result.success
        assert result.transformed_payload == {"first_name": "Jane"}
        assert result.errors == []

    def test_format_conversion(self, builder):
        """Test string → number conversion"""
        config = make_config(correspondence(
            "amount", "total",
            {"type": "format", "params": {"from": "string", "to": "number"}},
            target_type="number",
        ))

        result = builder.transform({"amount": "42.5"}, config)

        assert result.success
        assert result.transformed_payload == {"total": 42.5}

    def test_conversion_failure(self, builder):
        """Test failed conversion withholds the payload"""
        config = make_config(correspondence(
            "amount", "total",
            {"type": "format", "params": {"from": "string", "to": "number"}},
            target_type="number",
        ))

        result = builder.transform({"amount": "abc"}, config)

        assert not result.success
        assert result.transformed_payload is None
        assert len(result.errors) == 1
        assert result.errors[0].field == "amount"
        assert result.errors[0].original_value == "abc"
        assert result.errors[0].error.startswith("Transformation failed")

    def test_split(self, builder):
        """Test string split into a list"""
        config = make_config(correspondence(
            "tags", "labels", {"type": "split", "params": {"separator": ","}}, target_type="array",
        ))

        result = builder.transform({"tags": "a,b,c"}, config)

        assert result.transformed_payload == {"labels": ["a", "b", "c"]}

    def test_invalid_correspondence_does_not_stop_others(self, builder):
        """Test empty source path becomes an 'undefined' error"""
        config = make_config(
            correspondence("", "x"),
            correspondence("FirstName", "first_name"),
        )

        result = builder.transform({"FirstName": "Jane"}, config)

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].field == "undefined"
        assert "Invalid field mapping" in result.errors[0].error

    def test_non_string_path_is_invalid_correspondence(self, builder):
        """Test a non-string source path is recorded and other fields still map"""
        config = MappingConfiguration(
            id="typed",
            name="Typed",
            source_endpoint=EndpointReference("A", "/in"),
            target_endpoint=EndpointReference("B", "/out"),
            field_mappings=[
                FieldCorrespondence(source_field=5, target_field="x"),
                FieldCorrespondence(source_field="FirstName", target_field="first_name"),
            ],
        )

        result = builder.transform({"FirstName": "Jane"}, config)

        assert not result.success
        assert len(result.errors) == 1
        assert result.errors[0].field == "undefined"
        assert "Invalid field mapping" in result.errors[0].error

    def test_required_missing(self, builder):
        """Test required field absent"""
        config = make_config(correspondence("FirstName", "first_name", required=True))

        result = builder.transform({}, config)

        assert not result.success
        assert result.errors[0].field == "FirstName"
        assert result.errors[0].error == "Required field is missing or null"

    def test_required_null(self, builder):
        """Test required field explicitly null"""
        config = make_config(correspondence("FirstName", "first_name", required=True))

        result = builder.transform({"FirstName": None}, config)

        assert not result.success
        assert result.errors[0].error == "Required field is missing or null"

    def test_optional_missing_is_skipped(self, builder):
        """Test absent optional field leaves no target key"""
        config = make_config(correspondence("Nickname", "nickname"))

        result = builder.transform({}, config)

        assert result.success
        assert result.transformed_payload == {}

    def test_optional_null_is_written_untransformed(self, builder):
        """Test null optional value is written without applying the rule"""
        config = make_config(correspondence(
            "amount", "total",
            {"type": "format", "params": {"from": "string", "to": "number"}},
            target_type="number",
        ))

        result = builder.transform({"amount": None}, config)

        assert result.success
        assert result.transformed_payload == {"total": None}

    def test_nested_paths(self, builder):
        """Test reading and writing nested paths"""
        config = make_config(
            correspondence("customer.address.city", "location.city"),
            correspondence("customer.name", "location.label"),
        )

        result = builder.transform({"customer": {"name": "Jane", "address": {"city": "Lisbon"}}}, config)

        assert result.transformed_payload == {"location": {"city": "Lisbon", "label": "Jane"}}

    def test_nested_missing_intermediate(self, builder):
        """Test null intermediate object means the field is absent"""
        config = make_config(correspondence("customer.address.city", "city"))

        result = builder.transform({"customer": None}, config)

        assert result.success
        assert result.transformed_payload == {}

    def test_last_write_wins(self, builder):
        """Test later correspondences overwrite earlier ones"""
        config = make_config(
            correspondence("first", "name"),
            correspondence("second", "name"),
        )

        result = builder.transform({"first": "A", "second": "B"}, config)

        assert result.transformed_payload == {"name": "B"}

    def test_target_path_conflict(self, builder):
        """Test writing through an earlier scalar is a field error"""
        config = make_config(
            correspondence("a", "target"),
            correspondence("b", "target.child"),
        )

        result = builder.transform({"a": "x", "b": "y"}, config)

        assert not result.success
        assert result.errors[0].field == "b"

    def test_custom_rule_fails(self, builder):
        """Test custom rules are reported, not run"""
        config = make_config(correspondence("sku", "code", {"type": "custom", "function": "normalizeSku"}))

        result = builder.transform({"sku": "abc"}, config)

        assert not result.success
        assert "not supported" in result.errors[0].error

    def test_non_object_payload(self, builder):
        """Test non-object payloads are rejected"""
        result = builder.transform(["not", "an", "object"], make_config())

        assert not result.success
        assert result.errors[0].field == "$payload"

    def test_snake_case_configuration(self, builder):
        """Test snake_case correspondence keys are understood"""
        config = make_config({"source_field": "FirstName", "target_field": "first_name"})

        result = builder.transform({"FirstName": "Jane"}, config)

        assert result.transformed_payload == {"first_name": "Jane"}


class TestUnmappedFields:
    """Test unmapped source field reporting"""

    def test_unmapped_warning(self, builder):
        """Test extra top-level keys produce a warning, not an error"""
        config = make_config(correspondence("FirstName", "first_name"))

        result = builder.transform({"FirstName": "Jane", "Extra": 1, "Other": 2}, config)

        assert result.success
        assert result.unmapped_fields == ["Extra", "Other"]
        assert result.warnings == ["Unmapped source fields: Extra, Other"]

    def test_nested_source_is_shallow(self, builder):
        """Test detection compares top-level keys with whole source paths"""
        config = make_config(correspondence("customer.name", "name"))

        result = builder.transform({"customer": {"name": "Jane"}}, config)

        assert result.success
        assert result.unmapped_fields == ["customer"]


class TestTransformProperties:
    """Test purity and repeatability"""

    def test_idempotent_and_pure(self, builder, customer_mapping):
        """Test same input gives same output and the input is untouched"""
        payload = {"FirstName": "Jane", "amount": "10", "tags": ["a"]}
        snapshot = copy.deepcopy(payload)

        first = builder.transform(payload, customer_mapping)
        second = builder.transform(payload, customer_mapping)

        assert first.to_dict() == second.to_dict()
        assert payload == snapshot

    def test_output_does_not_alias_input(self, builder):
        """Test written values are copies"""
        config = make_config(correspondence("tags", "labels", source_type="array", target_type="array"))
        payload = {"tags": ["a", "b"]}

        result = builder.transform(payload, config)
        result.transformed_payload["labels"].append("c")

        assert payload == {"tags": ["a", "b"]}

    def test_to_dict(self, builder, customer_mapping):
        """Test serialized result sections"""
        ok = builder.transform({"FirstName": "Jane", "amount": "5"}, customer_mapping).to_dict()
        failed = builder.transform({"FirstName": "Jane", "amount": "x"}, customer_mapping).to_dict()

        assert ok == {"success": True, "transformedPayload": {"first_name": "Jane", "billing": {"total": 5}}}
        assert failed["success"] is False
        assert "transformedPayload" not in failed
        assert failed["errors"][0]["originalValue"] == "x"


# ============================================================================
# EXAMPLE PAYLOAD TESTS
# ============================================================================


class TestBuildExample:
    """Test example source payload generation"""

    def test_values_by_type(self, builder):
        """Test one placeholder per source type"""
        config = make_config(
            correspondence("name", "a"),
            correspondence("age", "b", source_type="integer"),
            correspondence("score", "c", source_type="number"),
            correspondence("active", "d", source_type="boolean"),
            correspondence("tags", "e", source_type="array"),
            correspondence("meta", "f", source_type="object"),
            correspondence("user.email", "g"),
            correspondence("", "h"),
        )

        example = builder.build_example(config)

        assert example == {
            "name": "example_name",
            "age": 123,
            "score": 123,
            "active": True,
            "tags": ["item1", "item2"],
            "meta": {"key": "value"},
            "user": {"email": "example_user.email"},
        }

    def test_example_transforms(self, builder):
        """Test example of a configuration without conversions transforms cleanly"""
        config = make_config(
            correspondence("FirstName", "first_name", {"type": "direct"}, required=True),
            correspondence("tags", "labels", source_type="array", target_type="array"),
        )

        result = builder.transform(builder.build_example(config), config)

        assert result.success
        assert result.transformed_payload == {"first_name": "example_FirstName", "labels": ["item1", "item2"]}


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
