"""
Unit tests for the data-in/data-out operations

Tests:
- Threshold validation
- JSON text payloads
- Repository operations through an injected repository
"""

import pytest

from schema_bridge import api
from schema_bridge.exceptions import InvalidThresholdError
from schema_bridge.storage import InMemoryStore, MappingRepository


class TestSuggestMappings:
    """Test suggest_mappings argument handling"""

    @pytest.mark.parametrize("threshold", [-0.1, 1.5, "0.5", True, None])
    def test_invalid_threshold(self, crm_schema, erp_schema, threshold):
        """Test thresholds outside [0, 1] or of the wrong type"""
        with pytest.raises(InvalidThresholdError):
            api.suggest_mappings(crm_schema, erp_schema, threshold)

    def test_threshold_is_value_error(self, crm_schema, erp_schema):
        """Test threshold errors are also ValueErrors"""
        with pytest.raises(ValueError):
            api.suggest_mappings(crm_schema, erp_schema, 2)

    @pytest.mark.parametrize("threshold", [0, 1, 0.7])
    def test_valid_threshold(self, crm_schema, erp_schema, threshold):
        """Test inclusive bounds"""
        suggestions = api.suggest_mappings(crm_schema, erp_schema, threshold)

        assert all(s.confidence >= threshold for s in suggestions)

    def test_extract_fields(self, crm_schema):
        """Test field paths as strings"""
        assert api.extract_fields(crm_schema) == ["FirstName", "LastName", "EmailAddress", "Phone"]


class TestPayloadOperations:
    """Test transform/validate/example entry points"""

    def test_json_text_payload(self, customer_mapping):
        """Test payloads given as JSON text"""
        result = api.transform_payload('{"FirstName": "Jane", "amount": "3"}', customer_mapping)

        assert result.success
        assert result.transformed_payload == {"first_name": "Jane", "billing": {"total": 3}}

    def test_invalid_json_payload(self, customer_mapping):
        """Test unparseable payload text"""
        result = api.transform_payload("{oops", customer_mapping)

        assert not result.success
        assert result.errors[0].field == "$payload"

    def test_validate_invalid_json(self, customer_mapping):
        """Test unparseable payload text on validation"""
        result = api.validate_transformed_payload("{oops", customer_mapping)

        assert not result.valid

    def test_validate_non_object(self, customer_mapping):
        """Test non-object payloads on validation"""
        result = api.validate_transformed_payload("[1, 2]", customer_mapping)

        assert result.errors == ["Payload must be a JSON object"]

    def test_generate_example(self, customer_mapping):
        """Test example payload for the customer mapping"""
        assert api.generate_example_payload(customer_mapping) == {
            "FirstName": "example_FirstName",
            "amount": "example_amount",
        }


class TestCheckCorrespondence:
    """Test correspondence checks"""

    def test_valid(self, customer_mapping):
        """Test a complete correspondence has no problems"""
        assert api.check_correspondence(customer_mapping["fieldMappings"][1]) == []

    def test_problems(self):
        """Test empty paths, missing types and unconverted type changes"""
        problems = api.check_correspondence({"sourceField": "", "targetField": "b"})
        mismatch = api.check_correspondence(
            {"sourceField": "a", "targetField": "b", "sourceType": "string", "targetType": "number"}
        )

        assert problems == ["Source field is required", "Source type is required", "Target type is required"]
        assert mismatch == ["Type mismatch requires transformation: string → number"]

    def test_required_flag_type(self):
        """Test a non-boolean required flag is a problem"""
        problems = api.check_correspondence(
            {"sourceField": "a", "targetField": "b", "sourceType": "string", "targetType": "string", "required": "false"}
        )

        assert problems == ["Required flag must be a boolean"]


class TestRepositoryOperations:
    """Test repository entry points"""

    def test_save_get_delete(self, memory_repository, customer_mapping):
        """Test lifecycle of one mapping"""
        api.save_mapping(memory_repository, customer_mapping)

        assert api.get_mapping(memory_repository, "crm-to-erp").id == "crm-to-erp"
        assert [s.id for s in api.list_mappings(memory_repository)] == ["crm-to-erp"]
        assert len(api.find_mappings_by_endpoint(memory_repository, "A", "/customers")) == 1
        assert api.delete_mapping(memory_repository, "crm-to-erp").deleted
        assert api.get_mapping(memory_repository, "crm-to-erp") is None

    def test_export_import(self, memory_repository, customer_mapping):
        """Test export then import into a fresh repository"""
        api.save_mapping(memory_repository, customer_mapping)
        target = MappingRepository(InMemoryStore())

        result = api.import_mappings(target, api.export_mappings(memory_repository))

        assert result.imported_count == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
