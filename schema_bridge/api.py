"""
Plain data-in/data-out operations for boundary layers (CLI, tool servers).

Repository operations take the repository explicitly; the entry point builds
one repository and hands it to every caller.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

from schema_bridge.builder.payload_builder import (
    ConfigurationLike,
    FieldError,
    PayloadBuilder,
    TransformResult,
)
from schema_bridge.exceptions import InvalidThresholdError
from schema_bridge.introspection import field_paths
from schema_bridge.introspection.schema_node import SchemaNode
from schema_bridge.mapper.heuristic import (
    DEFAULT_CONFIDENCE_THRESHOLD,
    MappingSuggestion,
    SimilarityScorer,
)
from schema_bridge.mapper.mapping import FieldCorrespondence, MappingConfiguration
from schema_bridge.storage.repository import (
    DeleteResult,
    ImportResult,
    MappingRepository,
    MappingSummary,
    SaveResult,
)
from schema_bridge.validator.payload_validator import PayloadValidator, ValidationResult

logger = logging.getLogger(__name__)

SchemaLike = Union[SchemaNode, Dict[str, Any]]
PayloadLike = Union[str, Dict[str, Any]]

_scorer = SimilarityScorer()
_builder = PayloadBuilder()
_validator = PayloadValidator()


def _parse_payload(payload: PayloadLike) -> Any:
    """Decode a JSON string payload; other values pass through"""
    if isinstance(payload, str):
        return json.loads(payload)
    return payload


def extract_fields(schema: SchemaLike) -> List[str]:
    """All field paths of a schema tree, in walk order."""
    return [f.path for f in field_paths.extract_fields(schema)]


def suggest_mappings(
    source_schema: SchemaLike,
    target_schema: SchemaLike,
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
) -> List[MappingSuggestion]:
    """
    Ranked field correspondence suggestions between two schema trees.

    Raises:
        InvalidThresholdError: If threshold is not a number in [0, 1]
    """
    if isinstance(threshold, bool) or not isinstance(threshold, (int, float)) or not 0.0 <= threshold <= 1.0:
        raise InvalidThresholdError(f"Confidence threshold must be between 0 and 1, got {threshold!r}")
    return _scorer.suggest(source_schema, target_schema, threshold)


def transform_payload(payload: PayloadLike, configuration: ConfigurationLike) -> TransformResult:
    """Reshape a source payload (object or JSON text) into the target schema."""
    try:
        parsed = _parse_payload(payload)
    except json.JSONDecodeError as e:
        return TransformResult(success=False, errors=[FieldError("$payload", f"Invalid JSON payload: {e}")])
    return _builder.transform(parsed, configuration)


def validate_transformed_payload(payload: PayloadLike, configuration: ConfigurationLike) -> ValidationResult:
    """Check a transformed payload against required fields and validation rules."""
    try:
        parsed = _parse_payload(payload)
    except json.JSONDecodeError as e:
        return ValidationResult(valid=False, errors=[f"Invalid JSON payload: {e}"])
    if not isinstance(parsed, dict):
        return ValidationResult(valid=False, errors=["Payload must be a JSON object"])
    return _validator.validate(parsed, configuration)


def check_correspondence(correspondence: Union[FieldCorrespondence, Dict[str, Any]]) -> List[str]:
    """Problems that would make a correspondence unusable; empty if it is fine."""
    if isinstance(correspondence, dict):
        correspondence = FieldCorrespondence.from_dict(correspondence)
    return correspondence.check()


def generate_example_payload(configuration: ConfigurationLike) -> Dict[str, Any]:
    """A representative source payload for a configuration."""
    return _builder.build_example(configuration)


def save_mapping(repository: MappingRepository, configuration: ConfigurationLike) -> SaveResult:
    return repository.save(configuration)


def get_mapping(repository: MappingRepository, mapping_id: str) -> Optional[MappingConfiguration]:
    return repository.get(mapping_id)


def delete_mapping(repository: MappingRepository, mapping_id: str) -> DeleteResult:
    return repository.delete(mapping_id)


def list_mappings(repository: MappingRepository) -> List[MappingSummary]:
    return repository.list()


def find_mappings_by_endpoint(
    repository: MappingRepository,
    system: str,
    path: str,
    method: Optional[str] = None,
) -> List[MappingConfiguration]:
    return repository.find_by_endpoint(system, path, method)


def export_mappings(repository: MappingRepository) -> str:
    return repository.export_all()


def import_mappings(repository: MappingRepository, serialized: Union[str, Dict[str, Any]]) -> ImportResult:
    return repository.import_all(serialized)
