"""
Payload Builder - Reshapes payloads from the source schema into the target schema

Integrates:
- Field correspondences: source path → target path, in declared order
- Transformation rules: typed conversions applied per field
- Nested paths: reads through objects, creates intermediate objects on write
- Example payloads: one representative value per source field
"""

import copy
import logging
from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional, Union

from schema_bridge.exceptions import PathConflictError, RuleApplicationError
from schema_bridge.mapper.mapping import FieldCorrespondence, MappingConfiguration
from .paths import MISSING, get_path, set_path

logger = logging.getLogger(__name__)

ConfigurationLike = Union[MappingConfiguration, Dict[str, Any]]


def as_configuration(configuration: ConfigurationLike) -> MappingConfiguration:
    """Accept a parsed configuration or its dictionary form"""
    if isinstance(configuration, MappingConfiguration):
        return configuration
    if isinstance(configuration, dict):
        return MappingConfiguration.from_dict(configuration)
    raise TypeError(f"Expected a mapping configuration, got {type(configuration).__name__}")


@dataclass
class FieldError:
    """A per-field failure recorded during transformation"""
    field: str
    error: str
    original_value: Any = MISSING

    def to_dict(self) -> Dict[str, Any]:
        result = {"field": self.field, "error": self.error}
        if self.original_value is not MISSING:
            result["originalValue"] = self.original_value
        return result


@dataclass
class FieldOutcome:
    """Result of mapping one correspondence: a written value, a skip, or an error"""
    value: Any = MISSING
    error: Optional[FieldError] = None

    @classmethod
    def skipped(cls) -> "FieldOutcome":
        return cls()

    @classmethod
    def failed(cls, error: FieldError) -> "FieldOutcome":
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass
class TransformResult:
    """Outcome of a whole-payload transformation"""
    success: bool
    transformed_payload: Optional[Dict[str, Any]] = None
    errors: List[FieldError] = dataclass_field(default_factory=list)
    warnings: List[str] = dataclass_field(default_factory=list)
    unmapped_fields: List[str] = dataclass_field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting empty sections"""
        result: Dict[str, Any] = {"success": self.success}
        if self.transformed_payload is not None:
            result["transformedPayload"] = self.transformed_payload
        if self.errors:
            result["errors"] = [e.to_dict() for e in self.errors]
        if self.warnings:
            result["warnings"] = list(self.warnings)
        if self.unmapped_fields:
            result["unmappedFields"] = list(self.unmapped_fields)
        return result


class PayloadBuilder:
    """
    Applies a mapping configuration to concrete payloads

    Usage:
    ```python
    builder = PayloadBuilder()
    result = builder.transform({"FirstName": "Jane"}, configuration)
    if result.success:
        post(result.transformed_payload)
    ```

    Every correspondence is attempted; one failing field does not stop the
    rest, but any error withholds the transformed payload from the result.
    """

    EXAMPLE_VALUES = {
        "number": 123,
        "integer": 123,
        "boolean": True,
        "array": ["item1", "item2"],
        "object": {"key": "value"},
    }

    def transform(self, payload: Any, configuration: ConfigurationLike) -> TransformResult:
        """
        Transform a source payload into the target shape

        Args:
            payload: Source payload (JSON object)
            configuration: Mapping configuration or its dictionary form

        Returns:
            TransformResult with the payload on success, itemized errors otherwise
        """
        configuration = as_configuration(configuration)

        if not isinstance(payload, dict):
            return TransformResult(
                success=False,
                errors=[FieldError("$payload", f"Payload must be a JSON object, got {type(payload).__name__}")],
            )

        errors: List[FieldError] = []
        warnings: List[str] = []
        output: Dict[str, Any] = {}

        mapped_sources = {m.source_field for m in configuration.field_mappings if isinstance(m.source_field, str)}
        unmapped_fields = [key for key in payload if key not in mapped_sources]

        for correspondence in configuration.field_mappings:
            outcome = self.map_field(correspondence, payload, output)
            if not outcome.ok:
                errors.append(outcome.error)

        if unmapped_fields:
            warnings.append(f"Unmapped source fields: {', '.join(unmapped_fields)}")
            logger.warning(f"Mapping '{configuration.id}': {len(unmapped_fields)} unmapped source fields")

        success = not errors
        if success:
            logger.info(f"Mapping '{configuration.id}': transformed {len(configuration.field_mappings)} fields")
        else:
            logger.info(f"Mapping '{configuration.id}': {len(errors)} field errors")

        return TransformResult(
            success=success,
            transformed_payload=output if success else None,
            errors=errors,
            warnings=warnings,
            unmapped_fields=unmapped_fields,
        )

    def map_field(
        self,
        correspondence: FieldCorrespondence,
        payload: Dict[str, Any],
        output: Dict[str, Any],
    ) -> FieldOutcome:
        """
        Carry one source value into the output payload

        Never raises for data problems; they come back as a failed outcome.
        """
        source, target = correspondence.source_field, correspondence.target_field
        if not isinstance(source, str) or not isinstance(target, str) or not source or not target:
            return FieldOutcome.failed(FieldError(
                source if isinstance(source, str) and source else "undefined",
                f"Invalid field mapping: sourceField='{source}', targetField='{target}'. "
                f"Check that the mapping was saved with valid field names.",
            ))

        value = get_path(payload, source)

        if value is MISSING or value is None:
            if correspondence.required:
                return FieldOutcome.failed(FieldError(source, "Required field is missing or null"))
            if value is MISSING:
                logger.debug(f"Skipping absent optional field: {source}")
                return FieldOutcome.skipped()
        elif correspondence.transformation is not None:
            try:
                value = correspondence.transformation.apply(value)
            except RuleApplicationError as e:
                return FieldOutcome.failed(FieldError(source, f"Transformation failed: {e}", original_value=value))

        try:
            set_path(output, target, copy.deepcopy(value))
        except PathConflictError as e:
            return FieldOutcome.failed(FieldError(source, str(e), original_value=value))

        return FieldOutcome(value=value)

    def build_example(self, configuration: ConfigurationLike) -> Dict[str, Any]:
        """
        Synthesize a source payload with one placeholder per correspondence

        Returns:
            Example payload keyed by source paths
        """
        configuration = as_configuration(configuration)
        example: Dict[str, Any] = {}

        for correspondence in configuration.field_mappings:
            if not isinstance(correspondence.source_field, str) or not correspondence.source_field:
                continue

            if correspondence.source_type == "string":
                value = f"example_{correspondence.source_field}"
            else:
                value = copy.deepcopy(self.EXAMPLE_VALUES.get(str(correspondence.source_type)))

            try:
                set_path(example, correspondence.source_field, value)
            except PathConflictError as e:
                logger.warning(f"Skipping example value: {e}")

        return example
