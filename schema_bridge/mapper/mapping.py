"""Data mapping model."""
from dataclasses import dataclass, field as dataclass_field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from schema_bridge.exceptions import MappingValidationError, RuleConfigurationError
from schema_bridge.transformer.registry import build_rule
from schema_bridge.transformer.rules import TransformationRule

VALIDATION_KINDS = ("required", "format", "range", "custom")


def now_iso() -> str:
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    moment = datetime.now(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    """Return the first non-None value among alternative key spellings."""
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return value
    return None


@dataclass
class FieldCorrespondence:
    """Maps one source field path to one target field path."""

    source_field: str
    target_field: str
    source_type: Optional[str] = None
    target_type: Optional[str] = None
    transformation: Optional[TransformationRule] = None
    required: bool = False
    description: Optional[str] = None
    confidence: Optional[float] = None

    @classmethod
    def from_dict(cls, raw: Dict[str, Any]) -> "FieldCorrespondence":
        """
        Build from either camelCase (sourceField) or snake_case (source_field) keys.

        Raises:
            RuleConfigurationError: If the transformation rule is malformed
        """
        return cls(
            source_field=_pick(raw, "sourceField", "source_field") or "",
            target_field=_pick(raw, "targetField", "target_field") or "",
            source_type=_pick(raw, "sourceType", "source_type"),
            target_type=_pick(raw, "targetType", "target_type"),
            transformation=build_rule(raw.get("transformation")),
            required=False if raw.get("required") is None else raw.get("required"),
            description=raw.get("description"),
            confidence=raw.get("confidence"),
        )

    def check(self) -> List[str]:
        """Report problems that would make this correspondence unusable."""
        errors = []
        if not _is_path(self.source_field):
            errors.append("Source field is required")
        if not _is_path(self.target_field):
            errors.append("Target field is required")
        if not isinstance(self.required, bool):
            errors.append("Required flag must be a boolean")
        if not self.source_type:
            errors.append("Source type is required")
        if not self.target_type:
            errors.append("Target type is required")
        if (
            self.source_type
            and self.target_type
            and self.source_type != self.target_type
            and self.transformation is None
        ):
            errors.append(
                f"Type mismatch requires transformation: {self.source_type} → {self.target_type}"
            )
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to canonical camelCase dictionary."""
        result = {
            "sourceField": self.source_field,
            "targetField": self.target_field,
            "sourceType": self.source_type,
            "targetType": self.target_type,
            "transformation": self.transformation.to_dict() if self.transformation else None,
            "required": self.required,
            "confidence": self.confidence,
        }
        if self.description:
            result["description"] = self.description
        return result


@dataclass
class EndpointReference:
    """Identifies an endpoint of one of the two systems."""

    system: str
    path: str
    method: str = "GET"

    def matches(self, system: str, path: str, method: Optional[str] = None) -> bool:
        """Check system/path equality and, when given, method (case-insensitive)."""
        if self.system != system or self.path != path:
            return False
        return method is None or self.method.upper() == method.upper()

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"system": self.system, "path": self.path, "method": self.method}


@dataclass
class ValidationRule:
    """A constraint checked against a transformed payload."""

    field: str
    kind: str
    params: Dict[str, Any] = dataclass_field(default_factory=dict)
    message: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {"field": self.field, "type": self.kind, "params": self.params}
        if self.message:
            result["errorMessage"] = self.message
        return result


@dataclass
class MappingConfiguration:
    """A named, persisted set of field correspondences between two endpoints."""

    id: str
    name: str
    source_endpoint: EndpointReference
    target_endpoint: EndpointReference
    field_mappings: List[FieldCorrespondence] = dataclass_field(default_factory=list)
    description: Optional[str] = None
    validation_rules: List[ValidationRule] = dataclass_field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "MappingConfiguration":
        """
        Parse a configuration document, normalizing correspondence keys.

        Empty ids, names or field paths are accepted here; use
        structural_errors() to reject them.

        Raises:
            MappingValidationError: If the document does not have the expected shape
        """
        if not isinstance(raw, dict):
            raise MappingValidationError([f"Mapping must be an object, got {type(raw).__name__}"])

        mapping_id = raw.get("id")
        errors = []

        endpoints = {}
        for key in ("sourceEndpoint", "targetEndpoint"):
            endpoint = _pick(raw, key, _snake(key))
            if not isinstance(endpoint, dict):
                errors.append(f"{key} is required")
                continue
            endpoints[key] = EndpointReference(
                system=str(endpoint.get("system", "")),
                path=str(endpoint.get("path", "")),
                method=str(endpoint.get("method", "GET")),
            )

        raw_fields = _pick(raw, "fieldMappings", "field_mappings")
        field_mappings = []
        if not isinstance(raw_fields, list):
            errors.append("fieldMappings must be a list")
        else:
            for index, raw_field in enumerate(raw_fields):
                if not isinstance(raw_field, dict):
                    errors.append(f"fieldMappings[{index}] must be an object")
                    continue
                if not isinstance(raw_field.get("required", False), (bool, type(None))):
                    errors.append(f"fieldMappings[{index}].required must be a boolean")
                    continue
                try:
                    field_mappings.append(FieldCorrespondence.from_dict(raw_field))
                except RuleConfigurationError as e:
                    errors.append(f"fieldMappings[{index}]: {e}")

        validation_rules = []
        raw_rules = _pick(raw, "validationRules", "validation_rules") or []
        if not isinstance(raw_rules, list):
            errors.append("validationRules must be a list")
            raw_rules = []
        for index, raw_rule in enumerate(raw_rules):
            rule_errors = _validation_rule_errors(raw_rule)
            if rule_errors:
                errors.extend(f"validationRules[{index}] {e}" for e in rule_errors)
                continue
            validation_rules.append(
                ValidationRule(
                    field=raw_rule["field"],
                    kind=_pick(raw_rule, "type", "kind"),
                    params=raw_rule.get("params") or {},
                    message=_pick(raw_rule, "errorMessage", "message"),
                )
            )

        if errors:
            raise MappingValidationError(errors, mapping_id if isinstance(mapping_id, str) else None)

        return cls(
            id=mapping_id,
            name=raw.get("name"),
            source_endpoint=endpoints["sourceEndpoint"],
            target_endpoint=endpoints["targetEndpoint"],
            field_mappings=field_mappings,
            description=raw.get("description"),
            validation_rules=validation_rules,
            created_at=_pick(raw, "createdAt", "created_at"),
            updated_at=_pick(raw, "updatedAt", "updated_at"),
            metadata=raw.get("metadata"),
        )

    def structural_errors(self) -> List[str]:
        """Return the reasons this configuration may not enter a store."""
        errors = []
        if not isinstance(self.id, str) or not self.id:
            errors.append("id must be a non-empty string")
        if not isinstance(self.name, str) or not self.name:
            errors.append("name must be a non-empty string")
        if self.source_endpoint is None:
            errors.append("sourceEndpoint is required")
        if self.target_endpoint is None:
            errors.append("targetEndpoint is required")
        for index, correspondence in enumerate(self.field_mappings):
            if not _is_path(correspondence.source_field) or not _is_path(correspondence.target_field):
                errors.append(f"fieldMappings[{index}] must have string sourceField and targetField")
            for name, value in (("sourceType", correspondence.source_type), ("targetType", correspondence.target_type)):
                if value is not None and not isinstance(value, str):
                    errors.append(f"fieldMappings[{index}].{name} must be a string")
        return errors

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted camelCase document."""
        result = {
            "id": self.id,
            "name": self.name,
            "sourceEndpoint": self.source_endpoint.to_dict(),
            "targetEndpoint": self.target_endpoint.to_dict(),
            "fieldMappings": [m.to_dict() for m in self.field_mappings],
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }
        if self.description:
            result["description"] = self.description
        if self.validation_rules:
            result["validationRules"] = [r.to_dict() for r in self.validation_rules]
        if self.metadata:
            result["metadata"] = self.metadata
        return result


def _snake(name: str) -> str:
    return "".join(f"_{c.lower()}" if c.isupper() else c for c in name)


def _is_path(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


def _validation_rule_errors(raw_rule: Any) -> List[str]:
    """Shape problems of one raw validation rule."""
    if not isinstance(raw_rule, dict):
        return [f"must be an object, got {type(raw_rule).__name__}"]
    errors = []
    kind = _pick(raw_rule, "type", "kind")
    if kind not in VALIDATION_KINDS:
        errors.append(f"has unknown type: {kind!r}")
    if not _is_path(raw_rule.get("field")):
        errors.append("field must be a non-empty string")
    if not isinstance(raw_rule.get("params") or {}, dict):
        errors.append("params must be an object")
    message = _pick(raw_rule, "errorMessage", "message")
    if message is not None and not isinstance(message, str):
        errors.append("errorMessage must be a string")
    return errors
