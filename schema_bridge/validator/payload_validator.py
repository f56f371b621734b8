"""Validation of transformed payloads."""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from schema_bridge.builder.paths import MISSING, get_path
from schema_bridge.builder.payload_builder import ConfigurationLike, as_configuration
from schema_bridge.mapper.mapping import ValidationRule
from schema_bridge.transformer.rules import stringify

logger = logging.getLogger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_path(value: Any) -> bool:
    return isinstance(value, str) and bool(value)


@dataclass
class ValidationResult:
    """All violations found in a payload."""

    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {"valid": self.valid, "errors": list(self.errors)}


class PayloadValidator:
    """Validates a transformed payload against its mapping configuration."""

    def validate(self, payload: Dict[str, Any], configuration: ConfigurationLike) -> ValidationResult:
        """
        Check required target fields and declared validation rules.

        Every violation is collected; nothing stops at the first one.
        """
        configuration = as_configuration(configuration)
        errors = []

        for correspondence in configuration.field_mappings:
            if correspondence.required is not True or not _is_path(correspondence.target_field):
                continue
            value = get_path(payload, correspondence.target_field)
            if value is MISSING or value is None:
                errors.append(f"Required field '{correspondence.target_field}' is missing")

        for rule in configuration.validation_rules:
            errors.extend(self._check_rule(payload, rule))

        if errors:
            logger.info(f"Mapping '{configuration.id}': {len(errors)} validation errors")

        return ValidationResult(valid=not errors, errors=errors)

    def _check_rule(self, payload: Dict[str, Any], rule: ValidationRule) -> List[str]:
        value = get_path(payload, rule.field) if _is_path(rule.field) else MISSING

        if rule.kind == "required":
            if value is MISSING or value is None:
                return [rule.message or f"Field '{rule.field}' is required"]

        elif rule.kind == "format":
            pattern = rule.params.get("pattern")
            if not pattern or value is MISSING or value is None:
                return []
            if not isinstance(pattern, str):
                return [f"Field '{rule.field}' has an invalid format pattern: {pattern!r}"]
            try:
                matched = re.search(pattern, value if isinstance(value, str) else stringify(value))
            except re.error as e:
                return [f"Field '{rule.field}' has an invalid format pattern: {e}"]
            if not matched:
                return [rule.message or f"Field '{rule.field}' does not match required format"]

        elif rule.kind == "range":
            if not _is_number(value):
                return []
            violations = []
            minimum, maximum = rule.params.get("min"), rule.params.get("max")
            if _is_number(minimum) and value < minimum:
                violations.append(rule.message or f"Field '{rule.field}' must be at least {minimum}")
            if _is_number(maximum) and value > maximum:
                violations.append(rule.message or f"Field '{rule.field}' must be at most {maximum}")
            return violations

        else:
            logger.debug(f"Skipping {rule.kind} rule on '{rule.field}'")

        return []
