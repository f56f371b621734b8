"""Transformer registry."""
from typing import Any, Dict, Optional, Type, Union
import logging

from schema_bridge.exceptions import RuleConfigurationError
from .rules import (
    CustomRule,
    DirectRule,
    FormatRule,
    JoinRule,
    LookupRule,
    SplitRule,
    TransformationRule,
)

logger = logging.getLogger(__name__)

RuleLike = Union[TransformationRule, Dict[str, Any]]


class TransformerRegistry:
    """Registry of available transformation rule kinds."""

    def __init__(self):
        """Initialize registry."""
        self.rule_types: Dict[str, Type[TransformationRule]] = {
            rule_type.kind: rule_type
            for rule_type in (DirectRule, FormatRule, SplitRule, JoinRule, LookupRule, CustomRule)
        }

    def kinds(self):
        """Return the registered rule kinds."""
        return sorted(self.rule_types)

    def build(self, raw: Optional[RuleLike]) -> Optional[TransformationRule]:
        """
        Build a typed rule from its persisted {type, params, function} form.

        Raises:
            RuleConfigurationError: If the kind is unknown or params are malformed
        """
        if raw is None or isinstance(raw, TransformationRule):
            return raw
        if not isinstance(raw, dict):
            raise RuleConfigurationError(f"Transformation rule must be an object, got {type(raw).__name__}")

        kind = raw.get("type")
        rule_type = self.rule_types.get(kind)
        if rule_type is None:
            raise RuleConfigurationError(f"Unknown transformation type: {kind!r}")

        params = raw.get("params") or {}
        if not isinstance(params, dict):
            raise RuleConfigurationError(f"Params of '{kind}' rule must be an object")

        return rule_type.from_params(params, raw)

    def transform(self, value: Any, rule: RuleLike) -> Any:
        """Apply a rule (typed or raw) to a value."""
        return self.build(rule).apply(value)


default_registry = TransformerRegistry()


def build_rule(raw: Optional[RuleLike]) -> Optional[TransformationRule]:
    """Build a rule with the default registry."""
    return default_registry.build(raw)
