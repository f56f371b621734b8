"""Transformation rules and their registry."""

from .rules import (
    TransformationRule,
    DirectRule,
    FormatRule,
    SplitRule,
    JoinRule,
    LookupRule,
    CustomRule,
)
from .registry import TransformerRegistry, build_rule

__all__ = [
    "TransformationRule",
    "DirectRule",
    "FormatRule",
    "SplitRule",
    "JoinRule",
    "LookupRule",
    "CustomRule",
    "TransformerRegistry",
    "build_rule",
]
