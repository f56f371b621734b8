"""
Payload Builder Module

Reshapes source payloads into the target schema with:
- Nested path reads and writes
- Per-field transformation rules
- Partial-failure results with itemized errors and warnings
- Example payload generation
"""

from .paths import MISSING, get_path, set_path
from .payload_builder import PayloadBuilder, TransformResult, FieldError, FieldOutcome

__all__ = [
    "MISSING",
    "get_path",
    "set_path",
    "PayloadBuilder",
    "TransformResult",
    "FieldError",
    "FieldOutcome",
]
