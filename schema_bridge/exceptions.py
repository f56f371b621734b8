"""Exception hierarchy for schema-bridge."""
from typing import List, Optional


class SchemaBridgeError(Exception):
    """Base class for all schema-bridge errors."""


class SchemaError(SchemaBridgeError):
    """Raised when a schema node is malformed."""


class SchemaLoadError(SchemaBridgeError):
    """Raised when a schema document cannot be read or fetched."""


class RuleConfigurationError(SchemaBridgeError, ValueError):
    """Raised when a transformation rule has an unknown kind or bad params."""


class RuleApplicationError(SchemaBridgeError):
    """Raised when a value does not fit a transformation rule."""


class PathConflictError(SchemaBridgeError):
    """Raised when a target path runs through a non-object value."""


class InvalidThresholdError(SchemaBridgeError, ValueError):
    """Raised when a confidence threshold falls outside [0, 1]."""


class MappingValidationError(SchemaBridgeError):
    """Raised when a mapping configuration fails structural validation."""

    def __init__(self, errors: List[str], mapping_id: Optional[str] = None):
        self.errors = list(errors)
        self.mapping_id = mapping_id
        prefix = f"Invalid mapping '{mapping_id}'" if mapping_id else "Invalid mapping"
        super().__init__(f"{prefix}: {'; '.join(self.errors)}")


class StoreError(SchemaBridgeError):
    """Raised by a mapping store when its persisted image cannot be used."""
