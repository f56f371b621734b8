"""
Schema Node - Normalized schema tree consumed by field extraction and scoring.

Supports:
- JSON types (string, number, integer, boolean, array, object, null)
- Nested object properties and array items
- Format, enum, pattern and min/max constraints
- Default/example values
"""

from dataclasses import dataclass, field as dataclass_field
from typing import Any, Dict, List, Optional
from enum import Enum
import logging

from schema_bridge.exceptions import SchemaError

logger = logging.getLogger(__name__)

PATH_DELIMITER = "."


class DataType(str, Enum):
    """Supported data types in a schema tree"""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    NULL = "null"

    @classmethod
    def parse(cls, value: Any) -> Optional["DataType"]:
        """Return the DataType for a raw value, or None if it is not one."""
        if isinstance(value, DataType):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            return None


@dataclass
class SchemaNode:
    """A single node of a normalized schema tree"""
    type: DataType
    properties: Dict[str, "SchemaNode"] = dataclass_field(default_factory=dict)
    items: Optional["SchemaNode"] = None
    format: Optional[str] = None
    description: str = ""
    enum: List[Any] = dataclass_field(default_factory=list)
    pattern: Optional[str] = None
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    required: List[str] = dataclass_field(default_factory=list)
    default: Any = None
    example: Any = None

    def __post_init__(self):
        if self.properties and self.type != DataType.OBJECT:
            raise SchemaError(f"'properties' is only allowed on object nodes, not {self.type.value}")
        if self.items is not None and self.type != DataType.ARRAY:
            raise SchemaError(f"'items' is only allowed on array nodes, not {self.type.value}")
        for name in self.properties:
            if not name or PATH_DELIMITER in name:
                raise SchemaError(f"Invalid property name: {name!r}")

    def is_container(self) -> bool:
        """Check if node is an object or array"""
        return self.type in (DataType.OBJECT, DataType.ARRAY)

    @classmethod
    def from_dict(cls, schema_obj: Dict[str, Any]) -> "SchemaNode":
        """
        Build a SchemaNode tree from a plain schema dictionary

        A missing type defaults to object (as in OpenAPI), a type list such as
        ["string", "null"] resolves to its first non-null entry.

        Raises:
            SchemaError: If the dictionary does not describe a valid node
        """
        if not isinstance(schema_obj, dict):
            raise SchemaError(f"Schema node must be an object, got {type(schema_obj).__name__}")

        raw_type = schema_obj.get("type", "object")
        if isinstance(raw_type, list):
            candidates = [t for t in raw_type if t != "null"] or ["null"]
            raw_type = candidates[0]

        node_type = DataType.parse(raw_type)
        if node_type is None:
            raise SchemaError(f"Unknown schema type: {raw_type!r}")

        properties = {}
        raw_properties = schema_obj.get("properties")
        if raw_properties:
            if not isinstance(raw_properties, dict):
                raise SchemaError("'properties' must be an object")
            properties = {
                name: cls.from_dict(prop_schema)
                for name, prop_schema in raw_properties.items()
            }

        items = None
        raw_items = schema_obj.get("items")
        if raw_items is not None:
            items = cls.from_dict(raw_items)

        return cls(
            type=node_type,
            properties=properties,
            items=items,
            format=schema_obj.get("format"),
            description=schema_obj.get("description", ""),
            enum=list(schema_obj.get("enum", [])),
            pattern=schema_obj.get("pattern"),
            minimum=schema_obj.get("minimum"),
            maximum=schema_obj.get("maximum"),
            min_length=schema_obj.get("minLength"),
            max_length=schema_obj.get("maxLength"),
            required=list(schema_obj.get("required", [])),
            default=schema_obj.get("default"),
            example=schema_obj.get("example"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation"""
        result: Dict[str, Any] = {"type": self.type.value}
        if self.properties:
            result["properties"] = {k: v.to_dict() for k, v in self.properties.items()}
        if self.items is not None:
            result["items"] = self.items.to_dict()
        optional = {
            "format": self.format,
            "description": self.description or None,
            "enum": self.enum or None,
            "pattern": self.pattern,
            "minimum": self.minimum,
            "maximum": self.maximum,
            "minLength": self.min_length,
            "maxLength": self.max_length,
            "required": self.required or None,
            "default": self.default,
            "example": self.example,
        }
        result.update({k: v for k, v in optional.items() if v is not None})
        return result
