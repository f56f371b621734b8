"""
Introspection Module

Turns schema documents into field paths:
- Schema node model (types, properties, items, constraints)
- Field path extraction (dot paths, [] for array items)
- Schema loading from files or URLs
"""

from .schema_node import DataType, SchemaNode
from .field_paths import FieldPath, extract_fields, iter_field_paths
from .schema_loader import SchemaLoader

__all__ = [
    "DataType",
    "SchemaNode",
    "FieldPath",
    "extract_fields",
    "iter_field_paths",
    "SchemaLoader",
]
