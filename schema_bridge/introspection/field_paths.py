"""
Field Paths - Flattens a schema tree into addressable dot-delimited paths.

Objects contribute one path per property ("address.city"), arrays contribute
an empty-bracket segment for their items ("tags[]", "orders[].id").
"""

from typing import Any, Dict, Iterator, List, NamedTuple, Union
import logging

from .schema_node import DataType, SchemaNode, PATH_DELIMITER

logger = logging.getLogger(__name__)

ARRAY_MARKER = "[]"


class FieldPath(NamedTuple):
    """A field path and the schema node found at it"""
    path: str
    node: SchemaNode

    @property
    def type(self) -> DataType:
        return self.node.type


def _as_node(schema: Union[SchemaNode, Dict[str, Any]]) -> SchemaNode:
    if isinstance(schema, SchemaNode):
        return schema
    return SchemaNode.from_dict(schema)


def iter_field_paths(schema: Union[SchemaNode, Dict[str, Any]], prefix: str = "") -> Iterator[FieldPath]:
    """
    Walk a schema tree depth-first, yielding every addressable field

    Properties are visited in declaration order, so the same tree always
    yields the same sequence. Each call starts a fresh walk.
    """
    node = _as_node(schema)

    if node.type == DataType.OBJECT:
        for name, prop in node.properties.items():
            field_path = f"{prefix}{PATH_DELIMITER}{name}" if prefix else name
            yield FieldPath(field_path, prop)
            if prop.is_container():
                yield from iter_field_paths(prop, field_path)

    elif node.type == DataType.ARRAY and node.items is not None:
        array_path = f"{prefix}{ARRAY_MARKER}"
        yield FieldPath(array_path, node.items)
        if node.items.is_container():
            yield from iter_field_paths(node.items, array_path)


def extract_fields(schema: Union[SchemaNode, Dict[str, Any]]) -> List[FieldPath]:
    """Return all field paths of a schema tree, in walk order"""
    fields = list(iter_field_paths(schema))
    logger.debug(f"Extracted {len(fields)} field paths")
    return fields
