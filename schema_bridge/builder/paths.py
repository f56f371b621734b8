"""
Nested path access for JSON payloads.

Reads return MISSING (not None) when a path does not exist, so an absent key
and an explicit null stay distinguishable.
"""

from typing import Any, Dict, List

from schema_bridge.exceptions import PathConflictError
from schema_bridge.introspection.schema_node import PATH_DELIMITER


class _Missing:
    """Sentinel for a path that does not resolve to a value"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "MISSING"

    def __bool__(self):
        return False


MISSING = _Missing()


def split_path(path: str) -> List[str]:
    """Split a dot path into segments; an empty path is an error"""
    if not path:
        raise ValueError("Field path is undefined or empty")
    return path.split(PATH_DELIMITER)


def get_path(payload: Any, path: str) -> Any:
    """Walk dot segments through nested objects; MISSING if any step is absent"""
    current = payload
    for segment in split_path(path):
        if not isinstance(current, dict) or segment not in current:
            return MISSING
        current = current[segment]
    return current


def set_path(payload: Dict[str, Any], path: str, value: Any) -> None:
    """
    Write a value at a dot path, creating intermediate objects

    Raises:
        PathConflictError: If an intermediate segment holds a non-object value
    """
    segments = split_path(path)
    current = payload
    for depth, segment in enumerate(segments[:-1]):
        if segment not in current or current[segment] is None:
            current[segment] = {}
        elif not isinstance(current[segment], dict):
            walked = PATH_DELIMITER.join(segments[: depth + 1])
            raise PathConflictError(f"Cannot write '{path}': '{walked}' is not an object")
        current = current[segment]
    current[segments[-1]] = value
