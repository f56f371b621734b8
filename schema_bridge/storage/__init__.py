"""Mapping persistence."""

from .stores import MappingStore, JsonFileStore, InMemoryStore
from .repository import MappingRepository, SaveResult, DeleteResult, ImportResult, MappingSummary

__all__ = [
    "MappingStore",
    "JsonFileStore",
    "InMemoryStore",
    "MappingRepository",
    "SaveResult",
    "DeleteResult",
    "ImportResult",
    "MappingSummary",
]
