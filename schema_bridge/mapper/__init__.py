"""Mapping model and field similarity scoring."""

from .mapping import (
    EndpointReference,
    FieldCorrespondence,
    MappingConfiguration,
    ValidationRule,
)
from .heuristic import MappingSuggestion, SimilarityScorer, normalize_name

__all__ = [
    "EndpointReference",
    "FieldCorrespondence",
    "MappingConfiguration",
    "ValidationRule",
    "MappingSuggestion",
    "SimilarityScorer",
    "normalize_name",
]
