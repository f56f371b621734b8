"""Heuristic mapping engine for suggesting field correspondences between schemas."""
from dataclasses import dataclass
from typing import Any, Dict, FrozenSet, List, Optional, Union
import logging

from schema_bridge.introspection.field_paths import FieldPath, extract_fields
from schema_bridge.introspection.schema_node import DataType, SchemaNode
from schema_bridge.mapper.mapping import FieldCorrespondence
from schema_bridge.transformer.rules import (
    DirectRule,
    FormatRule,
    JoinRule,
    SplitRule,
    TransformationRule,
)

logger = logging.getLogger(__name__)

SchemaLike = Union[SchemaNode, Dict[str, Any]]

DEFAULT_CONFIDENCE_THRESHOLD = 0.7

DATE_FORMATS = {"date", "date-time"}


def normalize_name(name: str) -> str:
    """Lower-case, drop '-' and '_', drop trailing '[]'."""
    normalized = name.lower().replace("-", "").replace("_", "")
    while normalized.endswith("[]"):
        normalized = normalized[:-2]
    return normalized


@dataclass
class MappingSuggestion:
    """A scored candidate correspondence; never persisted as-is."""

    confidence: float
    source_field: str
    target_field: str
    reasoning: str
    suggested_transformation: Optional[TransformationRule] = None
    source_type: Optional[str] = None
    target_type: Optional[str] = None

    def to_correspondence(self, required: bool = False) -> FieldCorrespondence:
        """Turn an accepted suggestion into a persistable correspondence."""
        return FieldCorrespondence(
            source_field=self.source_field,
            target_field=self.target_field,
            source_type=self.source_type,
            target_type=self.target_type,
            transformation=self.suggested_transformation,
            required=required,
            description=self.reasoning,
            confidence=self.confidence,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        result = {
            "confidence": self.confidence,
            "sourceField": self.source_field,
            "targetField": self.target_field,
            "reasoning": self.reasoning,
        }
        if self.suggested_transformation is not None:
            result["suggestedTransformation"] = self.suggested_transformation.to_dict()
        return result


class SimilarityScorer:
    """Score every source × target field pair and keep the likely ones."""

    EXACT_MATCH_WEIGHT = 0.5
    CASE_INSENSITIVE_WEIGHT = 0.3
    NORMALIZED_MATCH_WEIGHT = 0.2
    SYNONYM_WEIGHT = 0.3
    SUBSTRING_WEIGHT = 0.1
    TYPE_WEIGHT = 0.3

    SYNONYMS = {
        "email": ["mail", "e_mail", "email_address", "emailaddress"],
        "phone": ["telephone", "tel", "phone_number", "phonenumber", "mobile", "contact_number", "contactnumber"],
        "name": ["fullname", "full_name", "display_name", "displayname"],
        "firstName": ["first_name", "firstname", "given_name", "givenname"],
        "lastName": ["last_name", "lastname", "family_name", "familyname", "surname"],
        "street": ["address", "street_address", "streetaddress", "street1"],
        "city": ["location", "town"],
        "state": ["province", "region"],
        "zipCode": ["zip", "postal_code", "postalcode", "postcode"],
        "country": ["nation"],
        "birthDate": ["birth_date", "birthdate", "dob", "date_of_birth", "dateofbirth"],
        "companyName": ["company", "organization", "org_name", "orgname", "business_name", "businessname"],
        "status": ["state", "condition"],
        "createdAt": ["created_date", "createddate", "creation_date", "created_on", "created"],
        "updatedAt": ["updated_date", "updateddate", "last_modified", "lastmodified", "modified_at", "modifiedat"],
        "id": ["identifier", "uid", "unique_id", "uniqueid", "entity_id", "entityid"],
    }

    def __init__(self, synonyms: Optional[Dict[str, List[str]]] = None):
        """Initialize scorer with an optional replacement synonym table."""
        table = synonyms if synonyms is not None else self.SYNONYMS
        self.synonym_groups: List[FrozenSet[str]] = [
            frozenset(normalize_name(name) for name in [canonical, *variants])
            for canonical, variants in table.items()
        ]

    def suggest(
        self,
        source_schema: SchemaLike,
        target_schema: SchemaLike,
        threshold: float = DEFAULT_CONFIDENCE_THRESHOLD,
    ) -> List[MappingSuggestion]:
        """Return suggestions scoring at least `threshold`, best first."""
        source_fields = extract_fields(source_schema)
        target_fields = extract_fields(target_schema)
        suggestions = []

        for source in source_fields:
            for target in target_fields:
                confidence = self.score(source, target)
                if confidence < threshold:
                    continue

                suggestions.append(
                    MappingSuggestion(
                        confidence=confidence,
                        source_field=source.path,
                        target_field=target.path,
                        reasoning=self.explain(source, target, confidence),
                        suggested_transformation=self.suggest_transformation(source.node, target.node),
                        source_type=source.type.value,
                        target_type=target.type.value,
                    )
                )

        suggestions.sort(key=lambda s: s.confidence, reverse=True)
        logger.info(
            f"Scored {len(source_fields)}x{len(target_fields)} field pairs, "
            f"{len(suggestions)} above {threshold:.2f}"
        )
        return suggestions

    def score(self, source: FieldPath, target: FieldPath) -> float:
        """Additive similarity score in [0, 1]."""
        score = 0.0

        if source.path == target.path:
            score += self.EXACT_MATCH_WEIGHT

        if source.path.lower() == target.path.lower():
            score += self.CASE_INSENSITIVE_WEIGHT

        normalized_source = normalize_name(source.path)
        normalized_target = normalize_name(target.path)

        if normalized_source == normalized_target:
            score += self.NORMALIZED_MATCH_WEIGHT

        score += self.synonym_score(normalized_source, normalized_target) * self.SYNONYM_WEIGHT

        if normalized_source in normalized_target or normalized_target in normalized_source:
            score += self.SUBSTRING_WEIGHT

        score += self.type_compatibility(source.type, target.type) * self.TYPE_WEIGHT

        return round(min(score, 1.0), 4)

    def synonym_score(self, normalized_a: str, normalized_b: str) -> float:
        """1.0 if both normalized names share a synonym group, else 0.0."""
        for group in self.synonym_groups:
            if normalized_a in group and normalized_b in group:
                return 1.0
        return 0.0

    @staticmethod
    def type_compatibility(type_a: DataType, type_b: DataType) -> float:
        """1.0 for equal types, 0.7 for number/integer or string/null, else 0.0."""
        if type_a == type_b:
            return 1.0
        pair = {type_a, type_b}
        if pair == {DataType.NUMBER, DataType.INTEGER}:
            return 0.7
        if pair == {DataType.STRING, DataType.NULL}:
            return 0.7
        return 0.0

    @staticmethod
    def suggest_transformation(source: SchemaNode, target: SchemaNode) -> Optional[TransformationRule]:
        """Guess the rule needed to carry a source value into the target field."""
        if (
            source.type == target.type == DataType.STRING
            and source.format != target.format
            and {source.format, target.format} == DATE_FORMATS
        ):
            return FormatRule(from_type=source.format, to_type=target.format)

        if source.type == target.type:
            return DirectRule()

        numeric = (DataType.NUMBER, DataType.INTEGER)
        if source.type == DataType.STRING and target.type in numeric:
            return FormatRule(from_type="string", to_type=target.type.value)
        if source.type in numeric and target.type == DataType.STRING:
            return FormatRule(from_type=source.type.value, to_type="string")

        if source.type == DataType.ARRAY and target.type == DataType.STRING:
            return JoinRule()
        if source.type == DataType.STRING and target.type == DataType.ARRAY:
            return SplitRule()

        return None

    def explain(self, source: FieldPath, target: FieldPath, confidence: float) -> str:
        """Human-readable summary of what contributed to a score."""
        reasons = []

        normalized_source = normalize_name(source.path)
        normalized_target = normalize_name(target.path)

        if source.path == target.path:
            reasons.append("Exact field name match")
        elif normalized_source == normalized_target:
            reasons.append("Field names match after normalization")

        if self.synonym_score(normalized_source, normalized_target) > 0:
            reasons.append("Field names are synonyms")

        if source.type == target.type:
            reasons.append(f"Same data type ({source.type.value})")
        else:
            reasons.append(f"Type conversion needed: {source.type.value} → {target.type.value}")

        reasons.append(f"Confidence: {confidence * 100:.1f}%")
        return "; ".join(reasons)
