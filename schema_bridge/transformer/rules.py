"""
Transformation Rules - Typed value conversions applied per field correspondence.

Each rule kind is its own class carrying only its own parameters:
- direct: identity
- format: table-driven type/format conversion (string↔number, string↔boolean, date↔date-time)
- split / join: string ↔ list with a separator
- lookup: value table translation
- custom: recognized but never executed
"""

import math
import re
from dataclasses import dataclass, field as dataclass_field
from datetime import date, datetime, timezone
from typing import Any, Callable, ClassVar, Dict, Optional, Tuple
import logging

from schema_bridge.exceptions import RuleApplicationError, RuleConfigurationError

logger = logging.getLogger(__name__)

NUMBER_PATTERN = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?$")
INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}


def stringify(value: Any) -> str:
    """Render a JSON value as text (true/false, 42 rather than 42.0)"""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _require_string(value: Any, conversion: str) -> str:
    if not isinstance(value, str):
        raise RuleApplicationError(f"{conversion} requires string input, got {type(value).__name__}")
    return value


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# ============================================================================
# Format conversions
# ============================================================================


def _string_to_number(value: Any) -> Any:
    text = _require_string(value, "string→number").strip()
    if not NUMBER_PATTERN.match(text):
        raise RuleApplicationError(f"Cannot convert '{value}' to number")
    if INTEGER_PATTERN.match(text):
        return int(text)
    number = float(text)
    if not math.isfinite(number):
        raise RuleApplicationError(f"Cannot convert '{value}' to number")
    return number


def _string_to_integer(value: Any) -> int:
    text = _require_string(value, "string→integer").strip()
    if not INTEGER_PATTERN.match(text):
        raise RuleApplicationError(f"Cannot convert '{value}' to integer")
    return int(text)


def _number_to_string(value: Any) -> str:
    if not _is_number(value):
        raise RuleApplicationError(f"number→string requires numeric input, got {type(value).__name__}")
    return stringify(value)


def _string_to_boolean(value: Any) -> bool:
    text = _require_string(value, "string→boolean").strip().lower()
    if text in TRUE_VALUES:
        return True
    if text in FALSE_VALUES:
        return False
    raise RuleApplicationError(f"Cannot convert '{value}' to boolean")


def _boolean_to_string(value: Any) -> str:
    if not isinstance(value, bool):
        raise RuleApplicationError(f"boolean→string requires boolean input, got {type(value).__name__}")
    return "true" if value else "false"


def _parse_datetime(text: str) -> datetime:
    """Parse an ISO-8601 date or date-time; naive values are taken as UTC"""
    candidate = text.strip()
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    parsed = datetime.fromisoformat(candidate)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _format_timestamp(moment: datetime) -> str:
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def _date_to_datetime(value: Any) -> str:
    text = _require_string(value, "date→date-time")
    try:
        if len(text.strip()) == 10:
            day = date.fromisoformat(text.strip())
            moment = datetime(day.year, day.month, day.day, tzinfo=timezone.utc)
        else:
            moment = _parse_datetime(text)
    except ValueError as e:
        raise RuleApplicationError(f"Invalid date: {value}") from e
    return _format_timestamp(moment)


def _datetime_to_date(value: Any) -> str:
    text = _require_string(value, "date-time→date")
    try:
        moment = _parse_datetime(text)
    except ValueError as e:
        raise RuleApplicationError(f"Invalid date-time: {value}") from e
    return moment.date().isoformat()


FORMAT_CONVERSIONS: Dict[Tuple[str, str], Callable[[Any], Any]] = {
    ("string", "number"): _string_to_number,
    ("string", "integer"): _string_to_integer,
    ("number", "string"): _number_to_string,
    ("integer", "string"): _number_to_string,
    ("string", "boolean"): _string_to_boolean,
    ("boolean", "string"): _boolean_to_string,
    ("date", "date-time"): _date_to_datetime,
    ("date-time", "date"): _datetime_to_date,
}


# ============================================================================
# Rule variants
# ============================================================================


class TransformationRule:
    """Base class for all rule kinds"""

    kind: ClassVar[str] = ""

    def apply(self, value: Any) -> Any:
        raise NotImplementedError

    def params(self) -> Dict[str, Any]:
        return {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the persisted {type, params} form"""
        result: Dict[str, Any] = {"type": self.kind}
        params = self.params()
        if params:
            result["params"] = params
        return result

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "TransformationRule":
        return cls()


@dataclass(frozen=True)
class DirectRule(TransformationRule):
    """Copy the value unchanged"""

    kind: ClassVar[str] = "direct"

    def apply(self, value: Any) -> Any:
        return value


@dataclass(frozen=True)
class FormatRule(TransformationRule):
    """Convert between type/format tags; unknown pairs pass the value through"""

    from_type: str
    to_type: str

    kind: ClassVar[str] = "format"

    def __post_init__(self):
        for name, tag in (("from", self.from_type), ("to", self.to_type)):
            if not isinstance(tag, str) or not tag:
                raise RuleConfigurationError(f"Format rule requires a non-empty '{name}' tag")

    def apply(self, value: Any) -> Any:
        conversion = FORMAT_CONVERSIONS.get((self.from_type, self.to_type))
        if conversion is None:
            return value
        return conversion(value)

    def params(self) -> Dict[str, Any]:
        return {"from": self.from_type, "to": self.to_type}

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "FormatRule":
        return cls(from_type=params.get("from"), to_type=params.get("to"))


@dataclass(frozen=True)
class SplitRule(TransformationRule):
    """Split a string into trimmed pieces"""

    separator: str = ","

    kind: ClassVar[str] = "split"

    def __post_init__(self):
        if not isinstance(self.separator, str) or not self.separator:
            raise RuleConfigurationError("Split rule separator must be a non-empty string")

    def apply(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise RuleApplicationError("Split transformation requires string input")
        return [piece.strip() for piece in value.split(self.separator)]

    def params(self) -> Dict[str, Any]:
        return {"separator": self.separator}

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "SplitRule":
        return cls(separator=params.get("separator") or ",")


@dataclass(frozen=True)
class JoinRule(TransformationRule):
    """Join a list into a single string"""

    separator: str = ", "

    kind: ClassVar[str] = "join"

    def __post_init__(self):
        if not isinstance(self.separator, str):
            raise RuleConfigurationError("Join rule separator must be a string")

    def apply(self, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            raise RuleApplicationError("Join transformation requires array input")
        return self.separator.join("" if item is None else stringify(item) for item in value)

    def params(self) -> Dict[str, Any]:
        return {"separator": self.separator}

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "JoinRule":
        separator = params.get("separator")
        return cls(separator=", " if separator is None else separator)


@dataclass(frozen=True)
class LookupRule(TransformationRule):
    """Translate values through a table; misses pass through"""

    table: Dict[str, Any] = dataclass_field(default_factory=dict)

    kind: ClassVar[str] = "lookup"

    def __post_init__(self):
        if not isinstance(self.table, dict):
            raise RuleConfigurationError("Lookup rule requires a lookup table")

    def apply(self, value: Any) -> Any:
        return self.table.get(stringify(value), value)

    def params(self) -> Dict[str, Any]:
        return {"table": dict(self.table)}

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "LookupRule":
        if "table" not in params:
            raise RuleConfigurationError("Lookup rule requires a lookup table")
        return cls(table=params["table"])


@dataclass(frozen=True)
class CustomRule(TransformationRule):
    """Named custom logic; stored and round-tripped but never executed"""

    function: Optional[str] = None

    kind: ClassVar[str] = "custom"

    def __post_init__(self):
        if self.function is not None and not isinstance(self.function, str):
            raise RuleConfigurationError("Custom rule function must be a string identifier")

    def apply(self, value: Any) -> Any:
        name = self.function or "<unnamed>"
        raise RuleApplicationError(f"Custom transformation '{name}' is not supported")

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        if self.function:
            result["function"] = self.function
        return result

    @classmethod
    def from_params(cls, params: Dict[str, Any], raw: Dict[str, Any]) -> "CustomRule":
        return cls(function=raw.get("function") or params.get("function"))
