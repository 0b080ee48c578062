"""
Structured filters over analyzed strings.

Query parameters arrive as raw strings. Each supported parameter has its own
parser; they run in a fixed order and the first present-but-invalid value
stops the build with a FilterValidationError. Parameters that are absent are
ignored.
"""

import re
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from string_analyzer.errors import FilterValidationError
from string_analyzer.schemas import StringProperties

_DIGITS = re.compile(r"^\d+$")


class StringFilter(BaseModel):
    """
    Conjunction of optional constraints on a record's properties.

    Bounds are not range-checked here: query parameters are checked by their
    parsers, and parsed natural-language bounds such as "shorter than 0"
    (max_length -1) are valid filters that match nothing.
    """

    model_config = ConfigDict(frozen=True)

    is_palindrome: Optional[bool] = None
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    word_count: Optional[int] = None
    contains_character: Optional[str] = Field(None, min_length=1, max_length=1)

    def applied(self) -> Dict[str, Any]:
        """Constraints that are actually set, in canonical order."""
        return self.model_dump(exclude_none=True)

    def matches(self, properties: StringProperties) -> bool:
        if self.is_palindrome is not None and properties.is_palindrome != self.is_palindrome:
            return False
        if self.min_length is not None and properties.length < self.min_length:
            return False
        if self.max_length is not None and properties.length > self.max_length:
            return False
        if self.word_count is not None and properties.word_count != self.word_count:
            return False
        if (
            self.contains_character is not None
            and self.contains_character not in properties.character_frequency_map
        ):
            return False
        return True


def _parse_bool(field: str, raw: str) -> bool:
    if raw not in ("true", "false"):
        raise FilterValidationError(
            field, f"Invalid value for '{field}'. Must be 'true' or 'false'."
        )
    return raw == "true"


def _parse_non_negative_int(field: str, raw: str) -> int:
    stripped = raw.strip()
    if not _DIGITS.match(stripped):
        raise FilterValidationError(
            field, f"Invalid value for '{field}'. Must be a non-negative integer."
        )
    return int(stripped)


def _parse_character(field: str, raw: str) -> str:
    if len(raw) != 1:
        raise FilterValidationError(
            field, f"Invalid value for '{field}'. Must be a single character string."
        )
    return raw


# Validation order matters: the first failure is the one reported.
FILTER_PARAMETERS: Tuple[Tuple[str, Callable[[str, str], Any]], ...] = (
    ("is_palindrome", _parse_bool),
    ("min_length", _parse_non_negative_int),
    ("max_length", _parse_non_negative_int),
    ("word_count", _parse_non_negative_int),
    ("contains_character", _parse_character),
)


def build_filter(params: Mapping[str, Optional[str]]) -> StringFilter:
    """Validate raw query parameters and assemble a StringFilter."""
    values = {}
    for field, parse in FILTER_PARAMETERS:
        raw = params.get(field)
        if raw is None:
            continue
        values[field] = parse(field, raw)
    return StringFilter(**values)


def filter_from_constraints(constraints: Mapping[str, Any]) -> StringFilter:
    """Build a filter from already-typed constraints, such as parsed natural-language ones."""
    known = {field: constraints[field] for field, _ in FILTER_PARAMETERS if field in constraints}
    return StringFilter(**known)
