"""
Heuristic translation of free-form queries into filter constraints.

Examples:
- "all single word palindromic strings" -> {is_palindrome: True, word_count: 1}
- "strings longer than 10 characters"   -> {min_length: 11}
- "strings containing the letter z"     -> {contains_character: "z"}

This is substring and regex matching, not language understanding: there is
no negation, no and/or handling and no number words ("five" is not 5).
"""

import logging
import re
from typing import Any, Callable, Dict, List, NamedTuple, Optional

from string_analyzer.errors import QueryParseError

logger = logging.getLogger(__name__)

_LONGER_THAN = re.compile(r"longer than\s*(\d+)")
_SHORTER_THAN = re.compile(r"shorter than\s*(\d+)")
_THE_LETTER = re.compile(r"the letter\s*([a-z])")


class Rule(NamedTuple):
    name: str
    apply: Callable[[str], Optional[Dict[str, Any]]]


def _palindrome(text: str) -> Optional[Dict[str, Any]]:
    if "palindrome" in text or "palindromic" in text:
        return {"is_palindrome": True}
    return None


def _single_word(text: str) -> Optional[Dict[str, Any]]:
    if "single word" in text or "one word" in text:
        return {"word_count": 1}
    return None


def _length_bound(text: str) -> Optional[Dict[str, Any]]:
    # "longer than" takes precedence; the two bounds never combine
    if "longer than" in text:
        match = _LONGER_THAN.search(text)
        return {"min_length": int(match.group(1)) + 1} if match else None
    if "shorter than" in text:
        match = _SHORTER_THAN.search(text)
        return {"max_length": int(match.group(1)) - 1} if match else None
    return None


def _contains_character(text: str) -> Optional[Dict[str, Any]]:
    if "contain" not in text:
        return None
    match = _THE_LETTER.search(text)
    if match:
        return {"contains_character": match.group(1)}
    if "first vowel" in text:
        # Always "a"; the actual vowels of anything are not inspected.
        return {"contains_character": "a"}
    return None


RULES: List[Rule] = [
    Rule("palindrome", _palindrome),
    Rule("single_word", _single_word),
    Rule("length_bound", _length_bound),
    Rule("contains_character", _contains_character),
]


def parse_natural_language_query(query: str) -> Dict[str, Any]:
    """
    Run every rule against the lower-cased query and merge what they produce.

    Raises QueryParseError when no rule recognized anything.
    """
    text = query.lower()
    constraints: Dict[str, Any] = {}

    for rule in RULES:
        effect = rule.apply(text)
        if effect:
            logger.debug(f"Rule {rule.name} matched: {effect}")
            constraints.update(effect)

    if not constraints:
        raise QueryParseError(
            "Unable to parse natural language query. Please try different wording or check spelling."
        )
    return constraints
