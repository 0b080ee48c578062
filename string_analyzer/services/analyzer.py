import hashlib
import re
from collections import Counter
from datetime import datetime, timezone
from typing import Dict

from string_analyzer.schemas import StringProperties, StringRecord

_NON_ALNUM = re.compile(r"[^a-z0-9]")
_WORD = re.compile(r"\b\w+\b", re.ASCII)


def compute_sha256(text: str) -> str:
    """Compute SHA-256 hash of a string"""
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def is_palindrome(text: str) -> bool:
    """Check if string is palindrome (case-insensitive, alphanumerics only)"""
    cleaned = _NON_ALNUM.sub("", text.lower())
    return cleaned == cleaned[::-1]


def count_unique_characters(text: str) -> int:
    """Count distinct characters in string"""
    return len(set(text))


def count_words(text: str) -> int:
    """Count ASCII word tokens in the trimmed string"""
    return len(_WORD.findall(text.strip()))


def get_character_frequency(text: str) -> Dict[str, int]:
    """Get frequency map of each character"""
    return dict(Counter(text))


def analyze_string(value: str) -> StringProperties:
    """Analyze a string and return all computed properties"""
    return StringProperties(
        length=len(value),
        is_palindrome=is_palindrome(value),
        unique_characters=count_unique_characters(value),
        word_count=count_words(value),
        sha256_hash=compute_sha256(value),
        character_frequency_map=get_character_frequency(value),
    )


def build_record(value: str) -> StringRecord:
    """Analyze ``value`` and wrap the result in a new record stamped with the current time."""
    properties = analyze_string(value)
    return StringRecord(
        id=properties.sha256_hash,
        value=value,
        properties=properties,
        created_at=datetime.now(timezone.utc),
    )
