"""Tests for the pure string analysis functions."""

import hashlib
import re

import pytest

from string_analyzer.services.analyzer import (
    analyze_string,
    build_record,
    compute_sha256,
    count_words,
    get_character_frequency,
    is_palindrome,
)


class TestAnalyzeString:
    def test_hello(self):
        props = analyze_string("hello")
        assert props.length == 5
        assert props.unique_characters == 4
        assert props.word_count == 1
        assert props.is_palindrome is False
        assert props.character_frequency_map == {"h": 1, "e": 1, "l": 2, "o": 1}

    def test_empty_string(self):
        props = analyze_string("")
        assert props.length == 0
        assert props.is_palindrome is True
        assert props.unique_characters == 0
        assert props.word_count == 0
        assert props.character_frequency_map == {}

    def test_hash_matches_hashlib(self):
        props = analyze_string("hello")
        assert props.sha256_hash == hashlib.sha256(b"hello").hexdigest()
        assert re.fullmatch(r"[a-f0-9]{64}", props.sha256_hash)

    def test_deterministic(self):
        assert analyze_string("same text") == analyze_string("same text")

    def test_frequency_counts_whitespace_and_punctuation(self):
        freq = get_character_frequency("a b, a!")
        assert freq == {"a": 2, " ": 2, "b": 1, ",": 1, "!": 1}

    def test_unique_characters_are_case_sensitive(self):
        assert analyze_string("aA").unique_characters == 2

    def test_length_counts_characters_not_bytes(self):
        assert analyze_string("héllo").length == 5


class TestPalindrome:
    @pytest.mark.parametrize("text", [
        "A man a plan a canal Panama",
        "racecar",
        "Was it a car or a cat I saw?",
        "12321",
        "",
        "!!!",
    ])
    def test_palindromes(self, text):
        assert is_palindrome(text) is True

    @pytest.mark.parametrize("text", ["hello", "ab", "123"])
    def test_not_palindromes(self, text):
        assert is_palindrome(text) is False


class TestCountWords:
    def test_surrounding_whitespace_ignored(self):
        assert count_words("   hello   world  ") == 2

    def test_punctuation_splits_words(self):
        assert count_words("don't stop") == 3

    def test_underscores_join_words(self):
        assert count_words("snake_case name") == 2

    def test_no_words(self):
        assert count_words("  ?! ") == 0

    def test_non_ascii_letters_split_words(self):
        assert count_words("naïve") == 2

    def test_non_ascii_only_text_has_no_words(self):
        assert count_words("日本語") == 0
        assert analyze_string("日本語").word_count == 0


class TestBuildRecord:
    def test_id_is_content_hash(self):
        record = build_record("hello world")
        assert record.id == compute_sha256("hello world")
        assert record.id == record.properties.sha256_hash
        assert record.value == "hello world"

    def test_created_at_is_timezone_aware(self):
        record = build_record("x")
        assert record.created_at.tzinfo is not None
