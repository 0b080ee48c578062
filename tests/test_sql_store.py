"""Tests for the SQLAlchemy store against in-memory SQLite."""

from datetime import timezone

import pytest
from sqlalchemy.dialects import mysql, sqlite

from string_analyzer.crud.sql import contains_character_clause
from string_analyzer.errors import DuplicateRecordError
from string_analyzer.services.analyzer import build_record
from string_analyzer.services.filters import StringFilter, build_filter


@pytest.fixture
def seeded_store(sql_store):
    for value in ["hello", "racecar", "Level", "zz top", "100% sure", "under_score"]:
        sql_store.create(build_record(value))
    return sql_store


def _values(records):
    return sorted(r.value for r in records)


class TestCreateAndFind:
    def test_round_trip(self, sql_store):
        record = build_record("hello world")
        created = sql_store.create(record)
        assert created.id == record.id
        assert created.properties == record.properties

        found = sql_store.find_one(record.id)
        assert found == created

    def test_find_missing(self, sql_store):
        assert sql_store.find_one("0" * 64) is None

    def test_duplicate_rejected(self, sql_store):
        sql_store.create(build_record("dup"))
        with pytest.raises(DuplicateRecordError) as exc_info:
            sql_store.create(build_record("dup"))
        assert exc_info.value.record_id == build_record("dup").id
        # Store is still usable after the failed insert
        assert sql_store.count(StringFilter()) == 1

    def test_created_at_is_timezone_aware(self, sql_store):
        record = build_record("stamp")
        created = sql_store.create(record)
        assert created.created_at.tzinfo is not None
        assert created.created_at.utcoffset() == timezone.utc.utcoffset(None)
        assert created.created_at == record.created_at
        assert sql_store.find_one(record.id).created_at == record.created_at

    def test_serializes_like_memory_store(self, sql_store, memory_store):
        record = build_record("same shape")
        from_sql = sql_store.create(record)
        from_memory = memory_store.create(record)
        assert from_sql.model_dump(mode="json") == from_memory.model_dump(mode="json")


class TestFilters:
    def test_no_filter(self, seeded_store):
        assert seeded_store.count(StringFilter()) == 6
        assert len(seeded_store.find_many(StringFilter())) == 6

    def test_palindrome(self, seeded_store):
        string_filter = build_filter({"is_palindrome": "true"})
        assert _values(seeded_store.find_many(string_filter)) == ["Level", "racecar"]
        assert seeded_store.count(string_filter) == 2

    def test_length_range(self, seeded_store):
        string_filter = build_filter({"min_length": "5", "max_length": "6"})
        assert _values(seeded_store.find_many(string_filter)) == ["Level", "hello", "zz top"]

    def test_word_count(self, seeded_store):
        string_filter = build_filter({"word_count": "2"})
        assert _values(seeded_store.find_many(string_filter)) == ["100% sure", "zz top"]

    def test_contains_character_is_case_sensitive(self, seeded_store):
        assert _values(seeded_store.find_many(build_filter({"contains_character": "L"}))) == ["Level"]
        assert _values(seeded_store.find_many(build_filter({"contains_character": "l"}))) == [
            "Level",
            "hello",
        ]

    @pytest.mark.parametrize("character,expected", [("%", ["100% sure"]), ("_", ["under_score"])])
    def test_contains_wildcard_characters_literally(self, seeded_store, character, expected):
        string_filter = build_filter({"contains_character": character})
        assert _values(seeded_store.find_many(string_filter)) == expected

    def test_negative_bound_matches_nothing(self, seeded_store):
        string_filter = StringFilter(max_length=-1)
        assert seeded_store.find_many(string_filter) == []
        assert seeded_store.count(string_filter) == 0

    def test_matches_in_memory_semantics(self, seeded_store, memory_store):
        for record in seeded_store.find_many(StringFilter()):
            memory_store.create(record)
        for params in [
            {"is_palindrome": "false"},
            {"min_length": "6"},
            {"max_length": "5", "contains_character": "e"},
            {"word_count": "1", "is_palindrome": "true"},
        ]:
            string_filter = build_filter(params)
            assert _values(seeded_store.find_many(string_filter)) == _values(
                memory_store.find_many(string_filter)
            )
            assert seeded_store.count(string_filter) == memory_store.count(string_filter)


class TestContainsCharacterClause:
    def test_mysql_compares_binary(self):
        sql = str(contains_character_clause("a", "mysql").compile(dialect=mysql.dialect()))
        assert "COLLATE utf8mb4_bin" in sql
        assert "instr" in sql.lower()

    def test_sqlite_uses_plain_instr(self):
        sql = str(contains_character_clause("a", "sqlite").compile(dialect=sqlite.dialect()))
        assert "COLLATE" not in sql
        assert "instr" in sql.lower()


class TestDelete:
    def test_delete(self, sql_store):
        record = sql_store.create(build_record("bye"))
        assert sql_store.delete_one(record.id) is True
        assert sql_store.find_one(record.id) is None
        assert sql_store.delete_one(record.id) is False


class TestApiOverSql:
    def test_create_conflict_and_delete(self, sql_client):
        first = sql_client.post("/strings", json={"value": "madam"})
        second = sql_client.post("/strings", json={"value": "madam"})
        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["data"] == first.json()

        listing = sql_client.get("/strings", params={"is_palindrome": "true"}).json()
        assert listing["count"] == 1

        assert sql_client.delete("/strings/madam").status_code == 204
        assert sql_client.get("/strings/madam").status_code == 404
