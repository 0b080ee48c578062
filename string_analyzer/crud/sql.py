from sqlalchemy import and_, func
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Query, Session
from datetime import timezone
from typing import List, Optional
import logging

from string_analyzer.crud.base import StringStore
from string_analyzer.database import create_db_engine, create_session_factory, init_db
from string_analyzer.errors import DuplicateRecordError, StoreError
from string_analyzer.models.string_record import StringRecordRow
from string_analyzer.schemas import StringProperties, StringRecord
from string_analyzer.services.filters import StringFilter

logger = logging.getLogger(__name__)


def _to_record(row: StringRecordRow) -> StringRecord:
    created_at = row.created_at
    # SQLite drops the offset; timestamps are always written in UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return StringRecord(
        id=row.id,
        value=row.value,
        properties=StringProperties.model_validate(row),
        created_at=created_at,
    )


def contains_character_clause(character: str, dialect_name: str):
    """Case- and accent-sensitive "value contains character" for the given dialect"""
    value = StringRecordRow.value
    if dialect_name == "mysql":
        # Default MySQL collations fold case and accents
        value = value.collate("utf8mb4_bin")
    return func.instr(value, character) > 0


def _filtered_query(db: Session, string_filter: StringFilter) -> Query:
    """Translate a StringFilter into a query over StringRecordRow"""
    query = db.query(StringRecordRow)

    filters = []

    if string_filter.is_palindrome is not None:
        filters.append(StringRecordRow.is_palindrome == string_filter.is_palindrome)

    if string_filter.min_length is not None:
        filters.append(StringRecordRow.length >= string_filter.min_length)

    if string_filter.max_length is not None:
        filters.append(StringRecordRow.length <= string_filter.max_length)

    if string_filter.word_count is not None:
        filters.append(StringRecordRow.word_count == string_filter.word_count)

    if string_filter.contains_character is not None:
        # A character is a frequency map key exactly when it occurs in the value
        filters.append(
            contains_character_clause(string_filter.contains_character, db.get_bind().dialect.name)
        )

    if filters:
        query = query.filter(and_(*filters))

    return query


class SQLStringStore(StringStore):
    """SQLAlchemy-backed store; every operation runs in its own session."""

    def __init__(self, engine: Engine):
        self._engine = engine
        self._session_factory = create_session_factory(engine)

    @classmethod
    def from_url(cls, database_url: str) -> "SQLStringStore":
        return cls(create_db_engine(database_url))

    def init(self):
        init_db(self._engine)

    def create(self, record: StringRecord) -> StringRecord:
        properties = record.properties
        row = StringRecordRow(
            id=record.id,
            value=record.value,
            length=properties.length,
            is_palindrome=properties.is_palindrome,
            unique_characters=properties.unique_characters,
            word_count=properties.word_count,
            sha256_hash=properties.sha256_hash,
            character_frequency_map=dict(properties.character_frequency_map),
            created_at=record.created_at,
        )

        with self._session_factory() as db:
            try:
                db.add(row)
                db.commit()
            except IntegrityError:
                db.rollback()
                logger.warning(f"Duplicate insert rejected for record {record.id}")
                raise DuplicateRecordError(record.id)
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError(f"Failed to create record {record.id}") from e
            db.refresh(row)
            return _to_record(row)

    def find_one(self, record_id: str) -> Optional[StringRecord]:
        with self._session_factory() as db:
            try:
                row = db.query(StringRecordRow).filter(StringRecordRow.id == record_id).first()
            except SQLAlchemyError as e:
                raise StoreError(f"Failed to load record {record_id}") from e
            return _to_record(row) if row else None

    def find_many(self, string_filter: StringFilter) -> List[StringRecord]:
        with self._session_factory() as db:
            try:
                rows = _filtered_query(db, string_filter).all()
            except SQLAlchemyError as e:
                raise StoreError("Failed to query records") from e
            return [_to_record(row) for row in rows]

    def count(self, string_filter: StringFilter) -> int:
        with self._session_factory() as db:
            try:
                return _filtered_query(db, string_filter).count()
            except SQLAlchemyError as e:
                raise StoreError("Failed to count records") from e

    def delete_one(self, record_id: str) -> bool:
        with self._session_factory() as db:
            try:
                deleted = (
                    db.query(StringRecordRow)
                    .filter(StringRecordRow.id == record_id)
                    .delete(synchronize_session=False)
                )
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StoreError(f"Failed to delete record {record_id}") from e
            return deleted > 0
