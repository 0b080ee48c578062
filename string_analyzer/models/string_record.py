from sqlalchemy import Column, String, Integer, Boolean, DateTime, JSON, Text
from string_analyzer.database import Base


class StringRecordRow(Base):
    __tablename__ = "string_records"

    id = Column(String(64), primary_key=True, index=True)  # SHA-256 hash of value
    value = Column(Text, nullable=False)
    length = Column(Integer, nullable=False, index=True)
    is_palindrome = Column(Boolean, nullable=False, index=True)
    unique_characters = Column(Integer, nullable=False)
    word_count = Column(Integer, nullable=False, index=True)
    sha256_hash = Column(String(64), nullable=False)
    character_frequency_map = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False)
