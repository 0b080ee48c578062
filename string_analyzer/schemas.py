from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Dict, List
from datetime import datetime


class StringProperties(BaseModel):
    model_config = ConfigDict(from_attributes=True, frozen=True)

    length: int = Field(..., ge=0)
    is_palindrome: bool
    unique_characters: int = Field(..., ge=0)
    word_count: int = Field(..., ge=0)
    sha256_hash: str = Field(..., pattern=r"^[a-f0-9]{64}$")
    character_frequency_map: Dict[str, int]


class StringRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    value: str
    properties: StringProperties
    created_at: datetime


class StringListResponse(BaseModel):
    data: List[StringRecord]
    count: int
    filters_applied: Dict[str, Any]


class InterpretedQuery(BaseModel):
    original: str
    parsed_filters: Dict[str, Any]


class NaturalLanguageResponse(BaseModel):
    data: List[StringRecord]
    count: int
    interpreted_query: InterpretedQuery
