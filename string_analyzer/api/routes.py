from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, Response, status
from typing import Any, Optional
import logging

from string_analyzer import schemas
from string_analyzer.crud import StringStore
from string_analyzer.errors import (
    DuplicateRecordError,
    FilterValidationError,
    QueryParseError,
    StoreError,
)
from string_analyzer.services.analyzer import build_record, compute_sha256
from string_analyzer.services.filters import build_filter, filter_from_constraints
from string_analyzer.services.nl_parser import parse_natural_language_query

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "String does not exist in the system"


def get_store(request: Request) -> StringStore:
    """Dependency to provide the store the app was built with."""
    return request.app.state.store


def _internal_error(message: str, exc: Exception) -> HTTPException:
    logger.error(f"{message}: {exc!r}")
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=message,
    )


def _conflict(existing: Optional[schemas.StringRecord]) -> HTTPException:
    detail = {"error": "String already exists in the system"}
    if existing is not None:
        detail["data"] = existing.model_dump(mode="json")
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=detail)


@router.post("/strings", response_model=schemas.StringRecord, status_code=status.HTTP_201_CREATED)
def create_string(payload: Any = Body(None), store: StringStore = Depends(get_store)):
    """
    Analyze and store a string.
    Returns 409 (with the stored record) if the string was already analyzed.
    """
    if not isinstance(payload, dict) or payload.get("value") in (None, ""):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid request body or missing 'value' field",
        )

    value = payload["value"]
    if not isinstance(value, str):
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Invalid data type for 'value' (must be string)",
        )

    try:
        existing = store.find_one(compute_sha256(value))
        if existing:
            raise _conflict(existing)

        record = build_record(value)
        try:
            created = store.create(record)
        except DuplicateRecordError:
            # Lost a race with an identical submission
            raise _conflict(store.find_one(record.id))
    except StoreError as e:
        raise _internal_error("An unexpected error occurred during string analysis", e)

    logger.info(f"Stored analysis for string {created.id}")
    return created


# Must be registered before /strings/{string_value} or the path parameter swallows it
@router.get("/strings/filter-by-natural-language", response_model=schemas.NaturalLanguageResponse)
def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: StringStore = Depends(get_store),
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    if query is None or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Query parameter 'query' is required",
        )

    try:
        parsed_filters = parse_natural_language_query(query)
    except QueryParseError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        string_filter = filter_from_constraints(parsed_filters)
        data = store.find_many(string_filter)
        count = store.count(string_filter)
    except StoreError as e:
        logger.warning(f"Natural language query {query!r} could not be processed: {e!r}")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Query parsed but resulted in conflicting or unprocessable filters",
        )

    return schemas.NaturalLanguageResponse(
        data=data,
        count=count,
        interpreted_query=schemas.InterpretedQuery(original=query, parsed_filters=parsed_filters),
    )


@router.get("/strings/{string_value:path}", response_model=schemas.StringRecord)
def get_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    try:
        record = store.find_one(compute_sha256(string_value))
    except StoreError as e:
        raise _internal_error("Internal server error", e)

    if not record:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)
    return record


@router.get("/strings", response_model=schemas.StringListResponse)
def get_all_strings(
    is_palindrome: Optional[str] = Query(None, description="true or false"),
    min_length: Optional[str] = Query(None, description="Minimum length, inclusive"),
    max_length: Optional[str] = Query(None, description="Maximum length, inclusive"),
    word_count: Optional[str] = Query(None, description="Exact word count"),
    contains_character: Optional[str] = Query(None, description="Single character"),
    store: StringStore = Depends(get_store),
):
    """
    Get all strings with optional filtering.
    """
    try:
        string_filter = build_filter({
            "is_palindrome": is_palindrome,
            "min_length": min_length,
            "max_length": max_length,
            "word_count": word_count,
            "contains_character": contains_character,
        })
    except FilterValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

    try:
        data = store.find_many(string_filter)
        count = store.count(string_filter)
    except StoreError as e:
        raise _internal_error("An internal server error occurred", e)

    return schemas.StringListResponse(
        data=data,
        count=count,
        filters_applied=string_filter.applied(),
    )


@router.delete("/strings/{string_value:path}", status_code=status.HTTP_204_NO_CONTENT)
def delete_string(string_value: str, store: StringStore = Depends(get_store)):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    record_id = compute_sha256(string_value)
    try:
        deleted = store.delete_one(record_id)
    except StoreError as e:
        raise _internal_error("An internal error occurred", e)

    if not deleted:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_MESSAGE)

    logger.info(f"Deleted string {record_id}")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
