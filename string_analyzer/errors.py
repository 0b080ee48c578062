"""Domain exceptions raised by the analyzer, store and filter layers.

Route handlers translate these into HTTP responses; nothing here knows about
status codes.
"""


class StringAnalyzerError(Exception):
    """Base class for all service errors."""


class DuplicateRecordError(StringAnalyzerError):
    """A record with the same content hash already exists."""

    def __init__(self, record_id: str):
        super().__init__(f"Record {record_id} already exists")
        self.record_id = record_id


class StoreError(StringAnalyzerError):
    """The storage backend failed to complete an operation."""


class FilterValidationError(StringAnalyzerError):
    """A query parameter was present but had an invalid value."""

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field
        self.message = message


class QueryParseError(StringAnalyzerError):
    """No natural-language rule matched the query text."""
