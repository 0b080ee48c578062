from abc import ABC, abstractmethod
from typing import List, Optional

from string_analyzer.schemas import StringRecord
from string_analyzer.services.filters import StringFilter


class StringStore(ABC):
    """Persistence for analyzed strings, keyed by content hash."""

    def init(self):
        """Prepare the backend. Called once on application startup."""

    @abstractmethod
    def create(self, record: StringRecord) -> StringRecord:
        """Persist a new record; raises DuplicateRecordError if the id exists."""

    @abstractmethod
    def find_one(self, record_id: str) -> Optional[StringRecord]:
        ...

    @abstractmethod
    def find_many(self, string_filter: StringFilter) -> List[StringRecord]:
        ...

    @abstractmethod
    def count(self, string_filter: StringFilter) -> int:
        ...

    @abstractmethod
    def delete_one(self, record_id: str) -> bool:
        """Remove the record with ``record_id``; False when nothing was removed."""
