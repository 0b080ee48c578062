import threading
from typing import Dict, List, Optional

from string_analyzer.crud.base import StringStore
from string_analyzer.errors import DuplicateRecordError
from string_analyzer.schemas import StringRecord
from string_analyzer.services.filters import StringFilter


class InMemoryStringStore(StringStore):
    """Dict-backed store. Records are lost when the process exits."""

    def __init__(self):
        self._records: Dict[str, StringRecord] = {}
        self._lock = threading.Lock()

    def create(self, record: StringRecord) -> StringRecord:
        with self._lock:
            if record.id in self._records:
                raise DuplicateRecordError(record.id)
            self._records[record.id] = record
        return record

    def find_one(self, record_id: str) -> Optional[StringRecord]:
        return self._records.get(record_id)

    def find_many(self, string_filter: StringFilter) -> List[StringRecord]:
        return [r for r in list(self._records.values()) if string_filter.matches(r.properties)]

    def count(self, string_filter: StringFilter) -> int:
        return len(self.find_many(string_filter))

    def delete_one(self, record_id: str) -> bool:
        with self._lock:
            return self._records.pop(record_id, None) is not None
