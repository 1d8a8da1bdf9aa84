import threading
from typing import Dict, List

from app.errors import DuplicateFileId, FileNotFound
from app.models.file_record import FileRecord


class FileRegistry:
    """In-memory table of uploaded files, kept in upload order.

    Every public method holds the same lock, so a listing taken while another
    request inserts or removes a record never sees a half-applied change.
    Nothing here survives a restart.
    """

    def __init__(self):
        self._records: Dict[str, FileRecord] = {}
        self._lock = threading.Lock()

    def insert(self, record: FileRecord) -> int:
        """Register a record and return the new number of files."""
        with self._lock:
            if record.id in self._records:
                raise DuplicateFileId(f"File id {record.id} is already registered")
            self._records[record.id] = record
            return len(self._records)

    def get(self, file_id: str) -> FileRecord:
        with self._lock:
            try:
                return self._records[file_id]
            except KeyError:
                raise FileNotFound(file_id) from None

    def list(self) -> List[FileRecord]:
        """Snapshot of all records, oldest upload first."""
        with self._lock:
            return list(self._records.values())

    def remove(self, file_id: str) -> FileRecord:
        with self._lock:
            try:
                return self._records.pop(file_id)
            except KeyError:
                raise FileNotFound(file_id) from None

    def clear(self) -> int:
        """Drop every record and return how many there were."""
        with self._lock:
            count = len(self._records)
            self._records.clear()
            return count

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, file_id: str) -> bool:
        with self._lock:
            return file_id in self._records
