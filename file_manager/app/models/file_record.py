from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class FileRecord:
    """Metadata of one stored upload.

    ``name`` and ``type`` come from the client and are not trusted.
    ``storage_key`` locates the blob inside the storage directory and is
    never sent to clients.
    """
    id: str
    name: str
    size: int
    type: str
    upload_date: datetime
    storage_key: str
