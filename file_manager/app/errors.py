"""Error taxonomy for the file manager API.

Every error carries the HTTP status and the machine-readable ``code`` that the
exception handler in ``main.py`` renders as ``{"error": ..., "code": ...}``.
Extra keyword arguments are added to the JSON body as-is.
"""
from typing import Any, Dict, List


class FileManagerError(Exception):
    """Base class for errors reported to API clients."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, code: str = None, status_code: int = None, **extra: Any) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        if status_code is not None:
            self.status_code = status_code
        self.extra = extra

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.message, "code": self.code}
        body.update(self.extra)
        return body


class ValidationError(FileManagerError):
    status_code = 400


class NoFileProvided(ValidationError):
    code = "NO_FILE"

    def __init__(self) -> None:
        super().__init__("No file uploaded")


class SizeLimitExceeded(ValidationError):
    """Raised when an upload grows past the configured size limit."""

    status_code = 413
    code = "FILE_TOO_LARGE"

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(f"File exceeds maximum allowed size of {limit} bytes", limit=limit)


class NotFoundError(FileManagerError):
    status_code = 404
    code = "NOT_FOUND"


class FileNotFound(NotFoundError):
    def __init__(self, file_id: str) -> None:
        self.file_id = file_id
        super().__init__("File not found", id=file_id)


class EndpointNotFound(NotFoundError):
    def __init__(self, path: str, available_endpoints: List[str]) -> None:
        super().__init__(
            "API endpoint not found",
            path=path,
            availableEndpoints=available_endpoints,
        )


class ConsistencyError(FileManagerError):
    """A registry entry and the blob store disagree."""

    status_code = 404


class BlobMissing(ConsistencyError):
    code = "FILE_MISSING"

    def __init__(self, file_id: str) -> None:
        self.file_id = file_id
        super().__init__("File not found on server", id=file_id)


class InternalError(FileManagerError):
    def __init__(self, code: str) -> None:
        super().__init__("Internal server error", code=code)


class BlobNotFound(Exception):
    """Raised by the blob store when a storage key has no file behind it."""

    def __init__(self, storage_key: str) -> None:
        self.storage_key = storage_key
        super().__init__(f"Blob {storage_key} not found")


class DuplicateFileId(RuntimeError):
    """Raised when a generated file id is already registered."""
