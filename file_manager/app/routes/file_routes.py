import mimetypes
from datetime import datetime, timezone
from typing import Union
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import StreamingResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.errors import (
    BlobMissing,
    BlobNotFound,
    EndpointNotFound,
    FileNotFound,
    InternalError,
    NoFileProvided,
    SizeLimitExceeded,
    ValidationError,
)
from app.models.file_record import FileRecord
from app.schemas.files import (
    ClearResponse,
    DeleteResponse,
    FileInfo,
    FileListResponse,
    HealthResponse,
    UploadResponse,
)
from app.services.blob_store import BlobStore
from app.services.file_registry import FileRegistry
from app.utils.naming import generate_file_id, is_valid_id
from logger_config import setup_logger, structured_log

logger = setup_logger()

router = APIRouter(prefix="/api", tags=["files"])

AVAILABLE_ENDPOINTS = [
    "GET /api/health",
    "POST /api/upload",
    "GET /api/files",
    "GET /api/files/:id",
    "DELETE /api/files/:id",
    "DELETE /api/files",
]


def get_registry(request: Request) -> FileRegistry:
    return request.app.state.registry


def get_blob_store(request: Request) -> BlobStore:
    return request.app.state.blob_store


def lookup_file(registry: FileRegistry, file_id: str) -> FileRecord:
    """Find a registered file, treating malformed ids as unknown."""
    if not is_valid_id(file_id):
        raise FileNotFound(file_id)
    return registry.get(file_id)


def content_disposition(filename: str) -> str:
    """Build an attachment header that suggests the original filename."""
    quoted = quote(filename, safe="")
    if quoted != filename:
        return f"attachment; filename*=utf-8''{quoted}"
    return f'attachment; filename="{filename}"'


@router.get("/health", response_model=HealthResponse)
async def health_check():
    return HealthResponse(
        status="OK",
        message="File Manager API is running",
        timestamp=datetime.now(timezone.utc),
    )


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_file(
    request: Request,
    file: Union[UploadFile, str, None] = File(None),
    registry: FileRegistry = Depends(get_registry),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Store the multipart ``file`` part and register it.

    The blob is fully written before the record is inserted; if the insert
    fails the blob is removed again so no half-registered upload remains.
    """
    # A plain text field named "file" is not a file part
    if not isinstance(file, StarletteUploadFile):
        logger.info("Upload rejected: request has no file part")
        raise NoFileProvided()

    form = await request.form()
    if len(form.getlist("file")) > 1:
        raise ValidationError("Only one file can be uploaded per request", code="TOO_MANY_FILES")

    original_name = file.filename or "unnamed"
    logger.info(f"Receiving upload request for file: {original_name}")

    try:
        storage_key, size = await blob_store.put(file, original_name)
    except SizeLimitExceeded:
        logger.info(structured_log("Upload rejected: file too large", name=original_name, limit=blob_store.max_size))
        raise
    except Exception as e:
        logger.error(structured_log("Error storing upload", operation="upload", name=original_name, cause=str(e)),
                     exc_info=True)
        raise InternalError("UPLOAD_ERROR") from e

    record = FileRecord(
        id=generate_file_id(),
        name=original_name,
        size=size,
        type=file.content_type or "application/octet-stream",
        upload_date=datetime.now(timezone.utc),
        storage_key=storage_key,
    )

    try:
        total_files = registry.insert(record)
    except Exception as e:
        logger.error(structured_log("Error registering upload", operation="upload", file_id=record.id,
                                    cause=str(e)), exc_info=True)
        await blob_store.delete(storage_key)
        raise InternalError("UPLOAD_ERROR") from e

    logger.info(structured_log("File uploaded", file_id=record.id, name=original_name, size=size))
    return UploadResponse(
        message="File uploaded successfully",
        file=FileInfo.model_validate(record),
        total_files=total_files,
    )


@router.get("/files", response_model=FileListResponse)
async def list_files(registry: FileRegistry = Depends(get_registry)):
    try:
        records = registry.list()
    except Exception as e:
        logger.error(structured_log("Error listing files", operation="list", cause=str(e)), exc_info=True)
        raise InternalError("FILES_ERROR") from e

    return FileListResponse(
        files=[FileInfo.model_validate(record) for record in records],
        count=len(records),
    )


@router.get("/files/{file_id}")
async def download_file(
    file_id: str,
    registry: FileRegistry = Depends(get_registry),
    blob_store: BlobStore = Depends(get_blob_store),
):
    """Stream a stored file back under its original name."""
    logger.info(f"Receiving download request for file_id: {file_id}")
    record = lookup_file(registry, file_id)

    try:
        size, content = await blob_store.open(record.storage_key)
    except BlobNotFound:
        logger.error(structured_log("Registered file has no blob on disk", operation="download",
                                    file_id=file_id, storage_key=record.storage_key))
        raise BlobMissing(file_id)
    except OSError as e:
        logger.error(structured_log("Error opening blob", operation="download", file_id=file_id, cause=str(e)),
                     exc_info=True)
        raise InternalError("DOWNLOAD_ERROR") from e

    # The declared upload type is advisory only; infer from the name instead
    media_type, _ = mimetypes.guess_type(record.name)

    return StreamingResponse(
        content,
        media_type=media_type or "application/octet-stream",
        headers={
            "content-disposition": content_disposition(record.name),
            "content-length": str(size),
        },
    )


@router.delete("/files/{file_id}", response_model=DeleteResponse)
async def delete_file(
    file_id: str,
    registry: FileRegistry = Depends(get_registry),
    blob_store: BlobStore = Depends(get_blob_store),
):
    logger.info(f"Receiving delete request for file_id: {file_id}")
    record = lookup_file(registry, file_id)

    # The registry decides what exists for clients, so the record goes even if the blob stays
    try:
        await blob_store.delete(record.storage_key)
    except OSError as e:
        logger.error(structured_log("Could not remove blob, removing record anyway", operation="delete",
                                    file_id=file_id, cause=str(e)))

    registry.remove(file_id)

    logger.info(structured_log("File deleted", file_id=file_id, name=record.name))
    return DeleteResponse(message="File deleted successfully", deleted_file=record.name)


@router.delete("/files", response_model=ClearResponse)
async def delete_all_files(
    registry: FileRegistry = Depends(get_registry),
    blob_store: BlobStore = Depends(get_blob_store),
):
    logger.info("Receiving request to delete all files")

    failures = 0
    for record in registry.list():
        try:
            await blob_store.delete(record.storage_key)
        except OSError as e:
            failures += 1
            logger.error(structured_log("Could not remove blob during clear", operation="clear",
                                        file_id=record.id, cause=str(e)))

    deleted_count = registry.clear()

    if failures:
        logger.warning(f"Cleared {deleted_count} files, {failures} blobs were left on disk")
    else:
        logger.info(f"Cleared {deleted_count} files")
    return ClearResponse(message="All files deleted successfully", deleted_count=deleted_count)


@router.api_route(
    "/{path:path}",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    include_in_schema=False,
)
async def unknown_endpoint(request: Request, path: str):
    raise EndpointNotFound(request.url.path, AVAILABLE_ENDPOINTS)
