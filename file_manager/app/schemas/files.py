"""Request/response schemas with camelCase aliases.

Python code stays snake_case; JSON output becomes camelCase, so
``upload_date`` is serialized as ``uploadDate``.
"""
from datetime import datetime
from typing import List

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class FileInfo(CamelModel):
    id: str
    name: str
    size: int
    upload_date: datetime
    type: str


class UploadResponse(CamelModel):
    message: str
    file: FileInfo
    total_files: int


class FileListResponse(CamelModel):
    files: List[FileInfo]
    count: int


class DeleteResponse(CamelModel):
    message: str
    deleted_file: str


class ClearResponse(CamelModel):
    message: str
    deleted_count: int


class HealthResponse(BaseModel):
    status: str
    message: str
    timestamp: datetime
