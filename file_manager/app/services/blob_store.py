from pathlib import Path
from typing import AsyncIterator, Tuple

import aiofiles
import aiofiles.os

import config
from app.errors import BlobNotFound, SizeLimitExceeded
from app.utils.naming import generate_storage_key, resolve_under
from logger_config import setup_logger, structured_log

logger = setup_logger()


class BlobStore:
    def __init__(self, storage_dir: Path, temp_dir: Path,
                 max_size: int = config.MAX_FILE_SIZE, chunk_size: int = config.CHUNK_SIZE):
        self.storage_dir = Path(storage_dir)
        self.temp_dir = Path(temp_dir)
        self.max_size = max_size
        self.chunk_size = chunk_size

    async def initialize(self):
        """Create the storage directories and drop partial uploads left by a previous run."""
        logger.info("Initializing blob store...")

        self.storage_dir.mkdir(exist_ok=True, parents=True)
        self.temp_dir.mkdir(exist_ok=True, parents=True)
        logger.debug(f"Storage directories created/verified: {self.storage_dir}, {self.temp_dir}")

        files_removed = 0
        for file in self.temp_dir.glob("*"):
            if file.is_file():
                await aiofiles.os.unlink(file)
                files_removed += 1
        logger.info(f"Cleaned temporary directory, removed {files_removed} files")

    def path_for(self, storage_key: str) -> Path:
        """Get the path of a blob, guaranteed to be inside the storage directory."""
        return resolve_under(self.storage_dir, storage_key)

    async def put(self, source, original_name: str) -> Tuple[str, int]:
        """Stream ``source`` to disk and return ``(storage_key, bytes_written)``.

        ``source`` is anything with an async ``read(size)`` method, such as
        FastAPI's ``UploadFile``. Content is written to the temp directory first
        and only renamed into the storage directory once it is complete, so a
        blob under its final key is never partial.

        Raises:
            SizeLimitExceeded: the stream is larger than ``max_size``. Nothing
                is left on disk.
        """
        self.storage_dir.mkdir(exist_ok=True, parents=True)
        self.temp_dir.mkdir(exist_ok=True, parents=True)

        storage_key = generate_storage_key(original_name)
        final_path = self.path_for(storage_key)
        temp_path = resolve_under(self.temp_dir, f"{storage_key}.part")

        try:
            bytes_written = 0
            async with aiofiles.open(temp_path, 'wb') as f:
                while chunk := await source.read(self.chunk_size):
                    bytes_written += len(chunk)
                    if bytes_written > self.max_size:
                        raise SizeLimitExceeded(self.max_size)
                    await f.write(chunk)

            await aiofiles.os.rename(str(temp_path), str(final_path))
        except Exception:
            if await aiofiles.os.path.exists(temp_path):
                await aiofiles.os.unlink(temp_path)
            raise

        logger.debug(structured_log("Blob written", storage_key=storage_key, size=bytes_written))
        return storage_key, bytes_written

    async def exists(self, storage_key: str) -> bool:
        return await aiofiles.os.path.isfile(self.path_for(storage_key))

    async def open(self, storage_key: str) -> Tuple[int, AsyncIterator[bytes]]:
        """Return the blob size and an iterator over its content in chunks."""
        blob_path = self.path_for(storage_key)
        try:
            stat = await aiofiles.os.stat(blob_path)
        except FileNotFoundError:
            raise BlobNotFound(storage_key) from None

        async def file_iterator():
            async with aiofiles.open(blob_path, 'rb') as file:
                while chunk := await file.read(self.chunk_size):
                    yield chunk

        return stat.st_size, file_iterator()

    async def delete(self, storage_key: str) -> bool:
        """Delete a blob.

        Returns True if a file was removed and False if it was already gone.
        Any other OS error is raised.
        """
        blob_path = self.path_for(storage_key)
        try:
            await aiofiles.os.unlink(blob_path)
        except FileNotFoundError:
            logger.info(structured_log("Blob already absent", operation="delete", storage_key=storage_key))
            return False

        logger.debug(structured_log("Blob deleted", storage_key=storage_key))
        return True
