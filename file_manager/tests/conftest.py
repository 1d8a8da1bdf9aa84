import os
import sys
import tempfile
from pathlib import Path

import pytest

# Add the parent directory to sys.path so we can import main
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Point every directory at a throwaway location before the app is imported
import config

TEST_ROOT = Path(tempfile.mkdtemp(prefix="file_manager_tests_"))
config.LOG_DIR = str(TEST_ROOT / "logs")
config.UPLOAD_DIR = str(TEST_ROOT / "uploads")
config.TEMP_DIR = str(TEST_ROOT / "temp")
config.PUBLIC_DIR = str(TEST_ROOT / "public")


class ChunkedSource:
    """Minimal stand-in for UploadFile: async read(size) over in-memory bytes."""

    def __init__(self, data: bytes):
        self._data = data
        self._offset = 0

    async def read(self, size: int = -1) -> bytes:
        if size < 0:
            size = len(self._data) - self._offset
        chunk = self._data[self._offset:self._offset + size]
        self._offset += len(chunk)
        return chunk


@pytest.fixture
def storage_dirs(tmp_path):
    return tmp_path / "uploads", tmp_path / "temp"
