"""Id generation and the only place where client-supplied names meet the filesystem."""
import re
import secrets
import string
import time
from pathlib import Path

import config

_ID_ALPHABET = string.ascii_lowercase + string.digits
_UNSAFE_CHARS = re.compile(r'[^a-zA-Z0-9.\-]')

_last_timestamp = 0


def _timestamp_ms() -> int:
    """Wall-clock milliseconds, never lower than a previously returned value."""
    global _last_timestamp
    _last_timestamp = max(_last_timestamp, int(time.time() * 1000))
    return _last_timestamp


def generate_file_id() -> str:
    """Generate a public file id, e.g. ``1760611200000-k3j5h2l9q``."""
    suffix = ''.join(secrets.choice(_ID_ALPHABET) for _ in range(9))
    return f"{_timestamp_ms()}-{suffix}"


def is_valid_id(file_id: str) -> bool:
    """Check if the file ID could have been produced by generate_file_id."""
    if not file_id or len(file_id) > config.MAX_ID_LENGTH:
        return False

    # Check if id contains only allowed characters: a-z, A-Z, 0-9, dot, underscore, minus
    pattern = r'^[a-zA-Z0-9._-]+$'
    return bool(re.match(pattern, file_id))


def sanitize_filename(name: str) -> str:
    """Replace everything outside ``[A-Za-z0-9.-]`` with ``_``.

    The result never contains a path separator, so it cannot climb out of the
    directory it is joined to.
    """
    sanitized = _UNSAFE_CHARS.sub('_', name or '')
    # keep the tail so the extension survives truncation
    sanitized = sanitized[-config.MAX_NAME_LENGTH:]
    if not sanitized.strip('.'):
        sanitized = 'file'
    return sanitized


def generate_storage_key(original_name: str) -> str:
    """Build a unique on-disk name: ``<epoch-ms>-<random>-<sanitized name>``."""
    return f"{_timestamp_ms()}-{secrets.randbelow(10**9)}-{sanitize_filename(original_name)}"


def resolve_under(root: Path, storage_key: str) -> Path:
    """Join ``storage_key`` to ``root`` and refuse results outside of ``root``."""
    root = Path(root).resolve()
    candidate = (root / storage_key).resolve()
    if candidate.parent != root:
        raise ValueError(f"Storage key {storage_key!r} resolves outside of {root}")
    return candidate
