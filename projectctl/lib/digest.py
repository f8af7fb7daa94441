"""SHA-256 checksums of rendered content and cache keys."""

from __future__ import annotations

import hashlib
import logging
from pathlib import Path

from projectctl.lib.errors import IoError

log = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def hash_bytes(data: bytes | str) -> str:
    """Compute the SHA-256 hex digest of `data` (strings are UTF-8 encoded)."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return hashlib.sha256(data).hexdigest()


def hash_file(path: Path) -> str:
    """Compute the SHA-256 hex digest of a file, reading it chunk by chunk."""
    log.debug(f"Computing checksum of {path}")
    hasher = hashlib.sha256()
    try:
        with open(path, "rb") as f:
            while chunk := f.read(CHUNK_SIZE):
                hasher.update(chunk)
    except OSError as e:
        raise IoError(f"unable to read {path}: {e}") from e
    return hasher.hexdigest()
