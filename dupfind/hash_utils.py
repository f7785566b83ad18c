"""XXH3-64 content hashing and rehash decision logic."""
from __future__ import annotations

import math
import os
from typing import Optional

import xxhash

from catalog.models import FileRecord

_CHUNK_SIZE = 8 * 1024  # 8 KiB


def hash_file(path: str, chunk_size: int = _CHUNK_SIZE) -> str:
    """
    Compute the XXH3-64 hex digest of a file, reading it chunk by chunk.
    Raises OSError if the file cannot be opened or a read fails.
    """
    h = xxhash.xxh3_64()
    with open(path, "rb") as f:
        while True:
            chunk = f.read(chunk_size)
            if not chunk:
                break
            h.update(chunk)
    return h.hexdigest()


def file_signature(stat_result: os.stat_result) -> tuple[int, int]:
    """Return (size, mtime) with mtime floored to whole seconds."""
    return stat_result.st_size, math.floor(stat_result.st_mtime)


def needs_rehash(size: int, mtime: int, cached: Optional[FileRecord]) -> bool:
    """
    Return True if the file needs to be (re)hashed.

    Empty files are never hashed. Otherwise a file is hashed unless the
    stored record has exactly the same size and mtime.
    """
    if size == 0:
        return False
    if cached is None:
        return True
    return size != cached.size or mtime != cached.modified_time
