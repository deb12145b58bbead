# dirhash/utils/hashing.py
from __future__ import annotations

import hashlib
from pathlib import Path

DEFAULT_CHUNK_SIZE = 1024 * 1024
DIGEST_SIZE = 32


def sha256_file(path: Path, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """
    Compute SHA256 hash of a file (streamed, memory-safe).
    Returns the raw 32-byte digest.
    """
    h = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(chunk_size), b""):
            h.update(chunk)
    return h.digest()


def sha256_bytes(data: bytes) -> bytes:
    return hashlib.sha256(data).digest()


def digest_hex(digest: bytes) -> str:
    """Uppercase hex, the external representation of every digest."""
    return digest.hex().upper()
