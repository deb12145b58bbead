# dirhash/__init__.py
"""Deterministic SHA-256 digests of directory trees."""

from .core import hash_directory, hash_file, TreeHasher, DirHashError
from .utils.hashing import digest_hex

__version__ = "0.1.0"

__all__ = ["hash_directory", "hash_file", "TreeHasher", "DirHashError", "digest_hex"]
