# dirhash/utils/__init__.py
from .hashing import sha256_file, sha256_bytes, digest_hex, DEFAULT_CHUNK_SIZE, DIGEST_SIZE

__all__ = ["sha256_file", "sha256_bytes", "digest_hex", "DEFAULT_CHUNK_SIZE", "DIGEST_SIZE"]
