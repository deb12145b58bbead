from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from dirhash.utils.hashing import DIGEST_SIZE, digest_hex, sha256_bytes, sha256_file


EMPTY_SHA256 = "E3B0C44298FC1C149AFBF4C8996FB92427AE41E4649B934CA495991B7852B855"


def test_sha256_file_empty_matches_known_vector(tmp_path: Path) -> None:
    p = tmp_path / "empty"
    p.write_bytes(b"")

    digest = sha256_file(p)
    assert len(digest) == DIGEST_SIZE
    assert digest_hex(digest) == EMPTY_SHA256


def test_sha256_file_streams_across_chunks(tmp_path: Path) -> None:
    data = bytes(range(256)) * 100
    p = tmp_path / "blob.bin"
    p.write_bytes(data)

    # chunk size that does not divide the file evenly
    assert sha256_file(p, chunk_size=7) == hashlib.sha256(data).digest()
    assert sha256_file(p, chunk_size=7) == sha256_file(p)


def test_sha256_file_ignores_name_and_location(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    p1 = tmp_path / "a" / "one.txt"
    p2 = tmp_path / "two.dat"
    p1.write_bytes(b"same content")
    p2.write_bytes(b"same content")

    assert sha256_file(p1) == sha256_file(p2)


def test_sha256_file_missing_raises_oserror(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        sha256_file(tmp_path / "nope")


def test_digest_hex_is_uppercase_64_chars() -> None:
    h = digest_hex(sha256_bytes(b"hi"))
    assert len(h) == 64
    assert h == h.upper()
    assert h == hashlib.sha256(b"hi").hexdigest().upper()
