from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import pytest

from dirhash.app.config import DirHashConfig
from dirhash.app.runner import build_hasher, run_hash
from dirhash.core.errors import NotADirectory
from dirhash.core.tree import hash_directory


def _tree(root: Path) -> Path:
    root.mkdir()
    (root / "a.txt").write_bytes(b"a")
    (root / "sub").mkdir()
    (root / "sub" / "b.txt").write_bytes(b"b")
    return root


def test_run_hash_returns_digest_and_root_listing(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")

    run = run_hash(DirHashConfig(root=str(root)))

    assert run.root == root
    assert run.digest == hash_directory(root)
    assert run.digest == hashlib.sha256(run.listing).digest()
    assert run.listing.endswith(b' "a.txt"\n')
    assert b'"sub"\n=\n' in run.listing
    assert run.hex == run.digest.hex().upper()
    assert run.elapsed_s >= 0.0


def test_run_hash_logs_start_and_done(tmp_path: Path, caplog) -> None:
    root = _tree(tmp_path / "root")
    caplog.set_level(logging.INFO, logger="dirhash")

    run = run_hash(DirHashConfig(root=str(root)))

    messages = [r.getMessage() for r in caplog.records]
    assert any(m.startswith("HASH_START root=") for m in messages)
    assert any(m.startswith("HASH_DONE") and run.hex in m for m in messages)
    assert not any(m.startswith("LISTING") for m in messages)


def test_trace_logs_every_listing_at_debug(tmp_path: Path, caplog) -> None:
    root = _tree(tmp_path / "root")
    caplog.set_level(logging.DEBUG, logger="dirhash")

    run_hash(DirHashConfig(root=str(root), trace=True))

    listings = [r for r in caplog.records if r.getMessage().startswith("LISTING")]
    assert len(listings) == 2
    assert all(r.levelno == logging.DEBUG for r in listings)
    assert '"b.txt"' in listings[0].getMessage()


def test_trace_does_not_change_digest(tmp_path: Path) -> None:
    root = _tree(tmp_path / "root")
    plain = run_hash(DirHashConfig(root=str(root)))
    traced = run_hash(DirHashConfig(root=str(root), trace=True))
    assert plain.digest == traced.digest


def test_run_hash_logs_failure_and_reraises(tmp_path: Path, caplog) -> None:
    p = tmp_path / "file"
    p.write_bytes(b"")
    caplog.set_level(logging.WARNING, logger="dirhash")

    with pytest.raises(NotADirectory):
        run_hash(DirHashConfig(root=str(p)))

    assert any("HASH_FAILED code=not_a_directory" in r.getMessage() for r in caplog.records)


def test_build_hasher_applies_config(tmp_path: Path) -> None:
    seen = []
    hasher = build_hasher(
        DirHashConfig(symlinks="follow", workers=3, chunk_size=10),
        on_listing=lambda p, listing: seen.append(p),
    )
    assert hasher.symlinks == "follow"
    assert hasher.workers == 3
    assert hasher.chunk_size == 10

    root = _tree(tmp_path / "root")
    hasher.hash_directory(root)
    assert seen == [root / "sub", root]
