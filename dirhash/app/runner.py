# dirhash/app/runner.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dirhash.app.config import DirHashConfig
from dirhash.core.errors import DirHashError
from dirhash.core.tree import TraceHook, TreeHasher
from dirhash.utils.hashing import digest_hex


@dataclass(frozen=True)
class HashRun:
    root: Path
    digest: bytes
    listing: bytes  # canonical listing of the root itself
    elapsed_s: float

    @property
    def hex(self) -> str:
        return digest_hex(self.digest)


def listing_logger(logger: logging.Logger) -> TraceHook:
    """Trace hook that logs every directory listing at DEBUG."""
    def _trace(path: Path, listing: bytes) -> None:
        logger.debug(
            'LISTING path=%s\n"""\n%s"""',
            path,
            listing.decode("utf-8", errors="backslashreplace"),
        )
    return _trace


def build_hasher(
    cfg: DirHashConfig,
    *,
    logger: Optional[logging.Logger] = None,
    on_listing: Optional[TraceHook] = None,
) -> TreeHasher:
    log = logger or logging.getLogger(__name__)
    trace_log = listing_logger(log) if cfg.trace else None

    def _trace(path: Path, listing: bytes) -> None:
        if trace_log is not None:
            trace_log(path, listing)
        if on_listing is not None:
            on_listing(path, listing)

    hook = _trace if (trace_log is not None or on_listing is not None) else None
    return TreeHasher(
        symlinks=cfg.symlinks,
        workers=cfg.workers,
        chunk_size=cfg.chunk_size,
        trace=hook,
    )


def run_hash(cfg: DirHashConfig, *, logger: Optional[logging.Logger] = None) -> HashRun:
    """
    Hash cfg.root once and return the digest with the root listing.

    Errors propagate unchanged after a HASH_FAILED log line.
    """
    log = logger or logging.getLogger(__name__)
    root = Path(cfg.root)

    # listings arrive post-order, so the last one is the root's
    last_listing: list[bytes] = []

    def _keep(path: Path, listing: bytes) -> None:
        if path == root:
            last_listing[:] = [listing]

    hasher = build_hasher(cfg, logger=log, on_listing=_keep)

    log.info("HASH_START root=%s symlinks=%s workers=%d", root, cfg.symlinks, cfg.workers)
    t0 = time.perf_counter()
    try:
        digest = hasher.hash_directory(root)
    except DirHashError as e:
        log.warning("HASH_FAILED code=%s path=%s msg=%s", e.code, e.path or "-", e.message)
        raise

    run = HashRun(
        root=root,
        digest=digest,
        listing=last_listing[0] if last_listing else b"",
        elapsed_s=time.perf_counter() - t0,
    )
    log.info("HASH_DONE root=%s digest=%s elapsed_s=%.3f", root, run.hex, run.elapsed_s)
    return run
