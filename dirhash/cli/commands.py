# dirhash/cli/commands.py
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, TextIO

from dirhash.app.config import DirHashConfig, load_config
from dirhash.app.runner import run_hash
from dirhash.cli.args import config_overrides
from dirhash.common.logging_config import configure_logging
from dirhash.core.errors import DigestMismatch


def resolve_config(args: argparse.Namespace) -> DirHashConfig:
    base = load_config(args.config) if args.config else DirHashConfig()
    return base.with_overrides(config_overrides(args))


def setup_logging(cfg: DirHashConfig) -> None:
    # --trace implies DEBUG on the stream handler
    level = "DEBUG" if cfg.trace else cfg.log_level
    configure_logging(level, log_file=Path(cfg.log_file) if cfg.log_file else None)


def write_listing(out: TextIO, listing: bytes) -> None:
    """Write the listing byte-exact when the stream has a binary buffer."""
    buf = getattr(out, "buffer", None)
    if buf is None:
        out.write(listing.decode("utf-8", errors="backslashreplace"))
        return
    out.flush()
    buf.write(listing)
    buf.flush()


def cmd_hash(
    cfg: DirHashConfig,
    *,
    show_listing: bool = False,
    expect: Optional[str] = None,
    out: Optional[TextIO] = None,
) -> int:
    out = out or sys.stdout
    run = run_hash(cfg)

    if show_listing:
        write_listing(out, run.listing)
    out.write(f"{run.hex}\n")
    out.flush()

    if expect is not None and expect.strip().upper() != run.hex:
        raise DigestMismatch(
            f"Digest mismatch for {run.root}.",
            hint=f"expected {expect.strip().upper()}, got {run.hex}",
            details={"path": str(run.root)},
        )
    return 0
