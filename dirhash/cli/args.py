# dirhash/cli/args.py
from __future__ import annotations

import argparse
from typing import Any, Dict, Optional

from dirhash.common.logging_config import LEVELS
from dirhash.core.tree import SYMLINK_POLICIES


def positive_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{v}'")
    if n <= 0:
        raise argparse.ArgumentTypeError(f"Expected a positive integer, got {n}")
    return n


def non_negative_int(v: str) -> int:
    try:
        n = int(v)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid integer '{v}'")
    if n < 0:
        raise argparse.ArgumentTypeError(f"Expected an integer >= 0, got {n}")
    return n


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dirhash",
        description="Print a deterministic SHA-256 digest of a directory tree.",
    )
    parser.add_argument(
        "--dir",
        dest="root",
        default=None,
        help="The directory to generate a cryptographic hash of (default: current directory).",
    )
    parser.add_argument("--config", default=None, help="YAML config file; flags override its values.")
    parser.add_argument("--symlinks", choices=SYMLINK_POLICIES, default=None,
                        help="What to do with symbolic links inside the tree (default: refuse).")
    parser.add_argument("--workers", type=non_negative_int, default=None,
                        help="Threads used to hash files (0/1 = sequential).")
    parser.add_argument("--chunk-size", type=positive_int, default=None,
                        help="Read size in bytes when streaming file content.")
    parser.add_argument("--trace", action="store_true", default=None,
                        help="Log every directory's canonical listing at DEBUG.")
    parser.add_argument("--listing", action="store_true",
                        help="Print the root's canonical listing before the digest.")
    parser.add_argument("--expect", default=None, metavar="HEX",
                        help="Fail unless the digest equals HEX (case-insensitive).")
    parser.add_argument("--log-level", type=str.upper, choices=LEVELS, default=None)
    parser.add_argument("--log-file", default=None, help="Also write logs to this file.")
    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def config_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """Config fields set on the command line (None = not given)."""
    return {
        "root": args.root,
        "symlinks": args.symlinks,
        "workers": args.workers,
        "chunk_size": args.chunk_size,
        "trace": args.trace,
        "log_level": args.log_level,
        "log_file": args.log_file,
    }
