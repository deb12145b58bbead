# dirhash/cli/main.py
from __future__ import annotations

import sys
from typing import Optional

from dirhash.core.errors import DirHashError

from dirhash.cli.args import parse_args
from dirhash.cli.commands import cmd_hash, resolve_config, setup_logging


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        cfg = resolve_config(args)
        setup_logging(cfg)
        return cmd_hash(cfg, show_listing=args.listing, expect=args.expect)
    except DirHashError as e:
        print(f"error: {e.message}", file=sys.stderr)
        if e.hint:
            print(f"hint: {e.hint}", file=sys.stderr)
        return 1
