# dirhash/common/logging_config.py
from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, TextIO

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class LogDefaults:
    level: str = "WARNING"
    fmt: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
    stream_fmt: str = "[%(levelname)s] %(name)s: %(message)s"
    file_level: str = "DEBUG"

DEFAULTS = LogDefaults()


def parse_level(level: str) -> int:
    name = str(level).strip().upper()
    if name not in LEVELS:
        raise ValueError(f"Invalid log level '{level}' (use one of {', '.join(LEVELS)})")
    return getattr(logging, name)


def configure_logging(
    level: str = DEFAULTS.level,
    *,
    log_file: Optional[Path] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """
    Attach a stderr handler (and an optional file handler) to the 'dirhash' logger.
    Idempotent: re-running replaces the stream handler and never duplicates a file handler.
    """
    logger = logging.getLogger("dirhash")
    lvl = parse_level(level)

    for h in list(logger.handlers):
        if getattr(h, "_dirhash_stream", False):
            logger.removeHandler(h)

    sh = logging.StreamHandler(stream or sys.stderr)
    sh.setLevel(lvl)
    sh.setFormatter(logging.Formatter(DEFAULTS.stream_fmt))
    sh._dirhash_stream = True  # type: ignore[attr-defined]
    logger.addHandler(sh)

    effective = lvl
    if log_file is not None:
        add_file_handler(Path(log_file))
        effective = min(lvl, parse_level(DEFAULTS.file_level))

    logger.setLevel(effective)


def add_file_handler(log_path: Path) -> None:
    logger = logging.getLogger("dirhash")
    log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(log_path.resolve())

    for h in logger.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(log_path, encoding="utf-8", delay=True)
    fh.setLevel(parse_level(DEFAULTS.file_level))
    fh.setFormatter(logging.Formatter(DEFAULTS.fmt))
    logger.addHandler(fh)
