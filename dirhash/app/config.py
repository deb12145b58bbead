# dirhash/app/config.py
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from dirhash.common.logging_config import DEFAULTS as LOG_DEFAULTS, parse_level
from dirhash.core.errors import ConfigError
from dirhash.core.tree import SYMLINK_POLICIES, SYMLINK_REFUSE
from dirhash.utils.hashing import DEFAULT_CHUNK_SIZE


@dataclass(frozen=True)
class DirHashConfig:
    root: str = "."
    symlinks: str = SYMLINK_REFUSE
    workers: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    trace: bool = False
    log_level: str = LOG_DEFAULTS.level
    log_file: Optional[str] = None

    def validate(self) -> "DirHashConfig":
        if self.symlinks not in SYMLINK_POLICIES:
            raise ConfigError(
                f"Invalid symlink policy '{self.symlinks}'.",
                hint=f"Use one of: {', '.join(SYMLINK_POLICIES)}",
            )
        if self.workers < 0:
            raise ConfigError(f"workers must be >= 0, got {self.workers}.")
        if self.chunk_size <= 0:
            raise ConfigError(f"chunk_size must be > 0, got {self.chunk_size}.")
        try:
            parse_level(self.log_level)
        except ValueError as e:
            raise ConfigError(f"Invalid log level '{self.log_level}'.", hint=str(e)) from None
        return self

    def with_overrides(self, overrides: Mapping[str, Any]) -> "DirHashConfig":
        """Apply non-None overrides (CLI flags win over file values)."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes).validate()


# field name -> accepted python types
_FIELD_TYPES: Dict[str, tuple] = {
    "root": (str,),
    "symlinks": (str,),
    "workers": (int,),
    "chunk_size": (int,),
    "trace": (bool,),
    "log_level": (str,),
    "log_file": (str, type(None)),
}


def config_from_mapping(data: Mapping[str, Any], *, source: str = "<mapping>") -> DirHashConfig:
    known = {f.name for f in fields(DirHashConfig)}

    unknown = sorted(str(k) for k in data.keys() if k not in known)
    if unknown:
        raise ConfigError(
            f"Unknown config keys: {', '.join(unknown)}.",
            hint=f"Valid keys: {', '.join(sorted(known))}",
            details={"source": source},
        )

    values: Dict[str, Any] = {}
    for name, value in data.items():
        allowed = _FIELD_TYPES[name]
        # bool is an int subclass; don't let `workers: true` through
        if isinstance(value, bool) and bool not in allowed:
            ok = False
        else:
            ok = isinstance(value, allowed)
        if not ok:
            raise ConfigError(
                f"Config key '{name}' has invalid type {type(value).__name__}.",
                details={"source": source},
            )
        values[name] = value

    return DirHashConfig(**values).validate()


def load_config(path: str | Path) -> DirHashConfig:
    """
    Load a YAML config file.

    Accepted shapes:
        workers: 4               # flat mapping
        dirhash: {workers: 4}    # or nested under a 'dirhash' root node
    """
    full_path = Path(path)
    if not full_path.exists():
        raise ConfigError(f"Config file not found: {full_path}", details={"source": str(full_path)})

    try:
        with open(full_path, "r", encoding="utf-8") as f:
            doc = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Failed to parse config file {full_path}.",
            hint=str(e),
            details={"source": str(full_path)},
        ) from None
    except OSError as e:
        raise ConfigError(
            f"Failed to read config file {full_path}.",
            hint=str(e),
            details={"source": str(full_path)},
        ) from None

    if not isinstance(doc, dict):
        raise ConfigError(f"{full_path.name} must contain a mapping", details={"source": str(full_path)})

    if "dirhash" in doc:
        doc = doc["dirhash"] or {}
        if not isinstance(doc, dict):
            raise ConfigError(f"{full_path.name} 'dirhash' node must be a mapping", details={"source": str(full_path)})

    return config_from_mapping(doc, source=str(full_path))
