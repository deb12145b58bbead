# dirhash/app/__init__.py
from .config import DirHashConfig, load_config
from .runner import HashRun, run_hash, build_hasher

__all__ = ["DirHashConfig", "load_config", "HashRun", "run_hash", "build_hasher"]
