# core/__init__.py

from .errors import (
    DirHashError,
    TreeReadError,
    NotADirectory,
    SymlinkRefused,
    SymlinkCycleError,
    UnsupportedEntry,
    ConfigError,
    DigestMismatch,
)
from .listing import DirectoryEntry, build_listing, parse_listing, escape_name, unescape_name
from .tree import TreeHasher, hash_file, hash_directory, SYMLINK_POLICIES

__all__ = [
    "TreeHasher", "hash_file", "hash_directory", "SYMLINK_POLICIES",
    "DirectoryEntry", "build_listing", "parse_listing", "escape_name", "unescape_name",
    "DirHashError", "TreeReadError", "NotADirectory", "SymlinkRefused",
    "SymlinkCycleError", "UnsupportedEntry", "ConfigError", "DigestMismatch"]
