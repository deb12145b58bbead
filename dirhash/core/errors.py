# dirhash/core/errors.py
from __future__ import annotations


class DirHashError(Exception):
    """
    Anything that stops a tree from being hashed: unreadable paths, a
    non-directory where a directory was expected, links the policy rejects,
    bad configuration, or a digest that does not match --expect.

    `message` is the one-line summary the CLI prints after 'error:'.
    `hint` carries the underlying OS / parser text when there is one.
    `details` holds structured context; filesystem errors always set
    details["path"] to the entry that failed.
    """

    #: Short snake_case tag, logged as HASH_FAILED code=<code>
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    @property
    def path(self) -> str | None:
        """Failing filesystem path, if the error has one."""
        return self.details.get("path")

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Filesystem errors
# ---------------------------------------------------------------------------

class TreeReadError(DirHashError):
    """
    A path could not be opened, stat'ed, enumerated or read.

    Examples:
      - permission denied on a file or directory
      - file removed while the tree is being hashed
      - device / OS-level read error
    """
    code = "io_error"


class NotADirectory(DirHashError):
    """
    A path expected to be a directory is not one at traversal time.

    Raised for the root and for any subdirectory replaced by a file mid-run.
    """
    code = "not_a_directory"


# ---------------------------------------------------------------------------
# Entry classification errors
# ---------------------------------------------------------------------------

class SymlinkRefused(DirHashError):
    """A symbolic link was found while the symlink policy is 'refuse'."""
    code = "symlink_refused"


class SymlinkCycleError(DirHashError):
    """Following symbolic links led back into an ancestor directory."""
    code = "symlink_cycle"


class UnsupportedEntry(DirHashError):
    """
    Entry is neither a regular file nor a directory.

    Examples:
      - named pipe (FIFO)
      - UNIX socket
      - block / character device
    """
    code = "unsupported_entry"


# ---------------------------------------------------------------------------
# Application errors
# ---------------------------------------------------------------------------

class ConfigError(DirHashError):
    """Configuration file or option values are invalid."""
    code = "config_error"


class DigestMismatch(DirHashError):
    """Computed digest differs from the expected one."""
    code = "digest_mismatch"
