# dirhash/core/tree.py
from __future__ import annotations

import os
import stat
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, FrozenSet, Iterable, List, Optional, Tuple, Union

from dirhash.utils.hashing import DEFAULT_CHUNK_SIZE, sha256_bytes, sha256_file
from .errors import (
    DirHashError,
    NotADirectory,
    SymlinkCycleError,
    SymlinkRefused,
    TreeReadError,
    UnsupportedEntry,
)
from .listing import DIRECTORY, FILE, DirectoryEntry, build_listing, escape_name, fs_name

SYMLINK_REFUSE = "refuse"
SYMLINK_FOLLOW = "follow"
SYMLINK_POLICIES = (SYMLINK_REFUSE, SYMLINK_FOLLOW)

PathLike = Union[str, "os.PathLike[str]"]
Lister = Callable[[Path], Iterable[os.DirEntry]]
TraceHook = Callable[[Path, bytes], None]

_DirId = Tuple[int, int]


@dataclass
class _Frame:
    """One open directory on the traversal stack."""
    path: Path
    ancestors: FrozenSet[_DirId]
    children: List[Tuple[bytes, str, Path]]
    next: int = 0
    # [name, kind, digest | Future | None]; None until the subdirectory closes
    pending: List[list] = field(default_factory=list)


def scan_dir(path: Path) -> List[os.DirEntry]:
    """One listing pass over `path`. Order is whatever the OS returns."""
    with os.scandir(path) as it:
        return list(it)


def _os_error(path: Path, e: OSError) -> DirHashError:
    details = {"path": str(path), "errno": e.errno}
    if isinstance(e, NotADirectoryError):
        return NotADirectory(f"Not a directory: {path}", hint=str(e), details=details)
    return TreeReadError(f"Failed to read {path}.", hint=str(e), details=details)


class TreeHasher:
    """
    Directory tree hasher.

    - Post-order: every child digest is known before the parent listing is built.
      The walk keeps its own stack, so depth is not bounded by the interpreter's
      recursion limit.
    - Children are classified without following links; `symlinks` decides what
      happens when one is found ('refuse' raises, 'follow' hashes the target).
    - workers > 1 hashes regular files on a thread pool. Directory recursion
      always stays on the calling thread, so pool tasks never wait on each other.
    - trace(path, listing) is called once per directory, after its listing is built.

    The first failure aborts the whole computation; nothing partial is returned.
    """

    def __init__(
        self,
        *,
        symlinks: str = SYMLINK_REFUSE,
        workers: int = 0,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        trace: Optional[TraceHook] = None,
        lister: Optional[Lister] = None,
    ) -> None:
        if symlinks not in SYMLINK_POLICIES:
            raise ValueError(f"Invalid symlink policy '{symlinks}' (use one of {', '.join(SYMLINK_POLICIES)})")
        if int(workers) < 0:
            raise ValueError(f"workers must be >= 0, got {workers}")
        if int(chunk_size) <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")

        self.symlinks = symlinks
        self.workers = int(workers)
        self.chunk_size = int(chunk_size)
        self._trace = trace
        self._lister = lister or scan_dir

    # --- public ---
    def hash_file(self, path: PathLike) -> bytes:
        p = Path(path)
        try:
            return sha256_file(p, chunk_size=self.chunk_size)
        except OSError as e:
            raise _os_error(p, e) from None

    def hash_directory(self, path: PathLike) -> bytes:
        root = Path(path)
        st = self._stat_dir(root)

        if self.workers > 1:
            with ThreadPoolExecutor(max_workers=self.workers, thread_name_prefix="dirhash") as pool:
                return self._hash_tree(root, st, pool)
        return self._hash_tree(root, st, None)

    # --- traversal ---
    def _stat_dir(self, path: Path) -> os.stat_result:
        try:
            st = os.stat(path)
        except OSError as e:
            raise _os_error(path, e) from None
        if not stat.S_ISDIR(st.st_mode):
            raise NotADirectory(f"Not a directory: {path}", details={"path": str(path)})
        return st

    def _hash_tree(self, root: Path, st: os.stat_result, pool: Optional[ThreadPoolExecutor]) -> bytes:
        """
        Post-order walk driven by an explicit stack of open directories.

        The top frame is the directory being filled in. A subdirectory pushes a
        new frame; when a frame runs out of children its listing is hashed and
        the digest is handed to the placeholder its parent left for it.
        """
        stack: List[_Frame] = [self._open_frame(root, st, frozenset())]
        try:
            while True:
                frame = stack[-1]
                if frame.next < len(frame.children):
                    name, kind, child = frame.children[frame.next]
                    frame.next += 1
                    if kind == DIRECTORY:
                        sub_st = self._stat_dir(child)
                        frame.pending.append([name, kind, None])
                        stack.append(self._open_frame(child, sub_st, frame.ancestors))
                    elif pool is not None:
                        frame.pending.append([name, kind, pool.submit(self.hash_file, child)])
                    else:
                        frame.pending.append([name, kind, self.hash_file(child)])
                    continue

                digest = self._close_frame(frame)
                stack.pop()
                if not stack:
                    return digest
                stack[-1].pending[-1][2] = digest
        except BaseException:
            for frame in stack:
                for _, _, d in frame.pending:
                    if isinstance(d, Future):
                        d.cancel()
            raise

    def _open_frame(self, path: Path, st: os.stat_result, ancestors: FrozenSet[_DirId]) -> "_Frame":
        ident = (st.st_dev, st.st_ino)
        if ident in ancestors:
            raise SymlinkCycleError(
                f"Symbolic link cycle at {path}",
                hint="A followed link points back to one of its own parent directories.",
                details={"path": str(path)},
            )

        try:
            raw = list(self._lister(path))
        except OSError as e:
            raise _os_error(path, e) from None

        # classify in escaped-name order so classification errors do not depend on the OS
        named = sorted(((fs_name(entry.name), entry) for entry in raw), key=lambda ne: escape_name(ne[0]))
        children: List[Tuple[bytes, str, Path]] = []
        for name, entry in named:
            child = path / entry.name
            children.append((name, self._classify(entry, child), child))

        # hashing order: directories first, then files
        children.sort(key=lambda c: (c[1] != DIRECTORY, escape_name(c[0])))
        return _Frame(path=path, ancestors=ancestors | {ident}, children=children)

    def _close_frame(self, frame: "_Frame") -> bytes:
        # futures resolve in canonical order, so the first failing one is reported
        entries = [
            DirectoryEntry(name=name, kind=kind, digest=d.result() if isinstance(d, Future) else d)
            for name, kind, d in frame.pending
        ]
        listing = build_listing(entries)
        if self._trace is not None:
            self._trace(frame.path, listing)
        return sha256_bytes(listing)

    def _classify(self, entry: os.DirEntry, child: Path) -> str:
        try:
            follow = False
            if entry.is_symlink():
                if self.symlinks == SYMLINK_REFUSE:
                    raise SymlinkRefused(
                        f"Symbolic link not allowed: {child}",
                        hint="Pass --symlinks follow to hash link targets instead.",
                        details={"path": str(child)},
                    )
                follow = True

            if entry.is_dir(follow_symlinks=follow):
                return DIRECTORY
            if entry.is_file(follow_symlinks=follow):
                return FILE

            if follow and not os.path.exists(child):
                raise TreeReadError(
                    f"Failed to read {child}.",
                    hint="Broken symbolic link.",
                    details={"path": str(child)},
                )
        except OSError as e:
            raise _os_error(child, e) from None

        raise UnsupportedEntry(
            f"Not a regular file or directory: {child}",
            details={"path": str(child)},
        )


# ---------------- module-level API ----------------

def hash_file(path: PathLike, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> bytes:
    """SHA-256 of the file's bytes (same value as `sha256sum`)."""
    return TreeHasher(chunk_size=chunk_size).hash_file(path)


def hash_directory(
    path: PathLike,
    *,
    symlinks: str = SYMLINK_REFUSE,
    workers: int = 0,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    trace: Optional[TraceHook] = None,
) -> bytes:
    """SHA-256 of the directory's canonical listing, computed recursively."""
    hasher = TreeHasher(symlinks=symlinks, workers=workers, chunk_size=chunk_size, trace=trace)
    return hasher.hash_directory(path)
