# dirhash/core/listing.py
"""
Canonical listing ("pseudo-file") of a directory's children.

    8C1E0D4467DC345BCBE4122CB5F3A872A596FF7B5BB360B1A545FEF5991296AC "bar"
    A2E5BE5B8170F0B419A304B948D5711E9C555EB74A280EDA1AF6D53BB46478C5 "foo"
    =
    F5F12CF4210548CB4794FA08DD099186F5C4B3424BDC6535F1E63C2EBCD882BE "asd.txt"

- Two sections: directories, then files, split by a line holding only '='.
- Each line: uppercase hex digest, a space, the escaped name in double quotes, '\\n'.
- Lines in a section are ordered by the raw bytes of the escaped name.
- Escaping: '\\' -> '\\\\', then '"' -> '\\"'. Nothing else is touched.

The listing is bytes end to end: names come from os.fsencode(), so
filenames that are not valid UTF-8 keep their exact on-disk bytes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, List, Union

from dirhash.utils.hashing import DIGEST_SIZE, digest_hex

FILE = "file"
DIRECTORY = "directory"
ENTRY_KINDS = (DIRECTORY, FILE)

SEPARATOR = b"=\n"

_HEX_LEN = DIGEST_SIZE * 2
_HEX_CHARS = frozenset(b"0123456789ABCDEF")
_BACKSLASH = 0x5C
_QUOTE = 0x22


def fs_name(name: Union[str, bytes]) -> bytes:
    """Filename as the raw bytes the filesystem stores."""
    return os.fsencode(name)


def escape_name(name: bytes) -> bytes:
    return name.replace(b"\\", b"\\\\").replace(b'"', b'\\"')


def unescape_name(escaped: bytes) -> bytes:
    """Inverse of escape_name(). Rejects dangling or unknown escapes and bare quotes."""
    out = bytearray()
    i = 0
    n = len(escaped)
    while i < n:
        c = escaped[i]
        if c == _BACKSLASH:
            if i + 1 >= n:
                raise ValueError(f"Dangling escape at end of name {escaped!r}")
            nxt = escaped[i + 1]
            if nxt not in (_BACKSLASH, _QUOTE):
                raise ValueError(f"Unknown escape '\\{chr(nxt)}' in name {escaped!r}")
            out.append(nxt)
            i += 2
            continue
        if c == _QUOTE:
            raise ValueError(f"Unescaped quote in name {escaped!r}")
        out.append(c)
        i += 1
    return bytes(out)


@dataclass(frozen=True)
class DirectoryEntry:
    name: bytes
    kind: str
    digest: bytes

    @property
    def escaped_name(self) -> bytes:
        return escape_name(self.name)

    @property
    def is_dir(self) -> bool:
        return self.kind == DIRECTORY

    def line(self) -> bytes:
        return digest_hex(self.digest).encode("ascii") + b' "' + self.escaped_name + b'"\n'


def _validate(entry: DirectoryEntry) -> None:
    if entry.kind not in ENTRY_KINDS:
        raise ValueError(f"Unknown entry kind {entry.kind!r} for {entry.name!r}")
    if len(entry.digest) != DIGEST_SIZE:
        raise ValueError(
            f"Digest for {entry.name!r} must be {DIGEST_SIZE} bytes, got {len(entry.digest)}"
        )


def sort_entries(entries: Iterable[DirectoryEntry]) -> List[DirectoryEntry]:
    """Canonical order: directories first, each section by escaped-name bytes."""
    return sorted(entries, key=lambda e: (e.kind != DIRECTORY, e.escaped_name))


def build_listing(entries: Iterable[DirectoryEntry]) -> bytes:
    """
    Serialize entries into the canonical listing.

    Input order does not matter; the output for a given set of entries is unique.
    """
    dirs: List[bytes] = []
    files: List[bytes] = []
    for entry in sort_entries(entries):
        _validate(entry)
        (dirs if entry.is_dir else files).append(entry.line())
    return b"".join(dirs) + SEPARATOR + b"".join(files)


def parse_listing(data: bytes) -> List[DirectoryEntry]:
    """
    Parse a canonical listing back into entries (in listing order).

    Quote-aware: names may legally contain newlines, so lines are not split
    naively. Raises ValueError on any framing error.
    """
    entries: List[DirectoryEntry] = []
    kind = DIRECTORY
    seen_separator = False
    pos = 0
    n = len(data)

    while pos < n:
        if data.startswith(SEPARATOR, pos):
            if seen_separator:
                raise ValueError(f"Duplicate '=' separator at offset {pos}")
            seen_separator = True
            kind = FILE
            pos += len(SEPARATOR)
            continue

        hex_part = data[pos:pos + _HEX_LEN]
        if len(hex_part) != _HEX_LEN or not set(hex_part) <= _HEX_CHARS:
            raise ValueError(f"Expected {_HEX_LEN} uppercase hex digits at offset {pos}")
        pos += _HEX_LEN

        if data[pos:pos + 2] != b' "':
            raise ValueError(f"Expected ' \"' after digest at offset {pos}")
        pos += 2

        end = pos
        while True:
            if end >= n:
                raise ValueError("Unterminated quoted name")
            c = data[end]
            if c == _BACKSLASH:
                end += 2
                continue
            if c == _QUOTE:
                break
            end += 1

        name = unescape_name(data[pos:end])
        pos = end + 1

        if data[pos:pos + 1] != b"\n":
            raise ValueError(f"Expected newline after name at offset {pos}")
        pos += 1

        entries.append(DirectoryEntry(name=name, kind=kind, digest=bytes.fromhex(hex_part.decode("ascii"))))

    if not seen_separator:
        raise ValueError("Listing has no '=' separator")

    return entries
