"""Shared typed models.

This module defines the immutable models exchanged between the
archive codec, the archive index, the mutation cache, and the engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, Union


class Tombstone:
    """Cache marker for a record deleted since open."""

    _instance: "Tombstone | None" = None

    def __new__(cls) -> "Tombstone":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "TOMBSTONE"


TOMBSTONE = Tombstone()

CachedValue = Union[bytes, Tombstone]


@dataclass(frozen=True)
class ArchiveEntry:
    """Reference to one entry resident in an open archive.

    Attributes:
        name: Entry file name, the canonical record name.
        size: Uncompressed payload length in bytes.
        compressed_size: Stored payload length in bytes.
        handle: Codec-specific entry handle used to open the payload.
    """

    name: str
    size: int
    compressed_size: int
    handle: object = field(repr=False, compare=False)


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of a close-time archive rewrite.

    Attributes:
        path: Archive path that was rewritten.
        entry_count: Number of records written.
        atomic: Whether a temp-file replace was used.
    """

    path: Path
    entry_count: int
    atomic: bool


class KeyValueDatastore(Protocol):
    """Generic key/value datastore capability set."""

    def put(self, key: str, value: bytes) -> None: ...

    def get(self, key: str) -> bytes: ...

    def has(self, key: str) -> bool: ...

    def delete(self, key: str) -> None: ...

    def get_size(self, key: str) -> int: ...

    def query(self, query: object) -> Any: ...

    def close(self) -> Any: ...
