"""Archive name index built once at open time.

This module records which entries existed on disk when the datastore
was opened. The index is frozen for the session; deletions are tracked
by the mutation cache, never by editing this map.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterator

from core.errors import ZipcarStoreError
from core.types import ArchiveEntry
from store.archive_codec import ArchiveReader


class ArchiveIndex:
    """Read-only mapping from canonical record name to archive entry."""

    def __init__(
        self,
        entries: list[ArchiveEntry] | None = None,
        reader: ArchiveReader | None = None,
    ) -> None:
        by_name = {entry.name: entry for entry in entries or []}
        self._entries = MappingProxyType(by_name)
        self._reader = reader

    @classmethod
    def from_reader(cls, reader: ArchiveReader) -> "ArchiveIndex":
        """Index every entry of an open archive without reading payloads."""
        return cls(reader.entries(), reader)

    def lookup(self, name: str) -> ArchiveEntry | None:
        return self._entries.get(name)

    def open_payload(self, entry: ArchiveEntry) -> bytes:
        """Read the payload behind an entry reference.

        Args:
            entry: Entry returned by ``lookup``.

        Returns:
            Decompressed payload bytes.

        Raises:
            ZipcarIOError: If the entry cannot be read.
        """
        if self._reader is None:
            raise ZipcarStoreError(f"Entry '{entry.name}' does not belong to an open archive.")
        return self._reader.read(entry)

    def names(self) -> Iterator[str]:
        return iter(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)
