"""In-memory overlay of records added, fetched, or deleted since open.

A name is either absent (defer to the archive index), mapped to payload
bytes (authoritative), or tombstoned (deleted regardless of the index).
There is no eviction: the full record set must fit in memory.
"""

from __future__ import annotations

from typing import Iterator

from core.types import TOMBSTONE, CachedValue


class MutationCache:
    """Unbounded name to payload-or-tombstone mapping."""

    def __init__(self) -> None:
        self._values: dict[str, CachedValue] = {}

    def get(self, name: str) -> bytes | None:
        """Return the cached payload, or None when absent or tombstoned."""
        value = self._values.get(name)
        if isinstance(value, bytes):
            return value
        return None

    def set(self, name: str, payload: bytes) -> None:
        self._values[name] = bytes(payload)

    def tombstone(self, name: str) -> None:
        self._values[name] = TOMBSTONE

    def is_tombstoned(self, name: str) -> bool:
        return self._values.get(name) is TOMBSTONE

    def has_local(self, name: str) -> bool:
        """Return whether a real payload is cached for the name."""
        return isinstance(self._values.get(name), bytes)

    def entries(self) -> Iterator[tuple[str, CachedValue]]:
        return iter(list(self._values.items()))

    def payloads(self) -> Iterator[tuple[str, bytes]]:
        """Yield non-tombstoned entries sorted by name."""
        for name in sorted(self._values):
            value = self._values[name]
            if isinstance(value, bytes):
                yield name, value

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __len__(self) -> int:
        return len(self._values)
