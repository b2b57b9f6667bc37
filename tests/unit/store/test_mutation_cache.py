"""Unit tests for the in-memory mutation cache."""

from __future__ import annotations

from core.types import TOMBSTONE
from store.mutation_cache import MutationCache


def test_set_then_get_returns_payload() -> None:
    """Cached payloads should be returned as bytes."""
    cache = MutationCache()

    cache.set("a", bytearray(b"aaaa"))

    assert cache.get("a") == b"aaaa" and cache.has_local("a")


def test_absent_name_defers_to_index() -> None:
    """Names never cached are neither local nor tombstoned."""
    cache = MutationCache()

    assert cache.get("a") is None
    assert not cache.has_local("a") and not cache.is_tombstoned("a") and "a" not in cache


def test_tombstone_overrides_payload() -> None:
    """Tombstoned names should report no payload but stay present."""
    cache = MutationCache()
    cache.set("a", b"aaaa")

    cache.tombstone("a")

    assert cache.get("a") is None and cache.is_tombstoned("a")
    assert "a" in cache and not cache.has_local("a")


def test_entries_include_tombstones() -> None:
    """Entries should expose the tombstone marker itself."""
    cache = MutationCache()
    cache.set("a", b"aaaa")
    cache.tombstone("b")

    assert dict(cache.entries()) == {"a": b"aaaa", "b": TOMBSTONE}


def test_payloads_skip_tombstones_in_name_order() -> None:
    """Rewrite input should be sorted and exclude deleted names."""
    cache = MutationCache()
    cache.set("c", b"cccc")
    cache.set("a", b"aaaa")
    cache.tombstone("b")

    assert list(cache.payloads()) == [("a", b"aaaa"), ("c", b"cccc")]
