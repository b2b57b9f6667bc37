"""Shared content identifier helpers for tests."""

from __future__ import annotations

from multiformats import CID, multihash

from core.constants import HASH_FUNCTION, LEGACY_CODEC
from store.key_codec import cid_to_store_key, raw_cid_for


def raw_key(payload: bytes) -> str:
    """Return the datastore key of a payload's raw CIDv1."""
    return cid_to_store_key(raw_cid_for(payload))


def legacy_cid(payload: bytes) -> CID:
    """Build a CIDv0 over the sha2-256 digest of a payload."""
    return CID("base58btc", 0, LEGACY_CODEC, multihash.digest(payload, HASH_FUNCTION))


def modern_cid_with_same_hash(payload: bytes) -> CID:
    """Build a CIDv1 sharing codec and digest with ``legacy_cid``."""
    return CID("base32", 1, LEGACY_CODEC, multihash.digest(payload, HASH_FUNCTION))
