"""Store key and canonical record name conversions.

This module maps datastore keys to content identifiers and content
identifiers to the archive entry names records are stored under.
Version 0 identifiers are named in base58btc, all others in base32,
which keeps archive layouts stable across identifier generations.
"""

from __future__ import annotations

import base64
import binascii

from multiformats import CID, multihash

from core.constants import (
    HASH_FUNCTION,
    LEGACY_CID_VERSION,
    MODERN_NAME_BASE,
    RAW_CODEC,
    STORE_KEY_PREFIX,
)
from core.errors import ZipcarInvalidKeyError

_CID_ERRORS = (ValueError, KeyError, TypeError)


def cid_to_store_key(cid: CID) -> str:
    """Convert a content identifier into a datastore key.

    Args:
        cid: Content identifier.

    Returns:
        Key made of a slash and the unpadded upper base32 CID bytes.
    """
    encoded = base64.b32encode(bytes(cid)).decode("ascii").rstrip("=")
    return f"{STORE_KEY_PREFIX}{encoded}"


def store_key_to_cid(key: str) -> CID:
    """Decode a datastore key back into a content identifier.

    Args:
        key: Datastore key produced by ``cid_to_store_key``.

    Returns:
        Decoded content identifier.

    Raises:
        ZipcarInvalidKeyError: If the key does not decode to a CID.
    """
    if not isinstance(key, str) or not key.startswith(STORE_KEY_PREFIX):
        raise ZipcarInvalidKeyError(
            f"Invalid store key {key!r}: expected a '/'-prefixed base32 CID key. "
            "Build keys with cid_to_store_key."
        )
    body = key[len(STORE_KEY_PREFIX) :]
    try:
        raw = base64.b32decode(body + "=" * (-len(body) % 8))
    except (binascii.Error, ValueError) as error:
        raise ZipcarInvalidKeyError(
            f"Invalid store key {key!r}: body is not base32 ({error})."
        ) from error
    try:
        return CID.decode(raw)
    except _CID_ERRORS as error:
        raise ZipcarInvalidKeyError(
            f"Invalid store key {key!r}: bytes are not a content identifier ({error})."
        ) from error


def canonical_name(cid: CID) -> str:
    """Return the archive entry name for a content identifier.

    Raises:
        ZipcarInvalidKeyError: If the CID cannot be encoded in its scheme.
    """
    try:
        if cid.version == LEGACY_CID_VERSION:
            # CIDv0 strings are bare base58btc, no multibase prefix.
            return cid.encode()
        return cid.encode(MODERN_NAME_BASE)
    except _CID_ERRORS as error:
        raise ZipcarInvalidKeyError(
            f"Cannot encode content identifier {cid!r} as a record name: {error}."
        ) from error


def canonicalize(key: str) -> str:
    """Convert a datastore key into its canonical record name."""
    return canonical_name(store_key_to_cid(key))


def parse_cid(text: str) -> CID:
    """Parse a CID string such as ``Qm...`` or ``bafk...``.

    Raises:
        ZipcarInvalidKeyError: If the text is not a CID.
    """
    try:
        return CID.decode(text.strip())
    except _CID_ERRORS as error:
        raise ZipcarInvalidKeyError(
            f"Invalid content identifier '{text}': {error}. "
            "Pass a base58btc CIDv0 or a multibase CIDv1 string."
        ) from error


def raw_cid_for(payload: bytes) -> CID:
    """Build the CIDv1 of a payload using the raw codec and sha2-256."""
    digest = multihash.digest(payload, HASH_FUNCTION)
    return CID(MODERN_NAME_BASE, 1, RAW_CODEC, digest)
