"""Public SDK surface for Zipcar.

This module provides a stable import path for datastore users.
It re-exports the datastore, key helpers, config, and error types.
"""

from __future__ import annotations

from core.config import ZipcarConfig
from core.errors import (
    ZipcarDecodeError,
    ZipcarError,
    ZipcarInvalidKeyError,
    ZipcarIOError,
    ZipcarNotFoundError,
    ZipcarStoreError,
    ZipcarUnsupportedError,
)
from core.types import KeyValueDatastore, RewriteResult
from store.key_codec import (
    canonical_name,
    canonicalize,
    cid_to_store_key,
    parse_cid,
    raw_cid_for,
    store_key_to_cid,
)
from store.zip_datastore import ZipDatastore, new_datastore

__all__ = [
    "KeyValueDatastore",
    "RewriteResult",
    "ZipDatastore",
    "ZipcarConfig",
    "ZipcarDecodeError",
    "ZipcarError",
    "ZipcarIOError",
    "ZipcarInvalidKeyError",
    "ZipcarNotFoundError",
    "ZipcarStoreError",
    "ZipcarUnsupportedError",
    "canonical_name",
    "canonicalize",
    "cid_to_store_key",
    "new_datastore",
    "parse_cid",
    "raw_cid_for",
    "store_key_to_cid",
]
