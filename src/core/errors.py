"""Zipcar exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each failure kind raised by the datastore maps to one error type.
"""

from __future__ import annotations


class ZipcarError(Exception):
    """Base exception for all Zipcar failures."""


class ZipcarConfigError(ZipcarError):
    """Raised for invalid runtime configuration."""


class ZipcarInvalidKeyError(ZipcarError):
    """Raised when a key does not map to an encodable content identifier."""


class ZipcarNotFoundError(ZipcarError, KeyError):
    """Raised when a record is absent from both cache and archive index."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message instead.
        return str(self.args[0]) if self.args else ""


class ZipcarIOError(ZipcarError):
    """Raised for backing file, entry read, and rewrite failures."""


class ZipcarDecodeError(ZipcarIOError):
    """Raised when an existing file is not a readable ZIP archive."""


class ZipcarUnsupportedError(ZipcarError):
    """Raised for operations the datastore deliberately does not implement."""


class ZipcarStoreError(ZipcarError):
    """Raised for datastore misuse such as operating after close."""
