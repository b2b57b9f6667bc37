"""ZIP-backed content-addressed datastore.

Records are archive entries named by the canonical string form of their
CID. Reads go through a frozen name index built at open; put and delete
stage changes in an in-memory cache. Closing a modified store loads every
surviving record and rewrites the whole archive, because a finalized ZIP
central directory cannot be edited in place.

Unless atomic rewrite is enabled, the rewrite truncates the original file
first. A failure mid-rewrite leaves an incomplete archive on disk.
"""

from __future__ import annotations

import contextlib
import os
from pathlib import Path
import tempfile
from typing import Any, BinaryIO

from multiformats import CID

from core.config import ZipcarConfig
from core.constants import ARCHIVE_FILE_MODE, TEMP_ARCHIVE_SUFFIX
from core.errors import (
    ZipcarDecodeError,
    ZipcarIOError,
    ZipcarNotFoundError,
    ZipcarStoreError,
    ZipcarUnsupportedError,
)
from core.logging_config import get_logger
from core.types import RewriteResult
from store.archive_codec import ArchiveReader, write_archive, write_empty_archive
from store.archive_index import ArchiveIndex
from store.key_codec import canonicalize, cid_to_store_key
from store.mutation_cache import MutationCache

_LOGGER = get_logger(__name__)


class ZipDatastore:
    """Key/value datastore persisted as a single ZIP archive.

    Keys are datastore keys wrapping a CID (see ``cid_to_store_key``).
    The first put for a record name wins; later puts for the same name
    are ignored without comparing payloads, since equal CIDs imply equal
    content. Instances are not thread-safe.
    """

    def __init__(
        self,
        path: Path,
        file_handle: BinaryIO,
        reader: ArchiveReader,
        config: ZipcarConfig,
    ) -> None:
        """Wrap an already opened archive.

        Prefer ``ZipDatastore.open`` which owns path handling.

        Args:
            path: Archive path on disk.
            file_handle: Read handle owned by the datastore until close.
            reader: Archive reader over ``file_handle``.
            config: Runtime configuration.
        """
        self._path = path
        self._file_handle: BinaryIO | None = file_handle
        self._reader = reader
        self._config = config
        self._index = ArchiveIndex.from_reader(reader)
        self._cache = MutationCache()
        self._comment = reader.comment
        self._dirty = False
        self._closed = False

    @classmethod
    def open(cls, path: str | Path, config: ZipcarConfig | None = None) -> "ZipDatastore":
        """Open an archive, creating an empty one when the path is missing.

        Args:
            path: Archive file path.
            config: Optional config; read from environment when omitted.

        Returns:
            Open datastore.

        Raises:
            ZipcarIOError: If the file cannot be created or opened.
            ZipcarDecodeError: If an existing file is not a ZIP archive.
        """
        resolved_config = config or ZipcarConfig.from_env()
        archive_path = Path(path)
        created = not archive_path.exists()
        try:
            if created:
                with archive_path.open("xb") as new_handle:
                    write_empty_archive(new_handle)
            file_handle = archive_path.open("rb")
        except OSError as error:
            raise ZipcarIOError(
                f"Failed to open datastore archive at {archive_path}: {error}. "
                "Check the path exists and is readable."
            ) from error
        try:
            reader = ArchiveReader(file_handle, str(archive_path))
        except ZipcarDecodeError:
            file_handle.close()
            raise
        datastore = cls(archive_path, file_handle, reader, resolved_config)
        _LOGGER.info(
            "datastore_opened",
            path=str(archive_path),
            entry_count=len(datastore._index),
            created=created,
        )
        return datastore

    @property
    def path(self) -> Path:
        return self._path

    @property
    def dirty(self) -> bool:
        """Whether close will rewrite the archive."""
        return self._dirty

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def comment(self) -> str:
        """Archive-level comment, written on rewrite."""
        return self._comment

    @comment.setter
    def comment(self, value: str) -> None:
        self._ensure_open()
        if value == self._comment:
            return
        self._comment = value
        self._dirty = True

    def put(self, key: str, value: bytes) -> None:
        """Stage a record for the given key.

        Args:
            key: Datastore key wrapping a CID.
            value: Record payload.

        Raises:
            ZipcarInvalidKeyError: If key does not decode to a CID.
        """
        self._ensure_open()
        name = canonicalize(key)
        if self._has_name(name):
            return
        self._dirty = True
        self._cache.set(name, value)

    def get(self, key: str) -> bytes:
        """Return the payload stored under a key.

        Raises:
            ZipcarInvalidKeyError: If key does not decode to a CID.
            ZipcarNotFoundError: If the record does not exist or was deleted.
            ZipcarIOError: If the archive entry cannot be read.
        """
        self._ensure_open()
        name = canonicalize(key)
        if self._cache.is_tombstoned(name):
            raise _not_found(name)
        cached = self._cache.get(name)
        if cached is not None:
            return cached
        entry = self._index.lookup(name)
        if entry is None:
            raise _not_found(name)
        payload = self._index.open_payload(entry)
        self._cache.set(name, payload)
        return payload

    def has(self, key: str) -> bool:
        self._ensure_open()
        return self._has_name(canonicalize(key))

    def delete(self, key: str) -> None:
        """Delete a record; deleting a missing record is not an error."""
        self._ensure_open()
        name = canonicalize(key)
        self._cache.tombstone(name)
        self._dirty = True

    def get_size(self, key: str) -> int:
        """Return the payload length for a key without reading the payload.

        Raises:
            ZipcarInvalidKeyError: If key does not decode to a CID.
            ZipcarNotFoundError: If the record does not exist or was deleted.
        """
        self._ensure_open()
        name = canonicalize(key)
        if self._cache.is_tombstoned(name):
            raise _not_found(name)
        cached = self._cache.get(name)
        if cached is not None:
            return len(cached)
        entry = self._index.lookup(name)
        if entry is None:
            raise _not_found(name)
        return entry.size

    size = get_size

    def query(self, query: object) -> Any:
        raise ZipcarUnsupportedError(
            "ZipDatastore does not support queries. "
            "Look records up by key with get or has."
        )

    def put_cid(self, cid: CID, value: bytes) -> None:
        self.put(cid_to_store_key(cid), value)

    def get_cid(self, cid: CID) -> bytes:
        return self.get(cid_to_store_key(cid))

    def has_cid(self, cid: CID) -> bool:
        return self.has(cid_to_store_key(cid))

    def delete_cid(self, cid: CID) -> None:
        self.delete(cid_to_store_key(cid))

    def get_size_cid(self, cid: CID) -> int:
        return self.get_size(cid_to_store_key(cid))

    def close(self) -> RewriteResult | None:
        """Close the datastore, rewriting the archive if it was modified.

        Returns:
            Rewrite summary, or None when nothing changed.

        Raises:
            ZipcarIOError: If loading entries or writing the archive fails.
        """
        if self._closed:
            return None
        self._closed = True
        try:
            if self._dirty:
                self._materialize()
        finally:
            self._release_handle()
        if not self._dirty:
            _LOGGER.info("datastore_closed", path=str(self._path), rewritten=False)
            return None
        result = self._rewrite()
        _LOGGER.info("datastore_closed", path=str(self._path), rewritten=True)
        return result

    def __enter__(self) -> "ZipDatastore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _has_name(self, name: str) -> bool:
        if name in self._cache:
            return self._cache.has_local(name)
        return name in self._index

    def _ensure_open(self) -> None:
        if self._closed:
            raise ZipcarStoreError(
                f"Datastore at {self._path} is closed. Open it again to continue."
            )

    def _materialize(self) -> None:
        """Load every surviving indexed record into the cache."""
        for name in self._index.names():
            if name in self._cache:
                continue
            entry = self._index.lookup(name)
            if entry is None:
                continue
            self._cache.set(name, self._index.open_payload(entry))
            _LOGGER.debug("entry_loaded", name=name, size=entry.size)

    def _release_handle(self) -> None:
        self._reader.close()
        if self._file_handle is not None:
            self._file_handle.close()
            self._file_handle = None

    def _rewrite(self) -> RewriteResult:
        if self._config.atomic_rewrite:
            entry_count = self._rewrite_atomic()
        else:
            entry_count = self._rewrite_in_place()
        _LOGGER.info(
            "archive_rewritten",
            path=str(self._path),
            entry_count=entry_count,
            atomic=self._config.atomic_rewrite,
        )
        return RewriteResult(
            path=self._path,
            entry_count=entry_count,
            atomic=self._config.atomic_rewrite,
        )

    def _rewrite_in_place(self) -> int:
        """Truncate the archive and write every record back."""
        try:
            with self._path.open("wb") as handle:
                return self._write_records(handle)
        except OSError as error:
            raise ZipcarIOError(
                f"Failed to rewrite archive at {self._path}: {error}. "
                "The archive may be incomplete; restore it from a backup."
            ) from error

    def _rewrite_atomic(self) -> int:
        """Write records to a sibling temp file and replace the archive."""
        temp_path: str | None = None
        try:
            descriptor, temp_path = tempfile.mkstemp(
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=TEMP_ARCHIVE_SUFFIX,
            )
            with os.fdopen(descriptor, "wb") as handle:
                entry_count = self._write_records(handle)
                handle.flush()
                os.fsync(handle.fileno())
            os.chmod(temp_path, ARCHIVE_FILE_MODE)
            os.replace(temp_path, self._path)
            return entry_count
        except OSError as error:
            if temp_path is not None:
                with contextlib.suppress(FileNotFoundError):
                    os.unlink(temp_path)
            raise ZipcarIOError(
                f"Failed to rewrite archive at {self._path}: {error}. "
                "The original archive was left unchanged."
            ) from error

    def _write_records(self, handle: BinaryIO) -> int:
        return write_archive(
            handle,
            self._cache.payloads(),
            self._comment,
            self._config.compression_level,
        )


def new_datastore(path: str | Path, config: ZipcarConfig | None = None) -> ZipDatastore:
    """Open a ZipDatastore at ``path``; always close it when done."""
    return ZipDatastore.open(path, config)


def _not_found(name: str) -> ZipcarNotFoundError:
    return ZipcarNotFoundError(f"Record '{name}' not found in datastore.")
