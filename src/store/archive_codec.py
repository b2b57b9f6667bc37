"""ZIP archive read and write primitives.

This module is the only place that touches the zipfile container API.
The datastore engine works with ArchiveEntry references and raw bytes.
"""

from __future__ import annotations

from datetime import datetime
from typing import BinaryIO, Iterable
import zipfile

from core.constants import ARCHIVE_FILE_MODE
from core.errors import ZipcarDecodeError, ZipcarIOError
from core.types import ArchiveEntry


class ArchiveReader:
    """Read-only view over an open ZIP archive file handle."""

    def __init__(self, file_handle: BinaryIO, source: str) -> None:
        """Open the central directory of an archive.

        Args:
            file_handle: Seekable binary handle owned by the caller.
            source: Path label used in error messages.

        Raises:
            ZipcarDecodeError: If the handle is not a ZIP archive.
        """
        self._source = source
        try:
            self._zip = zipfile.ZipFile(file_handle, mode="r")
        except zipfile.BadZipFile as error:
            raise ZipcarDecodeError(
                f"Failed to read ZIP archive at {source}: {error}. "
                "Point the datastore at a valid archive or a new path."
            ) from error

    @property
    def comment(self) -> str:
        return self._zip.comment.decode("utf-8", errors="replace")

    def entries(self) -> list[ArchiveEntry]:
        """List every entry in the archive directory."""
        return [
            ArchiveEntry(
                name=info.filename,
                size=info.file_size,
                compressed_size=info.compress_size,
                handle=info,
            )
            for info in self._zip.infolist()
        ]

    def read(self, entry: ArchiveEntry) -> bytes:
        """Read and decompress one entry payload.

        Raises:
            ZipcarIOError: If the entry cannot be read or fails its CRC check.
        """
        try:
            with self._zip.open(entry.handle) as stream:  # type: ignore[arg-type]
                return stream.read()
        except (OSError, zipfile.BadZipFile, ValueError) as error:
            raise ZipcarIOError(
                f"Failed to read entry '{entry.name}' from {self._source}: {error}. "
                "The archive may be truncated or corrupt."
            ) from error

    def close(self) -> None:
        self._zip.close()


def write_archive(
    file_handle: BinaryIO,
    records: Iterable[tuple[str, bytes]],
    comment: str,
    compression_level: int,
) -> int:
    """Write a complete archive of deflated records to a handle.

    Args:
        file_handle: Writable binary handle positioned at offset zero.
        records: Pairs of entry name and payload, written in given order.
        comment: Archive-level comment.
        compression_level: Deflate level between 0 and 9.

    Returns:
        Number of entries written.
    """
    written = 0
    date_time = datetime.now().timetuple()[:6]
    with zipfile.ZipFile(
        file_handle,
        mode="w",
        compression=zipfile.ZIP_DEFLATED,
        compresslevel=compression_level,
    ) as writer:
        writer.comment = comment.encode("utf-8")
        for name, payload in records:
            info = zipfile.ZipInfo(filename=name, date_time=date_time)
            info.compress_type = zipfile.ZIP_DEFLATED
            info.external_attr = ARCHIVE_FILE_MODE << 16
            writer.writestr(info, payload, compresslevel=compression_level)
            written += 1
    return written


def write_empty_archive(file_handle: BinaryIO) -> None:
    """Write a well-formed archive with no entries."""
    with zipfile.ZipFile(file_handle, mode="w"):
        pass
