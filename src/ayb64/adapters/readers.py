"""Filesystem input reader."""

from __future__ import annotations

import errno
import os
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

from ayb64.application.ports import FileStat
from ayb64.errors import describe_os_error


def _timestamp(value: float | None) -> datetime | None:
    if value is None:
        return None
    return datetime.fromtimestamp(value, tz=UTC)


def _created_time(stat_result: os.stat_result) -> float | None:
    # st_birthtime exists on macOS/BSD (and Windows on 3.12+); fall back to ctime.
    birth = getattr(stat_result, "st_birthtime", None)
    if birth is not None:
        return birth
    return stat_result.st_ctime


class FilesystemReader:
    """Read file content and timestamps, mapping ``OSError`` to domain errors."""

    def stat(self, path: Path) -> FileStat:
        """Return size and timestamps for ``path``.

        Raises
        ------
        InputAcquisitionError
            If the file cannot be inspected or is not a regular file.
        """
        try:
            stat_result = path.stat()
        except OSError as exc:
            raise describe_os_error(exc, path) from exc
        if path.is_dir():
            error = IsADirectoryError(errno.EISDIR, "Is a directory", str(path))
            raise describe_os_error(error, path)
        return FileStat(
            size_bytes=stat_result.st_size,
            created_at=_timestamp(_created_time(stat_result)),
            modified_at=_timestamp(stat_result.st_mtime),
        )

    def read(self, path: Path) -> bytes:
        """Read the full content of ``path``."""
        try:
            return path.read_bytes()
        except OSError as exc:
            raise describe_os_error(exc, path) from exc

    def iter_chunks(self, path: Path, chunk_size: int) -> Iterator[bytes]:
        """Yield the content of ``path`` in ``chunk_size`` byte pieces."""
        try:
            with path.open("rb") as handle:
                while True:
                    chunk = handle.read(chunk_size)
                    if not chunk:
                        break
                    yield chunk
        except OSError as exc:
            raise describe_os_error(exc, path) from exc
