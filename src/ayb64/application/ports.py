"""Application ports for clean architecture boundaries."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol


@dataclass(frozen=True)
class FileStat:
    """Filesystem facts collected for path inputs."""

    size_bytes: int
    created_at: datetime | None
    modified_at: datetime | None


class MimeSniffer(Protocol):
    """Guess content types. Both methods are total: failures yield a fallback."""

    def detect_from_file(self, path: Path) -> str:
        """Return a MIME type for the file at ``path``."""

    def detect_from_buffer(self, data: bytes) -> str:
        """Return a MIME type for an in-memory buffer."""


class InputReader(Protocol):
    """Acquire file content and filesystem metadata.

    Implementations raise ``InputAcquisitionError`` on any filesystem failure.
    """

    def stat(self, path: Path) -> FileStat:
        """Return size and timestamps for ``path``."""

    def read(self, path: Path) -> bytes:
        """Read the full content of ``path``."""

    def iter_chunks(self, path: Path, chunk_size: int) -> Iterator[bytes]:
        """Yield the content of ``path`` in chunks of ``chunk_size`` bytes."""
