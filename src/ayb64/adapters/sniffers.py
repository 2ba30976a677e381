"""MIME type sniffing adapters."""

from __future__ import annotations

import logging
import mimetypes
from pathlib import Path

import filetype

from ayb64.types import DEFAULT_MIME_TYPE

logger = logging.getLogger(__name__)

# filetype only inspects the leading bytes of a buffer.
SNIFF_HEADER_BYTES = 8192


def guess_from_name(name: str | Path | None) -> str | None:
    """Guess a MIME type from a file name extension."""
    if not name:
        return None
    guessed, _ = mimetypes.guess_type(str(name))
    return guessed


class FiletypeMimeSniffer:
    """Magic-number detection with an extension-table fallback.

    Both methods are total: any detection failure resolves to
    ``application/octet-stream``.
    """

    def __init__(self, fallback: str = DEFAULT_MIME_TYPE) -> None:
        self.fallback = fallback

    def detect_from_file(self, path: Path) -> str:
        """Detect the MIME type of the file at ``path``.

        Parameters
        ----------
        path : Path
            File to inspect. Magic numbers are tried first, then the name.

        Returns
        -------
        str
            Detected MIME type or the fallback type.
        """
        try:
            detected = filetype.guess_mime(str(path))
        except (OSError, TypeError, ValueError) as exc:
            logger.debug("magic-number detection failed for %s: %s", path, exc)
            detected = None
        return detected or guess_from_name(path) or self.fallback

    def detect_from_buffer(self, data: bytes) -> str:
        """Detect the MIME type of an in-memory buffer."""
        if not data:
            return self.fallback
        try:
            detected = filetype.guess_mime(bytes(data[:SNIFF_HEADER_BYTES]))
        except (TypeError, ValueError) as exc:
            logger.debug("magic-number detection failed for buffer: %s", exc)
            detected = None
        return detected or self.fallback
