"""Unit tests for filesystem reader and MIME sniffer adapters."""

from __future__ import annotations

from pathlib import Path

import pytest

from ayb64.adapters.readers import FilesystemReader
from ayb64.adapters.sniffers import FiletypeMimeSniffer, guess_from_name
from ayb64.errors import InputAcquisitionError

PNG_HEADER = b"\x89PNG\r\n\x1a\n" + b"\x00\x00\x00\rIHDR" + b"\x00" * 32


def test_reader_stat_reports_size_and_timestamps(tmp_path: Path) -> None:
    """Return byte size and timezone-aware timestamps."""
    path = tmp_path / "data.bin"
    path.write_bytes(b"12345")

    stat = FilesystemReader().stat(path)

    assert stat.size_bytes == 5
    assert stat.modified_at is not None and stat.modified_at.tzinfo is not None
    assert stat.created_at is not None


def test_reader_rejects_directories(tmp_path: Path) -> None:
    """Treat a directory as an acquisition error."""
    with pytest.raises(InputAcquisitionError, match="found a directory"):
        FilesystemReader().stat(tmp_path)


def test_reader_maps_missing_files(tmp_path: Path) -> None:
    """Translate FileNotFoundError for every access method."""
    reader = FilesystemReader()
    missing = tmp_path / "missing.bin"

    with pytest.raises(InputAcquisitionError, match="File not found"):
        reader.stat(missing)
    with pytest.raises(InputAcquisitionError, match="File not found"):
        reader.read(missing)
    with pytest.raises(InputAcquisitionError, match="File not found"):
        list(reader.iter_chunks(missing, 4))


def test_reader_iter_chunks_respects_size(tmp_path: Path) -> None:
    """Yield fixed-size chunks with a shorter tail."""
    path = tmp_path / "data.bin"
    path.write_bytes(b"abcdefgh")

    assert list(FilesystemReader().iter_chunks(path, 3)) == [b"abc", b"def", b"gh"]


def test_sniffer_detects_magic_numbers(tmp_path: Path) -> None:
    """Prefer content signatures over the file name."""
    path = tmp_path / "picture.dat"
    path.write_bytes(PNG_HEADER)
    sniffer = FiletypeMimeSniffer()

    assert sniffer.detect_from_file(path) == "image/png"
    assert sniffer.detect_from_buffer(PNG_HEADER) == "image/png"


def test_sniffer_falls_back_to_extension_then_default(tmp_path: Path) -> None:
    """Use the extension table, then application/octet-stream."""
    text_path = tmp_path / "notes.txt"
    text_path.write_text("plain words", encoding="utf-8")
    unknown_path = tmp_path / "blob.zzunknown"
    unknown_path.write_bytes(b"\x01\x02")
    sniffer = FiletypeMimeSniffer()

    assert sniffer.detect_from_file(text_path) == "text/plain"
    assert sniffer.detect_from_file(unknown_path) == "application/octet-stream"
    assert sniffer.detect_from_buffer(b"") == "application/octet-stream"
    assert sniffer.detect_from_buffer(b"plain words") == "application/octet-stream"


def test_sniffer_missing_file_is_total(tmp_path: Path) -> None:
    """Never raise for unreadable files."""
    assert FiletypeMimeSniffer().detect_from_file(tmp_path / "gone.bin") == (
        "application/octet-stream"
    )


def test_guess_from_name_handles_missing_names() -> None:
    """Return None when there is no name to look up."""
    assert guess_from_name(None) is None
    assert guess_from_name("") is None
    assert guess_from_name("page.html") == "text/html"
