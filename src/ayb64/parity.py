"""Parity checks between streaming and in-memory execution."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ayb64.application.results import ConversionResult
from ayb64.application.use_cases import convert
from ayb64.converter.core import ConversionRequest
from ayb64.errors import ParityError
from ayb64.types import DEFAULT_CHUNK_SIZE, Direction


@dataclass(frozen=True)
class ModeParityReport:
    """Outcome of running one input through both execution modes."""

    path: Path
    direction: Direction
    chunk_size: int
    size_bytes: int
    content_hash: str | None
    payload_length: int
    in_memory_ms: int
    streaming_ms: int


def _first_difference(expected: str | bytes, actual: str | bytes) -> int:
    for index, (left, right) in enumerate(zip(expected, actual)):
        if left != right:
            return index
    return min(len(expected), len(actual))


def _compare(in_memory: ConversionResult, streaming: ConversionResult) -> None:
    if in_memory.ok != streaming.ok:
        raise ParityError(
            "Parity failed: one mode succeeded and the other failed "
            f"(in_memory={in_memory.error_message!r}, "
            f"streaming={streaming.error_message!r})."
        )
    if not in_memory.ok:
        in_memory.raise_for_error()
    if in_memory.payload != streaming.payload:
        offset = _first_difference(in_memory.payload, streaming.payload)
        raise ParityError(
            "Parity failed: payloads differ "
            f"(lengths {len(in_memory.payload)} vs {len(streaming.payload)}, "
            f"first difference at offset {offset})."
        )
    left, right = in_memory.metadata, streaming.metadata
    for field_name in ("size_bytes", "content_hash", "mime_type", "filename"):
        if getattr(left, field_name) != getattr(right, field_name):
            raise ParityError(
                f"Parity failed: metadata field {field_name} differs "
                f"({getattr(left, field_name)!r} vs {getattr(right, field_name)!r})."
            )


def check_mode_parity(
    path: Path,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    *,
    direction: Direction = "encode",
    wrap_column: int | None = None,
) -> ModeParityReport:
    """Convert ``path`` in both execution modes and compare the results.

    Parameters
    ----------
    path : Path
        File to convert.
    chunk_size : int, default=65536
        Read size for the streaming run.
    direction : {"encode", "decode"}, default="encode"
        Transform to compare.
    wrap_column : int | None, optional
        Line width applied to encoded output.

    Returns
    -------
    ModeParityReport
        Summary of the matching runs.

    Raises
    ------
    ParityError
        If payloads or metadata differ between modes.
    Ayb64Error
        If both modes fail with the same input error.
    """
    common = {"direction": direction, "wrap_column": wrap_column, "chunk_size": chunk_size}
    in_memory = convert(ConversionRequest.from_path(path, mode="in_memory", **common))
    streaming = convert(ConversionRequest.from_path(path, mode="streaming", **common))
    _compare(in_memory, streaming)
    return ModeParityReport(
        path=Path(path),
        direction=direction,
        chunk_size=chunk_size,
        size_bytes=in_memory.metadata.size_bytes,
        content_hash=in_memory.metadata.content_hash,
        payload_length=len(in_memory.payload),
        in_memory_ms=in_memory.elapsed_ms,
        streaming_ms=streaming.elapsed_ms,
    )
