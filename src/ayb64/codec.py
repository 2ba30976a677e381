"""Base64 encode/decode primitives and fixed-width line wrapping."""

from __future__ import annotations

import base64
import binascii
from collections.abc import Iterable, Iterator

from ayb64.errors import MalformedEncodingError
from ayb64.validate import validate_base64_text

ENCODE_ALIGNMENT = 3


def wrap_lines(text: str, width: int | None) -> str:
    """Split ``text`` into lines of exactly ``width`` characters.

    The last line may be shorter. Lines are joined by a single ``\\n`` with no
    trailing separator. ``None`` or a non-positive width returns ``text``.
    """
    if not width or width <= 0 or len(text) <= width:
        return text
    return "\n".join(text[start : start + width] for start in range(0, len(text), width))


def rewrap_lines(text: str, width: int | None) -> str:
    """Apply :func:`wrap_lines` to every existing line of ``text``.

    Lines already at most ``width`` long are left untouched, so re-wrapping
    content that was produced at the same width is a no-op.
    """
    if not width or width <= 0:
        return text
    return "\n".join(wrap_lines(line, width) for line in text.split("\n"))


def encode_bytes(data: bytes, wrap_column: int | None = None) -> str:
    """Encode bytes to canonical base64, optionally wrapped."""
    return wrap_lines(base64.b64encode(data).decode("ascii"), wrap_column)


def align_chunks(chunks: Iterable[bytes]) -> Iterator[bytes]:
    """Re-block ``chunks`` so every yielded piece but the last is 3-byte aligned.

    Base64 maps 3 input bytes onto 4 output characters, so aligned pieces can
    be encoded independently and concatenated without mid-stream padding.
    """
    carry = b""
    for chunk in chunks:
        block = carry + chunk
        cut = len(block) - len(block) % ENCODE_ALIGNMENT
        carry = block[cut:]
        if cut:
            yield block[:cut]
    if carry:
        yield carry


def encode_chunks(chunks: Iterable[bytes], wrap_column: int | None = None) -> str:
    """Encode a sequence of byte chunks as one base64 document.

    The result is identical to :func:`encode_bytes` over the joined chunks,
    whatever the chunk boundaries are.
    """
    parts = [base64.b64encode(piece).decode("ascii") for piece in align_chunks(chunks)]
    return wrap_lines("".join(parts), wrap_column)


def decode_base64(text: str) -> bytes:
    """Decode base64 text under the lenient-but-bounded validation policy.

    Raises
    ------
    MalformedEncodingError
        If validation or the strict decode of the re-padded text fails.
    """
    canonical = validate_base64_text(text)
    try:
        return base64.b64decode(canonical, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise MalformedEncodingError(f"Invalid base64 format: {exc}") from exc
