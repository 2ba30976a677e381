"""Base64 input validation.

Callers (scripts, AI agents) often hand-edit or truncate base64, so the policy
is lenient about whitespace and padding completeness but strict about the
alphabet and about where padding may appear.
"""

from __future__ import annotations

import re

from ayb64.errors import MalformedEncodingError

_WHITESPACE = re.compile(r"\s+")
_FOREIGN_CHAR = re.compile(r"[^A-Za-z0-9+/=]")
MAX_PADDING = 2


def clean_base64_text(text: str) -> str:
    """Strip all whitespace from base64 text."""
    return _WHITESPACE.sub("", text)


def validate_base64_text(text: str) -> str:
    """Validate base64 text and return it re-padded to a multiple of four.

    Parameters
    ----------
    text : str
        Candidate base64 text. Whitespace anywhere is ignored.

    Returns
    -------
    str
        Canonically padded base64, ready for a strict decoder.

    Raises
    ------
    MalformedEncodingError
        If a character outside ``[A-Za-z0-9+/=]`` appears, padding occurs
        before the end, more than two padding characters trail the data, or
        the data length leaves a dangling 6-bit group.
    """
    cleaned = clean_base64_text(text)

    foreign = _FOREIGN_CHAR.search(cleaned)
    if foreign is not None:
        raise MalformedEncodingError(
            "Invalid base64 format: unexpected character "
            f"{foreign.group()!r} at position {foreign.start()}"
        )

    data = cleaned.rstrip("=")
    if "=" in data:
        raise MalformedEncodingError(
            "Invalid base64 format: padding '=' found before the end of the data "
            f"(position {data.index('=')})"
        )

    padding = len(cleaned) - len(data)
    if padding > MAX_PADDING:
        raise MalformedEncodingError(
            f"Invalid base64 format: {padding} padding characters (at most "
            f"{MAX_PADDING} allowed)"
        )

    remainder = len(data) % 4
    if remainder == 1:
        raise MalformedEncodingError(
            f"Invalid base64 format: {len(data)} data characters cannot be decoded "
            "(one character past a complete 4-character group is truncated input)"
        )
    if remainder:
        data += "=" * (4 - remainder)
    return data
