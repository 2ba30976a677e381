"""Shared type aliases and constants for conversion modules."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

type InputKind = Literal["path", "text", "bytes"]
type Direction = Literal["encode", "decode"]
type ExecutionMode = Literal["in_memory", "streaming"]
type ErrorKind = Literal[
    "input_acquisition",
    "malformed_encoding",
    "unsupported_format",
    "format_registration",
    "invalid_options",
    "parity",
    "unclassified",
]

type InputValue = str | bytes | Path
type Payload = str | bytes

DEFAULT_MIME_TYPE = "application/octet-stream"
TEXT_MIME_TYPE = "text/plain"
DEFAULT_CHUNK_SIZE = 64 * 1024
