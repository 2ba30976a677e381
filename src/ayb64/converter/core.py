"""Conversion request model and integrity digest helpers."""

from __future__ import annotations

from dataclasses import dataclass
from hashlib import sha256
from pathlib import Path

from ayb64.types import (
    DEFAULT_CHUNK_SIZE,
    Direction,
    ExecutionMode,
    InputKind,
    InputValue,
)

_KIND_TYPES: dict[str, tuple[type, ...]] = {
    "path": (str, Path),
    "text": (str,),
    "bytes": (bytes, bytearray, memoryview),
}


@dataclass(frozen=True)
class ConversionRequest:
    """Normalized conversion request.

    Parameters
    ----------
    input_kind : {"path", "text", "bytes"}
        How ``input_value`` is interpreted. A request is never both a path and
        a literal at once.
    input_value : str | bytes | Path
        File path, literal UTF-8 text or raw bytes.
    direction : {"encode", "decode"}, default="encode"
        Transform to apply.
    wrap_column : int | None, default=None
        Encoded output line width; ``None`` or non-positive disables wrapping.
    produce_data_uri : bool, default=False
        Whether the rendered artifact should be a ``data:`` URI. The engine
        output is plain base64 either way; :func:`render_options_for` carries
        this choice into :class:`RenderOptions`.
    mode : {"in_memory", "streaming"}, default="in_memory"
        Execution mode for path inputs.
    chunk_size : int, default=65536
        Read size used by streaming mode.
    filename : str | None, default=None
        Display name for literal inputs (uploads, agent calls). Path inputs
        always use the final path component.
    """

    input_kind: InputKind
    input_value: InputValue
    direction: Direction = "encode"
    wrap_column: int | None = None
    produce_data_uri: bool = False
    mode: ExecutionMode = "in_memory"
    chunk_size: int = DEFAULT_CHUNK_SIZE
    filename: str | None = None

    def __post_init__(self) -> None:
        expected = _KIND_TYPES.get(self.input_kind)
        if expected is None:
            raise ValueError(f"unsupported input kind: {self.input_kind}")
        if not isinstance(self.input_value, expected):
            raise TypeError(
                f"input_kind {self.input_kind!r} does not accept "
                f"{type(self.input_value).__name__} values"
            )
        if self.direction not in ("encode", "decode"):
            raise ValueError(f"unsupported direction: {self.direction}")
        if self.mode not in ("in_memory", "streaming"):
            raise ValueError(f"unsupported execution mode: {self.mode}")
        if self.chunk_size <= 0:
            raise ValueError("chunk_size must be > 0")

    @classmethod
    def from_path(cls, path: str | Path, **kwargs: object) -> ConversionRequest:
        """Build a request reading from a file."""
        return cls(input_kind="path", input_value=Path(path), **kwargs)

    @classmethod
    def from_text(cls, text: str, **kwargs: object) -> ConversionRequest:
        """Build a request over literal UTF-8 text."""
        return cls(input_kind="text", input_value=text, **kwargs)

    @classmethod
    def from_bytes(cls, data: bytes, **kwargs: object) -> ConversionRequest:
        """Build a request over raw bytes."""
        return cls(input_kind="bytes", input_value=bytes(data), **kwargs)

    @property
    def path(self) -> Path:
        """Input path for ``input_kind == "path"`` requests."""
        if self.input_kind != "path":
            raise ValueError("request does not reference a file")
        return Path(self.input_value)  # type: ignore[arg-type]


def digest_bytes(data: bytes) -> str:
    """Compute SHA-256 digest for byte payload."""
    return sha256(data).hexdigest()


def digest_file(path: Path, *, chunk_size: int = 1 << 20) -> str:
    """Compute SHA-256 digest for file content."""
    hasher = sha256()
    with path.open("rb") as handle:
        while True:
            chunk = handle.read(chunk_size)
            if not chunk:
                break
            hasher.update(chunk)
    return hasher.hexdigest()


def safe_input_filename(filename: str) -> str:
    """Return the final path component of ``filename``, or ``artifact.bin``."""
    raw = filename.strip()
    if not raw:
        return "artifact.bin"
    # Normalize Windows-style separators before basename extraction.
    normalized = raw.replace("\\", "/")
    candidate = Path(normalized).name
    if candidate in {"", ".", ".."}:
        return "artifact.bin"
    return candidate
