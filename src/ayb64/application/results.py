"""Application-layer result objects."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from ayb64.errors import ERROR_KINDS, Ayb64Error
from ayb64.types import ErrorKind, Payload


@dataclass(frozen=True)
class Metadata:
    """Facts captured about the conversion input.

    ``size_bytes`` is always the input byte length, never the length of the
    produced payload.
    """

    size_bytes: int = 0
    filename: str | None = None
    mime_type: str | None = None
    created_at: datetime | None = None
    modified_at: datetime | None = None
    content_hash: str | None = None

    def to_json_dict(self) -> dict[str, str | int]:
        """Return camelCase metadata with unset fields omitted."""
        payload: dict[str, str | int] = {}
        if self.filename is not None:
            payload["filename"] = self.filename
        if self.mime_type is not None:
            payload["mimeType"] = self.mime_type
        payload["size"] = self.size_bytes
        if self.created_at is not None:
            payload["created"] = self.created_at.isoformat()
        if self.modified_at is not None:
            payload["modified"] = self.modified_at.isoformat()
        if self.content_hash is not None:
            payload["hash"] = self.content_hash
        return payload


@dataclass(frozen=True)
class ConversionResult:
    """Structured conversion outcome.

    Built exactly once by the engine per request. Failed results carry an empty
    payload, zeroed metadata, ``ok=False`` and a populated ``error_message``.
    """

    payload: Payload
    metadata: Metadata = field(default_factory=Metadata)
    elapsed_ms: int = 0
    ok: bool = True
    error_message: str | None = None
    error_kind: ErrorKind | None = None

    @classmethod
    def failure(
        cls,
        message: str,
        kind: ErrorKind,
        elapsed_ms: int = 0,
    ) -> ConversionResult:
        """Build a failed result with empty payload and zeroed metadata."""
        return cls(
            payload="",
            metadata=Metadata(),
            elapsed_ms=elapsed_ms,
            ok=False,
            error_message=message,
            error_kind=kind,
        )

    @property
    def text(self) -> str:
        """Payload coerced to text (bytes are decoded as lenient UTF-8)."""
        if isinstance(self.payload, bytes):
            return self.payload.decode("utf-8", errors="replace")
        return self.payload or ""

    def raise_for_error(self) -> None:
        """Raise the domain error matching ``error_kind`` if the result failed."""
        if self.ok:
            return
        error_cls = ERROR_KINDS.get(self.error_kind or "", Ayb64Error)
        raise error_cls(self.error_message or "Unknown error")
