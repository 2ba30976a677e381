"""Top-level API for base64 conversion and rendering."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult, Metadata
from ayb64.converter.core import ConversionRequest

__version__ = "0.1.0"


def convert(request: ConversionRequest) -> ConversionResult:
    """Run the conversion engine.

    Parameters
    ----------
    request : ConversionRequest
        Input and transform description.

    Returns
    -------
    ConversionResult
        Result with payload and metadata, or ``ok=False`` with an error
        message. Input and decoding failures never raise.
    """
    from .application.use_cases import convert as _impl

    return _impl(request)


def format_result(
    result: ConversionResult,
    format_name: str,
    options: RenderOptions | None = None,
    *,
    format_modules: Iterable[str] | None = None,
) -> str:
    """Render a conversion result.

    Parameters
    ----------
    result : ConversionResult
        Engine output. Never modified.
    format_name : str
        Format name or alias, matched case-insensitively.
    options : RenderOptions | None, optional
        Wrapping, data URI and metadata choices.
    format_modules : Iterable[str] | None, optional
        Extra modules or files registering output formats.

    Returns
    -------
    str
        Rendered artifact.

    Raises
    ------
    UnsupportedFormatError
        If ``format_name`` is not registered.
    """
    from .application.use_cases import format_result as _impl

    return _impl(result, format_name, options, format_modules=format_modules)


def encode_file_to_text(
    path: Path,
    output_format: str = "raw",
    *,
    wrap_column: int | None = None,
    data_uri: bool = False,
    include_metadata: bool = False,
    streaming: bool = False,
) -> str:
    """Encode a file and render it, raising on failure."""
    from .api import encode_file_to_text as _impl

    return _impl(
        path=Path(path),
        output_format=output_format,
        wrap_column=wrap_column,
        data_uri=data_uri,
        include_metadata=include_metadata,
        streaming=streaming,
    )


def encode_text(
    text: str,
    output_format: str = "raw",
    *,
    wrap_column: int | None = None,
    data_uri: bool = False,
    include_metadata: bool = False,
) -> str:
    """Encode literal text and render it, raising on failure."""
    from .api import encode_text as _impl

    return _impl(
        text=text,
        output_format=output_format,
        wrap_column=wrap_column,
        data_uri=data_uri,
        include_metadata=include_metadata,
    )


def decode_to_bytes(data: str | bytes) -> bytes:
    """Decode base64, raising ``MalformedEncodingError`` on invalid input."""
    from .api import decode_to_bytes as _impl

    return _impl(data)


def describe_file(path: Path) -> Metadata:
    """Return size, timestamps, MIME type and SHA-256 for a file."""
    from .api import describe_file as _impl

    return _impl(Path(path))


__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "Metadata",
    "RenderOptions",
    "convert",
    "decode_to_bytes",
    "describe_file",
    "encode_file_to_text",
    "encode_text",
    "format_result",
]
