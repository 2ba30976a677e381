"""Public raising API (delegates to application use-cases)."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable
from typing import Optional

from ayb64.application.results import Metadata
from ayb64.application.use_cases import build_engine_options
from ayb64.application.use_cases import convert
from ayb64.application.use_cases import format_result
from ayb64.application.use_cases import render_options_for
from ayb64.converter.core import ConversionRequest


def encode_file_to_text(
    path: Path,
    output_format: str = "raw",
    wrap_column: Optional[int] = None,
    data_uri: bool = False,
    include_metadata: bool = False,
    streaming: bool = False,
    chunk_size: Optional[int] = None,
    format_modules: Optional[Iterable[str]] = None,
) -> str:
    """Encode a file and render it in ``output_format``."""
    engine = build_engine_options(streaming=streaming, chunk_size=chunk_size)
    request = ConversionRequest.from_path(
        path,
        wrap_column=wrap_column,
        produce_data_uri=data_uri,
        mode=engine.mode,
        chunk_size=engine.chunk_size,
    )
    options = render_options_for(request, include_metadata=include_metadata)
    result = convert(request)
    result.raise_for_error()
    return format_result(result, output_format, options, format_modules=format_modules)


def encode_text(
    text: str,
    output_format: str = "raw",
    wrap_column: Optional[int] = None,
    data_uri: bool = False,
    include_metadata: bool = False,
) -> str:
    """Encode literal UTF-8 text and render it in ``output_format``."""
    request = ConversionRequest.from_text(
        text,
        wrap_column=wrap_column,
        produce_data_uri=data_uri,
    )
    options = render_options_for(request, include_metadata=include_metadata)
    result = convert(request)
    result.raise_for_error()
    return format_result(result, output_format, options)


def decode_to_bytes(data: str | bytes) -> bytes:
    """Decode base64 text under the lenient-but-bounded policy."""
    if isinstance(data, str):
        request = ConversionRequest.from_text(data, direction="decode")
    else:
        request = ConversionRequest.from_bytes(data, direction="decode")
    result = convert(request)
    result.raise_for_error()
    payload = result.payload
    return payload if isinstance(payload, bytes) else payload.encode("utf-8")


def describe_file(path: Path) -> Metadata:
    """Return the metadata the engine captures for ``path``."""
    result = convert(ConversionRequest.from_path(path))
    result.raise_for_error()
    return result.metadata
