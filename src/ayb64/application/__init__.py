"""Application-layer use-cases and option objects."""

from __future__ import annotations

from collections.abc import Iterable

from ayb64.application.options import EngineOptions, RenderOptions
from ayb64.application.ports import InputReader, MimeSniffer
from ayb64.application.results import ConversionResult, Metadata
from ayb64.converter.core import ConversionRequest


def build_render_options(
    *,
    wrap_column: int | None = None,
    data_uri: bool = False,
    include_metadata: bool = False,
) -> RenderOptions:
    """Build typed render options via lazy use-case import."""
    from ayb64.application.use_cases import build_render_options as _impl

    return _impl(
        wrap_column=wrap_column,
        data_uri=data_uri,
        include_metadata=include_metadata,
    )


def build_engine_options(
    *,
    streaming: bool = False,
    chunk_size: int | None = None,
) -> EngineOptions:
    """Build typed execution options via lazy use-case import."""
    from ayb64.application.use_cases import build_engine_options as _impl

    return _impl(streaming=streaming, chunk_size=chunk_size)


def convert(
    request: ConversionRequest,
    *,
    reader: InputReader | None = None,
    sniffer: MimeSniffer | None = None,
) -> ConversionResult:
    """Run the conversion engine via lazy use-case import."""
    from ayb64.application.use_cases import convert as _impl

    return _impl(request, reader=reader, sniffer=sniffer)


def format_result(
    result: ConversionResult,
    format_name: str,
    options: RenderOptions | None = None,
    *,
    format_modules: Iterable[str] | None = None,
) -> str:
    """Render a conversion result via lazy use-case import."""
    from ayb64.application.use_cases import format_result as _impl

    return _impl(result, format_name, options, format_modules=format_modules)


__all__ = [
    "ConversionRequest",
    "ConversionResult",
    "EngineOptions",
    "Metadata",
    "RenderOptions",
    "build_engine_options",
    "build_render_options",
    "convert",
    "format_result",
]
