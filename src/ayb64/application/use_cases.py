"""Application use-cases: the conversion engine and result rendering."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from hashlib import sha256
from time import perf_counter

from pydantic import ValidationError

from ayb64.adapters.readers import FilesystemReader
from ayb64.adapters.sniffers import FiletypeMimeSniffer, guess_from_name
from ayb64.application.options import EngineOptions, RenderOptions
from ayb64.application.ports import InputReader, MimeSniffer
from ayb64.application.results import ConversionResult, Metadata
from ayb64.codec import ENCODE_ALIGNMENT, decode_base64, encode_bytes, encode_chunks
from ayb64.converter.core import ConversionRequest, digest_bytes
from ayb64.errors import Ayb64Error, OptionsError
from ayb64.formats.base import prepare_content
from ayb64.formats.registry import FormatRegistry, create_default_registry
from ayb64.schemas import EngineConfig, RenderOptionsConfig
from ayb64.types import DEFAULT_MIME_TYPE, TEXT_MIME_TYPE, Payload

logger = logging.getLogger(__name__)


class _ReadTally:
    """Running hash and byte count over chunks as they are consumed."""

    def __init__(self) -> None:
        self._hasher = sha256()
        self.size_bytes = 0

    def track(self, chunks: Iterable[bytes]) -> Iterator[bytes]:
        for chunk in chunks:
            self._hasher.update(chunk)
            self.size_bytes += len(chunk)
            yield chunk

    @property
    def hexdigest(self) -> str:
        return self._hasher.hexdigest()


def _elapsed_ms(started: float) -> int:
    return max(0, round((perf_counter() - started) * 1000))


def _streaming_read_size(chunk_size: int) -> int:
    """Round ``chunk_size`` down to a multiple of 3, never below 3."""
    return max(ENCODE_ALIGNMENT, chunk_size - chunk_size % ENCODE_ALIGNMENT)


def _transform(request: ConversionRequest, data: bytes) -> Payload:
    if request.direction == "decode":
        return decode_base64(data.decode("utf-8", errors="replace"))
    return encode_bytes(data, request.wrap_column)


def _convert_path(
    request: ConversionRequest,
    reader: InputReader,
    sniffer: MimeSniffer,
) -> tuple[Payload, Metadata]:
    path = request.path
    stat = reader.stat(path)

    if request.mode == "streaming":
        tally = _ReadTally()
        chunks = tally.track(reader.iter_chunks(path, _streaming_read_size(request.chunk_size)))
        if request.direction == "decode":
            payload: Payload = decode_base64(
                b"".join(chunks).decode("utf-8", errors="replace")
            )
        else:
            payload = encode_chunks(chunks, request.wrap_column)
        size_bytes, content_hash = tally.size_bytes, tally.hexdigest
    else:
        data = reader.read(path)
        payload = _transform(request, data)
        size_bytes, content_hash = len(data), digest_bytes(data)

    metadata = Metadata(
        size_bytes=size_bytes,
        filename=path.name,
        mime_type=sniffer.detect_from_file(path),
        created_at=stat.created_at,
        modified_at=stat.modified_at,
        content_hash=content_hash,
    )
    return payload, metadata


def _convert_literal(
    request: ConversionRequest,
    sniffer: MimeSniffer,
) -> tuple[Payload, Metadata]:
    if request.input_kind == "text":
        data = str(request.input_value).encode("utf-8")
        mime_type = TEXT_MIME_TYPE
    else:
        data = bytes(request.input_value)  # type: ignore[arg-type]
        mime_type = sniffer.detect_from_buffer(data)
        if mime_type == DEFAULT_MIME_TYPE and request.filename:
            mime_type = guess_from_name(request.filename) or mime_type
    payload = _transform(request, data)
    metadata = Metadata(
        size_bytes=len(data),
        filename=request.filename,
        mime_type=mime_type,
        content_hash=digest_bytes(data),
    )
    return payload, metadata


def convert(
    request: ConversionRequest,
    *,
    reader: InputReader | None = None,
    sniffer: MimeSniffer | None = None,
) -> ConversionResult:
    """Use-case: acquire input, transform it and capture metadata.

    Never raises for input or decoding failures: those come back as a result
    with ``ok=False``, an empty payload and zeroed metadata.

    Parameters
    ----------
    request : ConversionRequest
        What to convert and how.
    reader : InputReader | None, optional
        File access adapter. Defaults to :class:`FilesystemReader`.
    sniffer : MimeSniffer | None, optional
        MIME detection adapter. Defaults to :class:`FiletypeMimeSniffer`.

    Returns
    -------
    ConversionResult
        Populated result, or a failed one carrying ``error_kind``.
    """
    started = perf_counter()
    reader = reader or FilesystemReader()
    sniffer = sniffer or FiletypeMimeSniffer()
    try:
        if request.input_kind == "path":
            payload, metadata = _convert_path(request, reader, sniffer)
        else:
            payload, metadata = _convert_literal(request, sniffer)
    except Ayb64Error as exc:
        elapsed = _elapsed_ms(started)
        logger.debug(
            "%s of %s input failed after %dms (%s): %s",
            request.direction,
            request.input_kind,
            elapsed,
            exc.kind,
            exc,
        )
        return ConversionResult.failure(str(exc), exc.kind, elapsed)  # type: ignore[arg-type]
    except Exception as exc:
        logger.exception("unexpected error during %s conversion", request.direction)
        return ConversionResult.failure(
            f"Unexpected error: {exc}",
            "unclassified",
            _elapsed_ms(started),
        )

    elapsed = _elapsed_ms(started)
    logger.debug(
        "%s of %s input (%s mode): %d bytes in %dms",
        request.direction,
        request.input_kind,
        request.mode,
        metadata.size_bytes,
        elapsed,
    )
    return ConversionResult(payload=payload, metadata=metadata, elapsed_ms=elapsed)


def format_result(
    result: ConversionResult,
    format_name: str,
    options: RenderOptions | None = None,
    *,
    registry: FormatRegistry | None = None,
    format_modules: Iterable[str] | None = None,
) -> str:
    """Use-case: render a conversion result in the named output format.

    Raises
    ------
    UnsupportedFormatError
        If ``format_name`` matches no registered name or alias.
    """
    options = options or RenderOptions()
    registry = registry or create_default_registry(extra_modules=format_modules)
    output_format = registry.get(format_name)
    return output_format.render(prepare_content(result, options), result, options)


def build_render_options(
    *,
    wrap_column: int | None = None,
    data_uri: bool = False,
    include_metadata: bool = False,
) -> RenderOptions:
    """Build typed render options from command/API params."""
    try:
        config = RenderOptionsConfig(
            wrap_column=wrap_column,
            data_uri=data_uri,
            include_metadata=include_metadata,
        )
    except ValidationError as exc:
        raise OptionsError(f"Invalid render options: {exc}") from exc
    return RenderOptions(
        wrap_column=config.wrap_column,
        data_uri=config.data_uri,
        include_metadata=config.include_metadata,
    )


def build_engine_options(
    *,
    streaming: bool = False,
    chunk_size: int | None = None,
) -> EngineOptions:
    """Build typed execution options from command/API params."""
    try:
        config = EngineConfig(
            mode="streaming" if streaming else "in_memory",
            **({"chunk_size": chunk_size} if chunk_size is not None else {}),
        )
    except ValidationError as exc:
        raise OptionsError(f"Invalid engine options: {exc}") from exc
    return EngineOptions(mode=config.mode, chunk_size=config.chunk_size)


def render_options_for(
    request: ConversionRequest,
    *,
    include_metadata: bool = False,
) -> RenderOptions:
    """Build render options carrying the request's wrap and data URI choices.

    ``produce_data_uri`` and ``wrap_column`` on the request are the single
    source for these two settings, so the engine output and the rendered
    artifact cannot disagree.
    """
    return build_render_options(
        wrap_column=request.wrap_column,
        data_uri=request.produce_data_uri,
        include_metadata=include_metadata,
    )
