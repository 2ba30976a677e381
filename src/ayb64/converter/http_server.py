"""HTTP tool-call server exposing encode/decode to agents and scripts."""

from __future__ import annotations

import argparse
import base64
import importlib
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Protocol, cast

from pydantic import BaseModel, ConfigDict

from ayb64.adapters.sniffers import FiletypeMimeSniffer
from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult
from ayb64.application.use_cases import build_render_options, convert, format_result
from ayb64.converter.core import (
    ConversionRequest,
    digest_bytes,
    digest_file,
    safe_input_filename,
)
from ayb64.converter.job_memory import (
    DEFAULT_MAX_JOBS,
    JobMemory,
    JobRecord,
    generate_job_id,
)
from ayb64.errors import Ayb64Error, describe_os_error
from ayb64.formats.registry import FormatRegistry, create_default_registry
from ayb64.types import DEFAULT_MIME_TYPE

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from fastapi import FastAPI, UploadFile
    from fastapi.responses import Response
else:

    class UploadFile:
        """Fallback UploadFile type used when FastAPI is not installed."""

        filename: str | None = None

        async def read(self) -> bytes:
            """Read uploaded content bytes."""
            return b""


class _FastapiStatusLike(Protocol):
    HTTP_400_BAD_REQUEST: int
    HTTP_403_FORBIDDEN: int
    HTTP_404_NOT_FOUND: int
    HTTP_500_INTERNAL_SERVER_ERROR: int


class _FastapiModuleLike(Protocol):
    """Subset of fastapi module API used by HTTP transport."""

    status: _FastapiStatusLike

    class HTTPException(Exception):
        def __init__(self, *, status_code: int, detail: str) -> None: ...

    def File(self, default: object) -> object: ...

    def Form(self, default: object = ..., **kwargs: object) -> object: ...

    def Query(self, default: object = ..., **kwargs: object) -> object: ...

    def FastAPI(self, **kwargs: object) -> object: ...


class _ResponsesModuleLike(Protocol):
    """Subset of fastapi.responses module API used by this module."""

    def Response(
        self,
        *,
        content: bytes,
        media_type: str,
        headers: dict[str, str],
    ) -> object: ...


_fastapi_module: ModuleType | None = None
_fastapi_responses_module: ModuleType | None = None
try:
    _fastapi_module = importlib.import_module("fastapi")
    _fastapi_responses_module = importlib.import_module("fastapi.responses")
except ModuleNotFoundError:  # pragma: no cover
    pass

if _fastapi_module is not None and not TYPE_CHECKING:
    UploadFile = cast(type[UploadFile], _fastapi_module.UploadFile)

fastapi = cast(_FastapiModuleLike | None, _fastapi_module)
responses = _fastapi_responses_module

try:
    import uvicorn as _uvicorn_imported

    _uvicorn_module: ModuleType | None = _uvicorn_imported
except ModuleNotFoundError:  # pragma: no cover
    _uvicorn_module = None

uvicorn: ModuleType | None = _uvicorn_module


def _require_http_runtime() -> None:
    """Ensure HTTP server runtime dependencies are available."""
    if _fastapi_module is None or _fastapi_responses_module is None:
        raise RuntimeError("fastapi is required to run ayb64-http. Install with extra: .[server]")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ServerSettings:
    """Runtime configuration for the HTTP server.

    ``allow_files`` lets callers name server-side paths; it is off unless
    ``AYB64_HTTP_ALLOW_FILES`` is set.
    """

    host: str = "127.0.0.1"
    port: int = 8090
    allow_files: bool = False
    job_memory_size: int = DEFAULT_MAX_JOBS

    @classmethod
    def from_env(cls) -> ServerSettings:
        """Read settings from ``AYB64_HTTP_*`` environment variables."""
        return cls(
            host=os.getenv("AYB64_HTTP_HOST", "127.0.0.1"),
            port=int(os.getenv("AYB64_HTTP_PORT", "8090")),
            allow_files=_env_flag("AYB64_HTTP_ALLOW_FILES"),
            job_memory_size=int(os.getenv("AYB64_JOB_MEMORY_SIZE", str(DEFAULT_MAX_JOBS))),
        )


class HealthResponse(BaseModel):
    """Health response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str


class ReadyResponse(BaseModel):
    """Readiness response payload."""

    model_config = ConfigDict(extra="forbid")

    status: str
    formats: int


class FormatInfo(BaseModel):
    """Registered output format description."""

    model_config = ConfigDict(extra="forbid")

    name: str
    aliases: list[str]
    extension: str
    media_type: str


class FormatsResponse(BaseModel):
    """Format listing payload."""

    model_config = ConfigDict(extra="forbid")

    formats: list[FormatInfo]


class EncodeBody(BaseModel):
    """Encode tool input."""

    model_config = ConfigDict(extra="forbid")

    data: str
    filename: str | None = None
    format: str = "raw"
    data_uri: bool = False
    include_metadata: bool = False
    wrap_at: int | None = None
    is_file: bool = False


class EncodeResponse(BaseModel):
    """Encode tool output."""

    model_config = ConfigDict(extra="forbid")

    job_id: str
    format: str
    content: str
    checksum: str
    recalled: bool
    metadata: dict[str, str | int]
    processing_ms: int


class DecodeBody(BaseModel):
    """Decode tool input."""

    model_config = ConfigDict(extra="forbid")

    data: str
    detect_type: bool = True


class DecodeResponse(BaseModel):
    """Decode tool output."""

    model_config = ConfigDict(extra="forbid")

    text: str
    size: int
    base64: str
    mime_type: str | None = None


class DataUriBody(BaseModel):
    """Data URI tool input."""

    model_config = ConfigDict(extra="forbid")

    input: str
    is_file: bool = False
    mime_type: str | None = None


class DataUriResponse(BaseModel):
    """Data URI tool output."""

    model_config = ConfigDict(extra="forbid")

    data_uri: str
    mime_type: str
    size: int


class JobSummary(BaseModel):
    """One stored job."""

    model_config = ConfigDict(extra="forbid")

    id: str
    format: str
    checksum: str
    filename: str | None = None
    size: int
    timestamp: float


class JobsResponse(BaseModel):
    """Job listing payload."""

    model_config = ConfigDict(extra="forbid")

    jobs: list[JobSummary]


class JobDetailResponse(BaseModel):
    """A stored job re-rendered in its (or an overriding) format."""

    model_config = ConfigDict(extra="forbid")

    job: JobSummary
    content: str


class MemoryStatsResponse(BaseModel):
    """Job memory occupancy."""

    model_config = ConfigDict(extra="forbid")

    total_jobs: int
    max_jobs: int
    oldest_timestamp: float | None = None
    newest_timestamp: float | None = None


class MemoryClearedResponse(BaseModel):
    """Job memory clear outcome."""

    model_config = ConfigDict(extra="forbid")

    cleared: int


def _summarize(record: JobRecord) -> JobSummary:
    return JobSummary(
        id=record.id,
        format=record.format_name,
        checksum=record.checksum,
        filename=record.filename,
        size=record.result.metadata.size_bytes,
        timestamp=record.timestamp,
    )


def _input_checksum(body: EncodeBody) -> str:
    if body.is_file:
        path = Path(body.data)
        try:
            return digest_file(path)
        except OSError as exc:
            raise describe_os_error(exc, path) from exc
    return digest_bytes(body.data.encode("utf-8"))


def _encode_request(body: EncodeBody, options: RenderOptions) -> ConversionRequest:
    if body.is_file:
        return ConversionRequest.from_path(body.data, wrap_column=options.effective_wrap)
    return ConversionRequest.from_text(
        body.data,
        wrap_column=options.effective_wrap,
        filename=body.filename,
    )


def _raise_for_result(result: ConversionResult) -> None:
    if not result.ok:
        raise Ayb64Error(result.error_message or "conversion failed")


def create_app(
    settings: ServerSettings | None = None,
    *,
    memory: JobMemory | None = None,
    registry: FormatRegistry | None = None,
) -> FastAPI:
    """Create the ayb64 HTTP application."""
    _require_http_runtime()
    if fastapi is None:
        raise RuntimeError("fastapi module is unavailable")
    fastapi_module = fastapi
    responses_module = cast(_ResponsesModuleLike, responses)
    settings = settings or ServerSettings.from_env()
    memory = memory or JobMemory(max_jobs=settings.job_memory_size)
    registry = registry or create_default_registry()
    sniffer = FiletypeMimeSniffer()

    app = cast(
        "FastAPI",
        fastapi_module.FastAPI(
            title="ayb64 tool server",
            version="0.1.0",
            description="Encode, decode and render base64 for agents and scripts.",
        ),
    )
    artifact_param = cast(UploadFile, fastapi_module.File(...))
    format_param = cast(str, fastapi_module.Form(default="raw"))
    data_uri_param = cast(bool, fastapi_module.Form(default=False))
    metadata_param = cast(bool, fastapi_module.Form(default=False))
    wrap_param = cast(int | None, fastapi_module.Form(default=None))
    limit_param = cast(int, fastapi_module.Query(default=10, ge=1, le=50))
    override_format_param = cast(str | None, fastapi_module.Query(default=None))

    def bad_request(detail: str) -> Exception:
        return fastapi_module.HTTPException(
            status_code=fastapi_module.status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )

    def internal_error(action: str) -> Exception:
        logger.exception("unexpected error during HTTP %s", action)
        return fastapi_module.HTTPException(
            status_code=fastapi_module.status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="internal server error",
        )

    def require_files_allowed(is_file: bool) -> None:
        if is_file and not settings.allow_files:
            raise fastapi_module.HTTPException(
                status_code=fastapi_module.status.HTTP_403_FORBIDDEN,
                detail="server-side file inputs are disabled (set AYB64_HTTP_ALLOW_FILES=1)",
            )

    @app.get("/healthz", response_model=HealthResponse)
    async def healthz() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/readyz", response_model=ReadyResponse)
    async def readyz() -> ReadyResponse:
        return ReadyResponse(status="ready", formats=len(registry.names()))

    @app.get("/v1/formats", response_model=FormatsResponse)
    def list_formats() -> FormatsResponse:
        infos = []
        for name in registry.names():
            fmt = registry.get(name)
            infos.append(
                FormatInfo(
                    name=fmt.name,
                    aliases=list(fmt.aliases),
                    extension=fmt.extension,
                    media_type=fmt.media_type,
                )
            )
        return FormatsResponse(formats=infos)

    @app.post("/v1/encode", response_model=EncodeResponse)
    def encode(body: EncodeBody) -> EncodeResponse:
        """Encode text or a server-side file, recalling identical past jobs."""
        require_files_allowed(body.is_file)
        try:
            options = build_render_options(
                wrap_column=body.wrap_at,
                data_uri=body.data_uri,
                include_metadata=body.include_metadata,
            )
            fmt = registry.get(body.format)
            checksum = _input_checksum(body)
            record = memory.find(checksum, fmt.name, options)
            recalled = record is not None
            if record is None:
                result = convert(_encode_request(body, options))
                _raise_for_result(result)
                record = JobRecord(
                    id=generate_job_id(),
                    result=result,
                    checksum=checksum,
                    format_name=fmt.name,
                    options=options,
                    filename=result.metadata.filename or body.filename,
                )
                memory.set(record)
            content = format_result(record.result, fmt.name, options, registry=registry)
        except Ayb64Error as exc:
            raise bad_request(str(exc)) from exc
        except Exception as exc:  # pragma: no cover
            raise internal_error("encode") from exc
        return EncodeResponse(
            job_id=record.id,
            format=fmt.name,
            content=content,
            checksum=checksum,
            recalled=recalled,
            metadata=record.result.metadata.to_json_dict(),
            processing_ms=record.result.elapsed_ms,
        )

    @app.post("/v1/encode/upload", response_model=None)
    async def encode_upload(
        artifact: UploadFile = artifact_param,
        format: str = format_param,
        data_uri: bool = data_uri_param,
        include_metadata: bool = metadata_param,
        wrap_at: int | None = wrap_param,
    ) -> Response:
        """Encode an uploaded file and return the rendered artifact."""
        artifact_name = safe_input_filename(artifact.filename or "")
        payload = await artifact.read()
        try:
            options = build_render_options(
                wrap_column=wrap_at,
                data_uri=data_uri,
                include_metadata=include_metadata,
            )
            fmt = registry.get(format)
            result = convert(
                ConversionRequest.from_bytes(
                    payload,
                    wrap_column=options.effective_wrap,
                    filename=artifact_name,
                )
            )
            _raise_for_result(result)
            record = JobRecord(
                id=generate_job_id(),
                result=result,
                checksum=result.metadata.content_hash or digest_bytes(payload),
                format_name=fmt.name,
                options=options,
                filename=artifact_name,
            )
            memory.set(record)
            content = format_result(result, fmt.name, options, registry=registry)
        except Ayb64Error as exc:
            raise bad_request(str(exc)) from exc
        except Exception as exc:  # pragma: no cover
            raise internal_error("upload") from exc

        headers = {
            "X-Content-SHA256": record.checksum,
            "X-Job-Id": record.id,
            "Content-Disposition": (
                f'attachment; filename="{Path(artifact_name).stem}{fmt.extension}"'
            ),
        }
        return cast(
            "Response",
            responses_module.Response(
                content=content.encode("utf-8"),
                media_type=fmt.media_type,
                headers=headers,
            ),
        )

    @app.post("/v1/decode", response_model=DecodeResponse)
    def decode(body: DecodeBody) -> DecodeResponse:
        """Decode base64 text."""
        try:
            result = convert(ConversionRequest.from_text(body.data, direction="decode"))
            _raise_for_result(result)
        except Ayb64Error as exc:
            raise bad_request(str(exc)) from exc
        except Exception as exc:  # pragma: no cover
            raise internal_error("decode") from exc
        decoded = cast(bytes, result.payload)
        return DecodeResponse(
            text=decoded.decode("utf-8", errors="replace"),
            size=len(decoded),
            base64=base64.b64encode(decoded).decode("ascii"),
            mime_type=sniffer.detect_from_buffer(decoded) if body.detect_type else None,
        )

    @app.post("/v1/datauri", response_model=DataUriResponse)
    def datauri(body: DataUriBody) -> DataUriResponse:
        """Build a ``data:`` URI from text or a server-side file."""
        require_files_allowed(body.is_file)
        if body.is_file:
            request = ConversionRequest.from_path(body.input)
        else:
            request = ConversionRequest.from_text(body.input)
        try:
            result = convert(request)
            _raise_for_result(result)
        except Ayb64Error as exc:
            raise bad_request(str(exc)) from exc
        except Exception as exc:  # pragma: no cover
            raise internal_error("datauri") from exc
        mime_type = body.mime_type or result.metadata.mime_type or DEFAULT_MIME_TYPE
        return DataUriResponse(
            data_uri=f"data:{mime_type};base64,{result.text}",
            mime_type=mime_type,
            size=result.metadata.size_bytes,
        )

    @app.get("/v1/jobs", response_model=JobsResponse)
    def list_jobs(limit: int = limit_param) -> JobsResponse:
        return JobsResponse(jobs=[_summarize(record) for record in memory.recent(limit)])

    @app.get("/v1/jobs/{job_id}", response_model=JobDetailResponse)
    def get_job(job_id: str, format: str | None = override_format_param) -> JobDetailResponse:
        """Re-render a stored job, optionally in another format."""
        record = memory.get(job_id)
        if record is None:
            recent = ", ".join(item.id for item in memory.recent(5)) or "none"
            raise fastapi_module.HTTPException(
                status_code=fastapi_module.status.HTTP_404_NOT_FOUND,
                detail=f"Job not found: {job_id}. Recent jobs: {recent}",
            )
        try:
            content = format_result(
                record.result,
                format or record.format_name,
                record.options,
                registry=registry,
            )
        except Ayb64Error as exc:
            raise bad_request(str(exc)) from exc
        return JobDetailResponse(job=_summarize(record), content=content)

    @app.get("/v1/memory/stats", response_model=MemoryStatsResponse)
    def memory_stats() -> MemoryStatsResponse:
        stats = memory.stats()
        return MemoryStatsResponse(
            total_jobs=stats.total_jobs,
            max_jobs=stats.max_jobs,
            oldest_timestamp=stats.oldest_timestamp,
            newest_timestamp=stats.newest_timestamp,
        )

    @app.delete("/v1/memory", response_model=MemoryClearedResponse)
    def clear_memory() -> MemoryClearedResponse:
        cleared = memory.clear()
        logger.info("cleared %d jobs from memory", cleared)
        return MemoryClearedResponse(cleared=cleared)

    return app


if TYPE_CHECKING:
    app: FastAPI | None

if _fastapi_module is not None:
    app = create_app()
else:  # pragma: no cover
    app = None


def main() -> None:
    """Run the ayb64 HTTP entrypoint."""
    _require_http_runtime()
    if uvicorn is None:
        raise RuntimeError("uvicorn is required to run ayb64-http")
    defaults = ServerSettings.from_env()
    parser = argparse.ArgumentParser(description="ayb64 HTTP tool server.")
    parser.add_argument("--host", default=defaults.host)
    parser.add_argument("--port", type=int, default=defaults.port)
    parser.add_argument("--log-level", default=os.getenv("AYB64_LOG_LEVEL", "info"))
    args = parser.parse_args()
    logging.basicConfig(level=args.log_level.upper())
    uvicorn.run(
        "ayb64.converter.http_server:app",
        host=args.host,
        port=args.port,
        reload=False,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
