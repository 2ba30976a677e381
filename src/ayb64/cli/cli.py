#!/usr/bin/env python3
"""
ayb64.cli.cli

Typer-based CLI for encoding and decoding base64 and rendering the result in
text formats (raw, JSON, JS, TS, CSS, HTML, XML, YAML, Markdown).

The core library only needs pydantic and filetype; the CLI and the HTTP tool
server live behind extras.

Examples
--------
Install core + CLI only:

    uv pip install -e ".[cli]"

Install CLI + HTTP server:

    uv pip install -e ".[cli,server]"
"""

from __future__ import annotations

import json
import logging
import re
import sys
import traceback
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import typer

from ayb64.application.options import EngineOptions
from ayb64.application.results import ConversionResult, Metadata
from ayb64.converter.core import ConversionRequest
from ayb64.errors import Ayb64Error, suggestions_for
from ayb64.types import DEFAULT_CHUNK_SIZE, Direction

app = typer.Typer(
    name="ayb64",
    help="Encode and decode base64 and render it for code, markup and docs.",
    no_args_is_help=True,
)

INPUT_HELP = "File path, '-' for stdin, or literal text. Omit to read stdin."
OUTPUT_HELP = "Write the result to this file instead of stdout."
STREAMING_HELP = "Read files in chunks instead of all at once."
CHUNK_SIZE_HELP = "Streaming read size, e.g. 4096, 64KB, 1MB."
FORMAT_MODULE_HELP = "Python module or file path that registers output formats (repeatable)."
QUIET_HELP = "Suppress status messages."

_SIZE_PATTERN = re.compile(r"^\s*(\d+)\s*([KMG]?B)?\s*$", re.IGNORECASE)
_SIZE_UNITS = {"B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
_BYTE_UNITS = ("Bytes", "KB", "MB", "GB", "TB")


# -----------------------------
# Dependency checks / utilities
# -----------------------------
@dataclass(frozen=True)
class MissingDep:
    """Represent a missing optional dependency."""

    import_name: str
    extra_name: str
    purpose: str


def _is_importable(module: str) -> bool:
    """Check whether a module can be resolved."""
    try:
        import importlib.util

        return importlib.util.find_spec(module) is not None
    except (ImportError, ValueError):
        return False


def _require_deps(missing: Sequence[MissingDep]) -> None:
    """Raise a Typer error if any required deps are missing.

    Parameters
    ----------
    missing : Sequence[MissingDep]
        Dependency requirements for a command.
    """
    not_found = [d for d in missing if not _is_importable(d.import_name)]
    if not not_found:
        return

    extras = sorted({d.extra_name for d in not_found})
    details = "\n".join(
        f"- Missing '{d.import_name}' ({d.purpose}). Install extra: .[{d.extra_name}]"
        for d in not_found
    )
    uv_hint = f'uv pip install -e ".[cli,{",".join(extras)}]"'
    pip_hint = f'pip install "all-your-base64[cli,{",".join(extras)}]"'
    msg = (
        "Missing optional dependencies for this command.\n\n"
        f"{details}\n\n"
        "Install with uv (recommended):\n"
        f"  {uv_hint}\n\n"
        "Or with pip:\n"
        f"  {pip_hint}\n"
    )
    raise typer.BadParameter(msg)


def _print_conversion_error(exc: BaseException, debug: bool) -> int:
    """Print a user-friendly error with suggestions.

    Returns
    -------
    int
        Process exit code.
    """
    typer.echo(f"Error: {exc}", err=True)
    hints = suggestions_for(exc)
    if hints:
        typer.echo("\nSuggestions:", err=True)
        for hint in hints:
            typer.echo(f"  - {hint}", err=True)
    if debug:
        typer.echo("\nTraceback:", err=True)
        typer.echo("".join(traceback.format_exception(type(exc), exc, exc.__traceback__)), err=True)
    code = getattr(exc, "exit_code", None)
    if isinstance(code, int) and code > 0:
        return code
    return 1


def parse_chunk_size(value: str) -> int:
    """Parse a byte size such as ``4096``, ``64KB`` or ``1mb``.

    Raises
    ------
    typer.BadParameter
        If the value is not a positive size.
    """
    match = _SIZE_PATTERN.match(value)
    if match is None:
        raise typer.BadParameter(
            f"Invalid chunk size '{value}'. Use a number with an optional B/KB/MB/GB suffix."
        )
    size = int(match.group(1)) * _SIZE_UNITS[(match.group(2) or "B").upper()]
    if size <= 0:
        raise typer.BadParameter("Chunk size must be greater than zero.")
    return size


def format_bytes(size: int) -> str:
    """Return a human-readable size using 1024-based units."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_BYTE_UNITS) - 1:
        value /= 1024
        unit += 1
    return f"{round(value, 2):g} {_BYTE_UNITS[unit]}"


def _metadata_lines(metadata: Metadata, elapsed_ms: int | None = None) -> list[str]:
    lines = ["File Information:"]
    if metadata.filename:
        lines.append(f"  Filename: {metadata.filename}")
    if metadata.mime_type:
        lines.append(f"  MIME Type: {metadata.mime_type}")
    lines.append(f"  Size: {format_bytes(metadata.size_bytes)} ({metadata.size_bytes} bytes)")
    if metadata.created_at:
        lines.append(f"  Created: {metadata.created_at.isoformat()}")
    if metadata.modified_at:
        lines.append(f"  Modified: {metadata.modified_at.isoformat()}")
    if metadata.content_hash:
        lines.append(f"  SHA256: {metadata.content_hash}")
    if elapsed_ms is not None:
        lines.append(f"  Processing Time: {elapsed_ms}ms")
    return lines


def _echo_metadata(result: ConversionResult, *, err: bool = False) -> None:
    for line in _metadata_lines(result.metadata, result.elapsed_ms):
        typer.echo(line, err=err)


def _is_regular_file(source: str) -> bool:
    """Return True only for an existing regular file.

    Stat failures (over-long names, NUL bytes, permissions) mean the argument
    is literal text, not a path.
    """
    try:
        return Path(source).is_file()
    except (OSError, ValueError):
        return False


def _build_request(
    source: str | None,
    direction: Direction,
    engine: EngineOptions,
    *,
    wrap_column: int | None = None,
    data_uri: bool = False,
) -> ConversionRequest:
    """Resolve the INPUT argument into a request.

    Existing regular files are read as files, ``-`` or no argument reads
    stdin, and anything else is taken as literal text.
    """
    common = {
        "direction": direction,
        "wrap_column": wrap_column,
        "produce_data_uri": data_uri,
        "mode": engine.mode,
        "chunk_size": engine.chunk_size,
    }
    if source is None or source == "-":
        data = typer.get_binary_stream("stdin").read()
        return ConversionRequest.from_bytes(data, **common)
    if _is_regular_file(source):
        return ConversionRequest.from_path(source, **common)
    return ConversionRequest.from_text(source, **common)


def _debug_enabled(ctx: typer.Context) -> bool:
    return bool((ctx.obj or {}).get("debug", False))


# -----------------------------
# Global options
# -----------------------------
@app.callback()
def _main(
    ctx: typer.Context,
    debug: bool = typer.Option(
        False, "--debug", help="Enable debug logging and show full tracebacks on error."
    ),
) -> None:
    """Initialize shared CLI state.

    Parameters
    ----------
    ctx : typer.Context
        Typer context object used to store shared state.
    debug : bool, default=False
        Whether to enable debug logging and error output.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = {"debug": debug}


# -----------------------------
# Commands
# -----------------------------
@app.command("encode")
def encode_cmd(
    ctx: typer.Context,
    source: str | None = typer.Argument(None, metavar="INPUT", help=INPUT_HELP),
    output: Path | None = typer.Option(None, "--output", "-o", help=OUTPUT_HELP),
    output_format: str = typer.Option(
        "raw",
        "--format",
        "-f",
        help="Output format: raw, json, js, ts, css, html, xml, yaml, markdown.",
    ),
    wrap: int | None = typer.Option(
        None, "--wrap", "-w", help="Wrap base64 lines at this column (0 disables)."
    ),
    data_uri: bool = typer.Option(False, "--data-uri", "-d", help="Emit a data: URI."),
    metadata: bool = typer.Option(
        False, "--metadata", "-m", help="Include file metadata in the output."
    ),
    streaming: bool = typer.Option(False, "--streaming", "-s", help=STREAMING_HELP),
    chunk_size: str = typer.Option("64KB", "--chunk-size", "-c", help=CHUNK_SIZE_HELP),
    format_module: list[str] | None = typer.Option(
        None, "--format-module", help=FORMAT_MODULE_HELP
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=QUIET_HELP),
) -> None:
    """Encode a file, stdin or literal text to base64."""
    debug = _debug_enabled(ctx)
    try:
        from ayb64.application.use_cases import (
            build_engine_options,
            convert,
            format_result,
            render_options_for,
        )

        engine = build_engine_options(
            streaming=streaming,
            chunk_size=parse_chunk_size(chunk_size),
        )
        request = _build_request(source, "encode", engine, wrap_column=wrap, data_uri=data_uri)
        render = render_options_for(request, include_metadata=metadata)
        result = convert(request)
        result.raise_for_error()
        rendered = format_result(result, output_format, render, format_modules=format_module)
        if output is None:
            typer.echo(rendered)
            return
        output.write_text(rendered, encoding="utf-8")
    except typer.BadParameter:
        raise
    except (Ayb64Error, OSError) as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if not quiet:
        typer.echo(f"✓ Saved: {output}")
        if metadata:
            _echo_metadata(result)


@app.command("decode")
def decode_cmd(
    ctx: typer.Context,
    source: str | None = typer.Argument(None, metavar="INPUT", help=INPUT_HELP),
    output: Path | None = typer.Option(None, "--output", "-o", help=OUTPUT_HELP),
    metadata: bool = typer.Option(
        False, "--metadata", "-m", help="Print input metadata after decoding."
    ),
    streaming: bool = typer.Option(False, "--streaming", "-s", help=STREAMING_HELP),
    chunk_size: str = typer.Option("64KB", "--chunk-size", "-c", help=CHUNK_SIZE_HELP),
    quiet: bool = typer.Option(False, "--quiet", "-q", help=QUIET_HELP),
) -> None:
    """Decode base64 from a file, stdin or literal text to raw bytes."""
    debug = _debug_enabled(ctx)
    try:
        from ayb64.application.use_cases import build_engine_options, convert

        engine = build_engine_options(
            streaming=streaming,
            chunk_size=parse_chunk_size(chunk_size),
        )
        result = convert(_build_request(source, "decode", engine))
        result.raise_for_error()
        decoded = result.payload if isinstance(result.payload, bytes) else result.text.encode()
        if output is None:
            stdout = typer.get_binary_stream("stdout")
            stdout.write(decoded)
            stdout.flush()
        else:
            output.write_bytes(decoded)
    except typer.BadParameter:
        raise
    except (Ayb64Error, OSError) as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))
    except Exception as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if quiet:
        return
    # Status goes to stderr when stdout carries the decoded bytes.
    to_stderr = output is None
    if output is not None:
        typer.echo(f"✓ Decoded {format_bytes(len(decoded))} to {output}")
    if metadata:
        _echo_metadata(result, err=to_stderr)


@app.command("info")
def info_cmd(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to describe."),
    as_json: bool = typer.Option(False, "--json", help="Print metadata as JSON."),
) -> None:
    """Show metadata (size, timestamps, MIME type, SHA-256) for a file."""
    debug = _debug_enabled(ctx)
    try:
        from ayb64.application.use_cases import convert

        result = convert(ConversionRequest.from_path(path))
        result.raise_for_error()
    except Ayb64Error as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    if as_json:
        typer.echo(json.dumps(result.metadata.to_json_dict(), indent=2))
        return
    for line in _metadata_lines(result.metadata):
        typer.echo(line)


@app.command("formats")
def formats_cmd(
    ctx: typer.Context,
    format_module: list[str] | None = typer.Option(
        None, "--format-module", help=FORMAT_MODULE_HELP
    ),
) -> None:
    """List registered output formats."""
    from ayb64.formats.registry import create_default_registry

    try:
        registry = create_default_registry(extra_modules=format_module)
    except Ayb64Error as exc:
        raise typer.Exit(code=_print_conversion_error(exc, _debug_enabled(ctx)))
    for name in registry.names():
        fmt = registry.get(name)
        aliases = f" (aliases: {', '.join(fmt.aliases)})" if fmt.aliases else ""
        typer.echo(f"{fmt.name:<10} {fmt.extension:<6} {fmt.media_type}{aliases}")


@app.command("parity")
def parity_cmd(
    ctx: typer.Context,
    path: Path = typer.Argument(..., help="File to encode in both execution modes."),
    chunk_size: str = typer.Option("64KB", "--chunk-size", "-c", help=CHUNK_SIZE_HELP),
    wrap: int | None = typer.Option(None, "--wrap", "-w", help="Wrap column to compare with."),
    decode: bool = typer.Option(False, "--decode", help="Compare decoding instead."),
) -> None:
    """Check that streaming and in-memory modes produce identical output."""
    debug = _debug_enabled(ctx)
    try:
        from ayb64.parity import check_mode_parity

        report = check_mode_parity(
            path,
            parse_chunk_size(chunk_size),
            direction="decode" if decode else "encode",
            wrap_column=wrap,
        )
    except typer.BadParameter:
        raise
    except Ayb64Error as exc:
        raise typer.Exit(code=_print_conversion_error(exc, debug))

    typer.echo(
        f"✓ Parity OK: {report.path} ({format_bytes(report.size_bytes)}, "
        f"chunk {report.chunk_size}, in-memory {report.in_memory_ms}ms, "
        f"streaming {report.streaming_ms}ms)"
    )


@app.command("serve")
def serve_cmd(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address."),
    port: int = typer.Option(8090, "--port", help="Bind port."),
    allow_files: bool = typer.Option(
        False, "--allow-files", help="Let callers read server-side files by path."
    ),
) -> None:
    """Run the HTTP tool server."""
    _require_deps(
        [
            MissingDep("fastapi", "server", "HTTP tool server"),
            MissingDep("uvicorn", "server", "ASGI server runtime"),
            MissingDep("multipart", "server", "multipart upload parsing"),
        ]
    )
    import uvicorn

    from ayb64.converter.http_server import ServerSettings, create_app

    defaults = ServerSettings.from_env()
    settings = ServerSettings(
        host=host,
        port=port,
        allow_files=allow_files or defaults.allow_files,
        job_memory_size=defaults.job_memory_size,
    )
    uvicorn.run(create_app(settings), host=settings.host, port=settings.port)


@app.command("doctor")
def doctor_cmd() -> None:
    """Print installed dependency versions and registered formats."""
    import importlib.metadata as metadata

    packages = [
        "pydantic",
        "filetype",
        "typer",
        "fastapi",
        "uvicorn",
        "python-multipart",
    ]

    typer.echo(f"Python: {sys.version.split()[0]}")
    for package in packages:
        try:
            version = metadata.version(package)
            typer.echo(f"{package}: {version}")
        except metadata.PackageNotFoundError:
            typer.echo(f"{package}: <not installed>")

    typer.echo(f"default chunk size: {format_bytes(DEFAULT_CHUNK_SIZE)}")
    try:
        from ayb64.formats.registry import create_default_registry

        registry = create_default_registry()
        typer.echo(f"formats: {', '.join(registry.names())}")
    except Ayb64Error:
        typer.echo("formats: <unavailable>")


if __name__ == "__main__":
    app()
