#!/usr/bin/env python3
"""Examples for encoding files and text and rendering them in several formats."""

from __future__ import annotations

import tempfile
from pathlib import Path

from ayb64 import (
    ConversionRequest,
    RenderOptions,
    convert,
    decode_to_bytes,
    encode_text,
    format_result,
)
from ayb64.parity import check_mode_parity


def example_text_formats() -> None:
    """Render a short string in every built-in format."""
    for name in ("raw", "json", "js", "ts", "css", "html", "xml", "yaml", "markdown"):
        print(f"--- {name} ---")
        print(encode_text("Hello, World!", name, include_metadata=True))


def example_file_roundtrip() -> None:
    """Encode a file in streaming mode, decode it back and compare."""
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "sample.bin"
        path.write_bytes(bytes(range(256)) * 64)

        result = convert(ConversionRequest.from_path(path, mode="streaming", chunk_size=4096))
        result.raise_for_error()
        print(
            format_result(
                result,
                "markdown",
                RenderOptions(wrap_column=76, include_metadata=True),
            )[:400]
        )

        if decode_to_bytes(result.text) != path.read_bytes():
            raise SystemExit("FAIL: decoded bytes differ from the source file.")
        report = check_mode_parity(path, chunk_size=1000)
        print(f"Parity OK ({report.size_bytes} bytes, hash {report.content_hash})")


def main() -> None:
    """Run all examples."""
    example_text_formats()
    example_file_roundtrip()


if __name__ == "__main__":
    main()
