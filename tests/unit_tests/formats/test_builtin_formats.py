"""Unit tests for built-in output format templates and escaping."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import cast

import pytest

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult, Metadata
from ayb64.application.use_cases import format_result
from ayb64.errors import UnsupportedFormatError
from ayb64.formats.registry import create_default_registry

ALL_FORMATS = ["raw", "json", "js", "ts", "css", "html", "xml", "yaml", "markdown"]
WITH_METADATA = RenderOptions(include_metadata=True)


def _result(payload: str | bytes = "SGVsbG8=") -> ConversionResult:
    metadata = Metadata(
        size_bytes=5,
        filename="hello.txt",
        mime_type="text/plain",
        content_hash="abc123",
    )
    return ConversionResult(payload=payload, metadata=metadata, elapsed_ms=7)


def test_raw_returns_content_only() -> None:
    """Emit the payload untouched."""
    assert format_result(_result(), "raw") == "SGVsbG8="


def test_json_without_metadata() -> None:
    """Emit data and UTF-8 byte size only."""
    payload = json.loads(format_result(_result(), "json"))

    assert payload == {"data": "SGVsbG8=", "size": 8}


def test_json_with_metadata_uses_camel_case_keys() -> None:
    """Attach metadata with processing time."""
    payload = json.loads(format_result(_result(), "json", WITH_METADATA))

    assert payload["metadata"] == {
        "filename": "hello.txt",
        "mimeType": "text/plain",
        "size": 5,
        "hash": "abc123",
        "processingTime": 7,
    }


def test_js_exports_plain_string() -> None:
    """Export the constant directly without metadata."""
    assert format_result(_result(), "js") == (
        'const base64Data = "SGVsbG8=";\n\nmodule.exports = base64Data;\n'
    )


def test_js_with_metadata_exports_object() -> None:
    """Export both constants when metadata is requested."""
    output = format_result(_result(), "javascript", WITH_METADATA)

    assert "const metadata = {" in output
    assert '"mimeType": "text/plain"' in output
    assert output.endswith("module.exports = { base64Data, metadata };\n")


@pytest.mark.parametrize("name", ["js", "ts"])
def test_script_formats_escape_quotes_backslashes_and_newlines(name: str) -> None:
    """Keep the literal on one line with escaped specials."""
    output = format_result(_result('a"b\\c\nd'), name)
    first_line = output.splitlines()[0]

    assert first_line.endswith('"a\\"b\\\\c\\nd";')


@pytest.mark.parametrize("name", ["js", "ts"])
def test_script_formats_escape_every_line_terminator(name: str) -> None:
    """Escape CR, LS and PS as well as LF so decoded CRLF text stays valid."""
    output = format_result(_result("a\r\nb\u2028c\u2029d"), name)
    first_line = output.splitlines()[0]

    assert first_line.endswith('"a\\r\\nb\\u2028c\\u2029d";')


def test_ts_with_metadata_declares_interface() -> None:
    """Declare the metadata interface and a typed constant."""
    output = format_result(_result(), "typescript", WITH_METADATA)

    assert output.startswith('export const base64Data: string = "SGVsbG8=";\n')
    assert "export interface FileMetadata {" in output
    assert "  size: number;" in output
    assert "export const metadata: FileMetadata = {" in output


def test_css_declares_custom_property_and_rule() -> None:
    """Emit the custom property and the rule consuming it."""
    output = format_result(_result('x"y\\z'), "css")

    assert '--base64-content: "x\\"y\\\\z";' in output
    assert ".base64-data::before {\n  content: var(--base64-content);\n}" in output


def test_html_escapes_attribute_and_shows_metadata() -> None:
    """Escape the five specials and render the information block."""
    output = format_result(_result("<&>\"'"), "html", WITH_METADATA)

    assert output.startswith("<!DOCTYPE html>")
    assert 'data-content="&lt;&amp;&gt;&quot;&#x27;"' in output
    assert "<h3>File Information</h3>" in output
    assert "<strong>Filename:</strong> hello.txt" in output
    assert "<strong>Size:</strong> 5 bytes" in output


def test_xml_escapes_content_and_lists_metadata() -> None:
    """Use &apos; and emit metadata children."""
    output = format_result(_result("<a> & 'b'"), "xml", WITH_METADATA)

    assert output.startswith('<?xml version="1.0" encoding="UTF-8"?>\n<base64-data>')
    assert "<content>&lt;a&gt; &amp; &apos;b&apos;</content>" in output
    assert "<mime-type>text/plain</mime-type>" in output
    assert "<size>5</size>" in output
    assert "<hash>abc123</hash>" in output


def test_yaml_rewraps_block_at_76_columns() -> None:
    """Re-wrap regardless of caller wrap options."""
    output = format_result(_result("A" * 100), "yaml")

    assert output == f"base64_data: |\n  {'A' * 76}\n  {'A' * 24}\n"


def test_yaml_quotes_metadata_strings() -> None:
    """Double-quote string values and leave size bare."""
    output = format_result(_result(), "yml", WITH_METADATA)

    assert '\nmetadata:\n  filename: "hello.txt"\n' in output
    assert '  mime_type: "text/plain"\n' in output
    assert "  size: 5\n" in output
    assert '  hash: "abc123"\n' in output


def test_yaml_empty_content_keeps_structure() -> None:
    """Emit the key with an empty block."""
    assert format_result(_result(""), "yaml") == "base64_data: |\n"


def test_markdown_with_metadata() -> None:
    """Render heading, fenced block and metadata list."""
    output = format_result(_result(), "md", WITH_METADATA)

    assert output.startswith("# Base64 Data\n\n## File: hello.txt\n\n```base64\nSGVsbG8=\n```\n")
    assert "- **MIME Type:** text/plain" in output
    assert "- **Size:** 5 bytes" in output
    assert "- **SHA256:** `abc123`" in output
    assert "- **Processing Time:** 7ms" in output


@pytest.mark.parametrize("name", ALL_FORMATS)
def test_missing_payload_renders_structure(name: str) -> None:
    """Treat a null payload as empty content."""
    result = ConversionResult(payload=cast(str, None))

    assert isinstance(format_result(result, name, WITH_METADATA), str)


def test_bytes_payload_is_coerced_to_text() -> None:
    """Decode byte payloads as UTF-8."""
    assert format_result(_result(b"SGVsbG8="), "raw") == "SGVsbG8="


def test_data_uri_uses_mime_type() -> None:
    """Prefix the content when a MIME type is known."""
    output = format_result(_result(), "raw", RenderOptions(data_uri=True))

    assert output == "data:text/plain;base64,SGVsbG8="


def test_data_uri_without_mime_type_leaves_content() -> None:
    """Never emit a malformed data: prefix."""
    result = ConversionResult(payload="SGVsbG8=", metadata=Metadata(size_bytes=5))

    assert format_result(result, "raw", RenderOptions(data_uri=True)) == "SGVsbG8="


def test_wrap_option_rewraps_content() -> None:
    """Chunk content at the configured column."""
    output = format_result(_result("A" * 10), "raw", RenderOptions(wrap_column=4))

    assert output == "AAAA\nAAAA\nAA"


@pytest.mark.parametrize(
    ("alias", "canonical"),
    [
        ("JSON", "json"),
        ("Yml", "yaml"),
        ("TypeScript", "ts"),
        ("JAVASCRIPT", "js"),
        ("MD", "markdown"),
        (" html ", "html"),
    ],
)
def test_names_match_case_insensitively(alias: str, canonical: str) -> None:
    """Resolve synonyms and casing to the same template."""
    result = _result()

    assert format_result(result, alias, WITH_METADATA) == format_result(
        result, canonical, WITH_METADATA
    )


def _mixed_case(value: str) -> str:
    return "".join(ch.upper() if index % 2 else ch.lower() for index, ch in enumerate(value))


@pytest.mark.parametrize("identifier", create_default_registry().identifiers())
@pytest.mark.parametrize(
    "variant", [str.lower, str.upper, _mixed_case], ids=["lower", "upper", "mixed"]
)
def test_every_identifier_renders_in_any_case(
    identifier: str, variant: Callable[[str], str]
) -> None:
    """Render every name and alias in lower, upper and mixed case."""
    canonical = create_default_registry().get(identifier).name
    spelled = variant(identifier)
    result = _result()

    assert format_result(result, spelled, WITH_METADATA) == format_result(
        result, canonical, WITH_METADATA
    )


def test_unknown_format_raises_with_name() -> None:
    """Name the offending format in the error."""
    with pytest.raises(UnsupportedFormatError, match="Unsupported output format: bogus"):
        format_result(_result(), "bogus")


def test_formatting_leaves_result_unchanged() -> None:
    """Render without touching the input result."""
    result = _result()
    snapshot = ConversionResult(
        payload=result.payload,
        metadata=result.metadata,
        elapsed_ms=result.elapsed_ms,
    )

    for name in ALL_FORMATS:
        format_result(result, name, RenderOptions(wrap_column=2, data_uri=True))

    assert result == snapshot
