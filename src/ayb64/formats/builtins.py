"""Built-in output formats."""

from __future__ import annotations

import json

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult
from ayb64.codec import rewrap_lines
from ayb64.formats.escaping import escape_css, escape_html, escape_js, escape_xml

# YAML and Markdown always re-wrap their content block at this width.
BLOCK_WIDTH = 76


class RawFormat:
    """Content only."""

    name = "raw"
    aliases: tuple[str, ...] = ()
    extension = ".b64"
    media_type = "text/plain"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        del result, options
        return content


class JsonFormat:
    """JSON object with ``data``, ``size`` and optional ``metadata``."""

    name = "json"
    aliases: tuple[str, ...] = ()
    extension = ".json"
    media_type = "application/json"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        output: dict[str, object] = {
            "data": content,
            "size": len(content.encode("utf-8")),
        }
        if options.include_metadata:
            metadata: dict[str, object] = dict(result.metadata.to_json_dict())
            metadata["processingTime"] = result.elapsed_ms
            output["metadata"] = metadata
        return json.dumps(output, indent=2)


class JavaScriptFormat:
    """CommonJS module exporting the content as a string constant."""

    name = "js"
    aliases: tuple[str, ...] = ("javascript",)
    extension = ".js"
    media_type = "application/javascript"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        output = f'const base64Data = "{escape_js(content)}";\n'
        if options.include_metadata:
            metadata = json.dumps(result.metadata.to_json_dict(), indent=2)
            output += f"\nconst metadata = {metadata};\n"
            output += "\nmodule.exports = { base64Data, metadata };\n"
        else:
            output += "\nmodule.exports = base64Data;\n"
        return output


_TS_INTERFACE = """export interface FileMetadata {
  filename?: string;
  mimeType?: string;
  size: number;
  created?: string;
  modified?: string;
  hash?: string;
}
"""


class TypeScriptFormat:
    """ES module with a typed string constant and optional typed metadata."""

    name = "ts"
    aliases: tuple[str, ...] = ("typescript",)
    extension = ".ts"
    media_type = "application/typescript"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        output = f'export const base64Data: string = "{escape_js(content)}";\n'
        if options.include_metadata:
            metadata = json.dumps(result.metadata.to_json_dict(), indent=2)
            output += f"\n{_TS_INTERFACE}\n"
            output += f"export const metadata: FileMetadata = {metadata};\n"
        return output


class CssFormat:
    """Custom property holding the content plus a rule consuming it."""

    name = "css"
    aliases: tuple[str, ...] = ()
    extension = ".css"
    media_type = "text/css"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        del result, options
        return (
            f'.base64-data {{\n  --base64-content: "{escape_css(content)}";\n}}\n\n'
            ".base64-data::before {\n  content: var(--base64-content);\n}\n"
        )


class HtmlFormat:
    """Minimal HTML5 document carrying the content in a data attribute."""

    name = "html"
    aliases: tuple[str, ...] = ("htm",)
    extension = ".html"
    media_type = "text/html"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        lines = [
            "<!DOCTYPE html>",
            '<html lang="en">',
            "<head>",
            '  <meta charset="UTF-8">',
            '  <meta name="viewport" content="width=device-width, initial-scale=1.0">',
            "  <title>Base64 Data</title>",
            "</head>",
            "<body>",
            f'  <div class="base64-data" data-content="{escape_html(content)}"></div>',
        ]
        if options.include_metadata:
            metadata = result.metadata
            lines.append('  <div class="metadata">')
            lines.append("    <h3>File Information</h3>")
            if metadata.filename:
                lines.append(
                    f"    <p><strong>Filename:</strong> {escape_html(metadata.filename)}</p>"
                )
            if metadata.mime_type:
                lines.append(
                    f"    <p><strong>MIME Type:</strong> {escape_html(metadata.mime_type)}</p>"
                )
            lines.append(f"    <p><strong>Size:</strong> {metadata.size_bytes} bytes</p>")
            lines.append("  </div>")
        lines.extend(["</body>", "</html>"])
        return "\n".join(lines) + "\n"


class XmlFormat:
    """``<base64-data>`` document with content and optional metadata."""

    name = "xml"
    aliases: tuple[str, ...] = ()
    extension = ".xml"
    media_type = "application/xml"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        lines = [
            '<?xml version="1.0" encoding="UTF-8"?>',
            "<base64-data>",
            f"  <content>{escape_xml(content)}</content>",
        ]
        if options.include_metadata:
            metadata = result.metadata
            lines.append("  <metadata>")
            if metadata.filename:
                lines.append(f"    <filename>{escape_xml(metadata.filename)}</filename>")
            if metadata.mime_type:
                lines.append(f"    <mime-type>{escape_xml(metadata.mime_type)}</mime-type>")
            lines.append(f"    <size>{metadata.size_bytes}</size>")
            if metadata.content_hash:
                lines.append(f"    <hash>{metadata.content_hash}</hash>")
            lines.append("  </metadata>")
        lines.append("</base64-data>")
        return "\n".join(lines) + "\n"


class YamlFormat:
    """Block-literal scalar re-wrapped at 76 columns, plus optional metadata."""

    name = "yaml"
    aliases: tuple[str, ...] = ("yml",)
    extension = ".yaml"
    media_type = "application/yaml"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        lines = ["base64_data: |"]
        if content:
            lines.extend(f"  {line}" for line in rewrap_lines(content, BLOCK_WIDTH).split("\n"))
        if options.include_metadata:
            metadata = result.metadata
            lines.extend(["", "metadata:"])
            if metadata.filename:
                lines.append(f"  filename: {json.dumps(metadata.filename)}")
            if metadata.mime_type:
                lines.append(f"  mime_type: {json.dumps(metadata.mime_type)}")
            lines.append(f"  size: {metadata.size_bytes}")
            if metadata.content_hash:
                lines.append(f"  hash: {json.dumps(metadata.content_hash)}")
        return "\n".join(lines) + "\n"


class MarkdownFormat:
    """Heading, fenced ``base64`` block and optional metadata list."""

    name = "markdown"
    aliases: tuple[str, ...] = ("md",)
    extension = ".md"
    media_type = "text/markdown"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        metadata = result.metadata
        output = "# Base64 Data\n\n"
        if options.include_metadata and metadata.filename:
            output += f"## File: {metadata.filename}\n\n"
        output += f"```base64\n{rewrap_lines(content, BLOCK_WIDTH)}\n```\n"
        if options.include_metadata:
            output += "\n## Metadata\n\n"
            if metadata.mime_type:
                output += f"- **MIME Type:** {metadata.mime_type}\n"
            output += f"- **Size:** {metadata.size_bytes} bytes\n"
            if metadata.content_hash:
                output += f"- **SHA256:** `{metadata.content_hash}`\n"
            output += f"- **Processing Time:** {result.elapsed_ms}ms\n"
        return output


BUILTIN_FORMATS = (
    RawFormat,
    JsonFormat,
    JavaScriptFormat,
    TypeScriptFormat,
    CssFormat,
    HtmlFormat,
    XmlFormat,
    YamlFormat,
    MarkdownFormat,
)
