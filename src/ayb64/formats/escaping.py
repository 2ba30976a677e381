"""Escaping rules for embedding content in each output language."""

from __future__ import annotations


def escape_js(content: str) -> str:
    """Escape for a double-quoted JS/TS string literal.

    Backslashes go first so the escapes added for quotes and line terminators
    are not escaped a second time. Every JS line terminator is escaped so the
    literal stays on one line.
    """
    return (
        content.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
        .replace("\u2028", "\\u2028")
        .replace("\u2029", "\\u2029")
    )


def escape_css(content: str) -> str:
    """Escape for a double-quoted CSS string."""
    return content.replace("\\", "\\\\").replace('"', '\\"')


def escape_html(content: str) -> str:
    """Escape the five HTML special characters."""
    return (
        content.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&#x27;")
    )


def escape_xml(content: str) -> str:
    """Escape the five predefined XML entities."""
    return (
        content.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )
