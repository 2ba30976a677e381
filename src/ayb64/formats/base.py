"""Output format protocol and shared content preparation."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult
from ayb64.codec import rewrap_lines


@runtime_checkable
class OutputFormat(Protocol):
    """Protocol implemented by output formats.

    Attributes
    ----------
    name : str
        Canonical identifier, matched case-insensitively.
    aliases : tuple[str, ...]
        Additional identifiers resolving to this format.
    extension : str
        File extension for rendered artifacts, including the dot.
    media_type : str
        MIME type of rendered artifacts.
    """

    name: str
    aliases: tuple[str, ...]
    extension: str
    media_type: str

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        """Render prepared content.

        Parameters
        ----------
        content : str
            Content after :func:`prepare_content` (wrapped, data URI applied).
        result : ConversionResult
            Source result, read-only. Used for metadata.
        options : RenderOptions
            Rendering options.

        Returns
        -------
        str
            Final textual artifact.
        """


def prepare_content(result: ConversionResult, options: RenderOptions) -> str:
    """Apply the steps shared by every format before its template.

    The payload is coerced to text, re-wrapped when a wrap column is set, and
    turned into a data URI when requested and a MIME type is known. Without a
    MIME type the content is left as is rather than producing a malformed
    ``data:`` prefix.
    """
    content = result.text
    content = rewrap_lines(content, options.effective_wrap)
    mime_type = result.metadata.mime_type
    if options.data_uri and mime_type:
        content = f"data:{mime_type};base64,{content}"
    return content
