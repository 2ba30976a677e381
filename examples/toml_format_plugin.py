#!/usr/bin/env python3
"""Example output format plugin rendering base64 as a TOML document.

Load it with ``ayb64 encode photo.png -f toml --format-module examples/toml_format_plugin.py``.
"""

from __future__ import annotations

import json

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult


class TomlFormat:
    """Multi-line basic string under ``[base64]`` plus an optional metadata table."""

    name = "toml"
    aliases: tuple[str, ...] = ()
    extension = ".toml"
    media_type = "application/toml"

    def render(
        self,
        content: str,
        result: ConversionResult,
        options: RenderOptions,
    ) -> str:
        """Render prepared content as TOML.

        Parameters
        ----------
        content : str
            Base64 content, already wrapped and turned into a data URI if requested.
        result : ConversionResult
            Source result used for metadata.
        options : RenderOptions
            Rendering options.

        Returns
        -------
        str
            TOML document.
        """
        lines = ["[base64]", f'data = """\n{content}"""']
        if options.include_metadata:
            lines.extend(["", "[metadata]"])
            for key, value in result.metadata.to_json_dict().items():
                lines.append(f"{key} = {json.dumps(value)}")
        return "\n".join(lines) + "\n"


FORMATS = [TomlFormat()]
