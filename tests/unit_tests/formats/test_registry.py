"""Unit tests for output format registry behavior and module loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from ayb64.application.options import RenderOptions
from ayb64.application.results import ConversionResult
from ayb64.errors import FormatRegistrationError, UnsupportedFormatError
from ayb64.formats.registry import FormatRegistry, create_default_registry


class _ShoutFormat:
    name = "shout"
    aliases: tuple[str, ...] = ("loud",)
    extension = ".txt"
    media_type = "text/plain"

    def render(self, content: str, result: ConversionResult, options: RenderOptions) -> str:
        del result, options
        return content.upper()


class _ConflictingFormat(_ShoutFormat):
    name = "conflict"
    aliases = ("yml",)


class _NamelessFormat(_ShoutFormat):
    name = "  "


def test_default_registry_contains_builtins() -> None:
    """Register the nine built-in formats and their synonyms."""
    registry = create_default_registry()

    assert registry.names() == [
        "css",
        "html",
        "js",
        "json",
        "markdown",
        "raw",
        "ts",
        "xml",
        "yaml",
    ]
    for alias in ("javascript", "typescript", "yml", "md"):
        assert alias in registry


def test_get_resolves_aliases_case_insensitively() -> None:
    """Return the same object for name and alias in any case."""
    registry = create_default_registry()

    assert registry.get("YML") is registry.get("yaml")
    assert registry.get("TypeScript").name == "ts"


def test_get_unknown_lists_available_identifiers() -> None:
    """Raise with the offending name and alternatives."""
    registry = create_default_registry()

    with pytest.raises(UnsupportedFormatError) as excinfo:
        registry.get("toml")

    assert "toml" in str(excinfo.value)
    assert "Available formats:" in str(excinfo.value)


def test_register_rejects_duplicate_unless_replace() -> None:
    """Keep names unique, allow explicit replacement."""
    registry = FormatRegistry()
    registry.register(_ShoutFormat())

    with pytest.raises(FormatRegistrationError, match="already registered"):
        registry.register(_ShoutFormat())

    replacement = _ShoutFormat()
    registry.register(replacement, replace=True)
    assert registry.get("loud") is replacement


def test_register_rejects_alias_conflicts() -> None:
    """Refuse identifiers owned by another format."""
    registry = create_default_registry()

    with pytest.raises(FormatRegistrationError, match="already used by format 'yaml'"):
        registry.register(_ConflictingFormat())
    assert "conflict" not in registry


def test_register_rejects_invalid_objects() -> None:
    """Require the protocol and a non-empty name."""
    registry = FormatRegistry()

    with pytest.raises(FormatRegistrationError, match="protocol"):
        registry.register(object())  # type: ignore[arg-type]
    with pytest.raises(FormatRegistrationError, match="non-empty"):
        registry.register(_NamelessFormat())


def _write_module(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "custom_formats.py"
    path.write_text(
        "class Shout:\n"
        "    name = 'shout'\n"
        "    aliases = ()\n"
        "    extension = '.txt'\n"
        "    media_type = 'text/plain'\n"
        "    def render(self, content, result, options):\n"
        "        return content.upper()\n" + body,
        encoding="utf-8",
    )
    return path


@pytest.mark.parametrize(
    "body",
    [
        "FORMATS = [Shout()]\n",
        "FORMAT = Shout()\n",
        "def register_formats(registry):\n    registry.register(Shout())\n",
    ],
)
def test_load_module_from_path(tmp_path: Path, body: str) -> None:
    """Accept FORMATS, FORMAT or register_formats providers."""
    registry = create_default_registry(extra_modules=[str(_write_module(tmp_path, body))])

    assert "shout" in registry.names()


def test_load_module_without_provider_fails(tmp_path: Path) -> None:
    """Explain which providers a format module must expose."""
    path = _write_module(tmp_path, "")

    with pytest.raises(FormatRegistrationError, match="register_formats"):
        FormatRegistry().load_module(str(path))


def test_load_module_import_failure() -> None:
    """Wrap import errors for unknown modules."""
    with pytest.raises(FormatRegistrationError, match="Unable to import format module"):
        FormatRegistry().load_module("ayb64_definitely_missing_formats")


def test_load_module_with_syntax_error(tmp_path: Path) -> None:
    """Report a plugin file that does not compile as a registration error."""
    path = tmp_path / "broken_formats.py"
    path.write_text("def oops(:\n", encoding="utf-8")

    with pytest.raises(FormatRegistrationError, match="Unable to load format module"):
        FormatRegistry().load_module(str(path))


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ("raise RuntimeError('boom')\n", "Unable to load format module"),
        ("def register_formats(registry):\n    raise KeyError('x')\n", "register_formats"),
        (
            "def register_formats(registry):\n    registry.register(Shout())\n"
            "    registry.register(Shout())\n",
            "already registered",
        ),
    ],
)
def test_load_module_runtime_failures(tmp_path: Path, body: str, message: str) -> None:
    """Wrap failures raised while running plugin code."""
    path = _write_module(tmp_path, body)

    with pytest.raises(FormatRegistrationError, match=message):
        FormatRegistry().load_module(str(path))
