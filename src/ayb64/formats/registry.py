"""Output format registry and discovery helpers."""

from __future__ import annotations

import importlib
import importlib.util
import logging
import os
from collections.abc import Iterable
from pathlib import Path
from types import ModuleType

from ayb64.errors import FormatRegistrationError, UnsupportedFormatError
from ayb64.formats.base import OutputFormat
from ayb64.formats.builtins import BUILTIN_FORMATS

logger = logging.getLogger(__name__)


def _normalize(identifier: str) -> str:
    return identifier.strip().lower()


class FormatRegistry:
    """Registry mapping format names and aliases to output formats."""

    def __init__(self) -> None:
        self._formats: dict[str, OutputFormat] = {}
        self._lookup: dict[str, str] = {}

    def register(self, fmt: OutputFormat, *, replace: bool = False) -> None:
        """Register a format under its name and aliases.

        Parameters
        ----------
        fmt : OutputFormat
            Format instance to register.
        replace : bool, optional
            Allow a format with the same canonical name to be replaced.

        Raises
        ------
        FormatRegistrationError
            If the format is malformed or one of its identifiers is taken by
            another format.
        """
        if not isinstance(fmt, OutputFormat):
            raise FormatRegistrationError(
                f"Object {fmt!r} does not implement the output format protocol."
            )
        name = _normalize(getattr(fmt, "name", "") or "")
        if not name:
            raise FormatRegistrationError("Output format must define a non-empty 'name'.")

        if name in self._formats and not replace:
            raise FormatRegistrationError(f"Output format '{name}' is already registered.")

        identifiers = [name, *(_normalize(alias) for alias in fmt.aliases)]
        for identifier in identifiers:
            if not identifier:
                raise FormatRegistrationError(f"Output format '{name}' has an empty alias.")
            owner = self._lookup.get(identifier)
            if owner is not None and owner != name:
                raise FormatRegistrationError(
                    f"Identifier '{identifier}' of format '{name}' is already "
                    f"used by format '{owner}'."
                )

        if name in self._formats:
            self._lookup = {key: owner for key, owner in self._lookup.items() if owner != name}
        self._formats[name] = fmt
        for identifier in identifiers:
            self._lookup[identifier] = name
        logger.debug("Registered output format %s (aliases: %s)", name, fmt.aliases)

    def names(self) -> list[str]:
        """Return canonical format names, sorted."""
        return sorted(self._formats)

    def identifiers(self) -> list[str]:
        """Return every accepted identifier, names and aliases, sorted."""
        return sorted(self._lookup)

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and _normalize(identifier) in self._lookup

    def get(self, identifier: str) -> OutputFormat:
        """Get a format by name or alias, case-insensitively.

        Raises
        ------
        UnsupportedFormatError
            If nothing is registered under ``identifier``.
        """
        name = self._lookup.get(_normalize(identifier))
        if name is None:
            raise UnsupportedFormatError(identifier, available=self.identifiers())
        return self._formats[name]

    def load_module(self, module_or_path: str) -> None:
        """Load format definitions from a module name or file path.

        .. warning::
            This executes code from the specified module. Only load format
            modules from trusted sources.
        """
        module = _import_module_or_path(module_or_path)
        _register_from_module(module, self)


def _import_module_or_path(module_or_path: str) -> ModuleType:
    """Import a module by import path or filesystem path.

    Raises
    ------
    FormatRegistrationError
        If the import cannot be completed.
    """
    candidate = Path(module_or_path)
    if os.path.isfile(candidate):
        spec = importlib.util.spec_from_file_location(candidate.stem, candidate)
        if spec is None or spec.loader is None:
            raise FormatRegistrationError(f"Unable to load format module from {candidate}.")
        module = importlib.util.module_from_spec(spec)
        try:
            spec.loader.exec_module(module)
        except Exception as exc:
            raise FormatRegistrationError(
                f"Unable to load format module from {candidate}: {exc}"
            ) from exc
        return module

    try:
        return importlib.import_module(module_or_path)
    except Exception as exc:
        raise FormatRegistrationError(
            f"Unable to import format module '{module_or_path}': {exc}"
        ) from exc


def _register_from_module(module: ModuleType, registry: FormatRegistry) -> None:
    """Register format definitions found in ``module``."""
    if hasattr(module, "register_formats"):
        try:
            module.register_formats(registry)
        except FormatRegistrationError:
            raise
        except Exception as exc:
            raise FormatRegistrationError(
                f"register_formats() in {module.__name__} failed: {exc}"
            ) from exc
        return

    formats_obj = getattr(module, "FORMATS", None)
    if formats_obj is not None:
        for fmt in formats_obj:
            registry.register(fmt)
        return

    format_obj = getattr(module, "FORMAT", None)
    if format_obj is not None:
        registry.register(format_obj)
        return

    raise FormatRegistrationError(
        "Format module must expose register_formats(registry), FORMATS, or FORMAT."
    )


def create_default_registry(
    extra_modules: Iterable[str] | None = None,
) -> FormatRegistry:
    """Create a registry holding the built-in formats.

    Parameters
    ----------
    extra_modules : Iterable[str] | None, optional
        Additional format modules to load after the built-ins.

    Returns
    -------
    FormatRegistry
        Registry with built-in and external formats.
    """
    registry = FormatRegistry()
    for format_cls in BUILTIN_FORMATS:
        registry.register(format_cls())
    for module in extra_modules or []:
        registry.load_module(module)
    return registry
