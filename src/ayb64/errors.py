"""Error hierarchy shared by the engine, formatter and front ends."""

from __future__ import annotations

import errno
from pathlib import Path


class Ayb64Error(Exception):
    """Base class for all domain errors.

    Attributes
    ----------
    exit_code : int
        Process exit code used by the CLI when this error escapes a command.
    kind : str
        Stable error tag carried by failed conversion results.
    """

    exit_code = 1
    kind = "unclassified"


class InputAcquisitionError(Ayb64Error):
    """Source input is missing, unreadable or otherwise unavailable."""

    exit_code = 2
    kind = "input_acquisition"

    def __init__(
        self,
        message: str,
        path: Path | None = None,
        errno_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.path = path
        self.errno_code = errno_code


class MalformedEncodingError(Ayb64Error):
    """Decode input violates the base64 alphabet or padding rules."""

    exit_code = 3
    kind = "malformed_encoding"


class UnsupportedFormatError(Ayb64Error):
    """Formatter was asked for a format name nobody registered."""

    exit_code = 4
    kind = "unsupported_format"

    def __init__(self, format_name: str, available: list[str] | None = None) -> None:
        message = f"Unsupported output format: {format_name}"
        if available:
            message += f". Available formats: {', '.join(available)}"
        super().__init__(message)
        self.format_name = format_name


class FormatRegistrationError(Ayb64Error):
    """Output format definition or format module is invalid."""

    exit_code = 5
    kind = "format_registration"


class OptionsError(Ayb64Error):
    """Caller-supplied options failed validation."""

    exit_code = 2
    kind = "invalid_options"


class ParityError(Ayb64Error):
    """Streaming and in-memory execution produced different output."""

    exit_code = 6
    kind = "parity"


ERROR_KINDS: dict[str, type[Ayb64Error]] = {
    cls.kind: cls
    for cls in (
        Ayb64Error,
        InputAcquisitionError,
        MalformedEncodingError,
        UnsupportedFormatError,
        FormatRegistrationError,
        OptionsError,
        ParityError,
    )
}


def describe_os_error(exc: OSError, path: Path) -> InputAcquisitionError:
    """Map a filesystem error onto a human-readable acquisition error."""
    if isinstance(exc, FileNotFoundError):
        message = f"File not found: {path}"
    elif isinstance(exc, PermissionError):
        message = f"Permission denied: {path}"
    elif isinstance(exc, IsADirectoryError):
        message = f"Expected a file but found a directory: {path}"
    else:
        reason = exc.strerror or str(exc)
        message = f"Unable to read {path}: {reason}"
    return InputAcquisitionError(message, path=path, errno_code=exc.errno)


_KIND_SUGGESTIONS: dict[str, list[str]] = {
    "malformed_encoding": [
        "Check that the base64 string contains only A-Z, a-z, 0-9, '+' and '/'",
        "Padding '=' may only appear at the end, at most twice",
    ],
    "unsupported_format": ["Run 'ayb64 formats' to see supported output formats"],
    "format_registration": [
        "Format modules must expose register_formats(registry), FORMATS or FORMAT",
    ],
    "parity": ["Re-run with --debug and report the input that triggers the mismatch"],
}

_ERRNO_SUGGESTIONS: dict[int, list[str]] = {
    errno.ENOENT: ["Check that the file path is correct", "Ensure the file exists"],
    errno.EACCES: ["Check file permissions", "Run with appropriate privileges if needed"],
    errno.EISDIR: ["Pass a regular file, not a directory"],
    errno.ENOSPC: ["No space left on device"],
}


def suggestions_for(exc: BaseException) -> list[str]:
    """Return follow-up hints a front end may print after an error message."""
    if isinstance(exc, InputAcquisitionError):
        hints = list(_ERRNO_SUGGESTIONS.get(exc.errno_code or -1, []))
        if exc.path is not None:
            hints.append(f"Path: {exc.path}")
        return hints
    if isinstance(exc, Ayb64Error):
        return list(_KIND_SUGGESTIONS.get(exc.kind, []))
    return ["Please report this issue with steps to reproduce"]
