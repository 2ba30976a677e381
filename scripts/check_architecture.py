#!/usr/bin/env python3
"""Architecture boundary checks."""

from __future__ import annotations

from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/ayb64"


def _read(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _assert_no_imports(path: Path, banned: list[str]) -> None:
    text = _read(path)
    for token in banned:
        if token in text:
            raise SystemExit(f"Architecture violation in {path}: found '{token}'")


def main() -> None:
    """Run repository architecture boundary checks."""
    front_ends = ["import typer", "from typer", "import fastapi", "from fastapi", "import uvicorn"]

    # Core layers must stay importable with only the base dependencies.
    for layer in ("application", "formats", "adapters"):
        for path in (PACKAGE / layer).glob("*.py"):
            _assert_no_imports(path, front_ends)
    for name in ("codec.py", "validate.py", "errors.py", "types.py", "schemas.py", "api.py"):
        _assert_no_imports(PACKAGE / name, front_ends)

    # The formatter only reads results; it never runs the engine.
    for path in (PACKAGE / "formats").glob("*.py"):
        _assert_no_imports(path, ["use_cases", "adapters."])

    _assert_no_imports(PACKAGE / "cli/cli.py", ["import fastapi", "from fastapi"])

    print("Architecture checks passed.")


if __name__ == "__main__":
    main()
