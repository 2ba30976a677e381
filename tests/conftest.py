"""Shared pytest configuration, suite markers and ayb64 fixtures."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

_SUITE_MARKERS = {
    "e2e_tests": pytest.mark.e2e,
    "integration_tests": pytest.mark.integration,
    "unit_tests": pytest.mark.unit,
}


def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Attach unit/integration/e2e markers from the suite directory."""
    del config
    for item in items:
        parts = set(Path(str(item.fspath)).parts)
        for directory, marker in _SUITE_MARKERS.items():
            if directory in parts:
                item.add_marker(marker)
                break


@pytest.fixture(autouse=True)
def _isolated_ayb64_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep AYB64_* settings from the developer shell out of the tests."""
    for name in list(os.environ):
        if name.startswith("AYB64_"):
            monkeypatch.delenv(name)


@pytest.fixture
def binary_file(tmp_path: Path) -> Path:
    """A file of every byte value, long enough to span several small chunks."""
    path = tmp_path / "blob.bin"
    path.write_bytes(bytes(range(256)) * 9 + b"xy")
    return path
