#!/usr/bin/env python3
"""Branching guard for the conversion orchestrators.

The engine and parity helpers should stay flat: acquisition, transform and
rendering decisions belong in adapters, the codec and format objects.
"""

from __future__ import annotations

import ast
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
TARGETS = (
    ROOT / "src/ayb64/application/use_cases.py",
    ROOT / "src/ayb64/parity.py",
    ROOT / "src/ayb64/api.py",
)
MAX_BRANCHES = 8
_BRANCH_NODES = (ast.If, ast.IfExp, ast.For, ast.While, ast.Try, ast.ExceptHandler, ast.Match)


def _branch_count(func: ast.FunctionDef) -> int:
    return sum(isinstance(node, _BRANCH_NODES) for node in ast.walk(func))


def _violations(path: Path) -> list[str]:
    tree = ast.parse(path.read_text(encoding="utf-8"))
    found: list[str] = []
    for node in tree.body:
        if isinstance(node, ast.FunctionDef):
            count = _branch_count(node)
            if count > MAX_BRANCHES:
                found.append(f"{path.name}:{node.name}: {count} branches")
    return found


def main() -> None:
    """Fail when an orchestrator function branches more than allowed."""
    violations = [entry for target in TARGETS for entry in _violations(target)]
    if violations:
        raise SystemExit(
            f"Orchestrator branching above {MAX_BRANCHES}:\n"
            + "\n".join(f"- {v}" for v in violations)
        )
    print("Orchestrator complexity check passed.")


if __name__ == "__main__":
    main()
