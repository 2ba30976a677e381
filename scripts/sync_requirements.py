#!/usr/bin/env python3
"""Keep requirements.txt and third-party imports in line with pyproject.toml.

``python scripts/sync_requirements.py`` rewrites requirements.txt from the base
dependencies plus the ``cli`` and ``server`` extras; ``--check`` only compares,
and also fails when ``src/ayb64`` imports a distribution nobody declared.
"""

from __future__ import annotations

import argparse
import ast
import re
import sys
import tomllib
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
PACKAGE = ROOT / "src/ayb64"
REQUIREMENTS = ROOT / "requirements.txt"
# Runtime profile shipped to users and scanners; the test extra stays out.
SYNC_EXTRAS = ("cli", "server")
# Import names that differ from their distribution names.
IMPORT_TO_DIST = {"multipart": "python-multipart"}
HEADER = (
    "# Generated from pyproject.toml (base + extras: cli,server)\n"
    "# Do not edit manually; run: python scripts/sync_requirements.py\n\n"
)


def _dist_name(requirement: str) -> str:
    return re.split(r"[<>=!~\[; ]", requirement.strip(), maxsplit=1)[0].lower()


def _declared() -> list[str]:
    project = tomllib.loads((ROOT / "pyproject.toml").read_text(encoding="utf-8"))["project"]
    deps = set(project.get("dependencies", []))
    optional = project.get("optional-dependencies", {})
    for extra in SYNC_EXTRAS:
        deps.update(optional.get(extra, []))
    return sorted(dep.strip() for dep in deps if dep.strip())


def _listed() -> list[str]:
    if not REQUIREMENTS.exists():
        return []
    lines = REQUIREMENTS.read_text(encoding="utf-8").splitlines()
    return sorted(line.split("#", 1)[0].strip() for line in lines if line.split("#", 1)[0].strip())


def _imported_dists() -> set[str]:
    local = {"ayb64"}
    found: set[str] = set()
    for path in PACKAGE.rglob("*.py"):
        for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
            if isinstance(node, ast.Import):
                roots = [alias.name.split(".")[0] for alias in node.names]
            elif isinstance(node, ast.ImportFrom) and node.level == 0 and node.module:
                roots = [node.module.split(".")[0]]
            else:
                continue
            for root in roots:
                if root not in local and root not in sys.stdlib_module_names:
                    found.add(IMPORT_TO_DIST.get(root, root).lower())
    return found


def check() -> list[str]:
    """Return a list of problems; empty when everything is in sync."""
    declared = _declared()
    listed = _listed()
    problems = [f"missing from requirements.txt: {r}" for r in declared if r not in listed]
    problems += [f"unexpected in requirements.txt: {r}" for r in listed if r not in declared]
    declared_dists = {_dist_name(r) for r in declared}
    problems += [
        f"imported but not declared: {dist}"
        for dist in sorted(_imported_dists() - declared_dists)
    ]
    return problems


def main() -> None:
    """Regenerate requirements.txt, or verify it with --check."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--check", action="store_true", help="Compare without writing.")
    args = parser.parse_args()

    if args.check:
        problems = check()
        if problems:
            raise SystemExit(
                "Dependency declarations are out of sync.\n"
                "Run: python scripts/sync_requirements.py\n"
                + "\n".join(f"- {p}" for p in problems)
            )
        print("Dependency sync check passed.")
        return

    reqs = _declared()
    REQUIREMENTS.write_text(HEADER + "\n".join(reqs) + "\n", encoding="utf-8")
    print(f"Wrote {len(reqs)} requirements to {REQUIREMENTS.name}")


if __name__ == "__main__":
    main()
