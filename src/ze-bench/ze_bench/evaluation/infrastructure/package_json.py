"""Helpers for locating and reading the package.json manifests of a JS workspace."""

import json
import os
from pathlib import Path
from typing import Any

from ze_bench.evaluation.infrastructure.errors import PackageJsonError

DEPENDENCY_SECTIONS: tuple[str, ...] = ("dependencies", "devDependencies", "peerDependencies")

# Directories never searched for manifests or compared in diffs.
IGNORED_DIRS = frozenset({"node_modules", ".git", "dist", ".turbo", ".nx", ".pnpm-store"})

_MAX_MANIFEST_DEPTH = 3

type PackageJson = dict[str, Any]


def package_json_paths(root: Path) -> list[Path]:
    """Root manifest first, then nested ones (``apps/*``, ``packages/*/*`` ...) in sorted order."""
    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.relative_to(root).parts)
        dirnames[:] = sorted(name for name in dirnames if name not in IGNORED_DIRS)
        if depth >= _MAX_MANIFEST_DEPTH:
            dirnames[:] = []
        if "package.json" in filenames:
            found.append(current / "package.json")
    return found


def read_package_json(path: Path) -> PackageJson:
    """Parse *path*.

    Raises:
        PackageJsonError: if the file cannot be read, is not JSON, or is not an object.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise PackageJsonError(path=path, reason=str(exc)) from exc
    if not isinstance(data, dict):
        raise PackageJsonError(path=path, reason="top-level value is not an object")
    return data


def dependency_version(
    package: PackageJson,
    name: str,
    sections: tuple[str, ...] = DEPENDENCY_SECTIONS,
) -> str | None:
    """The declared range for *name*, searching *sections* in order."""
    for section in sections:
        entries = package.get(section)
        if isinstance(entries, dict) and isinstance(entries.get(name), str):
            return entries[name]
    return None


def relative_label(root: Path, path: Path) -> str:
    return path.relative_to(root).as_posix()
