"""Compare a baseline checkout with the agent's workspace into DiffArtifacts."""

import difflib
import json
import os
from pathlib import Path

from ze_bench.evaluation.domain.diff import DependencyChange, DiffArtifacts, FileDiff
from ze_bench.evaluation.infrastructure.package_json import (
    DEPENDENCY_SECTIONS,
    IGNORED_DIRS,
)

MAX_PATCH_BYTES = 1_000_000


def build_diff_artifacts(baseline_dir: Path, workspace_dir: Path) -> DiffArtifacts:
    """Diff every file under the two trees, skipping build and VCS directories.

    Text files get a unified-diff patch; binary or oversized files are listed
    without one. ``package.json`` files present in either tree also yield
    per-dependency changes.
    """
    before = _snapshot(baseline_dir)
    after = _snapshot(workspace_dir)

    files: list[FileDiff] = []
    for relative in sorted(before.keys() | after.keys()):
        old_path, new_path = before.get(relative), after.get(relative)
        if old_path is None:
            files.append(FileDiff(file=relative, change_type="added", text_patch=_patch(relative, None, new_path)))
        elif new_path is None:
            files.append(FileDiff(file=relative, change_type="deleted", text_patch=_patch(relative, old_path, None)))
        elif old_path.read_bytes() != new_path.read_bytes():
            files.append(
                FileDiff(file=relative, change_type="modified", text_patch=_patch(relative, old_path, new_path))
            )

    dependencies: list[DependencyChange] = []
    for relative in sorted(name for name in before.keys() | after.keys() if Path(name).name == "package.json"):
        dependencies.extend(
            _dependency_changes(
                package_path=relative,
                old=_dependencies(before.get(relative)),
                new=_dependencies(after.get(relative)),
            )
        )
    return DiffArtifacts(files=files, dependencies=dependencies)


def _snapshot(root: Path) -> dict[str, Path]:
    files: dict[str, Path] = {}
    if not root.is_dir():
        return files
    for dirpath, dirnames, filenames in os.walk(root):
        dirnames[:] = [name for name in dirnames if name not in IGNORED_DIRS]
        for filename in filenames:
            path = Path(dirpath) / filename
            if path.is_file():
                files[path.relative_to(root).as_posix()] = path
    return files


def _patch(relative: str, old_path: Path | None, new_path: Path | None) -> str | None:
    old_lines = _text_lines(old_path)
    new_lines = _text_lines(new_path)
    if old_lines is None or new_lines is None:
        return None
    return "".join(
        difflib.unified_diff(old_lines, new_lines, fromfile=f"a/{relative}", tofile=f"b/{relative}")
    )


def _text_lines(path: Path | None) -> list[str] | None:
    """Lines of a text file, [] for no file, None for binary or oversized content."""
    if path is None:
        return []
    if path.stat().st_size > MAX_PATCH_BYTES:
        return None
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError:
        return None
    lines = text.splitlines(keepends=True)
    if lines and not lines[-1].endswith("\n"):
        lines[-1] += "\n"
    return lines


def _dependencies(path: Path | None) -> dict[tuple[str, str], str]:
    if path is None:
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        # A manifest broken mid-edit still shows up as a modified file.
        return {}
    if not isinstance(data, dict):
        return {}
    entries: dict[tuple[str, str], str] = {}
    for section in DEPENDENCY_SECTIONS:
        declared = data.get(section)
        if isinstance(declared, dict):
            entries.update(
                ((section, name), version) for name, version in declared.items() if isinstance(version, str)
            )
    return entries


def _dependency_changes(
    package_path: str,
    old: dict[tuple[str, str], str],
    new: dict[tuple[str, str], str],
) -> list[DependencyChange]:
    return [
        DependencyChange(
            package_path=package_path,
            section=section,
            name=name,
            before=old.get((section, name)),
            after=new.get((section, name)),
        )
        for section, name in sorted(old.keys() | new.keys())
        if old.get((section, name)) != new.get((section, name))
    ]
