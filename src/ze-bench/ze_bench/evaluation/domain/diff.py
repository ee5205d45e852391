"""Diff artifacts — what changed between the baseline and the agent's workspace."""

from collections.abc import Callable
from pathlib import Path
from typing import Literal

from pydantic import BaseModel

type ChangeType = Literal["added", "modified", "deleted"]


class FileDiff(BaseModel, frozen=True):
    file: str
    change_type: ChangeType
    text_patch: str | None = None


class DependencyChange(BaseModel, frozen=True):
    """One dependency entry that differs between baseline and workspace ``package.json``.

    ``before`` is None for an added dependency, ``after`` None for a removed one.
    """

    package_path: str
    section: str
    name: str
    before: str | None = None
    after: str | None = None


class DiffArtifacts(BaseModel, frozen=True):
    files: list[FileDiff] = []
    dependencies: list[DependencyChange] = []


type DiffBuilder = Callable[[Path, Path], DiffArtifacts]
