"""Evaluation infrastructure errors."""

from pathlib import Path

from ze_bench.core.errors import ZeBenchError


class PackageJsonError(ZeBenchError):
    """Raised when a package.json in the workspace cannot be read or parsed."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to read package manifest '{path}': {reason}")


class RunPersistenceError(ZeBenchError):
    """Raised when a run record cannot be written to storage."""

    def __init__(self, run_id: str, reason: str) -> None:
        self.run_id = run_id
        super().__init__(f"Failed to persist run '{run_id}': {reason}")
