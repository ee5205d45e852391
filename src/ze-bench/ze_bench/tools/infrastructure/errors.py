"""Error types raised by workspace tools."""

from ze_bench.core.errors import ZeBenchError


class ToolPathError(ZeBenchError):
    """Raised when a tool is asked to touch a path it may not access."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to access '{path}': {reason}")
