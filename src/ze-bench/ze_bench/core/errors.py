"""Base exception class for all ze-bench-specific errors."""


class ZeBenchError(Exception):
    """Base class for all ze-bench errors."""

    def __init__(self, message: str, retriable: bool = False) -> None:
        super().__init__(message)
        self.retriable = retriable


class UnparseableJsonError(ZeBenchError):
    """Raised when model output cannot be parsed or repaired into JSON."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Failed to parse model output as JSON: {reason}")
