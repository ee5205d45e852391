"""Error types raised by judge infrastructure."""

from ze_bench.core.errors import ZeBenchError


class JudgeInvocationError(ZeBenchError):
    """Raised when the judge cannot be invoked or returns an unusable response."""

    def __init__(self, reason: str, retriable: bool = False) -> None:
        super().__init__(f"Failed to score response: {reason}", retriable=retriable)


class UnparseableJudgeOutputError(JudgeInvocationError):
    """Raised when the judge output is not JSON, even after repair."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"unparseable judge output: {reason}")


class InvalidJudgeVerdictError(JudgeInvocationError):
    """Raised when the judge JSON does not match the verdict schema (e.g. a score outside 1-5)."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"invalid judge verdict: {reason}")
