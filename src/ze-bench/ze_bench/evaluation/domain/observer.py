"""Observer port for the evaluation domain — defines events in domain language."""

from typing import Protocol

from ze_bench.core.run_context import RunContext


class EvaluationObserver(Protocol):
    """Observer port emitting structured events while a run is scored.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def evaluator_started(self, context: RunContext, evaluator: str) -> None: ...

    def evaluator_completed(self, context: RunContext, evaluator: str, score: float) -> None: ...

    def evaluator_failed(self, context: RunContext, evaluator: str, reason: str) -> None: ...

    def run_started(self, context: RunContext) -> None: ...

    def run_completed(
        self,
        context: RunContext,
        total_score: float,
        weighted_score: float,
        successful: bool,
        elapsed_seconds: float,
    ) -> None: ...

    def run_failed(self, context: RunContext, reason: str) -> None: ...

    def run_timed_out(self, context: RunContext, timeout_minutes: float) -> None: ...

    def run_record_saved(self, context: RunContext, status: str, location: str) -> None: ...
