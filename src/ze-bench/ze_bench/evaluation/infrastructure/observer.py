"""StructlogEvaluationObserver — production observer that delegates to structlog."""

import structlog

from ze_bench.core.run_context import RunContext


class StructlogEvaluationObserver:
    """Logs evaluation domain events to structlog.

    Does NOT inherit from EvaluationObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def evaluator_started(self, context: RunContext, evaluator: str) -> None:
        self._log.debug("evaluation.evaluator_started", **context.log_fields(), evaluator=evaluator)

    def evaluator_completed(self, context: RunContext, evaluator: str, score: float) -> None:
        self._log.info(
            "evaluation.evaluator_completed",
            **context.log_fields(),
            evaluator=evaluator,
            score=round(score, 4),
        )

    def evaluator_failed(self, context: RunContext, evaluator: str, reason: str) -> None:
        self._log.error(
            "evaluation.evaluator_failed",
            **context.log_fields(),
            evaluator=evaluator,
            reason=reason,
        )

    def run_started(self, context: RunContext) -> None:
        self._log.info("run.started", **context.log_fields())

    def run_completed(
        self,
        context: RunContext,
        total_score: float,
        weighted_score: float,
        successful: bool,
        elapsed_seconds: float,
    ) -> None:
        self._log.info(
            "run.completed",
            **context.log_fields(),
            total_score=round(total_score, 4),
            weighted_score=weighted_score,
            successful=successful,
            elapsed_seconds=round(elapsed_seconds, 2),
        )

    def run_failed(self, context: RunContext, reason: str) -> None:
        self._log.error("run.failed", **context.log_fields(), reason=reason)

    def run_timed_out(self, context: RunContext, timeout_minutes: float) -> None:
        self._log.warning("run.timed_out", **context.log_fields(), timeout_minutes=timeout_minutes)

    def run_record_saved(self, context: RunContext, status: str, location: str) -> None:
        self._log.debug("run.record_saved", **context.log_fields(), status=status, location=location)
