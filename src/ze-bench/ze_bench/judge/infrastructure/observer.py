"""StructlogJudgeObserver — production observer that delegates to structlog."""

import structlog

from ze_bench.core.run_context import RunContext


class StructlogJudgeObserver:
    """Logs judge domain events to structlog.

    Does NOT inherit from JudgeObserver (structural typing via Protocol).
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def judge_scoring_started(self, context: RunContext, model: str, prompt_chars: int) -> None:
        self._log.info(
            "judge.scoring_started", **context.log_fields(), model=model, prompt_chars=prompt_chars
        )

    def judge_cache_hit(self, context: RunContext, model: str) -> None:
        self._log.info("judge.cache_hit", **context.log_fields(), model=model)

    def judge_output_truncated(self, context: RunContext, model: str, raw_chars: int) -> None:
        self._log.warning(
            "judge.output_truncated", **context.log_fields(), model=model, raw_chars=raw_chars
        )

    def judge_scoring_completed(
        self, context: RunContext, model: str, duration_ms: int, normalized_score: float
    ) -> None:
        self._log.info(
            "judge.scoring_completed",
            **context.log_fields(),
            model=model,
            duration_ms=duration_ms,
            normalized_score=round(normalized_score, 4),
        )

    def judge_scoring_failed(self, context: RunContext, model: str, reason: str) -> None:
        self._log.error("judge.scoring_failed", **context.log_fields(), model=model, reason=reason)
