"""JudgeObserver port — domain events emitted during judge scoring."""

from typing import Protocol

from ze_bench.core.run_context import RunContext


class JudgeObserver(Protocol):
    """Observer port for judge domain events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def judge_scoring_started(self, context: RunContext, model: str, prompt_chars: int) -> None: ...

    def judge_cache_hit(self, context: RunContext, model: str) -> None: ...

    def judge_output_truncated(self, context: RunContext, model: str, raw_chars: int) -> None: ...

    def judge_scoring_completed(
        self, context: RunContext, model: str, duration_ms: int, normalized_score: float
    ) -> None: ...

    def judge_scoring_failed(self, context: RunContext, model: str, reason: str) -> None: ...
