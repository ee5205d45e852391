"""Judge Protocol — structural interface for all judge implementations."""

from typing import Protocol

from ze_bench.core.run_context import RunContext
from ze_bench.judge.domain.verdict import JudgeVerdict


class Judge(Protocol):
    """Scores a fully rendered rubric prompt.

    Raises JudgeInvocationError (or a subclass) when no valid verdict can be
    obtained; callers decide how that affects the score.
    """

    model: str

    async def score(self, prompt: str, context: RunContext) -> JudgeVerdict: ...
