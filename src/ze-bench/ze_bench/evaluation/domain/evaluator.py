"""Evaluator Protocol — structural interface for every scorer the engine runs."""

from typing import Protocol

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.result import EvaluatorResult


class Evaluator(Protocol):
    """Scores one aspect of a finished run into [0, 1].

    ``name`` doubles as the score-card metric name.
    """

    name: str

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult: ...
