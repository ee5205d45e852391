"""EvaluationEngine — runs every registered evaluator and assembles the score card."""

from collections.abc import Sequence

from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.evaluator import Evaluator
from ze_bench.evaluation.domain.observer import EvaluationObserver
from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.evaluation.domain.score_card import REPORTED_METRICS, ScoreCard


class EvaluationEngine:
    """Runs evaluators one after another, isolating each one's failure.

    An evaluator that raises is recorded as score 0 with ``error: <message>``
    details; the remaining evaluators still run.
    """

    def __init__(
        self,
        evaluators: Sequence[Evaluator],
        observer: EvaluationObserver,
        reported: Sequence[str] = REPORTED_METRICS,
    ) -> None:
        self._evaluators = list(evaluators)
        self._observer = observer
        self._reported = reported

    async def run(self, context: EvaluationContext) -> tuple[list[EvaluatorResult], ScoreCard]:
        results: list[EvaluatorResult] = []
        for evaluator in self._evaluators:
            results.append(await self._run_one(evaluator, context))
        return results, ScoreCard.from_results(results, reported=self._reported)

    async def _run_one(self, evaluator: Evaluator, context: EvaluationContext) -> EvaluatorResult:
        self._observer.evaluator_started(context=context.run, evaluator=evaluator.name)
        try:
            result = await evaluator.evaluate(context)
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
            self._observer.evaluator_failed(context=context.run, evaluator=evaluator.name, reason=reason)
            return EvaluatorResult(name=evaluator.name, score=0.0, details=f"error: {reason}")

        self._observer.evaluator_completed(context=context.run, evaluator=evaluator.name, score=result.score)
        return result
