"""LlmJudgeEvaluator — qualitative rubric scoring delegated to a Judge."""

import json
import math

from ze_bench.core.errors import ZeBenchError
from ze_bench.evaluation.domain.context import EvaluationContext
from ze_bench.evaluation.domain.judge_prompt import build_judge_prompt
from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.judge.domain.judge import Judge

CHARS_PER_TOKEN = 4


class LlmJudgeEvaluator:
    """Builds the rubric prompt, asks the judge, and reports the normalized verdict.

    A disabled judge block or an empty category list scores 0 without any
    model call. Judge failures score 0 with the failure in the details.
    """

    name = "llm_judge"

    def __init__(self, judge: Judge) -> None:
        self._judge = judge

    async def evaluate(self, context: EvaluationContext) -> EvaluatorResult:
        config = context.scenario.llm_judge
        if not config.enabled:
            return EvaluatorResult(name=self.name, score=0.0, details="LLM judge disabled for this scenario")
        if not config.categories:
            return EvaluatorResult(
                name=self.name,
                score=0.0,
                details="LLM judge categories not defined in scenario.yaml (llm_judge.categories required)",
            )

        prompt = build_judge_prompt(
            scenario=context.scenario,
            agent_response=context.agent_response,
            diffs=context.diffs,
            command_results=context.command_results,
        )
        try:
            verdict = await self._judge.score(prompt=prompt, context=context.run)
        except ZeBenchError as exc:
            return EvaluatorResult(name=self.name, score=0.0, details=f"LLM judge evaluation failed: {exc}")

        score = verdict.normalized_score
        details = {
            "scores": [category.model_dump() for category in verdict.scores],
            "overall_assessment": verdict.overall_assessment,
            "normalized_score": score,
            "input_tokens": math.ceil(len(prompt) / CHARS_PER_TOKEN),
        }
        return EvaluatorResult(name=self.name, score=score, details=json.dumps(details, indent=2))
