"""Evaluator registry — the default evaluator set for a scenario."""

from ze_bench.cache.domain.result_cache import ResultCache
from ze_bench.config.domain.scenario import ScenarioConfig
from ze_bench.config.domain.settings import HarnessSettings
from ze_bench.evaluation.domain.evaluator import Evaluator
from ze_bench.evaluation.infrastructure.commands import (
    InstallEvaluator,
    LintEvaluator,
    NonRegressionEvaluator,
    TypecheckEvaluator,
)
from ze_bench.evaluation.infrastructure.config_accuracy import ConfigAccuracyEvaluator
from ze_bench.evaluation.infrastructure.dependencies import (
    CompanionAlignmentEvaluator,
    DependencyProximityEvaluator,
    DependencyTargetsEvaluator,
    NamespaceMigrationEvaluator,
    PackageManagerEvaluator,
)
from ze_bench.evaluation.infrastructure.file_structure import FileStructureEvaluator
from ze_bench.evaluation.infrastructure.heuristic_checks import HeuristicChecksEvaluator
from ze_bench.evaluation.infrastructure.integrity_guard import IntegrityGuardEvaluator
from ze_bench.evaluation.infrastructure.llm_judge import LlmJudgeEvaluator
from ze_bench.judge.domain.judge import Judge
from ze_bench.judge.domain.observer import JudgeObserver
from ze_bench.judge.infrastructure.litellm import LiteLLMJudge


def build_default_evaluators(
    scenario: ScenarioConfig,
    settings: HarnessSettings,
    cache: ResultCache,
    judge_observer: JudgeObserver,
    judge: Judge | None = None,
) -> list[Evaluator]:
    """Return the evaluators that apply to *scenario*.

    Evaluators whose prerequisites are missing (reference path, enabled block,
    judge API key) are left out; the score card reports the core metrics as 0
    when that happens.
    """
    evaluators: list[Evaluator] = [
        InstallEvaluator(),
        NonRegressionEvaluator(),
        LintEvaluator(),
        TypecheckEvaluator(),
        PackageManagerEvaluator(),
        DependencyTargetsEvaluator(),
        IntegrityGuardEvaluator(),
        NamespaceMigrationEvaluator(),
        CompanionAlignmentEvaluator(),
    ]
    if scenario.reference_path is not None:
        evaluators.append(DependencyProximityEvaluator())
        evaluators.append(ConfigAccuracyEvaluator())
    if scenario.targets.files:
        evaluators.append(FileStructureEvaluator())
    if scenario.heuristic_checks.enabled:
        evaluators.append(HeuristicChecksEvaluator())

    if scenario.llm_judge.enabled:
        if judge is None and settings.openrouter_api_key is not None:
            model = scenario.llm_judge.model or settings.judge_model
            judge = LiteLLMJudge(
                model=model,
                temperature=settings.judge_temperature,
                observer=judge_observer,
                cache=cache,
                max_tokens=settings.judge_max_tokens,
                api_key=settings.openrouter_api_key if model.startswith("openrouter/") else None,
            )
        if judge is not None:
            evaluators.append(LlmJudgeEvaluator(judge=judge))
    return evaluators
