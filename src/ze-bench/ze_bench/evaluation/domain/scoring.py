"""Weighted totals and the overall success decision for a scored run."""

from collections.abc import Mapping, Sequence

from pydantic import BaseModel

from ze_bench.config.domain.scenario import SuccessWeights
from ze_bench.validation.domain.command import CommandKind, CommandResult

WEIGHTED_MAX = 10.0
DEFAULT_WEIGHT = 1.0
SUCCESS_THRESHOLD = 0.7

BASE_WEIGHTS: Mapping[str, float] = {
    "install_success": 1.5,
    "tests_nonregression": 2.5,
    "manager_correctness": 1.0,
    "dependency_targets": 2.0,
    "integrity_guard": 1.5,
}

CRITICAL_COMMANDS: tuple[CommandKind, ...] = ("install", "test")


class WeightedTotals(BaseModel, frozen=True):
    weighted: float
    max: float = WEIGHTED_MAX


class SuccessOutcome(BaseModel, frozen=True):
    successful: bool
    metric: float
    validation_ratio: float
    evaluator_average: float


def compute_weighted_totals(
    scores: Mapping[str, float], overrides: Mapping[str, float] | None = None
) -> WeightedTotals:
    """Weighted mean of *scores* scaled to 0-10.

    Weights come from *overrides*, then the base table, then 1.0; metrics
    whose weight is zero or negative are left out entirely.
    """
    overrides = overrides or {}
    achieved = 0.0
    total = 0.0
    for metric, score in scores.items():
        weight = overrides.get(metric, BASE_WEIGHTS.get(metric, DEFAULT_WEIGHT))
        if weight <= 0:
            continue
        total += weight
        achieved += weight * score
    weighted = round(achieved / total * WEIGHTED_MAX, 4) if total > 0 else 0.0
    return WeightedTotals(weighted=weighted)


def calculate_success(
    command_results: Sequence[CommandResult],
    scores: Mapping[str, float],
    weights: SuccessWeights,
    configured: Sequence[str],
) -> SuccessOutcome:
    """Blend validation, evaluator and judge scores into one success metric.

    A run is successful when every configured critical command (install,
    test) ran and passed, and the blended metric reaches the threshold.
    """
    passed = sum(1 for result in command_results if result.succeeded)
    validation_ratio = passed / len(command_results) if command_results else 0.0
    evaluator_average = sum(scores.values()) / len(scores) if scores else 0.0
    judge = scores.get("llm_judge", 0.0)

    metric = (
        validation_ratio * weights.validation
        + evaluator_average * weights.evaluators
        + judge * weights.llm_judge
    )

    by_kind = {result.kind: result for result in command_results}
    critical_passed = all(
        kind in by_kind and by_kind[kind].succeeded
        for kind in CRITICAL_COMMANDS
        if kind in configured
    )
    return SuccessOutcome(
        successful=critical_passed and metric >= SUCCESS_THRESHOLD,
        metric=round(metric, 4),
        validation_ratio=validation_ratio,
        evaluator_average=evaluator_average,
    )
