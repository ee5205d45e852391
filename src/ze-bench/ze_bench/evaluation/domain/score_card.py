"""ScoreCard — the final metric-name to [0, 1] score mapping for one run."""

from collections.abc import Sequence

from pydantic import BaseModel

from ze_bench.evaluation.domain.result import EvaluatorResult

# Always present on a card; an evaluator that was skipped (missing reference
# path, API key, disabled block) scores 0 here. Any other evaluator's metric
# appears only when it actually ran.
REPORTED_METRICS: tuple[str, ...] = (
    "install_success",
    "tests_nonregression",
    "manager_correctness",
    "dependency_targets",
    "integrity_guard",
    "llm_judge",
)


class ScoreCard(BaseModel, frozen=True):
    scores: dict[str, float]
    details: dict[str, str] = {}

    @classmethod
    def from_results(
        cls,
        results: Sequence[EvaluatorResult],
        reported: Sequence[str] = REPORTED_METRICS,
    ) -> "ScoreCard":
        """Build a card from *results*; the first result for a name wins."""
        by_name: dict[str, EvaluatorResult] = {}
        for result in results:
            by_name.setdefault(result.name, result)

        scores = {name: by_name[name].score if name in by_name else 0.0 for name in reported}
        for name, result in by_name.items():
            scores.setdefault(name, result.score)
        details = {name: result.details for name, result in by_name.items()}
        return cls(scores=scores, details=details)

    def __getitem__(self, metric: str) -> float:
        return self.scores[metric]

    def __contains__(self, metric: object) -> bool:
        return metric in self.scores

    @property
    def total_score(self) -> float:
        """Unweighted mean of every metric on the card."""
        if not self.scores:
            return 0.0
        return sum(self.scores.values()) / len(self.scores)
