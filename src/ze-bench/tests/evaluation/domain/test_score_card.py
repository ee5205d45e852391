"""Tests for ScoreCard construction."""

import pytest

from ze_bench.evaluation.domain.result import EvaluatorResult
from ze_bench.evaluation.domain.score_card import REPORTED_METRICS, ScoreCard


class TestFromResults:
    def test_reported_metrics_always_present(self) -> None:
        card = ScoreCard.from_results([EvaluatorResult(name="install_success", score=1.0)])

        assert set(REPORTED_METRICS) <= set(card.scores)
        assert card["install_success"] == 1.0
        assert card["llm_judge"] == 0.0

    def test_optional_metric_only_when_it_ran(self) -> None:
        without = ScoreCard.from_results([])
        with_checks = ScoreCard.from_results([EvaluatorResult(name="heuristic_checks", score=0.75)])

        assert "heuristic_checks" not in without
        assert with_checks["heuristic_checks"] == 0.75

    def test_first_result_for_a_name_wins(self) -> None:
        card = ScoreCard.from_results(
            [
                EvaluatorResult(name="lint", score=1.0, details="first"),
                EvaluatorResult(name="lint", score=0.0, details="second"),
            ],
            reported=(),
        )

        assert card.scores == {"lint": 1.0}
        assert card.details == {"lint": "first"}

    def test_total_score_is_unweighted_mean(self) -> None:
        card = ScoreCard.from_results(
            [EvaluatorResult(name="a", score=1.0), EvaluatorResult(name="b", score=0.5)],
            reported=(),
        )

        assert card.total_score == pytest.approx(0.75)

    def test_empty_card(self) -> None:
        assert ScoreCard(scores={}).total_score == 0.0
