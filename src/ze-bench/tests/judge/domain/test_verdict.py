"""Tests for JudgeVerdict and CategoryScore."""

import pytest
from pydantic import ValidationError

from ze_bench.judge.domain.verdict import CategoryScore, JudgeVerdict


def _verdict(*scores: float) -> JudgeVerdict:
    return JudgeVerdict(
        scores=[CategoryScore(category=f"c{index}", score=score) for index, score in enumerate(scores)]
    )


class TestNormalization:
    """Category scores map from [1, 5] onto [0, 1]; the verdict is their mean."""

    def test_category_normalization(self) -> None:
        verdict = _verdict(5, 3, 1)

        assert [score.normalized for score in verdict.scores] == [1.0, 0.5, 0.0]

    def test_aggregate_is_equal_weight_mean(self) -> None:
        assert _verdict(5, 3, 1).normalized_score == pytest.approx(0.5)

    def test_fractional_scores(self) -> None:
        assert _verdict(4.5).normalized_score == pytest.approx(0.875)


class TestValidation:
    @pytest.mark.parametrize("score", [0, 5.5, -1])
    def test_score_out_of_range_rejected(self, score: float) -> None:
        with pytest.raises(ValidationError):
            CategoryScore(category="correctness", score=score)

    def test_blank_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CategoryScore(category="   ", score=3)

    def test_category_is_stripped(self) -> None:
        assert CategoryScore(category=" correctness ", score=3).category == "correctness"

    def test_empty_scores_rejected(self) -> None:
        with pytest.raises(ValidationError):
            JudgeVerdict(scores=[])

    @pytest.mark.parametrize("score", ["4", True, None])
    def test_non_numeric_score_rejected(self, score: object) -> None:
        with pytest.raises(ValidationError):
            CategoryScore.model_validate({"category": "correctness", "score": score})

    def test_integer_score_accepted(self) -> None:
        assert CategoryScore.model_validate({"category": "correctness", "score": 4}).score == 4.0
