"""JudgeVerdict domain model — the structured rubric scores returned by a judge model."""

from pydantic import BaseModel, Field, field_validator


class CategoryScore(BaseModel, frozen=True):
    """One rubric category scored on the 1-5 scale (5 = perfect, very rare)."""

    category: str = Field(min_length=1)
    score: float = Field(ge=1, le=5, strict=True)
    reasoning: str = ""

    @field_validator("category")
    @classmethod
    def _category_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("category must not be blank")
        return value.strip()

    @property
    def normalized(self) -> float:
        """Score mapped linearly from [1, 5] onto [0, 1]."""
        return (self.score - 1) / 4


class JudgeVerdict(BaseModel, frozen=True):
    scores: list[CategoryScore] = Field(min_length=1)
    overall_assessment: str = ""

    @property
    def normalized_score(self) -> float:
        """Equal-weight mean of the normalized category scores."""
        return sum(score.normalized for score in self.scores) / len(self.scores)
