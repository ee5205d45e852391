"""EvaluatorResult value object — one evaluator's score for one run."""

from pydantic import BaseModel, Field


class EvaluatorResult(BaseModel, frozen=True):
    name: str = Field(min_length=1)
    score: float = Field(ge=0.0, le=1.0)
    details: str = ""
