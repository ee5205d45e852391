"""RunRecord — the persisted outcome of one scenario run."""

from typing import Any, Literal, Protocol

from pydantic import BaseModel, Field

from ze_bench.evaluation.domain.result import EvaluatorResult

type RunStatus = Literal["running", "completed", "failed", "incomplete"]


class Telemetry(BaseModel, frozen=True):
    tool_calls: int = Field(default=0, ge=0)
    tokens_in: int = Field(default=0, ge=0)
    tokens_out: int = Field(default=0, ge=0)
    cost_usd: float = Field(default=0.0, ge=0.0)
    duration_ms: int = Field(default=0, ge=0)


class RunRecord(BaseModel, frozen=True):
    """One run as handed to storage.

    A record is saved once with status ``running`` when the run starts and
    again with its final status; ``run_id`` identifies both saves.
    """

    run_id: str = Field(min_length=1)
    status: RunStatus
    total_score: float | None = None
    weighted_score: float | None = None
    metadata: dict[str, Any] = {}
    evaluations: list[EvaluatorResult] = []
    telemetry: Telemetry = Telemetry()


class RunSink(Protocol):
    """Storage collaborator for run records. Returns where the record went."""

    def save(self, record: RunRecord) -> str: ...
