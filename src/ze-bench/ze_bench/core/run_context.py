"""RunContext — immutable identity of one scenario run, passed to every observer call."""

import uuid

from pydantic import BaseModel, Field


def _new_run_id() -> str:
    return uuid.uuid4().hex


class RunContext(BaseModel, frozen=True):
    """Identifies the run an event belongs to.

    Threaded explicitly through the driver, validation runner, evaluators and
    observers so log lines can be correlated without any module-level state.
    """

    run_id: str = Field(default_factory=_new_run_id, min_length=1)
    suite: str = ""
    scenario: str = ""
    tier: str = ""
    agent: str = ""
    model: str = ""

    def log_fields(self) -> dict[str, str]:
        """Return the non-empty fields as structlog key/value pairs."""
        return {key: value for key, value in self.model_dump().items() if value}
