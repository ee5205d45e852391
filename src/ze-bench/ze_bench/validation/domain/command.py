"""CommandResult value object — one validation command and what it produced."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

type CommandKind = Literal["install", "test", "lint", "typecheck"]

COMMAND_ORDER: tuple[CommandKind, ...] = ("install", "test", "lint", "typecheck")


class CommandResult(BaseModel, frozen=True):
    kind: CommandKind
    command: str
    exit_code: int
    stdout: str
    stderr: str
    timed_out: bool = False
    started_at: datetime
    duration_ms: int = Field(ge=0)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.timed_out
