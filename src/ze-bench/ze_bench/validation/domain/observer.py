"""ValidationObserver port — domain events emitted while validation commands run."""

from typing import Protocol

from ze_bench.core.run_context import RunContext
from ze_bench.validation.domain.command import CommandKind


class ValidationObserver(Protocol):
    def command_started(self, context: RunContext, kind: CommandKind, command: str) -> None: ...

    def command_completed(
        self,
        context: RunContext,
        kind: CommandKind,
        exit_code: int,
        timed_out: bool,
        duration_ms: int,
    ) -> None: ...

    def install_failed(self, context: RunContext, exit_code: int, skipped: list[CommandKind]) -> None: ...
