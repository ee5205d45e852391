"""StructlogValidationObserver — production observer that delegates to structlog."""

import structlog

from ze_bench.core.run_context import RunContext
from ze_bench.validation.domain.command import CommandKind


class StructlogValidationObserver:
    """Logs validation events to structlog.

    Satisfies the ValidationObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def command_started(self, context: RunContext, kind: CommandKind, command: str) -> None:
        self._log.info(
            "validation.command_started", **context.log_fields(), kind=kind, command=command
        )

    def command_completed(
        self,
        context: RunContext,
        kind: CommandKind,
        exit_code: int,
        timed_out: bool,
        duration_ms: int,
    ) -> None:
        log = self._log.info if exit_code == 0 and not timed_out else self._log.warning
        log(
            "validation.command_completed",
            **context.log_fields(),
            kind=kind,
            exit_code=exit_code,
            timed_out=timed_out,
            duration_ms=duration_ms,
        )

    def install_failed(self, context: RunContext, exit_code: int, skipped: list[CommandKind]) -> None:
        self._log.warning(
            "validation.install_failed",
            **context.log_fields(),
            exit_code=exit_code,
            skipped=skipped,
        )
