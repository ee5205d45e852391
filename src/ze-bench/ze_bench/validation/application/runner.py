"""ValidationCommandRunner — install first, then test/lint/typecheck side by side."""

import asyncio
from pathlib import Path

from ze_bench.config.domain.scenario import ValidationCommands
from ze_bench.core.process import run_shell
from ze_bench.core.run_context import RunContext
from ze_bench.validation.domain.command import COMMAND_ORDER, CommandKind, CommandResult
from ze_bench.validation.domain.observer import ValidationObserver

DEFAULT_COMMAND_TIMEOUT_S = 10 * 60.0

_POST_INSTALL: tuple[CommandKind, ...] = ("test", "lint", "typecheck")


class ValidationCommandRunner:
    """Runs a scenario's validation commands against a finished workspace.

    Install runs alone. If it exits nonzero or times out, nothing else runs:
    tests and linters are meaningless in a project that does not install.
    Otherwise the remaining configured commands run concurrently, each with
    its own timeout and no cross-cancellation. Results come back in
    install/test/lint/typecheck order.
    """

    def __init__(
        self,
        observer: ValidationObserver,
        context: RunContext,
        timeout_s: float = DEFAULT_COMMAND_TIMEOUT_S,
    ) -> None:
        self._observer = observer
        self._context = context
        self._timeout_s = timeout_s

    async def run(self, workspace_dir: Path, commands: ValidationCommands) -> list[CommandResult]:
        results: list[CommandResult] = []

        if commands.install:
            install = await self._run_one(kind="install", command=commands.install, cwd=workspace_dir)
            results.append(install)
            if not install.succeeded:
                skipped = [kind for kind in _POST_INSTALL if getattr(commands, kind)]
                self._observer.install_failed(
                    context=self._context, exit_code=install.exit_code, skipped=skipped
                )
                return results

        pending = [
            self._run_one(kind=kind, command=command, cwd=workspace_dir)
            for kind in _POST_INSTALL
            if (command := getattr(commands, kind))
        ]
        results.extend(await asyncio.gather(*pending))
        return sorted(results, key=lambda result: COMMAND_ORDER.index(result.kind))

    async def _run_one(self, kind: CommandKind, command: str, cwd: Path) -> CommandResult:
        self._observer.command_started(context=self._context, kind=kind, command=command)
        outcome = await run_shell(command, cwd=cwd, timeout_s=self._timeout_s)
        self._observer.command_completed(
            context=self._context,
            kind=kind,
            exit_code=outcome.exit_code,
            timed_out=outcome.timed_out,
            duration_ms=outcome.duration_ms,
        )
        return CommandResult(
            kind=kind,
            command=command,
            exit_code=outcome.exit_code,
            stdout=outcome.stdout,
            stderr=outcome.stderr,
            timed_out=outcome.timed_out,
            started_at=outcome.started_at,
            duration_ms=outcome.duration_ms,
        )
