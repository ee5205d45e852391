"""Async subprocess execution with enforced timeouts and kill-on-cancel.

Every child is started in its own session so that a timeout or a cancelled run
kills the whole process group (``sh -c`` wrappers, package-manager workers),
not only the immediate child.
"""

import asyncio
import os
import signal
import time
from datetime import UTC, datetime
from pathlib import Path

from pydantic import BaseModel, Field

TIMEOUT_EXIT_CODE = 124
SPAWN_FAILURE_EXIT_CODE = -1

_DRAIN_TIMEOUT_S = 5.0


class ProcessOutcome(BaseModel, frozen=True):
    """Captured result of one finished (or killed) subprocess."""

    exit_code: int
    stdout: str
    stderr: str
    timed_out: bool = False
    started_at: datetime
    duration_ms: int = Field(ge=0)

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0 and not self.timed_out


async def run_shell(
    command: str,
    cwd: Path,
    timeout_s: float,
    stdin_text: str | None = None,
) -> ProcessOutcome:
    """Run *command* through the shell in *cwd*, killing it after *timeout_s*."""
    started_at = datetime.now(UTC)
    start = time.monotonic()
    try:
        process = await asyncio.create_subprocess_shell(
            command,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE if stdin_text is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        return _spawn_failure(exc=exc, started_at=started_at, start=start)
    return await _collect(
        process=process,
        timeout_s=timeout_s,
        stdin_text=stdin_text,
        started_at=started_at,
        start=start,
    )


async def run_exec(
    argv: list[str],
    cwd: Path,
    timeout_s: float,
    stdin_text: str | None = None,
) -> ProcessOutcome:
    """Run *argv* directly (no shell) in *cwd*, killing it after *timeout_s*."""
    started_at = datetime.now(UTC)
    start = time.monotonic()
    try:
        process = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            stdin=asyncio.subprocess.PIPE if stdin_text is not None else asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            start_new_session=True,
        )
    except OSError as exc:
        return _spawn_failure(exc=exc, started_at=started_at, start=start)
    return await _collect(
        process=process,
        timeout_s=timeout_s,
        stdin_text=stdin_text,
        started_at=started_at,
        start=start,
    )


async def _collect(
    process: asyncio.subprocess.Process,
    timeout_s: float,
    stdin_text: str | None,
    started_at: datetime,
    start: float,
) -> ProcessOutcome:
    payload = stdin_text.encode("utf-8") if stdin_text is not None else None
    try:
        stdout, stderr = await asyncio.wait_for(
            process.communicate(input=payload), timeout=timeout_s
        )
    except TimeoutError:
        _kill_group(process)
        stdout, stderr = await _drain(process)
        message = f"Timed out after {timeout_s:g}s"
        return ProcessOutcome(
            exit_code=TIMEOUT_EXIT_CODE,
            stdout=_decode(stdout),
            stderr=f"{_decode(stderr)}\n{message}".lstrip("\n"),
            timed_out=True,
            started_at=started_at,
            duration_ms=_elapsed_ms(start),
        )
    except asyncio.CancelledError:
        _kill_group(process)
        raise

    return ProcessOutcome(
        exit_code=process.returncode if process.returncode is not None else SPAWN_FAILURE_EXIT_CODE,
        stdout=_decode(stdout),
        stderr=_decode(stderr),
        started_at=started_at,
        duration_ms=_elapsed_ms(start),
    )


async def _drain(process: asyncio.subprocess.Process) -> tuple[bytes, bytes]:
    """Read whatever the killed process left in its pipes."""
    try:
        return await asyncio.wait_for(process.communicate(), timeout=_DRAIN_TIMEOUT_S)
    except TimeoutError:
        return b"", b""


def _kill_group(process: asyncio.subprocess.Process) -> None:
    if process.returncode is not None:
        return
    try:
        os.killpg(process.pid, signal.SIGKILL)
    except ProcessLookupError:
        # Exited between the returncode check and the kill.
        return


def _spawn_failure(exc: OSError, started_at: datetime, start: float) -> ProcessOutcome:
    return ProcessOutcome(
        exit_code=SPAWN_FAILURE_EXIT_CODE,
        stdout="",
        stderr=str(exc),
        started_at=started_at,
        duration_ms=_elapsed_ms(start),
    )


def _decode(data: bytes | None) -> str:
    return data.decode("utf-8", errors="replace") if data else ""


def _elapsed_ms(start: float) -> int:
    return max(0, int((time.monotonic() - start) * 1000))
