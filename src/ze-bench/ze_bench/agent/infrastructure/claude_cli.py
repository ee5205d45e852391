"""ClaudeCliAdapter — runs the Claude Code CLI as a subprocess and parses its JSON output."""

import json
import shutil
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.observer import AgentObserver
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.domain.response import AgentResponse
from ze_bench.agent.infrastructure.errors import (
    AgentExecutableNotFoundError,
    ProviderTransportError,
)
from ze_bench.core.process import SPAWN_FAILURE_EXIT_CODE, run_exec
from ze_bench.core.run_context import RunContext

DEFAULT_EXECUTABLE = "claude"
DEFAULT_MAX_TURNS = 10
DEFAULT_TIMEOUT_S = 30 * 60.0

_PROMPT_PREFIXES = {
    "system": "System Instructions: ",
    "user": "",
    "assistant": "Previous Response: ",
}


@dataclass
class CliTranscript:
    """What could be recovered from one CLI invocation's stdout."""

    content: str
    tokens_in: int | None = None
    tokens_out: int | None = None
    cost_usd: float = 0.0
    tool_calls: int = 0
    turns: int = 0


class ClaudeCliAdapter:
    """Satisfies the ProviderAdapter protocol by shelling out to ``claude -p``.

    The CLI runs its own agent loop with its own built-in tools inside the
    workspace, so declared tool handlers on the request are not used; the
    flattened conversation is sent as one prompt on stdin.
    """

    name = "claude-cli"

    def __init__(
        self,
        observer: AgentObserver,
        context: RunContext,
        model: str | None = None,
        executable: str = DEFAULT_EXECUTABLE,
        timeout_s: float = DEFAULT_TIMEOUT_S,
    ) -> None:
        resolved = shutil.which(executable)
        if resolved is None:
            raise AgentExecutableNotFoundError(provider=self.name, executable=executable)
        self._executable = resolved
        self._observer = observer
        self._context = context
        self._model = model
        self._timeout_s = timeout_s

    async def send(self, request: AgentRequest) -> AgentResponse:
        """Run the CLI once for *request*.

        Raises:
            ProviderTransportError: if the CLI cannot be started, exits
                nonzero, or exceeds its timeout.
        """
        max_turns = request.max_turns or DEFAULT_MAX_TURNS
        workspace = request.workspace_dir
        self._observer.conversation_started(
            context=self._context,
            provider=self.name,
            model=self._model or "default",
            max_turns=max_turns,
            tools=0,
        )

        outcome = await run_exec(
            argv=self._argv(max_turns=max_turns, workspace=workspace),
            cwd=workspace if workspace is not None else Path.cwd(),
            timeout_s=self._timeout_s,
            stdin_text=flatten_prompt(request.messages),
        )
        if not outcome.succeeded:
            if outcome.exit_code == SPAWN_FAILURE_EXIT_CODE:
                reason = f"could not start CLI: {outcome.stderr}"
            else:
                detail = outcome.stderr.strip() or outcome.stdout.strip()[-500:]
                reason = f"CLI exited with code {outcome.exit_code}: {detail}"
            self._observer.conversation_failed(context=self._context, reason=reason)
            raise ProviderTransportError(
                provider=self.name, reason=reason, retriable=outcome.timed_out
            )

        transcript = parse_cli_output(outcome.stdout)
        self._observer.conversation_completed(
            context=self._context,
            turns=transcript.turns,
            tool_calls=transcript.tool_calls,
            cost_usd=transcript.cost_usd,
            duration_ms=outcome.duration_ms,
        )
        return AgentResponse(
            content=transcript.content,
            tokens_in=transcript.tokens_in,
            tokens_out=transcript.tokens_out,
            cost_usd=transcript.cost_usd,
            tool_calls=transcript.tool_calls,
            turns=transcript.turns,
            model=self._model,
        )

    def _argv(self, max_turns: int, workspace: Path | None) -> list[str]:
        argv = [
            self._executable,
            "-p",
            "--output-format",
            "json",
            "--max-turns",
            str(max_turns),
            "--verbose",
            "--permission-mode",
            "bypassPermissions",
        ]
        if self._model:
            argv += ["--model", self._model]
        if workspace is not None:
            argv += ["--add-dir", str(workspace)]
        return argv


def flatten_prompt(messages: Sequence[Message]) -> str:
    """Join a conversation into one prompt, labelling non-user roles."""
    return "\n\n".join(
        f"{_PROMPT_PREFIXES[message.role]}{message.content}" for message in messages
    )


def parse_cli_output(stdout: str) -> CliTranscript:
    """Recover text, usage, cost and tool counts from CLI stdout.

    Accepts a JSON array of events, a single result object, or newline
    delimited events. Lines that are not JSON objects are kept as literal
    content rather than dropped.
    """
    text = stdout.strip()
    if not text:
        return CliTranscript(content="")

    try:
        document = json.loads(text)
    except json.JSONDecodeError:
        document = None

    if isinstance(document, list):
        transcript = _from_events(event for event in document if isinstance(event, dict))
    elif isinstance(document, dict):
        transcript = _from_events([document])
    else:
        events, literal_lines = _split_lines(text)
        transcript = _from_events(events)
        transcript.content = "\n".join(
            part for part in (transcript.content, *literal_lines) if part
        )

    if not transcript.content:
        transcript.content = text
    return transcript


def _split_lines(text: str) -> tuple[list[dict[str, Any]], list[str]]:
    events: list[dict[str, Any]] = []
    literal_lines: list[str] = []
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        try:
            event = json.loads(stripped)
        except json.JSONDecodeError:
            literal_lines.append(line)
            continue
        if isinstance(event, dict):
            events.append(event)
        else:
            literal_lines.append(line)
    return events, literal_lines


@dataclass
class _Totals:
    tokens_in: int = 0
    tokens_out: int = 0
    saw_usage: bool = False
    cost_usd: float = 0.0
    reported_tool_calls: int = 0
    observed_tool_calls: int = 0
    assistant_turns: int = 0
    assistant_texts: list[str] = field(default_factory=list)


def _from_events(events: Iterable[dict[str, Any]]) -> CliTranscript:
    totals = _Totals()
    result: dict[str, Any] | None = None

    for event in events:
        if event.get("type") == "result":
            result = event
        else:
            _add_usage(totals, event.get("usage") or _message(event).get("usage"))
        if event.get("type") == "assistant":
            totals.assistant_turns += 1
            _collect_assistant_blocks(totals, _message(event).get("content"))
        totals.cost_usd = max(totals.cost_usd, _number(event.get("total_cost_usd")))
        totals.reported_tool_calls = max(
            totals.reported_tool_calls, int(_number(event.get("tool_use_count")))
        )

    content = ""
    turns = totals.assistant_turns
    if result is not None:
        result_usage = result.get("usage") or {}
        if isinstance(result_usage, dict) and result_usage:
            totals.saw_usage = True
            totals.tokens_in = max(totals.tokens_in, int(_number(result_usage.get("input_tokens"))))
            totals.tokens_out = max(
                totals.tokens_out, int(_number(result_usage.get("output_tokens")))
            )
        turns = int(_number(result.get("num_turns"))) or turns
        if isinstance(result.get("result"), str):
            content = result["result"]
        elif result.get("subtype"):
            content = f"Claude execution status: {result['subtype']} ({turns} turns)"

    if not content:
        content = "\n\n".join(totals.assistant_texts)

    return CliTranscript(
        content=content,
        tokens_in=totals.tokens_in if totals.saw_usage else None,
        tokens_out=totals.tokens_out if totals.saw_usage else None,
        cost_usd=totals.cost_usd,
        tool_calls=max(totals.reported_tool_calls, totals.observed_tool_calls),
        turns=turns,
    )


def _message(event: dict[str, Any]) -> dict[str, Any]:
    message = event.get("message")
    return message if isinstance(message, dict) else {}


def _add_usage(totals: _Totals, usage: Any) -> None:
    if not isinstance(usage, dict):
        return
    totals.saw_usage = True
    totals.tokens_in += int(_number(usage.get("input_tokens")))
    totals.tokens_out += int(_number(usage.get("output_tokens")))


def _collect_assistant_blocks(totals: _Totals, content: Any) -> None:
    if isinstance(content, str):
        totals.assistant_texts.append(content)
        return
    for block in content or []:
        if not isinstance(block, dict):
            continue
        if block.get("type") == "text" and block.get("text"):
            totals.assistant_texts.append(block["text"])
        elif block.get("type") == "tool_use":
            totals.observed_tool_calls += 1


def _number(value: Any) -> float:
    return float(value) if isinstance(value, (int, float)) and not isinstance(value, bool) else 0.0
