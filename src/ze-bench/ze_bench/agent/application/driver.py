"""ConversationDriver — the multi-turn tool-calling loop shared by every chat provider."""

import asyncio
import inspect
import json
import time
from collections.abc import Mapping
from typing import Any

from ze_bench.agent.domain.conversation import (
    AssistantTurn,
    HistoryEntry,
    ProviderTurn,
    ToolResultsTurn,
)
from ze_bench.agent.domain.observer import AgentObserver
from ze_bench.agent.domain.pricing import CostEstimator
from ze_bench.agent.domain.provider import ChatProvider
from ze_bench.agent.domain.request import AgentRequest
from ze_bench.agent.domain.response import AgentResponse
from ze_bench.agent.domain.tool import (
    ToolCall,
    ToolDefinition,
    ToolHandler,
    ToolInput,
    ToolResult,
)
from ze_bench.agent.domain.tool_output import DEFAULT_MAX_TOOL_OUTPUT_CHARS, compact_tool_output
from ze_bench.agent.domain.tool_recovery import recover_tool_calls
from ze_bench.agent.infrastructure.errors import ProviderTransportError
from ze_bench.core.run_context import RunContext

MAX_TURNS_MESSAGE = "Max tool calling iterations reached"


class ConversationDriver:
    """Drives a ChatProvider through a tool-calling conversation.

    Satisfies the ProviderAdapter protocol. Each turn calls the provider with
    the full history, executes the returned (or text-recovered) tool calls one
    after another, and appends both sides to the history. The loop ends when a
    turn yields no tool calls or the turn budget runs out; either way exactly
    one AgentResponse is produced. Tool handler failures never escape ``send``;
    ProviderTransportError does.
    """

    def __init__(
        self,
        provider: ChatProvider,
        pricing: CostEstimator,
        observer: AgentObserver,
        context: RunContext,
        max_tool_output_chars: int = DEFAULT_MAX_TOOL_OUTPUT_CHARS,
        attach_tools_every_turn: bool = True,
        turn_timeout_s: float | None = None,
    ) -> None:
        self._provider = provider
        self._pricing = pricing
        self._observer = observer
        self._context = context
        self._max_tool_output_chars = max_tool_output_chars
        self._attach_tools_every_turn = attach_tools_every_turn
        self._turn_timeout_s = turn_timeout_s

    @property
    def name(self) -> str:
        return self._provider.name

    async def send(self, request: AgentRequest) -> AgentResponse:
        """Run the conversation described by *request* to completion.

        Raises:
            ProviderTransportError: if the provider cannot be reached or a
                single provider call exceeds the turn timeout.
        """
        max_turns = request.max_turns or self._provider.default_max_turns
        declared = request.tool_names
        history: list[HistoryEntry] = list(request.messages)
        self._pricing.schedule_refresh()
        self._observer.conversation_started(
            context=self._context,
            provider=self._provider.name,
            model=self._provider.model,
            max_turns=max_turns,
            tools=len(request.tools),
        )

        start = time.monotonic()
        usage = _Usage(model=self._provider.model)
        last_text = ""

        try:
            for turn in range(1, max_turns + 1):
                tools = request.tools if turn == 1 or self._attach_tools_every_turn else []
                reply = await self._complete(history=history, tools=tools)
                usage.add(tokens_in=reply.tokens_in, tokens_out=reply.tokens_out, model=reply.model)
                if reply.text.strip():
                    last_text = reply.text

                calls: list[ToolCall] = list(reply.tool_calls)
                if not calls:
                    calls = list(recover_tool_calls(reply.text, declared))
                    if calls:
                        self._observer.tool_calls_recovered(
                            context=self._context, turn=turn, names=[call.name for call in calls]
                        )
                self._observer.turn_completed(
                    context=self._context,
                    turn=turn,
                    tool_calls=len(calls),
                    tokens_in=reply.tokens_in,
                    tokens_out=reply.tokens_out,
                )

                if not calls:
                    return await self._finish(
                        content=reply.text, usage=usage, turns=turn, start=start
                    )

                usage.tool_calls += len(calls)
                results = [
                    await self._execute(call=call, handlers=request.tool_handlers)
                    for call in calls
                ]
                history.append(AssistantTurn(text=reply.text, tool_calls=calls))
                history.append(ToolResultsTurn(results=results))
        except ProviderTransportError as exc:
            self._observer.conversation_failed(context=self._context, reason=str(exc))
            raise

        self._observer.max_turns_reached(context=self._context, max_turns=max_turns)
        return await self._finish(
            content=last_text or MAX_TURNS_MESSAGE, usage=usage, turns=max_turns, start=start
        )

    async def _complete(
        self, history: list[HistoryEntry], tools: list[ToolDefinition]
    ) -> ProviderTurn:
        try:
            async with asyncio.timeout(self._turn_timeout_s):
                return await self._provider.complete(history=history, tools=tools)
        except TimeoutError as exc:
            raise ProviderTransportError(
                provider=self._provider.name,
                reason=f"no response within {self._turn_timeout_s:g}s",
                retriable=True,
            ) from exc

    async def _execute(self, call: ToolCall, handlers: Mapping[str, ToolHandler]) -> ToolResult:
        handler = handlers.get(call.name)
        if handler is None:
            return ToolResult(
                tool_call_id=call.id,
                name=call.name,
                content=f"Tool '{call.name}' is not available",
                is_error=True,
            )

        try:
            arguments = _decode_arguments(call.raw_arguments)
            outcome = handler(arguments)
            if inspect.isawaitable(outcome):
                outcome = await outcome
        except Exception as exc:
            # Handlers are caller-supplied; whatever they raise goes back to the model.
            reason = str(exc) or type(exc).__name__
            self._observer.tool_failed(context=self._context, tool_name=call.name, reason=reason)
            return ToolResult(
                tool_call_id=call.id, name=call.name, content=f"Error: {reason}", is_error=True
            )

        content = outcome if isinstance(outcome, str) else json.dumps(outcome, default=str)
        compacted = compact_tool_output(content, limit=self._max_tool_output_chars)
        if compacted is not content:
            self._observer.tool_output_compacted(
                context=self._context,
                tool_name=call.name,
                original_size=len(content),
                compacted_size=len(compacted),
            )
        return ToolResult(tool_call_id=call.id, name=call.name, content=compacted)

    async def _finish(
        self, content: str, usage: "_Usage", turns: int, start: float
    ) -> AgentResponse:
        cost_usd = await self._pricing.cost(
            model=usage.model, tokens_in=usage.tokens_in, tokens_out=usage.tokens_out
        )
        self._observer.conversation_completed(
            context=self._context,
            turns=turns,
            tool_calls=usage.tool_calls,
            cost_usd=cost_usd,
            duration_ms=int((time.monotonic() - start) * 1000),
        )
        return AgentResponse(
            content=content,
            tokens_in=usage.tokens_in,
            tokens_out=usage.tokens_out,
            cost_usd=cost_usd,
            tool_calls=usage.tool_calls,
            turns=turns,
            model=usage.model,
        )


class _Usage:
    """Running totals across turns; cost is priced once on the cumulative counts."""

    def __init__(self, model: str) -> None:
        self.model = model
        self.tokens_in = 0
        self.tokens_out = 0
        self.tool_calls = 0

    def add(self, tokens_in: int, tokens_out: int, model: str | None) -> None:
        self.tokens_in += tokens_in
        self.tokens_out += tokens_out
        if model:
            self.model = model


def _decode_arguments(raw_arguments: dict[str, Any] | str) -> ToolInput:
    if isinstance(raw_arguments, dict):
        return raw_arguments
    try:
        decoded = json.loads(raw_arguments or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid tool arguments: {exc.msg}") from exc
    if not isinstance(decoded, dict):
        raise ValueError("invalid tool arguments: expected a JSON object")
    return decoded
