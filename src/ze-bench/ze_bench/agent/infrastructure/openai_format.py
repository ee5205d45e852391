"""Translation between the neutral conversation history and OpenAI-style chat payloads.

Both the LiteLLM provider and the OpenRouter gateway speak this format, so
history, tool schemas and tool-call parsing are shared here.
"""

import json
from collections.abc import Sequence
from typing import Any

import openai

from ze_bench.agent.domain.conversation import AssistantTurn, HistoryEntry, ToolResultsTurn
from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.tool import NativeToolCall, ToolCall, ToolDefinition
from ze_bench.agent.infrastructure.errors import ProviderTransportError

type ChatMessage = dict[str, Any]

_RETRIABLE_ERRORS = (
    openai.RateLimitError,
    openai.APITimeoutError,
    openai.APIConnectionError,
    openai.InternalServerError,
)


def to_chat_messages(history: Sequence[HistoryEntry]) -> list[ChatMessage]:
    messages: list[ChatMessage] = []
    for entry in history:
        if isinstance(entry, Message):
            messages.append({"role": entry.role, "content": entry.content})
        elif isinstance(entry, AssistantTurn):
            messages.append(_assistant_message(entry))
        elif isinstance(entry, ToolResultsTurn):
            messages.extend(
                {"role": "tool", "tool_call_id": result.tool_call_id, "content": result.content}
                for result in entry.results
            )
    return messages


def to_chat_tools(tools: Sequence[ToolDefinition]) -> list[dict[str, Any]]:
    return [
        {
            "type": "function",
            "function": {
                "name": tool.name,
                "description": tool.description,
                "parameters": tool.input_schema,
            },
        }
        for tool in tools
    ]


def parse_tool_calls(message: Any) -> list[NativeToolCall]:
    """Read the ``tool_calls`` of an OpenAI-shaped assistant message."""
    calls: list[NativeToolCall] = []
    for raw in getattr(message, "tool_calls", None) or []:
        function = raw.function
        calls.append(
            NativeToolCall(
                id=raw.id,
                name=function.name,
                raw_arguments=function.arguments or "{}",
            )
        )
    return calls


def usage_tokens(response: Any) -> tuple[int, int]:
    usage = getattr(response, "usage", None)
    if usage is None:
        return 0, 0
    return (
        int(getattr(usage, "prompt_tokens", 0) or 0),
        int(getattr(usage, "completion_tokens", 0) or 0),
    )


def transport_error(provider: str, exc: openai.APIError, hint: str | None = None) -> ProviderTransportError:
    reason = str(exc)
    if hint:
        reason = f"{reason} ({hint})"
    return ProviderTransportError(
        provider=provider,
        reason=reason,
        retriable=isinstance(exc, _RETRIABLE_ERRORS),
    )


def _assistant_message(turn: AssistantTurn) -> ChatMessage:
    message: ChatMessage = {"role": "assistant", "content": turn.text or None}
    if turn.tool_calls:
        message["tool_calls"] = [_wire_tool_call(call) for call in turn.tool_calls]
    return message


def _wire_tool_call(call: ToolCall) -> dict[str, Any]:
    arguments = (
        call.raw_arguments
        if isinstance(call.raw_arguments, str)
        else json.dumps(call.raw_arguments)
    )
    return {
        "id": call.id,
        "type": "function",
        "function": {"name": call.name, "arguments": arguments},
    }
