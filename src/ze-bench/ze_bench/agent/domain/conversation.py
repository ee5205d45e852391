"""Provider-neutral conversation history and the normalized result of one provider call."""

from pydantic import BaseModel, Field

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.tool import ToolCall, ToolResult


class AssistantTurn(BaseModel, frozen=True):
    """What the assistant said on one turn, including any tool calls it made."""

    text: str
    tool_calls: list[ToolCall] = []


class ToolResultsTurn(BaseModel, frozen=True):
    """The answers to every tool call of the preceding assistant turn, in call order."""

    results: list[ToolResult] = Field(min_length=1)


type HistoryEntry = Message | AssistantTurn | ToolResultsTurn


class ProviderTurn(BaseModel, frozen=True):
    """One provider round-trip, normalized.

    ``tool_calls`` only ever holds native calls; fallback recovery from
    ``text`` is the driver's job.
    """

    text: str
    tool_calls: list[ToolCall] = []
    tokens_in: int = Field(default=0, ge=0)
    tokens_out: int = Field(default=0, ge=0)
    model: str | None = None
