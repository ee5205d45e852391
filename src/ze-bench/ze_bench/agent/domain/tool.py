"""Tool definitions, tool calls and tool results exchanged between driver and providers."""

from collections.abc import Awaitable, Callable
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field

type ToolInput = dict[str, Any]
type ToolHandler = Callable[[ToolInput], str | Awaitable[str]]


class ToolDefinition(BaseModel, frozen=True):
    """A tool the agent may call: its name, a description, and an object-shaped JSON schema."""

    name: str = Field(min_length=1)
    description: str
    input_schema: dict[str, Any] = {"type": "object", "properties": {}}


class NativeToolCall(BaseModel, frozen=True):
    """A tool call the provider reported through its native tool-calling channel."""

    origin: Literal["native"] = "native"
    id: str
    name: str
    raw_arguments: dict[str, Any] | str


class RecoveredToolCall(BaseModel, frozen=True):
    """A tool call recovered from a plain-text response that described it as JSON."""

    origin: Literal["recovered"] = "recovered"
    id: str
    name: str
    raw_arguments: dict[str, Any] | str


type ToolCall = Annotated[NativeToolCall | RecoveredToolCall, Field(discriminator="origin")]


class ToolResult(BaseModel, frozen=True):
    """The string answer to one tool call; failures are carried as ``Error: ...`` content."""

    tool_call_id: str
    name: str
    content: str
    is_error: bool = False
