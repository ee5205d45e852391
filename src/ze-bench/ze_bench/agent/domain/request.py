"""AgentRequest value object — everything one ``send`` call needs."""

from pathlib import Path

from pydantic import BaseModel, Field, model_validator

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.tool import ToolDefinition, ToolHandler


class AgentRequest(BaseModel, frozen=True):
    """Immutable input to a provider adapter.

    ``tool_handlers`` maps declared tool names to callables; a declared tool
    without a handler is allowed and answered with a "not available" result.
    """

    messages: list[Message] = Field(min_length=1)
    workspace_dir: Path | None = None
    max_turns: int | None = Field(default=None, ge=1)
    tools: list[ToolDefinition] = []
    tool_handlers: dict[str, ToolHandler] = {}

    @model_validator(mode="after")
    def _tool_names_unique(self) -> "AgentRequest":
        names = [tool.name for tool in self.tools]
        duplicates = sorted({name for name in names if names.count(name) > 1})
        if duplicates:
            raise ValueError(f"duplicate tool names: {', '.join(duplicates)}")
        return self

    @property
    def tool_names(self) -> frozenset[str]:
        return frozenset(tool.name for tool in self.tools)
