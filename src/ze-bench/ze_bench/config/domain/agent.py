"""Agent configuration model."""

from typing import Literal

from pydantic import BaseModel, Field

type AgentType = Literal["anthropic", "openrouter", "claude-cli", "claude-sdk"]


class AgentConfig(BaseModel, frozen=True):
    type: AgentType
    model: str | None = None
    fallback_models: list[str] = []
    max_turns: int | None = Field(default=None, ge=1)
