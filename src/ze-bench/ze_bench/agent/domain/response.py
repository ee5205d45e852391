"""AgentResponse value object — the single outcome of one ``send`` call."""

from pydantic import BaseModel, Field


class AgentResponse(BaseModel, frozen=True):
    content: str
    tokens_in: int | None = Field(default=None, ge=0)
    tokens_out: int | None = Field(default=None, ge=0)
    cost_usd: float = Field(default=0.0, ge=0.0)
    tool_calls: int = Field(default=0, ge=0)
    turns: int = Field(default=0, ge=0)
    model: str | None = None
