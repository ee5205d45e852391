"""HarnessSettings — provider credentials and model choices read from the environment."""

from collections.abc import Mapping

from pydantic import BaseModel, Field

DEFAULT_JUDGE_MODEL = "openrouter/openai/gpt-4o-mini"
DEFAULT_JUDGE_TEMPERATURE = 0.1


class HarnessSettings(BaseModel, frozen=True):
    anthropic_api_key: str | None = None
    openrouter_api_key: str | None = None
    claude_model: str | None = None
    openrouter_model: str | None = None
    judge_model: str = DEFAULT_JUDGE_MODEL
    judge_temperature: float = Field(default=DEFAULT_JUDGE_TEMPERATURE, ge=0.0, le=2.0)
    judge_max_tokens: int | None = Field(default=None, ge=1)

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "HarnessSettings":
        """Build settings from an environment mapping; blank values count as unset."""

        def value(name: str) -> str | None:
            raw = environ.get(name, "").strip()
            return raw or None

        fields: dict[str, object] = {
            "anthropic_api_key": value("ANTHROPIC_API_KEY"),
            "openrouter_api_key": value("OPENROUTER_API_KEY"),
            "claude_model": value("CLAUDE_MODEL"),
            "openrouter_model": value("OPENROUTER_MODEL"),
        }
        if (judge_model := value("LLM_JUDGE_MODEL")) is not None:
            fields["judge_model"] = judge_model
        if (temperature := value("LLM_JUDGE_TEMPERATURE")) is not None:
            fields["judge_temperature"] = temperature
        if (max_tokens := value("LLM_JUDGE_MAX_TOKENS")) is not None:
            fields["judge_max_tokens"] = max_tokens
        return cls.model_validate(fields)
