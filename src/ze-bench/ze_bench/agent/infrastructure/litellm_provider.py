"""LiteLLMChatProvider — native tool calling against Anthropic models through LiteLLM."""

from collections.abc import Sequence
from typing import Any

import litellm
import openai

from ze_bench.agent.domain.conversation import HistoryEntry, ProviderTurn
from ze_bench.agent.domain.tool import ToolDefinition
from ze_bench.agent.infrastructure.errors import MissingCredentialsError
from ze_bench.agent.infrastructure.openai_format import (
    parse_tool_calls,
    to_chat_messages,
    to_chat_tools,
    transport_error,
    usage_tokens,
)
from ze_bench.config.domain.settings import HarnessSettings

litellm.suppress_debug_info = True

DEFAULT_ANTHROPIC_MODEL = "anthropic/claude-3-7-sonnet-20250219"
DEFAULT_MAX_TOKENS = 4096


class LiteLLMChatProvider:
    """Satisfies the ChatProvider protocol for providers with native tool calling.

    Raises MissingCredentialsError at construction when no API key is set,
    because the provider cannot do anything useful without one.
    """

    name = "anthropic"
    default_max_turns = 10

    def __init__(
        self,
        settings: HarnessSettings,
        model: str | None = None,
        max_tokens: int = DEFAULT_MAX_TOKENS,
    ) -> None:
        if settings.anthropic_api_key is None:
            raise MissingCredentialsError(provider=self.name, env_var="ANTHROPIC_API_KEY")
        self._api_key = settings.anthropic_api_key
        self.model = _qualified(model or settings.claude_model or DEFAULT_ANTHROPIC_MODEL)
        self._max_tokens = max_tokens

    async def complete(
        self,
        history: Sequence[HistoryEntry],
        tools: Sequence[ToolDefinition],
    ) -> ProviderTurn:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "api_key": self._api_key,
            "max_tokens": self._max_tokens,
            "messages": to_chat_messages(history),
        }
        if tools:
            kwargs["tools"] = to_chat_tools(tools)
            kwargs["tool_choice"] = "auto"

        try:
            response = await litellm.acompletion(**kwargs)
        except openai.APIError as exc:
            raise transport_error(provider=self.name, exc=exc) from exc

        message = response.choices[0].message
        tokens_in, tokens_out = usage_tokens(response)
        return ProviderTurn(
            text=message.content or "",
            tool_calls=parse_tool_calls(message),
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            model=self.model,
        )


def _qualified(model: str) -> str:
    return model if "/" in model else f"anthropic/{model}"
