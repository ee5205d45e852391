"""OpenRouterChatProvider — the OpenAI-compatible multi-model gateway."""

from collections.abc import Sequence
from typing import Any, Literal

import openai
from openai import AsyncOpenAI

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

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
DEFAULT_OPENROUTER_MODEL = "minimax/minimax-m2:free"
DEFAULT_MAX_TOKENS = 8192
DEFAULT_TEMPERATURE = 0.1

type ModelSource = Literal["parameter", "environment", "default"]


class OpenRouterChatProvider:
    """Satisfies the ChatProvider protocol against OpenRouter.

    ``fallback_models`` is sent as the gateway's ``models`` routing list so
    that OpenRouter itself retries the request on the next model when the
    primary one is unavailable; the model that actually answered is reported
    on every turn and used for pricing.
    """

    name = "openrouter"
    default_max_turns = 50

    def __init__(
        self,
        settings: HarnessSettings,
        model: str | None = None,
        fallback_models: Sequence[str] = (),
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        client: AsyncOpenAI | None = None,
    ) -> None:
        if settings.openrouter_api_key is None:
            raise MissingCredentialsError(provider=self.name, env_var="OPENROUTER_API_KEY")
        self.model, self.model_source = _resolve_model(model=model, settings=settings)
        self._fallback_models = [m for m in fallback_models if m != self.model]
        self._max_tokens = max_tokens
        self._temperature = temperature
        self._client = client or AsyncOpenAI(
            api_key=settings.openrouter_api_key, base_url=OPENROUTER_BASE_URL
        )

    async def complete(
        self,
        history: Sequence[HistoryEntry],
        tools: Sequence[ToolDefinition],
    ) -> ProviderTurn:
        kwargs: dict[str, Any] = {
            "model": self.model,
            "messages": to_chat_messages(history),
            "max_tokens": self._max_tokens,
            "temperature": self._temperature,
        }
        if tools:
            kwargs["tools"] = to_chat_tools(tools)
            kwargs["tool_choice"] = "auto"
        extra_body = self._routing()
        if extra_body:
            kwargs["extra_body"] = extra_body

        try:
            response = await self._client.chat.completions.create(**kwargs)
        except openai.APIError as exc:
            raise transport_error(provider=self.name, exc=exc, hint=_hint_for(exc)) from exc

        message = response.choices[0].message
        tokens_in, tokens_out = usage_tokens(response)
        return ProviderTurn(
            text=message.content or "",
            tool_calls=parse_tool_calls(message),
            tokens_in=tokens_in,
            tokens_out=tokens_out,
            model=getattr(response, "model", None) or self.model,
        )

    def _routing(self) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if self._fallback_models:
            body["models"] = [self.model, *self._fallback_models]
        if self.model.startswith("anthropic/"):
            body["provider"] = {"only": ["anthropic"]}
        return body


def _resolve_model(model: str | None, settings: HarnessSettings) -> tuple[str, ModelSource]:
    if model:
        return model, "parameter"
    if settings.openrouter_model:
        return settings.openrouter_model, "environment"
    return DEFAULT_OPENROUTER_MODEL, "default"


def _hint_for(exc: openai.APIError) -> str | None:
    message = str(exc)
    if "No allowed providers" in message:
        return "the model may not be available through the pinned provider; check the model id"
    if isinstance(exc, openai.APITimeoutError) or "timeout" in message.lower():
        return "the request timed out; try a faster model or fewer turns"
    if isinstance(exc, openai.RateLimitError) or "rate limit" in message.lower():
        return "rate limited; free-tier models are heavily throttled"
    return None
