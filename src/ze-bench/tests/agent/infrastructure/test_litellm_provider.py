"""Tests for LiteLLMChatProvider."""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from ze_bench.agent.domain.message import Message
from ze_bench.agent.domain.tool import ToolDefinition
from ze_bench.agent.infrastructure.errors import MissingCredentialsError, ProviderTransportError
from ze_bench.agent.infrastructure.litellm_provider import DEFAULT_ANTHROPIC_MODEL, LiteLLMChatProvider
from ze_bench.config.domain.settings import HarnessSettings

_ACOMPLETION = "ze_bench.agent.infrastructure.litellm_provider.litellm.acompletion"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _make_response(content: str | None = "done", tool_calls: list | None = None) -> MagicMock:
    message = MagicMock()
    message.content = content
    message.tool_calls = tool_calls
    choice = MagicMock()
    choice.message = message
    response = MagicMock()
    response.choices = [choice]
    response.usage.prompt_tokens = 100
    response.usage.completion_tokens = 20
    return response


def _make_settings(**overrides: str) -> HarnessSettings:
    return HarnessSettings(anthropic_api_key="sk-test", **overrides)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_missing_api_key_raises(self) -> None:
        with pytest.raises(MissingCredentialsError, match="ANTHROPIC_API_KEY"):
            LiteLLMChatProvider(settings=HarnessSettings())

    def test_default_model(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())

        assert provider.model == DEFAULT_ANTHROPIC_MODEL

    def test_model_from_environment_is_qualified(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings(claude_model="claude-sonnet-4"))

        assert provider.model == "anthropic/claude-sonnet-4"

    def test_explicit_model_wins(self) -> None:
        provider = LiteLLMChatProvider(
            settings=_make_settings(claude_model="claude-sonnet-4"), model="anthropic/claude-opus-4"
        )

        assert provider.model == "anthropic/claude-opus-4"


# ---------------------------------------------------------------------------
# complete()
# ---------------------------------------------------------------------------


class TestComplete:
    async def test_returns_text_and_usage(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())
        mock = AsyncMock(return_value=_make_response(content="All done."))

        with patch(_ACOMPLETION, new=mock):
            turn = await provider.complete(history=[Message(role="user", content="hi")], tools=[])

        assert turn.text == "All done."
        assert turn.tool_calls == []
        assert (turn.tokens_in, turn.tokens_out) == (100, 20)
        assert turn.model == DEFAULT_ANTHROPIC_MODEL

    async def test_tools_are_sent_with_auto_choice(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())
        mock = AsyncMock(return_value=_make_response())
        tool = ToolDefinition(name="readFile", description="Read a file")

        with patch(_ACOMPLETION, new=mock):
            await provider.complete(history=[Message(role="user", content="hi")], tools=[tool])

        kwargs = mock.call_args.kwargs
        assert kwargs["tool_choice"] == "auto"
        assert kwargs["tools"][0]["function"]["name"] == "readFile"
        assert kwargs["api_key"] == "sk-test"

    async def test_no_tools_omits_tool_fields(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())
        mock = AsyncMock(return_value=_make_response())

        with patch(_ACOMPLETION, new=mock):
            await provider.complete(history=[Message(role="user", content="hi")], tools=[])

        assert "tools" not in mock.call_args.kwargs
        assert "tool_choice" not in mock.call_args.kwargs

    async def test_none_content_becomes_empty_text(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())

        with patch(_ACOMPLETION, new=AsyncMock(return_value=_make_response(content=None))):
            turn = await provider.complete(history=[Message(role="user", content="hi")], tools=[])

        assert turn.text == ""

    async def test_api_error_becomes_transport_error(self) -> None:
        provider = LiteLLMChatProvider(settings=_make_settings())
        request = httpx.Request("POST", "https://api.anthropic.com/v1/messages")
        error = openai.APIConnectionError(message="connection reset", request=request)

        with patch(_ACOMPLETION, new=AsyncMock(side_effect=error)):
            with pytest.raises(ProviderTransportError) as exc_info:
                await provider.complete(history=[Message(role="user", content="hi")], tools=[])

        assert exc_info.value.retriable is True
        assert exc_info.value.provider == "anthropic"
