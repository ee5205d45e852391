"""Tests for HarnessSettings.from_env."""

import pytest
from pydantic import ValidationError

from ze_bench.config.domain.settings import DEFAULT_JUDGE_MODEL, DEFAULT_JUDGE_TEMPERATURE, HarnessSettings


class TestFromEnv:
    def test_defaults(self) -> None:
        settings = HarnessSettings.from_env({})

        assert settings.anthropic_api_key is None
        assert settings.judge_model == DEFAULT_JUDGE_MODEL
        assert settings.judge_temperature == DEFAULT_JUDGE_TEMPERATURE
        assert settings.judge_max_tokens is None

    def test_blank_values_count_as_unset(self) -> None:
        settings = HarnessSettings.from_env({"ANTHROPIC_API_KEY": "   ", "LLM_JUDGE_MODEL": ""})

        assert settings.anthropic_api_key is None
        assert settings.judge_model == DEFAULT_JUDGE_MODEL

    def test_reads_every_variable(self) -> None:
        settings = HarnessSettings.from_env(
            {
                "ANTHROPIC_API_KEY": "sk-a",
                "OPENROUTER_API_KEY": "sk-o",
                "CLAUDE_MODEL": "claude-sonnet-4",
                "OPENROUTER_MODEL": "openai/gpt-4o",
                "LLM_JUDGE_MODEL": "openrouter/anthropic/claude-3.5-sonnet",
                "LLM_JUDGE_TEMPERATURE": "0",
                "LLM_JUDGE_MAX_TOKENS": "4096",
            }
        )

        assert settings.claude_model == "claude-sonnet-4"
        assert settings.openrouter_model == "openai/gpt-4o"
        assert settings.judge_temperature == 0.0
        assert settings.judge_max_tokens == 4096

    def test_out_of_range_temperature(self) -> None:
        with pytest.raises(ValidationError):
            HarnessSettings.from_env({"LLM_JUDGE_TEMPERATURE": "3.5"})
