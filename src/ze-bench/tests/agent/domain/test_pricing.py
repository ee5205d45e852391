"""Tests for static fallback pricing and model id normalization."""

import pytest

from ze_bench.agent.domain.pricing import FREE, ModelPricing, fallback_pricing, normalize_model_id


class TestFallbackPricing:
    @pytest.mark.parametrize(
        ("model", "prompt"),
        [
            ("openai/gpt-4o-mini", 5e-6),
            ("openai/gpt-4-turbo", 3e-5),
            ("anthropic/claude-3-7-sonnet", 3e-6),
            ("meta-llama/llama-3-70b", 8e-7),
        ],
    )
    def test_substring_match(self, model: str, prompt: float) -> None:
        assert fallback_pricing(model).prompt == pytest.approx(prompt)

    def test_first_match_wins(self) -> None:
        # "gpt-4o" must not fall through to the more general "gpt-4" row.
        assert fallback_pricing("gpt-4o").completion == pytest.approx(15e-6)

    def test_unknown_model_is_free(self) -> None:
        assert fallback_pricing("mystery-model") == FREE


class TestModelPricing:
    def test_cost(self) -> None:
        pricing = ModelPricing(prompt=1e-6, completion=2e-6)

        assert pricing.cost(tokens_in=1_000, tokens_out=500) == pytest.approx(0.002)


def test_normalize_strips_gateway_prefix() -> None:
    assert normalize_model_id("openrouter/anthropic/claude-3.5-sonnet") == "anthropic/claude-3.5-sonnet"
    assert normalize_model_id("anthropic/claude-3.5-sonnet") == "anthropic/claude-3.5-sonnet"
