"""Per-token model pricing and the static fallback used when live prices are unavailable."""

from typing import Protocol

from pydantic import BaseModel, Field


class ModelPricing(BaseModel, frozen=True):
    """USD price per single token."""

    prompt: float = Field(ge=0.0)
    completion: float = Field(ge=0.0)

    def cost(self, tokens_in: int, tokens_out: int) -> float:
        return tokens_in * self.prompt + tokens_out * self.completion


FREE = ModelPricing(prompt=0.0, completion=0.0)

# Ordered: the first substring contained in the model id wins.
_FALLBACK_PRICING: tuple[tuple[str, ModelPricing], ...] = (
    ("gpt-4o", ModelPricing(prompt=5e-6, completion=15e-6)),
    ("gpt-4", ModelPricing(prompt=3e-5, completion=6e-5)),
    ("gpt-3.5", ModelPricing(prompt=1.5e-6, completion=2e-6)),
    ("llama", ModelPricing(prompt=8e-7, completion=8e-7)),
    ("claude", ModelPricing(prompt=3e-6, completion=15e-6)),
    ("gemma", ModelPricing(prompt=5e-7, completion=5e-7)),
)


def fallback_pricing(model: str) -> ModelPricing:
    """Static price for *model* by substring match; unknown models are free."""
    lowered = model.lower()
    for fragment, pricing in _FALLBACK_PRICING:
        if fragment in lowered:
            return pricing
    return FREE


def normalize_model_id(model: str) -> str:
    """Strip routing prefixes so ids line up with the gateway's catalogue."""
    return model.removeprefix("openrouter/")


class PricingSource(Protocol):
    """Fetches the live price list, keyed by model id."""

    async def fetch(self) -> dict[str, ModelPricing]: ...


class CostEstimator(Protocol):
    """Prices cumulative token usage for a model."""

    def schedule_refresh(self) -> None: ...

    async def cost(self, model: str, tokens_in: int, tokens_out: int) -> float: ...
