"""PricingCatalog — live per-model prices memoized in the ResultCache, with a static fallback."""

import asyncio
import time

import httpx

from ze_bench.agent.domain.observer import PricingObserver
from ze_bench.agent.domain.pricing import (
    ModelPricing,
    PricingSource,
    fallback_pricing,
    normalize_model_id,
)
from ze_bench.cache.domain.result_cache import CacheNamespace, ResultCache

OPENROUTER_MODELS_URL = "https://openrouter.ai/api/v1/models"

MODEL_PRICES: CacheNamespace[ModelPricing] = CacheNamespace("pricing")

_FETCH_TIMEOUT_S = 10.0
_RETRY_AFTER_FAILURE_S = 300.0


class OpenRouterPricingSource:
    """Reads per-token prompt/completion prices from the OpenRouter model list."""

    def __init__(self, url: str = OPENROUTER_MODELS_URL, timeout_s: float = _FETCH_TIMEOUT_S) -> None:
        self._url = url
        self._timeout_s = timeout_s

    async def fetch(self) -> dict[str, ModelPricing]:
        async with httpx.AsyncClient(timeout=self._timeout_s) as client:
            response = await client.get(self._url)
            response.raise_for_status()
            payload = response.json()

        data = payload.get("data", []) if isinstance(payload, dict) else None
        if not isinstance(data, list):
            raise ValueError("model list payload is not an object with a 'data' array")

        prices: dict[str, ModelPricing] = {}
        for entry in data:
            if not isinstance(entry, dict):
                raise ValueError(f"model list entry is not an object: {entry!r}")
            model_id = entry.get("id")
            if not isinstance(model_id, str) or not model_id:
                continue
            pricing = entry.get("pricing")
            if not isinstance(pricing, dict):
                pricing = {}
            try:
                prices[model_id] = ModelPricing(
                    prompt=float(pricing.get("prompt", 0) or 0),
                    completion=float(pricing.get("completion", 0) or 0),
                )
            except (TypeError, ValueError):
                # Negative "variable" sentinel prices and malformed entries are skipped.
                continue
        return prices


class PricingCatalog:
    """Resolves the per-token price of a model.

    Live prices come from a PricingSource and are stored in the shared
    ResultCache; refreshes are single-flight and may be started in the
    background with ``schedule_refresh`` so that the price is usually known
    by the time a conversation ends. When the source is unreachable or does
    not list the model, the static substring table is used instead.
    """

    def __init__(
        self,
        cache: ResultCache,
        observer: PricingObserver,
        source: PricingSource | None = None,
    ) -> None:
        self._prices = cache.namespace(MODEL_PRICES)
        self._observer = observer
        self._source = source if source is not None else OpenRouterPricingSource()
        self._refresh_lock = asyncio.Lock()
        self._last_failure_at: float | None = None
        self._last_success_at: float | None = None
        self._background: set[asyncio.Task[None]] = set()

    def schedule_refresh(self) -> None:
        """Start refreshing live prices without waiting for the result."""
        task = asyncio.get_running_loop().create_task(self._refresh())
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    async def price_for(self, model: str) -> ModelPricing:
        model_id = normalize_model_id(model)
        cached = self._prices.get(model_id)
        if cached is not None:
            return cached
        await self._refresh()
        cached = self._prices.get(model_id)
        return cached if cached is not None else fallback_pricing(model_id)

    async def cost(self, model: str, tokens_in: int, tokens_out: int) -> float:
        """USD cost of *tokens_in* prompt and *tokens_out* completion tokens on *model*."""
        pricing = await self.price_for(model)
        return pricing.cost(tokens_in=tokens_in, tokens_out=tokens_out)

    async def _refresh(self) -> None:
        async with self._refresh_lock:
            if self._recently_failed() or self._recently_refreshed():
                return
            try:
                prices = await self._source.fetch()
            except (httpx.HTTPError, ValueError) as exc:
                self._last_failure_at = time.monotonic()
                self._observer.pricing_refresh_failed(reason=str(exc) or type(exc).__name__)
                return
            for model_id, pricing in prices.items():
                self._prices.set(model_id, pricing)
            self._last_failure_at = None
            self._last_success_at = time.monotonic()
            self._observer.pricing_refreshed(models=len(prices))

    def _recently_refreshed(self) -> bool:
        return (
            self._last_success_at is not None
            and time.monotonic() - self._last_success_at < self._prices.ttl_s
        )

    def _recently_failed(self) -> bool:
        return (
            self._last_failure_at is not None
            and time.monotonic() - self._last_failure_at < _RETRY_AFTER_FAILURE_S
        )
