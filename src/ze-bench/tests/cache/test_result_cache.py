"""Tests for ResultCache namespaces and cache_key."""

from ze_bench.cache.domain.result_cache import CacheNamespace, ResultCache, cache_key

VERDICTS: CacheNamespace[str] = CacheNamespace("judge")
PRICES: CacheNamespace[float] = CacheNamespace("pricing")


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TestNamespaces:
    def test_same_namespace_returns_same_cache(self) -> None:
        cache = ResultCache()

        assert cache.namespace(VERDICTS) is cache.namespace(VERDICTS)

    def test_namespaces_are_isolated(self) -> None:
        cache = ResultCache()
        cache.namespace(VERDICTS).set("k", "verdict")

        assert cache.namespace(PRICES).get("k") is None

    def test_stats_per_namespace(self) -> None:
        cache = ResultCache()
        cache.namespace(VERDICTS).set("a", "1")
        cache.namespace(VERDICTS).set("b", "2")
        cache.namespace(PRICES).set("m", 0.5)

        assert cache.stats() == {"judge": 2, "pricing": 1}


class TestSharedPolicy:
    def test_cleanup_sweeps_every_namespace(self) -> None:
        clock = FakeClock()
        cache = ResultCache(ttl_s=60.0, clock=clock)
        cache.namespace(VERDICTS).set("a", "1")
        cache.namespace(PRICES).set("m", 0.5)
        clock.now = 61.0

        assert cache.cleanup_expired() == 2
        assert cache.stats() == {"judge": 0, "pricing": 0}

    def test_clear(self) -> None:
        cache = ResultCache()
        cache.namespace(VERDICTS).set("a", "1")
        cache.clear()

        assert cache.stats() == {"judge": 0}


class TestCacheKey:
    def test_stable(self) -> None:
        assert cache_key("model", "prompt") == cache_key("model", "prompt")

    def test_part_boundaries_matter(self) -> None:
        assert cache_key("ab", "c") != cache_key("a", "bc")

    def test_is_sha256_hex(self) -> None:
        assert len(cache_key("x")) == 64
