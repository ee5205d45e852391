"""ResultCache — namespaced TTL caches for memoizing expensive LLM and network calls."""

import hashlib
import threading
import time
from dataclasses import dataclass
from typing import Any

from ze_bench.cache.domain.ttl_cache import DEFAULT_TTL_S, Clock, TtlCache


@dataclass(frozen=True)
class CacheNamespace[T]:
    """Typed handle for one logical cache.

    Consumers declare a module-level constant such as
    ``JUDGE_VERDICTS: CacheNamespace[JudgeVerdict] = CacheNamespace("judge")``
    and always get back a ``TtlCache[JudgeVerdict]`` for it.
    """

    name: str


class ResultCache:
    """One TTL policy shared by a set of per-kind caches."""

    def __init__(self, ttl_s: float = DEFAULT_TTL_S, clock: Clock = time.monotonic) -> None:
        self._ttl_s = ttl_s
        self._clock = clock
        self._caches: dict[str, TtlCache[Any]] = {}
        self._lock = threading.Lock()

    def namespace[T](self, namespace: CacheNamespace[T]) -> TtlCache[T]:
        """Return the cache for *namespace*, creating it on first use."""
        with self._lock:
            cache = self._caches.get(namespace.name)
            if cache is None:
                cache = TtlCache(ttl_s=self._ttl_s, clock=self._clock)
                self._caches[namespace.name] = cache
            return cache

    def stats(self) -> dict[str, int]:
        """Entry count per namespace."""
        with self._lock:
            caches = dict(self._caches)
        return {name: cache.size() for name, cache in sorted(caches.items())}

    def cleanup_expired(self) -> int:
        with self._lock:
            caches = list(self._caches.values())
        return sum(cache.cleanup_expired() for cache in caches)

    def clear(self) -> None:
        with self._lock:
            caches = list(self._caches.values())
        for cache in caches:
            cache.clear()


def cache_key(*parts: str) -> str:
    """Stable SHA-256 digest of *parts*, usable as a cache key across processes."""
    digest = hashlib.sha256()
    for part in parts:
        digest.update(part.encode("utf-8"))
        digest.update(b"\x00")
    return digest.hexdigest()
