"""Generic TTL cache with lazy expiry on read and an eager sweep."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_TTL_S = 3600.0

type Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry[T]:
    value: T
    expires_at: float


class TtlCache[T]:
    """Maps string keys to values of one kind, each expiring *ttl_s* after it was set.

    All operations hold an internal lock and never await, so a single instance
    can be shared by concurrent scenario runs whether they are tasks on one
    event loop or threads.
    """

    def __init__(self, ttl_s: float = DEFAULT_TTL_S, clock: Clock = time.monotonic) -> None:
        if ttl_s <= 0:
            raise ValueError(f"ttl_s must be positive, got {ttl_s}")
        self._ttl_s = ttl_s
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_s(self) -> float:
        return self._ttl_s

    def get(self, key: str) -> T | None:
        """Return the live value for *key*, deleting it if it has expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[key]
                return None
            return entry.value

    def set(self, key: str, value: T) -> None:
        entry = CacheEntry(value=value, expires_at=self._clock() + self._ttl_s)
        with self._lock:
            self._entries[key] = entry

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def size(self) -> int:
        """Number of stored entries, including expired ones not yet swept."""
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup_expired(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)
