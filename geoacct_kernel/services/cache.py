"""
Scoped cache -- key -> value store with TTL and explicit invalidation.

Responsibility:
    Holds derived reference data (account directory, cash-flow map) for a
    bounded time so report requests do not re-read storage on every call.

Architecture position:
    Kernel > Services.  One instance is created by whoever owns the
    request/process scope and injected into the services that use it.
    There is no module-level store.

Invariants enforced:
    - An entry is never returned after its expiry, as measured by the
      injected Clock.
    - ``invalidate``/``invalidate_prefix``/``clear`` take effect
      immediately for every holder of the instance.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from geoacct_kernel.domain.clock import Clock, SystemClock
from geoacct_kernel.logging_config import get_logger

logger = get_logger("services.cache")

T = TypeVar("T")


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    expirations: int = 0
    invalidations: int = 0


@dataclass(frozen=True, slots=True)
class _Entry:
    value: Any
    expires_at: float


class ScopedCache:
    """
    Thread-safe TTL cache.

    Args:
        default_ttl_seconds: TTL applied when ``set`` is called without one.
        clock: time source for expiry; SystemClock when omitted.
    """

    def __init__(self, default_ttl_seconds: float = 300, clock: Clock | None = None):
        if default_ttl_seconds <= 0:
            raise ValueError("default_ttl_seconds must be positive")
        self._default_ttl = default_ttl_seconds
        self._clock = clock or SystemClock()
        self._store: dict[str, _Entry] = {}
        self._lock = threading.RLock()
        self.stats = CacheStats()

    def get(self, key: str) -> Any | None:
        with self._lock:
            entry = self._store.get(key)
            if entry is None:
                self.stats.misses += 1
                return None
            if self._clock.monotonic_seconds() >= entry.expires_at:
                del self._store[key]
                self.stats.expirations += 1
                self.stats.misses += 1
                return None
            self.stats.hits += 1
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float | None = None) -> None:
        ttl = self._default_ttl if ttl_seconds is None else ttl_seconds
        if ttl <= 0:
            raise ValueError("ttl_seconds must be positive")
        with self._lock:
            self._store[key] = _Entry(value, self._clock.monotonic_seconds() + ttl)

    def get_or_load(
        self,
        key: str,
        loader: Callable[[], T],
        ttl_seconds: float | None = None,
    ) -> T:
        """Return the cached value, or call ``loader`` and cache its result."""
        with self._lock:
            value = self.get(key)
            if value is not None:
                return value
            value = loader()
            self.set(key, value, ttl_seconds)
            logger.debug("cache_loaded", extra={"cache_key": key})
            return value

    def invalidate(self, key: str) -> bool:
        with self._lock:
            removed = self._store.pop(key, None) is not None
            if removed:
                self.stats.invalidations += 1
        return removed

    def invalidate_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [k for k in self._store if k.startswith(prefix)]
            for k in keys:
                del self._store[k]
            self.stats.invalidations += len(keys)
        if keys:
            logger.info("cache_invalidated", extra={"prefix": prefix, "count": len(keys)})
        return len(keys)

    def clear(self) -> None:
        with self._lock:
            self.stats.invalidations += len(self._store)
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
