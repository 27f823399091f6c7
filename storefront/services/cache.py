# storefront/services/cache.py

import time
import logging
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

DEFAULT_TTL_MS = 5 * 60 * 1000


class _Miss:
    """Sentinel returned on a cache miss; distinct from any cached value, falsy ones included."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self):
        return False

    def __repr__(self):
        return "MISS"


MISS = _Miss()


class ReadThroughCache:
    """
    In-memory key -> (value, expires_at) map for slow-changing catalog reads.

    Expiry is lazy: an entry is only evicted when a read finds it stale. There
    is no background sweep, so memory grows with the number of distinct keys.
    The clock is injectable (seconds, monotonic) so expiry can be simulated.
    """

    def __init__(self, default_ttl_ms: int = DEFAULT_TTL_MS, clock: Callable[[], float] = time.monotonic):
        self.default_ttl_ms = default_ttl_ms
        self._clock = clock
        self._store: Dict[str, Tuple[Any, float]] = {}
        self.cache_stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "expirations": 0
        }

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def set(self, key: str, value: Any, ttl_ms: Optional[int] = None) -> None:
        """
        Store a value with an absolute expiry.

        Args:
            key: Cache key
            value: Any value, including None or empty containers
            ttl_ms: Time to live in milliseconds (defaults to default_ttl_ms)
        """
        if ttl_ms is None:
            ttl_ms = self.default_ttl_ms
        self._store[key] = (value, self._now_ms() + ttl_ms)
        self.cache_stats["sets"] += 1
        logger.debug(f"Cached {key} for {ttl_ms}ms")

    def get(self, key: str, default: Any = MISS) -> Any:
        """
        Get a cached value.

        Returns the value while now <= expires_at; otherwise evicts the entry
        and returns ``default`` (the ``MISS`` sentinel unless overridden).
        """
        entry = self._store.get(key)
        if entry is None:
            self.cache_stats["misses"] += 1
            return default

        value, expires_at = entry
        if self._now_ms() > expires_at:
            del self._store[key]
            self.cache_stats["expirations"] += 1
            self.cache_stats["misses"] += 1
            logger.debug(f"Expired cache entry removed: {key}")
            return default

        self.cache_stats["hits"] += 1
        return value

    def get_or_load(self, key: str, loader: Callable[[], Any], ttl_ms: Optional[int] = None) -> Any:
        """Return the cached value for ``key``, calling ``loader`` and caching its result on a miss."""
        value = self.get(key)
        if value is not MISS:
            return value

        value = loader()
        self.set(key, value, ttl_ms)
        return value

    def clear(self, key: Optional[str] = None) -> None:
        """Remove one entry, or every entry when no key is given."""
        if key is not None:
            self._store.pop(key, None)
            return
        cleared = len(self._store)
        self._store.clear()
        logger.info(f"Cleared {cleared} cache entries")

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not MISS

    def __len__(self) -> int:
        return len(self._store)

    def get_cache_stats(self) -> Dict[str, Any]:
        """Get cache statistics."""
        total_requests = self.cache_stats["hits"] + self.cache_stats["misses"]
        hit_rate = (self.cache_stats["hits"] / total_requests * 100) if total_requests > 0 else 0

        return {
            "size": len(self._store),
            "hit_rate_percent": round(hit_rate, 2),
            "total_hits": self.cache_stats["hits"],
            "total_misses": self.cache_stats["misses"],
            "total_sets": self.cache_stats["sets"],
            "total_expirations": self.cache_stats["expirations"],
            "default_ttl_ms": self.default_ttl_ms
        }
