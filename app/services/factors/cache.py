"""
In-memory TTL cache for resolved emission factors.

The cache is an explicit object owned by whoever builds the resolver, so
tests can inject a fake clock or disable caching with ``NullFactorCache``.
Entries expire lazily: an expired entry is dropped by the lookup that finds it.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Callable

from app.utils.constants import FACTOR_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)


def make_cache_key(category: str, type_: str, region: str | None = None) -> str:
    """
    Build the cache key for a factor lookup.

    Example:
        >>> make_cache_key("fuels", "diesel")
        'fuels:diesel:default'
    """
    return f"{category}:{type_}:{region or 'default'}"


@dataclass
class CacheEntry:
    data: Any
    timestamp: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class FactorCache:
    """
    Key/value cache with a per-entry time-to-live.

    Plain dict, no locking: concurrent writers for the same key store the
    same record, so the last write wins.
    """

    def __init__(
        self,
        ttl: float = FACTOR_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl = ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None

        if not entry.is_valid(self._clock()):
            logger.debug(f"Cache entry expired: {key}")
            del self._entries[key]
            return None

        return entry.data

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        self._entries[key] = CacheEntry(
            data=value,
            timestamp=self._clock(),
            ttl=self.ttl if ttl is None else ttl,
        )

    def clear(self) -> None:
        logger.info(f"Clearing factor cache ({len(self._entries)} entries)")
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None


class NullFactorCache(FactorCache):
    """Cache that never stores anything."""

    def __init__(self):
        super().__init__(ttl=0)

    def get(self, key: str) -> Any | None:
        return None

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        return None
