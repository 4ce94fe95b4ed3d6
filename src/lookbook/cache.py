"""In-memory cache for detail records.

Detail lookups read through this cache, which is what prefetching warms:
a neighbour fetched ahead of time is served without a round trip when the
user steps to it.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import Any

import structlog

log = structlog.get_logger()


@dataclass
class CacheStats:
    """Cache performance counters."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    expirations: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "evictions": self.evictions,
            "expirations": self.expirations,
            "hit_rate": round(self.hit_rate, 4),
        }


@dataclass
class CacheEntry[T]:
    value: T
    expires_at: float
    created_at: float = field(default_factory=time.monotonic)

    @property
    def is_expired(self) -> bool:
        return time.monotonic() >= self.expires_at


class LRUCache[T]:
    """LRU cache with per-entry TTL.

    Safe for a single event loop; there is no locking.
    """

    def __init__(self, maxsize: int = 500, default_ttl: float = 300.0) -> None:
        self._entries: OrderedDict[str, CacheEntry[T]] = OrderedDict()
        self._maxsize = maxsize
        self._default_ttl = default_ttl
        self.stats = CacheStats()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.is_expired

    def get(self, key: str) -> T | None:
        """Cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is None:
            self.stats.misses += 1
            return None
        if entry.is_expired:
            del self._entries[key]
            self.stats.expirations += 1
            self.stats.misses += 1
            return None
        self._entries.move_to_end(key)
        self.stats.hits += 1
        return entry.value

    def set(self, key: str, value: T, ttl: float | None = None) -> None:
        ttl = self._default_ttl if ttl is None else ttl
        if key in self._entries:
            self._entries.move_to_end(key)
        self._entries[key] = CacheEntry(value=value, expires_at=time.monotonic() + ttl)
        while len(self._entries) > self._maxsize:
            evicted, _ = self._entries.popitem(last=False)
            self.stats.evictions += 1
            log.debug("cache_evicted", key=evicted)

    def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()


def slug_key(entity_type: str, slug: str) -> str:
    return f"{entity_type.lower()}:{slug}"
