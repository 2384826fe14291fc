"""
Series Cache - short-TTL store for resolved series.

Key: (dataset, indicator, area, start, end, frequency)
Value: the normalized points of a successful, non-empty resolution.

Entries are replaced wholesale, never edited. A stale entry is ignored by
get() and left in place until the next set() for the same key overwrites
it. Empty results are never stored so a transient upstream failure is not
remembered as "no data".
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from config import config
from sources.base import SeriesPoint


@dataclass(frozen=True)
class CacheEntry:
    """Single cache entry: when it was stored and what."""
    timestamp: float
    points: Tuple[SeriesPoint, ...]


def series_cache_key(request) -> str:
    """Composite key for a DataRequest."""
    return (
        f"imf:{request.flow_ref}:{request.indicator}:{request.area}:"
        f"{request.start_period or ''}:{request.end_period or ''}:{request.frequency}"
    )


class SeriesCache:
    """
    TTL cache of SeriesPoint lists.

    Bounded by max_size (oldest insertions evicted first); TTL expiry itself
    never deletes anything.
    """

    def __init__(
        self,
        ttl: Optional[float] = None,
        max_size: Optional[int] = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            ttl: Seconds an entry stays fresh (default: config.series_cache_ttl, 6h)
            max_size: Maximum number of entries
            clock: Time source in seconds, injectable for tests
        """
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._ttl = float(config.series_cache_ttl if ttl is None else ttl)
        self._max_size = config.series_cache_size if max_size is None else max_size
        self._clock = clock
        self._hits = 0
        self._misses = 0

    @property
    def ttl(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[List[SeriesPoint]]:
        """Points if present and not older than the TTL, else None."""
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.timestamp > self._ttl:
            self._misses += 1
            return None
        self._hits += 1
        return list(entry.points)

    def set(self, key: str, points: List[SeriesPoint]) -> None:
        """Store a fresh entry. Empty point lists are ignored."""
        if not points:
            return
        if key in self._entries:
            del self._entries[key]
        while len(self._entries) >= self._max_size > 0:
            self._entries.popitem(last=False)
        self._entries[key] = CacheEntry(timestamp=self._clock(), points=tuple(points))

    def clear(self) -> None:
        """Clear all entries."""
        self._entries.clear()

    def stats(self) -> dict:
        """Get cache statistics."""
        now = self._clock()
        fresh = sum(1 for e in self._entries.values() if now - e.timestamp <= self._ttl)
        return {
            'total_entries': len(self._entries),
            'fresh_entries': fresh,
            'stale_entries': len(self._entries) - fresh,
            'max_size': self._max_size,
            'ttl_seconds': self._ttl,
            'hits': self._hits,
            'misses': self._misses,
        }


# Global cache instance
series_cache = SeriesCache()
