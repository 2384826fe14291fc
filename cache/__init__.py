"""Cache module - short-TTL series cache."""

from .cache_manager import CacheEntry, SeriesCache, series_cache, series_cache_key

__all__ = ['CacheEntry', 'SeriesCache', 'series_cache', 'series_cache_key']
