"""In-memory response caching for cakewalk.

This package provides :class:`ResponseCache`, the per-client TTL map that
memoises successful API results. Entries are keyed by the string cache keys
the typed accessors build and expire ``ttl_seconds`` after they were stored.

The cache is owned by :class:`~cakewalk.client.base.CachedApiClient` and
lives only as long as the client instance; nothing is written to disk.
"""

from cakewalk.cache.cache import CacheEntry, ResponseCache

__all__ = ["CacheEntry", "ResponseCache"]
