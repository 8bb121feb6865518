"""Time-to-live cache for decoded API results.

Entries are immutable :class:`CacheEntry` records holding the cached value
and an absolute expiry timestamp. An entry is fresh while its deadline is
strictly greater than the current clock reading; stale entries are left in
place until the next successful fetch for the same key overwrites them or
they are removed explicitly.

The clock is injectable so that expiry can be exercised without sleeping.

See Also:
    :class:`~cakewalk.models.ClientOptions` -- the ``cache_ttl`` setting
    that feeds ``ttl_seconds``.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the epoch second at which it stops being fresh."""

    value: Any
    expires_at: float


class ResponseCache:
    """In-memory TTL cache keyed by accessor cache keys.

    Only successful results are ever stored; the client never calls
    :meth:`set` for a failed fetch.

    Args:
        ttl_seconds: Lifetime of an entry in seconds. ``0`` stores entries
            that are already stale.
        clock: Zero-argument callable returning the current epoch time in
            seconds. Defaults to :func:`time.time`.

    Example::

        cache = ResponseCache(ttl_seconds=300)
        cache.set("categories", [{"slug": "news", "name": "News"}])
        hit = cache.get("categories")
    """

    def __init__(
        self,
        ttl_seconds: float,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock or time.time
        self._entries: dict[str, CacheEntry] = {}

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Optional[CacheEntry]:
        """Return the entry for *key* if it is still fresh, else ``None``."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expires_at > self._clock():
            return entry
        return None

    def set(self, key: str, value: Any) -> CacheEntry:
        """Store *value* under *key*, replacing any previous entry.

        Returns:
            The newly stored :class:`CacheEntry`.
        """
        entry = CacheEntry(value=value, expires_at=self._clock() + self._ttl)
        self._entries[key] = entry
        return entry

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key*. Missing keys are ignored."""
        self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove all entries."""
        self._entries.clear()

    def keys(self) -> list[str]:
        """Return the stored keys, fresh or stale."""
        return list(self._entries)

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Returns:
            A ``dict`` with ``size`` (stored entries, including stale
            ones), ``fresh`` (entries still within their TTL) and
            ``ttl_seconds``.
        """
        now = self._clock()
        fresh = sum(1 for entry in self._entries.values() if entry.expires_at > now)
        return {
            "size": len(self._entries),
            "fresh": fresh,
            "ttl_seconds": self._ttl,
        }

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
