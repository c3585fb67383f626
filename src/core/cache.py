"""TTL cache for derived views (core domain).

Entries are spread over a fixed number of stripes, each guarded by its own
lock, so request threads and the background sweeper only contend when they
touch keys that hash to the same stripe. Expiry is the only eviction policy.
"""

from __future__ import annotations

import logging
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Hashable, List

LOGGER = logging.getLogger(__name__)


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Any = _Miss()


class ViewKind(str, Enum):
    """Kinds of derived views; each kind has a fixed TTL."""

    TAGS = "tags"
    IMAGES = "images"
    FEED = "feed"


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the instant (on the cache clock) it stops being valid."""

    key: Hashable
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


@dataclass
class CacheStats:
    entries: int
    hits: int
    misses: int
    swept: int


@dataclass
class _Stripe:
    lock: threading.Lock = field(default_factory=threading.Lock)
    entries: Dict[Hashable, CacheEntry] = field(default_factory=dict)


class DerivedViewCache:
    """Concurrency-safe key/value cache with per-entry expiry."""

    def __init__(self, stripes: int = 16, clock: Callable[[], float] = time.monotonic) -> None:
        if stripes < 1:
            raise ValueError(f"stripes must be at least 1, got {stripes}")
        self._stripes: List[_Stripe] = [_Stripe() for _ in range(stripes)]
        self._clock = clock
        self._stats_lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._swept = 0

    def _stripe(self, key: Hashable) -> _Stripe:
        return self._stripes[hash(key) % len(self._stripes)]

    def get(self, key: Hashable) -> Any:
        """Return the cached value, or ``MISS`` if absent or expired."""

        stripe = self._stripe(key)
        now = self._clock()
        with stripe.lock:
            entry = stripe.entries.get(key)
            if entry is not None and entry.is_expired(now):
                del stripe.entries[key]
                entry = None
        self._record(hit=entry is not None)
        if entry is None:
            return MISS
        return entry.value

    def put(self, key: Hashable, value: Any, ttl_seconds: float) -> CacheEntry:
        """Store ``value`` until ``now + ttl_seconds``, replacing any previous entry."""

        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        entry = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl_seconds)
        stripe = self._stripe(key)
        with stripe.lock:
            stripe.entries[key] = entry
        return entry

    def invalidate(self, key: Hashable) -> bool:
        stripe = self._stripe(key)
        with stripe.lock:
            return stripe.entries.pop(key, None) is not None

    def clear(self) -> None:
        for stripe in self._stripes:
            with stripe.lock:
                stripe.entries.clear()

    def sweep(self) -> int:
        """Remove expired entries and return how many were removed.

        Each stripe is locked only while it is scanned. The decision uses the
        entry currently stored under the key, so a value refreshed after the
        sweep started carries its new expiry and survives.
        """

        removed = 0
        for stripe in self._stripes:
            now = self._clock()
            with stripe.lock:
                expired = [key for key, entry in stripe.entries.items() if entry.is_expired(now)]
                for key in expired:
                    del stripe.entries[key]
            removed += len(expired)
        if removed:
            with self._stats_lock:
                self._swept += removed
            LOGGER.debug("Cache sweep removed %s expired entries", removed)
        return removed

    def __len__(self) -> int:
        total = 0
        for stripe in self._stripes:
            with stripe.lock:
                total += len(stripe.entries)
        return total

    def stats(self) -> CacheStats:
        entries = len(self)
        with self._stats_lock:
            return CacheStats(entries=entries, hits=self._hits, misses=self._misses, swept=self._swept)

    def _record(self, hit: bool) -> None:
        with self._stats_lock:
            if hit:
                self._hits += 1
            else:
                self._misses += 1
