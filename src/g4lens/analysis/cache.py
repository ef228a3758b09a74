"""Bounded, time-limited cache of analysis results.

Entries expire ``ttl`` seconds after they were stored; expired entries
are dropped when looked up.  When a store pushes the cache past
``max_entries``, the oldest stored entries are evicted first.  Lookups do
not refresh an entry's position.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Final

from g4lens.models import AnalysisResult

logger = logging.getLogger(__name__)

DEFAULT_TTL: Final[float] = 300.0
DEFAULT_MAX_ENTRIES: Final[int] = 10


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """A stored result with the hash and time it was stored under."""

    result: AnalysisResult
    hash: str
    timestamp: float


class AnalysisCache:
    """Thread-safe insertion-ordered result cache.

    Parameters
    ----------
    ttl:
        Seconds an entry stays valid.
    max_entries:
        Maximum number of entries kept after a store.
    clock:
        Zero-argument callable returning the current time in seconds.
        Defaults to ``time.monotonic``; tests inject a fake clock.

    Example
    -------
    ::

        cache = AnalysisCache(ttl=60)
        cache.put(key, result)
        cache.get(key)  # result, until 60 seconds have passed
    """

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError(f"max_entries must be at least 1, got {max_entries}")
        self._ttl = ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: dict[Hashable, CacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> float:
        return self._ttl

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def get(self, key: Hashable) -> AnalysisResult | None:
        """Return the live result stored under ``key``, or None."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                logger.debug("Cache miss for %r", key)
                return None
            if self._clock() - entry.timestamp > self._ttl:
                del self._entries[key]
                logger.debug("Cache entry for %r expired", key)
                return None
            logger.debug("Cache hit for %r", key)
            return entry.result

    def put(self, key: Hashable, result: AnalysisResult) -> None:
        """Store ``result`` under ``key``, evicting the oldest entries if full."""
        with self._lock:
            # Re-storing a key moves it to the back of the eviction order.
            self._entries.pop(key, None)
            self._entries[key] = CacheEntry(
                result=result,
                hash=result.grammar_hash,
                timestamp=self._clock(),
            )
            while len(self._entries) > self._max_entries:
                oldest = next(iter(self._entries))
                del self._entries[oldest]
                logger.debug("Evicted cache entry for %r", oldest)

    def clear(self) -> None:
        """Drop every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
