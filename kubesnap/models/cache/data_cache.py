"""Keyed TTL cache with partial refresh."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable, Hashable, Iterable
from dataclasses import dataclass, field
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[K, V]):
    """Values refreshed together and the time of the last refresh."""

    timestamp: float
    values: dict[K, V] = field(default_factory=dict)


class KeyedTTLCache(Generic[K, V]):
    """TTL-gated key/value map that fetches only what it is missing.

    One timestamp covers the whole entry. A lookup against an entry whose
    age has reached the TTL treats every requested key as missing and
    replaces the entry. A lookup against a fresh entry fetches only the
    requested keys the entry lacks, merges them in and refreshes the
    timestamp. A refresh in which every fetch failed leaves the timestamp
    alone, so earlier values still expire on schedule.

    Lookups and invalidation are serialized by one lock, so at most one
    refresh per cache instance is in flight.
    """

    def __init__(
        self,
        ttl: float,
        fetch_one: Callable[[K], Awaitable[V | None]],
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ) -> None:
        self.ttl = ttl
        self.name = name
        self._fetch_one = fetch_one
        self._clock = clock
        self._entry: CacheEntry[K, V] | None = None
        self._lock = asyncio.Lock()

    async def lookup(self, keys: Iterable[K]) -> dict[K, V]:
        """Return cached or freshly fetched values for ``keys``.

        Keys whose fetch fails or yields None are absent from the result and
        are fetched again on the next lookup.
        """
        requested = list(dict.fromkeys(keys))
        if not requested:
            return {}

        async with self._lock:
            now = self._clock()
            entry = self._entry
            stale = entry is None or now - entry.timestamp >= self.ttl
            if stale:
                merged: dict[K, V] = {}
                missing = requested
            else:
                merged = entry.values
                missing = [key for key in requested if key not in merged]

            if missing:
                logger.debug("%s: fetching %d of %d keys", self.name, len(missing), len(requested))
                fetched = await self._fetch_missing(missing)
                if fetched:
                    merged = {**merged, **fetched}
                    self._entry = CacheEntry(timestamp=now, values=merged)
                elif stale:
                    self._entry = None

            return {key: merged[key] for key in requested if key in merged}

    async def invalidate(self) -> None:
        """Drop the entry so the next lookup fetches everything."""
        async with self._lock:
            self._entry = None

    def peek(self) -> dict[K, V]:
        """Snapshot of the cached values regardless of age."""
        entry = self._entry
        return dict(entry.values) if entry is not None else {}

    def is_fresh(self) -> bool:
        """Whether an entry exists and is younger than the TTL."""
        entry = self._entry
        return entry is not None and self._clock() - entry.timestamp < self.ttl

    async def _fetch_missing(self, missing: list[K]) -> dict[K, V]:
        results = await asyncio.gather(
            *(self._fetch_one(key) for key in missing),
            return_exceptions=True,
        )
        fetched: dict[K, V] = {}
        for key, result in zip(missing, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.debug("%s: fetch for %r failed: %s", self.name, key, result)
                continue
            if result is not None:
                fetched[key] = result
        return fetched


__all__ = ["CacheEntry", "KeyedTTLCache"]
