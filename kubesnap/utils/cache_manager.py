"""CacheManager - partitioned caches owned by one cluster client.

Each client instance owns its own manager; there is no process-wide
singleton. Caches are partitioned by the scope they describe:

    node stats          one cache per context, keyed by node name
    secret permissions  one cache per (context, namespace), keyed by secret

Usage:
    manager = CacheManager(node_stats_ttl=15.0, permission_ttl=60.0)
    cache = manager.node_stats("prod", fetch_summary)
    summaries = await cache.lookup(["node-a", "node-b"])
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable, Hashable
from typing import Any

from kubesnap.constants.defaults import (
    NODE_STATS_CACHE_TTL_DEFAULT,
    SECRET_PERMISSION_CACHE_TTL_DEFAULT,
)
from kubesnap.models.cache.data_cache import KeyedTTLCache

logger = logging.getLogger(__name__)


class CacheManager:
    """Creates and invalidates the partitioned caches of one client."""

    def __init__(
        self,
        node_stats_ttl: float = NODE_STATS_CACHE_TTL_DEFAULT,
        permission_ttl: float = SECRET_PERMISSION_CACHE_TTL_DEFAULT,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.node_stats_ttl = node_stats_ttl
        self.permission_ttl = permission_ttl
        self._clock = clock
        self._node_stats: dict[str, KeyedTTLCache[str, Any]] = {}
        self._permissions: dict[tuple[str, str], KeyedTTLCache[str, Any]] = {}

    # =========================================================================
    # Partitions
    # =========================================================================

    def node_stats(
        self,
        context: str,
        fetch_one: Callable[[str], Awaitable[Any]],
    ) -> KeyedTTLCache[str, Any]:
        """Node-statistics cache for ``context``, created on first use."""
        return self._partition(
            self._node_stats,
            context,
            self.node_stats_ttl,
            fetch_one,
            f"node-stats[{context}]",
        )

    def secret_permissions(
        self,
        context: str,
        namespace: str,
        fetch_one: Callable[[str], Awaitable[Any]],
    ) -> KeyedTTLCache[str, Any]:
        """Secret-permission cache for one namespace of ``context``."""
        return self._partition(
            self._permissions,
            (context, namespace),
            self.permission_ttl,
            fetch_one,
            f"secret-permissions[{context}/{namespace}]",
        )

    def _partition(
        self,
        partitions: dict[Any, KeyedTTLCache[str, Any]],
        key: Hashable,
        ttl: float,
        fetch_one: Callable[[str], Awaitable[Any]],
        name: str,
    ) -> KeyedTTLCache[str, Any]:
        cache = partitions.get(key)
        if cache is None:
            cache = KeyedTTLCache(ttl, fetch_one, clock=self._clock, name=name)
            partitions[key] = cache
        return cache

    # =========================================================================
    # Invalidation
    # =========================================================================

    async def invalidate_node_stats(self, context: str | None = None) -> None:
        """Invalidate node statistics for one context, or for all of them."""
        if context is None:
            targets = list(self._node_stats.values())
        else:
            cache = self._node_stats.get(context)
            targets = [cache] if cache is not None else []
        for cache in targets:
            await cache.invalidate()
        logger.debug("Invalidated node stats cache: %s", context or "all contexts")

    async def invalidate_permissions(self) -> None:
        """Invalidate every secret-permission partition."""
        for cache in list(self._permissions.values()):
            await cache.invalidate()
        logger.debug("Invalidated secret permission caches")

    def get_cache_stats(self) -> dict[str, int]:
        """Number of live partitions per cache kind."""
        return {
            "node_stats": len(self._node_stats),
            "secret_permissions": len(self._permissions),
        }


__all__ = ["CacheManager"]
