"""Tests for CacheManager - partitioned cache ownership."""

from __future__ import annotations

import pytest

from kubesnap.utils.cache_manager import CacheManager


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def manager() -> CacheManager:
    """Fresh manager with a controllable clock."""
    return CacheManager(node_stats_ttl=15.0, permission_ttl=60.0, clock=FakeClock())


async def _echo(key: str) -> str:
    return key


class TestCacheManagerPartitions:
    """Tests for partition creation."""

    def test_node_stats_partition_per_context(self, manager: CacheManager) -> None:
        """Each context gets its own node-stats cache, reused afterwards."""
        prod = manager.node_stats("prod", _echo)
        assert manager.node_stats("prod", _echo) is prod
        assert manager.node_stats("staging", _echo) is not prod
        assert prod.ttl == 15.0

    def test_permission_partition_per_namespace(self, manager: CacheManager) -> None:
        """Permission caches are keyed by (context, namespace)."""
        default = manager.secret_permissions("prod", "default", _echo)
        assert manager.secret_permissions("prod", "default", _echo) is default
        assert manager.secret_permissions("prod", "kube-system", _echo) is not default
        assert default.ttl == 60.0

    def test_instances_do_not_share_state(self) -> None:
        """Two managers never hand out the same cache."""
        first = CacheManager().node_stats("prod", _echo)
        second = CacheManager().node_stats("prod", _echo)
        assert first is not second

    def test_cache_stats(self, manager: CacheManager) -> None:
        """Stats count live partitions."""
        manager.node_stats("prod", _echo)
        manager.secret_permissions("prod", "default", _echo)
        manager.secret_permissions("prod", "apps", _echo)
        assert manager.get_cache_stats() == {"node_stats": 1, "secret_permissions": 2}


class TestCacheManagerInvalidation:
    """Tests for invalidation."""

    @pytest.mark.asyncio
    async def test_invalidate_one_context(self, manager: CacheManager) -> None:
        """Only the named context is cleared."""
        prod = manager.node_stats("prod", _echo)
        staging = manager.node_stats("staging", _echo)
        await prod.lookup(["n1"])
        await staging.lookup(["n1"])

        await manager.invalidate_node_stats("prod")

        assert prod.peek() == {}
        assert staging.peek() == {"n1": "n1"}

    @pytest.mark.asyncio
    async def test_invalidate_all_contexts(self, manager: CacheManager) -> None:
        """No context clears every node-stats partition."""
        prod = manager.node_stats("prod", _echo)
        await prod.lookup(["n1"])
        await manager.invalidate_node_stats()
        assert prod.peek() == {}

    @pytest.mark.asyncio
    async def test_invalidate_permissions(self, manager: CacheManager) -> None:
        """Every permission partition is cleared."""
        cache = manager.secret_permissions("prod", "default", _echo)
        await cache.lookup(["db"])
        await manager.invalidate_permissions()
        assert cache.peek() == {}
