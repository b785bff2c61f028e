"""Cache models."""

from kubesnap.models.cache.data_cache import CacheEntry, KeyedTTLCache

__all__ = ["CacheEntry", "KeyedTTLCache"]
