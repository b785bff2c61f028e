"""Utility functions and classes for kubesnap."""

from kubesnap.utils.cache_manager import CacheManager
from kubesnap.utils.stable_identifier import IdentifierTable, stable_uuid

__all__ = [
    # Cache
    "CacheManager",
    # Identifiers
    "IdentifierTable",
    "stable_uuid",
]
