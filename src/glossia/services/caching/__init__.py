"""Caching services - session cache engine for reading results."""

from glossia.services.caching.cache_engine import CacheEngine, CacheStats, context_key

__all__ = [
    "CacheEngine",
    "CacheStats",
    "context_key",
]
