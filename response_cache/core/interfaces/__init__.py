"""
Core Interfaces

Protocols the cache engine depends on.
"""

from response_cache.core.interfaces.cache import CacheStore, Codec, KeyGenerator

__all__ = [
    "CacheStore",
    "Codec",
    "KeyGenerator",
]
