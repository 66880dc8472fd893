"""
Cache Stores

In-memory expiring map and Redis-backed store behind the CacheStore protocol.
"""

from .factory import create_store
from .memory_store import MemoryStore
from .redis_client import RedisClient
from .remote_store import RemoteStore

__all__ = [
    "MemoryStore",
    "RedisClient",
    "RemoteStore",
    "create_store",
]
