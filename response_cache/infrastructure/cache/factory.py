"""
Cache Store Factory

Factory pattern for creating the store a CacheConfig asks for.
Supports the in-memory and Redis implementations.
"""

from collections.abc import Callable

from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.interfaces.cache import CacheStore
from response_cache.infrastructure.cache.memory_store import MemoryStore
from response_cache.infrastructure.cache.redis_client import RedisClient
from response_cache.infrastructure.cache.remote_store import ErrorHook, RemoteStore


def create_store(
    config: CacheConfig,
    logger=None,
    on_error: ErrorHook | None = None,
    clock: Callable[[], float] | None = None,
) -> CacheStore:
    """
    Build the store for a configuration.

    Args:
        config: Engine configuration
        logger: Logger handed to the store and the Redis client; None keeps
            them silent
        on_error: Failure hook handed to the remote store
        clock: Time source for the memory store (tests)

    Returns:
        CacheStore: MemoryStore or RemoteStore

    Raises:
        ValueError: If the backend is not supported
    """
    if config.backend == "memory":
        if clock is None:
            return MemoryStore(max_entries=config.max_entries, logger=logger)
        return MemoryStore(max_entries=config.max_entries, clock=clock, logger=logger)

    if config.backend == "redis":
        return RemoteStore(
            RedisClient(config, logger=logger),
            prefix=config.key_prefix,
            operation_timeout=config.operation_timeout,
            logger=logger,
            on_error=on_error,
        )

    raise ValueError(f"Unknown cache backend: {config.backend}. Available types: memory, redis")
