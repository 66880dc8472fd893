"""
Redis-Backed Store

Failure policy:
- reads fail closed: any backend error or timeout on ``get`` is a miss
- writes fail silently: ``set``/``delete`` errors are reported and dropped

Caching is a performance optimization, never a correctness dependency, so
nothing raised by Redis ever leaves this class.

Every call is bounded by ``operation_timeout`` so a stalled backend cannot
hold a request for longer than that budget.
"""

import asyncio
from collections.abc import Callable
from typing import Any

from redis.exceptions import RedisError

from response_cache.core.config.constants import REDIS_KEY_CACHE_RESPONSE, Stage
from response_cache.core.exceptions import BackendUnavailableError, CacheError
from response_cache.core.logging.logger import NullLogger, log_stage
from response_cache.infrastructure.cache.redis_client import RedisClient

# Errors that mean "the backend did not do what we asked"
BACKEND_ERRORS = (CacheError, RedisError, OSError, asyncio.TimeoutError)

ErrorHook = Callable[[str, Exception], None]


class RemoteStore:
    """
    CacheStore implementation over Redis.

    Keys are namespaced as ``{prefix}:{key}``; expiry is delegated to Redis
    (SET ... EX). Values must be bytes or str, which is why the engine always
    pairs this store with the JSON codec.

    Args:
        client: RedisClient instance
        prefix: Key namespace
        operation_timeout: Budget for one store call, in seconds
        logger: Structured logger for failures when no on_error hook is set
        on_error: Optional hook called with (operation, error) on every failure;
            replaces the warning log
    """

    def __init__(
        self,
        client: RedisClient,
        prefix: str = REDIS_KEY_CACHE_RESPONSE,
        operation_timeout: float = 0.5,
        logger=None,
        on_error: ErrorHook | None = None,
    ):
        self._client = client
        self._prefix = prefix
        self._timeout = operation_timeout
        self._logger = logger or NullLogger()
        self._on_error = on_error

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def _bounded(self, coro):
        return await asyncio.wait_for(coro, timeout=self._timeout)

    def _failed(self, operation: str, key: str | None, error: Exception) -> None:
        if isinstance(error, asyncio.TimeoutError):
            error = BackendUnavailableError(
                f"Redis {operation} exceeded {self._timeout}s budget",
                details={"timeout": self._timeout},
            )
        # The hook owns reporting when one is installed
        if self._on_error is not None:
            self._on_error(operation, error)
            return
        log_stage(
            self._logger,
            Stage.REDIS,
            f"Cache backend {operation} failed",
            level="warning",
            cache_key=key,
            error_type=type(error).__name__,
            error=str(error),
        )

    # -------------------------------------------------------------------------
    # CacheStore protocol
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> Any | None:
        try:
            return await self._bounded(self._client.get(self._key(key)))
        except BACKEND_ERRORS as e:
            self._failed("get", key, e)
            return None

    async def set(self, key: str, value: Any, ttl: int) -> None:
        try:
            await self._bounded(self._client.set(self._key(key), value, ttl=ttl))
        except BACKEND_ERRORS as e:
            self._failed("set", key, e)

    async def delete(self, key: str) -> None:
        try:
            await self._bounded(self._client.delete(self._key(key)))
        except BACKEND_ERRORS as e:
            self._failed("delete", key, e)

    async def size(self) -> int:
        """Best effort: number of keys under the namespace, 0 if Redis is unreachable."""
        try:
            return await self._bounded(self._client.count_keys(f"{self._prefix}:*"))
        except BACKEND_ERRORS as e:
            self._failed("size", None, e)
            return 0

    async def clear(self) -> None:
        try:
            await self._bounded(self._client.delete_matching(f"{self._prefix}:*"))
        except BACKEND_ERRORS as e:
            self._failed("clear", None, e)

    async def close(self) -> None:
        await self._client.disconnect()

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def connect(self) -> bool:
        """
        Ping Redis at startup.

        Returns:
            True when connected. A failure is logged and leaves the store
            degraded (misses and dropped writes) instead of failing startup.
        """
        try:
            await self._client.connect()
            return True
        except CacheError as e:
            self._failed("connect", None, e)
            return False

    async def health_check(self) -> dict[str, Any]:
        return await self._client.health_check()
