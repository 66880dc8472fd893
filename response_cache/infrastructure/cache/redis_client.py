"""
Redis Client with Connection Pooling

Architecture:
    RedisClient (Public API)
        ├── ConnectionManager (Pool lifecycle, startup ping with retry)
        └── command methods (get / set / delete / scan) with error translation

The client raises the cache exception hierarchy instead of redis-py errors:
- connection problems and timeouts -> BackendUnavailableError
- any other RedisError             -> CacheKeyError

Deciding what a failure *means* (miss, dropped write) is RemoteStore's job.
"""

import time
from typing import Any

import redis.asyncio as redis
from redis.exceptions import ConnectionError, RedisError, TimeoutError
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.config.constants import (
    REDIS_CONNECT_ATTEMPTS,
    REDIS_CONNECT_MAX_WAIT,
    Stage,
)
from response_cache.core.exceptions import BackendUnavailableError, CacheKeyError
from response_cache.core.logging.logger import NullLogger, log_stage


# =============================================================================
# LAYER 1: CONNECTION MANAGEMENT
# =============================================================================


class ConnectionManager:
    """
    Owns the redis-py client and its connection pool.

    The pool is created lazily and does not touch the network; redis-py
    opens connections on first command and reconnects on its own after a
    failure, so a store built while Redis is down starts working as soon as
    Redis comes back.
    """

    def __init__(self, config: CacheConfig, logger=None):
        self._config = config
        self._logger = logger or NullLogger()
        self._client: redis.Redis | None = None
        self._is_connected = False

    def get_client(self) -> redis.Redis:
        if self._client is None:
            socket_timeout, connect_timeout = self._config.socket_timeouts
            common: dict[str, Any] = {
                "max_connections": self._config.redis_max_connections,
                "socket_timeout": socket_timeout,
                "socket_connect_timeout": connect_timeout,
                "retry_on_timeout": False,
                "decode_responses": False,
            }
            if self._config.redis_url:
                self._client = redis.Redis.from_url(self._config.redis_url, **common)
            else:
                self._client = redis.Redis(
                    host=self._config.redis_host,
                    port=self._config.redis_port,
                    db=self._config.redis_db,
                    password=self._config.redis_password,
                    **common,
                )
        return self._client

    async def connect(self) -> None:
        """
        Verify the backend answers, retrying with exponential jitter.

        Raises:
            BackendUnavailableError: If every attempt fails
        """
        client = self.get_client()
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(REDIS_CONNECT_ATTEMPTS),
                wait=wait_exponential_jitter(initial=0.1, max=REDIS_CONNECT_MAX_WAIT),
                retry=retry_if_exception_type((ConnectionError, TimeoutError, OSError)),
            ):
                with attempt:
                    await client.ping()
        except RetryError as e:
            cause = e.last_attempt.exception()
            self._is_connected = False
            raise BackendUnavailableError.from_exception(
                cause,
                message=f"Failed to connect to Redis: {cause}",
                **self.endpoint(),
            ) from cause
        except RedisError as e:
            self._is_connected = False
            raise BackendUnavailableError.from_exception(
                e, message=f"Redis rejected connection: {e}", **self.endpoint()
            ) from e

        self._is_connected = True
        log_stage(self._logger, Stage.REDIS, "Redis connected", **self.endpoint())

    async def disconnect(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
        self._is_connected = False
        log_stage(self._logger, Stage.REDIS, "Redis disconnected")

    async def ping(self) -> bool:
        try:
            return bool(await self.get_client().ping())
        except (ConnectionError, TimeoutError, OSError):
            return False

    def is_connected(self) -> bool:
        return self._is_connected

    def endpoint(self) -> dict[str, Any]:
        if self._config.redis_url:
            return {"url": self._config.redis_url}
        return {"host": self._config.redis_host, "port": self._config.redis_port}


# =============================================================================
# LAYER 2: PUBLIC API
# =============================================================================


class RedisClient:
    """
    Async Redis client used by RemoteStore.

    Usage:
        client = RedisClient(config)
        await client.connect()

        await client.set("key", b"value", ttl=60)
        value = await client.get("key")

        await client.disconnect()
    """

    def __init__(self, config: CacheConfig, logger=None):
        self._conn_mgr = ConnectionManager(config, logger=logger)

    async def connect(self) -> None:
        await self._conn_mgr.connect()

    async def disconnect(self) -> None:
        await self._conn_mgr.disconnect()

    async def ping(self) -> bool:
        return await self._conn_mgr.ping()

    def is_connected(self) -> bool:
        return self._conn_mgr.is_connected()

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    async def get(self, key: str) -> bytes | None:
        try:
            return await self._conn_mgr.get_client().get(key)
        except RedisError as e:
            raise self._translate(e, "GET", key=key) from e

    async def set(self, key: str, value: bytes | str, ttl: int) -> bool:
        """SET with EX: the backend expires the key natively."""
        try:
            result = await self._conn_mgr.get_client().set(key, value, ex=ttl)
            return result is not None
        except RedisError as e:
            raise self._translate(e, "SET", key=key) from e

    async def delete(self, *keys: str) -> int:
        try:
            return await self._conn_mgr.get_client().delete(*keys)
        except RedisError as e:
            raise self._translate(e, "DEL", keys=list(keys)) from e

    async def count_keys(self, pattern: str) -> int:
        """Count keys matching pattern with SCAN (non-blocking for the server)."""
        try:
            count = 0
            async for _ in self._conn_mgr.get_client().scan_iter(match=pattern, count=500):
                count += 1
            return count
        except RedisError as e:
            raise self._translate(e, "SCAN", pattern=pattern) from e

    async def delete_matching(self, pattern: str) -> int:
        try:
            client = self._conn_mgr.get_client()
            deleted = 0
            async for key in client.scan_iter(match=pattern, count=500):
                deleted += await client.delete(key)
            return deleted
        except RedisError as e:
            raise self._translate(e, "SCAN+DEL", pattern=pattern) from e

    async def health_check(self) -> dict[str, Any]:
        """
        Ping the backend and report latency.

        Never raises; an unreachable backend is reported as unhealthy.
        """
        health: dict[str, Any] = {
            "status": "healthy",
            "connected": self._conn_mgr.is_connected(),
            **self._conn_mgr.endpoint(),
            "ping_latency_ms": None,
        }
        start = time.perf_counter()
        if await self._conn_mgr.ping():
            health["ping_latency_ms"] = round((time.perf_counter() - start) * 1000, 2)
        else:
            health["status"] = "unhealthy"
        return health

    def _translate(self, error: RedisError, command: str, **context) -> Exception:
        if isinstance(error, (ConnectionError, TimeoutError)):
            return BackendUnavailableError.from_exception(
                error, message=f"Redis {command} failed: {error}", command=command, **context
            )
        return CacheKeyError.from_exception(
            error, message=f"Redis {command} failed: {error}", command=command, **context
        )
