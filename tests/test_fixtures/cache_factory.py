"""
Cache Test Factory

Creates clocks, Redis client doubles and engines with various configurations
for testing.
"""

import asyncio
import fnmatch
from typing import Any
from unittest.mock import AsyncMock

from response_cache.core.exceptions import BackendUnavailableError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class InMemoryRedisClient:
    """
    Stand-in for RedisClient backed by a dict.

    Implements the same command surface RemoteStore uses, with SET ... EX
    expiry driven by the supplied clock.
    """

    def __init__(self, clock: FakeClock | None = None):
        self.clock = clock or FakeClock()
        self.data: dict[str, Any] = {}
        self.expiry: dict[str, float] = {}
        self.connected = False

    def _expire(self, key: str) -> None:
        if key in self.expiry and self.clock() >= self.expiry[key]:
            self.data.pop(key, None)
            self.expiry.pop(key, None)

    async def connect(self) -> None:
        self.connected = True

    async def disconnect(self) -> None:
        self.connected = False

    async def get(self, key: str):
        self._expire(key)
        return self.data.get(key)

    async def set(self, key: str, value, ttl: int) -> bool:
        self.data[key] = value
        self.expiry[key] = self.clock() + ttl
        return True

    async def delete(self, *keys: str) -> int:
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.expiry.pop(key, None)
        return removed

    async def count_keys(self, pattern: str) -> int:
        for key in list(self.data):
            self._expire(key)
        return sum(1 for key in self.data if fnmatch.fnmatchcase(key, pattern))

    async def delete_matching(self, pattern: str) -> int:
        matching = [key for key in self.data if fnmatch.fnmatchcase(key, pattern)]
        return await self.delete(*matching)

    async def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "type": "in_memory"}


class CacheTestFactory:
    """Factory for creating cache test objects."""

    @staticmethod
    def redis_client_with_data(
        initial_data: dict[str, Any] | None = None, clock: FakeClock | None = None
    ) -> InMemoryRedisClient:
        """Create an in-memory Redis client with initial (non-expiring) data."""
        client = InMemoryRedisClient(clock)
        client.data.update(initial_data or {})
        return client

    @staticmethod
    def failing_redis_client(error: Exception = None) -> AsyncMock:
        """Create a Redis client whose every command fails."""
        if error is None:
            error = BackendUnavailableError("Redis connection failed")

        client = AsyncMock()
        client.connect = AsyncMock(side_effect=error)
        client.disconnect = AsyncMock()
        client.get = AsyncMock(side_effect=error)
        client.set = AsyncMock(side_effect=error)
        client.delete = AsyncMock(side_effect=error)
        client.count_keys = AsyncMock(side_effect=error)
        client.delete_matching = AsyncMock(side_effect=error)
        client.health_check = AsyncMock(return_value={"status": "unhealthy", "error": str(error)})

        return client

    @staticmethod
    def slow_redis_client(delay: float = 1.0) -> AsyncMock:
        """Create a Redis client that stalls on every command."""
        client = AsyncMock()
        client.connect = AsyncMock()
        client.disconnect = AsyncMock()

        async def delayed(*args, **kwargs):
            await asyncio.sleep(delay)
            return b'{"stale": true}'

        client.get = AsyncMock(side_effect=delayed)
        client.set = AsyncMock(side_effect=delayed)
        client.delete = AsyncMock(side_effect=delayed)
        client.count_keys = AsyncMock(side_effect=delayed)
        client.delete_matching = AsyncMock(side_effect=delayed)
        client.health_check = AsyncMock(
            return_value={"status": "healthy", "latency_ms": delay * 1000}
        )

        return client
