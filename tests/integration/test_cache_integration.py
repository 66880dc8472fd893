"""
Integration Tests for the Response Cache

End-to-end expiry with real time, and the Redis backend against a live
server when one is available.
"""

import asyncio
import time
import uuid

import pytest
from fastapi.testclient import TestClient

from response_cache.application.app import build_engine, create_app
from response_cache.core.config.cache_config import CacheConfig
from response_cache.engine.cache_engine import CacheEngine
from tests.test_fixtures import RequestFactory


@pytest.mark.integration
class TestExpiryEndToEnd:
    """Expiry through the HTTP surface."""

    def test_entry_expires(self):
        """Test a response is recomputed once the TTL has passed."""
        with TestClient(create_app(build_engine(ttl=1))) as client:
            first = client.get("/test").json()
            cached = client.get("/test").json()
            time.sleep(1.1)
            fresh = client.get("/test").json()

        assert cached["data"]["timestamp"] == first["timestamp"]
        assert "fromCache" not in fresh
        assert fresh["timestamp"] != first["timestamp"]


@pytest.mark.integration
class TestRedisBackend:
    """Redis backend against a live server."""

    @pytest.fixture
    async def engine(self, use_real_redis):
        if not use_real_redis:
            pytest.skip("USE_REAL_REDIS not set")
        config = CacheConfig.create(
            redis=True, ttl=1, metrics=True, keyPrefix=f"test:{uuid.uuid4().hex}"
        )
        engine = CacheEngine(config)
        await engine.initialize()
        yield engine
        await engine.clear()
        await engine.shutdown()

    @pytest.mark.asyncio
    async def test_hit_after_store_and_native_expiry(self, engine):
        calls = []

        async def handler():
            calls.append(1)
            return {"n": len(calls)}

        request = RequestFactory.get("/test")

        await engine.handle(request, handler)
        hit = await engine.handle(request, handler)
        await asyncio.sleep(1.2)
        expired = await engine.handle(request, handler)

        assert hit.from_cache is True
        assert hit.data == {"n": 1}
        assert expired.from_cache is False
        assert (await engine.refresh_metrics()).size == 1
