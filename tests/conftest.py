"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import os
import sys
from unittest.mock import AsyncMock

import pytest

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from tests.test_fixtures import CacheTestFactory, FakeClock, InMemoryRedisClient  # noqa: E402


# ============================================================================
# Environment Isolation
# ============================================================================


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """
    Reset the settings singleton around every test.

    Cache-related environment variables from the developer's shell must not
    leak into tests.
    """
    from response_cache.core.config import settings as settings_module

    for name in list(os.environ):
        if name.startswith(("CACHE_", "REDIS_")):
            monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("ENVIRONMENT", "test")
    settings_module._settings = None
    yield
    settings_module._settings = None


@pytest.fixture
def mock_settings():
    """
    Application settings for testing.

    Built from the real section models, so CacheConfig.from_settings sees
    the same attribute surface as in production. Fields can be reassigned
    per test.
    """
    from response_cache.core.config.settings import (
        ApplicationSettings,
        CacheSettings,
        RedisSettings,
        Settings,
    )

    return Settings(
        cache=CacheSettings(
            CACHE_BACKEND="memory",
            CACHE_TTL=60,
            CACHE_EXCLUDE_ROUTES=[],
            CACHE_ALLOWED_METHODS=["GET"],
            CACHE_METRICS=True,
            CACHE_OPERATION_TIMEOUT=0.5,
        ),
        redis=RedisSettings(REDIS_HOST="localhost", REDIS_PORT=6379),
        app=ApplicationSettings(
            ENVIRONMENT="test",
            APP_VERSION="1.0.0-test",
            APP_NAME="Response Cache Test",
        ),
    )


# ============================================================================
# Environment-Based Integration Toggles
# ============================================================================


@pytest.fixture(scope="session")
def use_real_redis():
    """Check if real Redis should be used for integration tests."""
    return os.getenv("USE_REAL_REDIS", "0").lower() in ("1", "true", "yes")


# ============================================================================
# Clock and Store Fixtures
# ============================================================================


@pytest.fixture
def fake_clock():
    """Manually advanced clock; expiry tests never sleep."""
    return FakeClock()


@pytest.fixture
def memory_store(fake_clock):
    """MemoryStore driven by the fake clock."""
    from response_cache.infrastructure.cache.memory_store import MemoryStore

    return MemoryStore(clock=fake_clock)


@pytest.fixture
def in_memory_redis_client(fake_clock):
    """
    In-memory Redis client stub for testing.

    Mimics the RedisClient command surface using in-memory storage.
    """
    return InMemoryRedisClient(fake_clock)


@pytest.fixture
def failing_redis_client():
    """Redis client whose every command raises BackendUnavailableError."""
    return CacheTestFactory.failing_redis_client()


@pytest.fixture
def remote_store(in_memory_redis_client):
    """RemoteStore over the in-memory client."""
    from response_cache.infrastructure.cache.remote_store import RemoteStore

    return RemoteStore(in_memory_redis_client, prefix="cache:response", operation_timeout=0.5)


# ============================================================================
# Engine Fixtures
# ============================================================================


@pytest.fixture
def engine(fake_clock):
    """Memory-backed engine with metrics on and a fake clock."""
    from response_cache.engine.cache_engine import CacheEngine

    return CacheEngine(ttl=60, metrics=True, clock=fake_clock)


@pytest.fixture
def downstream():
    """Downstream handler mock producing a fresh payload per call."""
    calls = {"count": 0}

    async def handler():
        calls["count"] += 1
        return {"success": True, "call": calls["count"]}

    return AsyncMock(side_effect=handler)
