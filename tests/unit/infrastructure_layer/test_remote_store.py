"""
Unit Tests for RemoteStore

Tests namespacing, Redis-side expiry and the fail-closed / fail-silent policy.
"""

from unittest.mock import MagicMock

import pytest

from response_cache.core.exceptions import BackendUnavailableError, CacheKeyError
from response_cache.infrastructure.cache.remote_store import RemoteStore
from tests.test_fixtures import CacheTestFactory


@pytest.mark.unit
class TestRemoteStore:
    """Test suite for RemoteStore over a healthy backend."""

    @pytest.mark.asyncio
    async def test_keys_are_namespaced(self, remote_store, in_memory_redis_client):
        await remote_store.set("abc", b"1", ttl=10)

        assert "cache:response:abc" in in_memory_redis_client.data
        assert await remote_store.get("abc") == b"1"

    @pytest.mark.asyncio
    async def test_expiry_delegated_to_backend(self, remote_store, fake_clock):
        await remote_store.set("abc", b"1", ttl=2)

        fake_clock.advance(2)

        assert await remote_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_delete(self, remote_store):
        await remote_store.set("abc", b"1", ttl=10)
        await remote_store.delete("abc")
        await remote_store.delete("abc")

        assert await remote_store.get("abc") is None

    @pytest.mark.asyncio
    async def test_size_and_clear_stay_in_namespace(self, in_memory_redis_client):
        """Test that foreign keys are neither counted nor deleted."""
        in_memory_redis_client.data["other:key"] = b"keep"
        store = RemoteStore(in_memory_redis_client, prefix="cache:response")
        await store.set("a", b"1", ttl=10)
        await store.set("b", b"2", ttl=10)

        assert await store.size() == 2

        await store.clear()

        assert await store.size() == 0
        assert in_memory_redis_client.data == {"other:key": b"keep"}

    @pytest.mark.asyncio
    async def test_connect_and_close(self, remote_store, in_memory_redis_client):
        assert await remote_store.connect() is True
        await remote_store.close()
        assert in_memory_redis_client.connected is False


@pytest.mark.unit
class TestRemoteStoreFailures:
    """Test the failure policy."""

    @pytest.mark.asyncio
    async def test_read_failure_is_a_miss(self, failing_redis_client):
        store = RemoteStore(failing_redis_client)
        assert await store.get("abc") is None

    @pytest.mark.asyncio
    async def test_write_failure_is_silent(self, failing_redis_client):
        store = RemoteStore(failing_redis_client)

        await store.set("abc", b"1", ttl=10)
        await store.delete("abc")
        await store.clear()

    @pytest.mark.asyncio
    async def test_size_failure_reports_zero(self, failing_redis_client):
        assert await RemoteStore(failing_redis_client).size() == 0

    @pytest.mark.asyncio
    async def test_connect_failure_returns_false(self, failing_redis_client):
        assert await RemoteStore(failing_redis_client).connect() is False

    @pytest.mark.asyncio
    async def test_error_hook_receives_failures(self):
        """Test every failure is reported through on_error."""
        error = CacheKeyError("WRONGTYPE")
        hook = MagicMock()
        store = RemoteStore(CacheTestFactory.failing_redis_client(error), on_error=hook)

        await store.get("a")
        await store.set("a", b"1", ttl=10)

        assert [c.args[0] for c in hook.call_args_list] == ["get", "set"]
        assert hook.call_args_list[0].args[1] is error

    @pytest.mark.asyncio
    async def test_slow_backend_is_bounded(self):
        """Test a stalled backend is abandoned after the operation timeout."""
        hook = MagicMock()
        store = RemoteStore(
            CacheTestFactory.slow_redis_client(delay=1.0), operation_timeout=0.05, on_error=hook
        )

        assert await store.get("abc") is None

        reported = hook.call_args.args[1]
        assert isinstance(reported, BackendUnavailableError)
        assert reported.details["timeout"] == 0.05

    @pytest.mark.asyncio
    async def test_failures_are_logged(self, failing_redis_client):
        logger = MagicMock()
        store = RemoteStore(failing_redis_client, logger=logger)

        await store.get("abc")

        assert logger.warning.call_args.kwargs["stage"] == "R_REDIS_BACKEND"

    @pytest.mark.asyncio
    async def test_hook_replaces_warning_log(self, failing_redis_client):
        """Test a failure is reported once, through the hook only."""
        logger = MagicMock()
        hook = MagicMock()
        store = RemoteStore(failing_redis_client, logger=logger, on_error=hook)

        await store.get("abc")

        hook.assert_called_once()
        logger.warning.assert_not_called()
