#!/usr/bin/env python3
"""
Response Cache Engine

Architecture:
    CacheEngine (Public API)
        ├── KeyGenerator  (request descriptor -> key)
        ├── Codec         (payload <-> stored representation)
        ├── CacheStore    (MemoryStore | RemoteStore)
        └── CacheObserver (logging + metrics)

Per-request decision:
    1. Eligibility: excluded path or disallowed method -> pass through,
       no store access, no metrics
    2. Key derivation
    3. Lookup (backend failure == absent)
    4. Hit: decode, count, short-circuit with the cached value
    5. Miss: count, run downstream, encode + store its payload, return
       the payload unchanged

No cache-layer failure ever reaches the caller: every one of them degrades
to "behave as if caching were disabled for this request". Errors raised by
the downstream handler are not cache errors and propagate untouched.
"""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.config.constants import (
    ENVELOPE_DATA,
    ENVELOPE_FROM_CACHE,
    ENVELOPE_METRICS,
    HEADER_CACHE_CONTROL,
    Stage,
)
from response_cache.core.exceptions import ConfigurationError
from response_cache.core.interfaces.cache import CacheStore, Codec
from response_cache.core.logging.logger import log_stage
from response_cache.core.models import CacheLookup, CacheOutcome, MetricsSnapshot, RequestDescriptor
from response_cache.engine.codec import select_codec
from response_cache.engine.key_generator import default_key_generator
from response_cache.engine.observer import CacheObserver
from response_cache.infrastructure.cache.factory import create_store

Downstream = Callable[[], Awaitable[Any]]


class CacheEngine:
    """
    HTTP response cache decision engine.

    Usage:
        engine = CacheEngine(ttl=5, excludeRoutes=["/health"], metrics=True)

        # FastAPI / Starlette
        app.middleware("http")(engine.middleware())

        # Any other host
        outcome = await engine.handle(descriptor, lambda: handler(request))

        await engine.invalidate_cache(key)
        snapshot = engine.get_metrics()

    Args:
        config: Prebuilt CacheConfig; mutually exclusive with **options
        store: Store override (defaults to the backend the config names)
        codec: Codec override (defaults to select_codec(config))
        logger: Logger used when the config enables logging
        clock: Time source for the default memory store
        **options: CacheConfig fields, snake_case or camelCase

    Raises:
        ConfigurationError: If the configuration is invalid
    """

    def __init__(
        self,
        config: CacheConfig | None = None,
        *,
        store: CacheStore | None = None,
        codec: Codec | None = None,
        logger=None,
        clock: Callable[[], float] | None = None,
        **options: Any,
    ):
        if config is not None and options:
            raise ConfigurationError(
                "Pass either a CacheConfig or keyword options, not both",
                details={"options": sorted(options)},
            )
        self._config = config if config is not None else CacheConfig.create(**options)

        self._observer = CacheObserver.for_config(self._config, logger)
        self._key_generator = self._config.key_generator or default_key_generator
        self._codec = codec if codec is not None else select_codec(self._config)
        self._store = store if store is not None else create_store(
            self._config,
            logger=self._observer.logger,
            on_error=self._observer.record_error,
            clock=clock,
        )

        self._pending_writes: set[asyncio.Task] = set()
        self._initialized = False

        log_stage(
            self._observer.logger,
            Stage.INITIALIZATION,
            "Cache engine created",
            backend=self._config.backend,
            ttl=self._config.ttl,
            codec=getattr(self._codec, "name", type(self._codec).__name__),
            allowed_methods=sorted(self._config.allowed_methods),
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def initialize(self) -> None:
        """
        Connect the backend and start background work.

        A remote backend that cannot be reached does not fail startup; the
        store simply behaves as a permanent miss until Redis comes back.
        """
        if self._initialized:
            return

        connect = getattr(self._store, "connect", None)
        if connect is not None:
            await connect()

        start_sweeper = getattr(self._store, "start_sweeper", None)
        if self._config.sweep_interval and start_sweeper is not None:
            start_sweeper(self._config.sweep_interval)

        self._initialized = True

    async def shutdown(self) -> None:
        """Wait for write-behind tasks, then release the store."""
        if self._pending_writes:
            await asyncio.gather(*self._pending_writes, return_exceptions=True)
        await self._store.close()
        self._initialized = False
        log_stage(self._observer.logger, Stage.SHUTDOWN, "Cache engine shut down")

    async def __aenter__(self) -> "CacheEngine":
        await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    # -------------------------------------------------------------------------
    # Decision steps
    # -------------------------------------------------------------------------

    def is_eligible(self, request: RequestDescriptor) -> bool:
        """True when the request may be served from or stored in the cache."""
        if request.path in self._config.exclude_routes:
            self._observer.record_skip(request.method, request.path, "excluded_route")
            return False
        if request.method.upper() not in self._config.allowed_methods:
            self._observer.record_skip(request.method, request.path, "method_not_allowed")
            return False
        return True

    def derive_key(self, request: RequestDescriptor) -> str:
        return self._key_generator(request)

    async def lookup(self, request: RequestDescriptor) -> CacheLookup | None:
        """
        Derive the key and consult the store.

        Records exactly one hit or miss. A corrupt entry counts as a miss
        and is evicted.

        Returns:
            CacheLookup, or None if the key generator failed (the request
            then proceeds uncached and no counter changes)
        """
        try:
            key = self.derive_key(request)
        except Exception as e:
            self._observer.record_error("key", e)
            return None

        raw = await self._safe_get(key)
        if raw is None:
            self._observer.record_miss(key)
            return CacheLookup(key=key, hit=False)

        try:
            value = self._codec.decode(raw)
        except Exception as e:
            self._observer.record_error("decode", e, key)
            await self._safe_delete(key)
            self._observer.record_miss(key)
            return CacheLookup(key=key, hit=False)

        self._observer.record_hit(key)
        return CacheLookup(key=key, hit=True, value=value)

    async def store_response(self, key: str, payload: Any) -> None:
        """
        Encode and store a downstream payload.

        Never raises. With write_behind the write runs as a background task
        so the response is not held back by the store.
        """
        if payload is None:
            return
        try:
            raw = self._codec.encode(payload)
        except Exception as e:
            self._observer.record_error("encode", e, key)
            return

        if self._config.write_behind:
            task = asyncio.create_task(self._write(key, raw))
            self._pending_writes.add(task)
            task.add_done_callback(self._pending_writes.discard)
        else:
            await self._write(key, raw)

    def hit_body(self, value: Any) -> dict[str, Any]:
        """
        Response envelope for a cache hit.

        Metrics are only embedded when both metrics and embed_metrics are on.
        """
        body: dict[str, Any] = {ENVELOPE_FROM_CACHE: True, ENVELOPE_DATA: value}
        if self._config.embed_metrics:
            snapshot = self.get_metrics()
            if snapshot is not None:
                body[ENVELOPE_METRICS] = snapshot.to_dict()
        return body

    def cache_control_headers(self) -> dict[str, str]:
        if not self._config.cache_control:
            return {}
        return {HEADER_CACHE_CONTROL: f"public, max-age={self._config.ttl}"}

    # -------------------------------------------------------------------------
    # Orchestration
    # -------------------------------------------------------------------------

    async def handle(self, request: RequestDescriptor, downstream: Downstream) -> CacheOutcome:
        """
        Run the full decision for one request.

        Args:
            request: Request descriptor
            downstream: Zero-argument coroutine function producing the
                handler's payload; never awaited on a hit

        Returns:
            CacheOutcome describing what to send
        """
        if not self.is_eligible(request):
            return CacheOutcome(from_cache=False, data=await downstream())

        lookup = await self.lookup(request)
        if lookup is None:
            return CacheOutcome(from_cache=False, data=await downstream())

        if lookup.hit:
            return CacheOutcome(
                from_cache=True,
                data=lookup.value,
                body=self.hit_body(lookup.value),
                key=lookup.key,
                headers=self.cache_control_headers(),
            )

        payload = await downstream()
        await self.store_response(lookup.key, payload)
        return CacheOutcome(from_cache=False, data=payload, key=lookup.key)

    def middleware(self):
        """
        Request handler for a Starlette/FastAPI middleware chain.

        Usage:
            app.middleware("http")(engine.middleware())
        """
        from response_cache.application.middleware.response_cache import dispatch_with_cache

        async def cache_middleware(request, call_next):
            return await dispatch_with_cache(self, request, call_next)

        return cache_middleware

    # -------------------------------------------------------------------------
    # Invalidation and metrics
    # -------------------------------------------------------------------------

    async def invalidate_cache(self, key: str) -> None:
        """Evict key from the active store regardless of its TTL."""
        await self._safe_delete(key)
        self._observer.record_invalidation(key)
        await self._refresh_size()

    async def clear(self) -> None:
        """Drop every entry in the active store."""
        try:
            await self._store.clear()
        except Exception as e:
            self._observer.record_error("clear", e)
        await self._refresh_size()

    def get_metrics(self) -> MetricsSnapshot | None:
        """
        Current counters, or None when metrics are disabled.

        The size of an in-process store is re-counted here so entries that
        expired since the last write are not reported. A remote size is
        only re-read by refresh_metrics().
        """
        if not self._observer.metrics_enabled:
            return None
        live_size = getattr(self._store, "live_size", None)
        if live_size is not None:
            self._observer.set_size(live_size())
        return self._observer.snapshot()

    async def refresh_metrics(self) -> MetricsSnapshot | None:
        """Re-read the store size (including a remote store), then snapshot."""
        if not self._observer.metrics_enabled:
            return None
        await self._refresh_size(include_remote=True)
        return self._observer.snapshot()

    # Aliases matching the middleware option surface
    invalidateCache = invalidate_cache
    getMetrics = get_metrics

    @property
    def config(self) -> CacheConfig:
        return self._config

    @property
    def store(self) -> CacheStore:
        return self._store

    @property
    def codec(self) -> Codec:
        return self._codec

    # -------------------------------------------------------------------------
    # Store access with the failure policy applied
    # -------------------------------------------------------------------------

    async def _safe_get(self, key: str) -> Any | None:
        try:
            return await self._store.get(key)
        except Exception as e:
            self._observer.record_error("get", e, key)
            return None

    async def _safe_delete(self, key: str) -> None:
        try:
            await self._store.delete(key)
        except Exception as e:
            self._observer.record_error("delete", e, key)

    async def _write(self, key: str, raw: Any) -> None:
        try:
            await self._store.set(key, raw, self._config.ttl)
        except Exception as e:
            self._observer.record_error("set", e, key)
            return
        self._observer.record_store(key, self._config.ttl)
        await self._refresh_size()

    async def _refresh_size(self, include_remote: bool = False) -> None:
        # A remote size is a SCAN; only done on explicit refresh
        if not self._observer.metrics_enabled:
            return
        if self._config.is_remote and not include_remote:
            return
        try:
            self._observer.set_size(await self._store.size())
        except Exception as e:
            self._observer.record_error("size", e)
