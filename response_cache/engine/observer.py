"""
Cache Observer

All side effects of a cache decision that are not the decision itself:
structured logging and metrics.

Why Separate Observer?
- The engine's decision logic stays free of logging/metrics branches
- A disabled concern is a no-op object, not an ``if`` at every call site
- Tests can inspect counters without parsing logs
"""

from response_cache.core.config.constants import Stage
from response_cache.core.logging.logger import NullLogger, get_logger, log_stage
from response_cache.core.models import MetricsSnapshot
from response_cache.infrastructure.monitoring.metrics_collector import CacheMetrics


class CacheObserver:
    """
    Logs cache operations and maintains counters.

    Args:
        logger: Structured logger, or None for a NullLogger
        metrics: CacheMetrics, or None when metrics are disabled
    """

    def __init__(self, logger=None, metrics: CacheMetrics | None = None):
        self._logger = logger if logger is not None else NullLogger()
        self._metrics = metrics

    @classmethod
    def for_config(cls, config, logger=None) -> "CacheObserver":
        """Build the observer a CacheConfig asks for."""
        if config.logging:
            logger = logger or get_logger("response_cache.engine")
        else:
            logger = NullLogger()
        metrics = CacheMetrics(backend=config.backend) if config.metrics else None
        return cls(logger=logger, metrics=metrics)

    @property
    def logger(self):
        return self._logger

    @property
    def metrics_enabled(self) -> bool:
        return self._metrics is not None

    def record_skip(self, method: str, path: str, reason: str) -> None:
        log_stage(
            self._logger, Stage.ELIGIBILITY, "Request not cacheable",
            level="debug", method=method, path=path, reason=reason,
        )

    def record_hit(self, key: str) -> None:
        if self._metrics is not None:
            self._metrics.record_hit()
        log_stage(self._logger, Stage.CACHE_HIT, "Cache hit", cache_key=key[:20])

    def record_miss(self, key: str) -> None:
        if self._metrics is not None:
            self._metrics.record_miss()
        log_stage(self._logger, Stage.CACHE_MISS, "Cache miss", cache_key=key[:20])

    def record_store(self, key: str, ttl: int) -> None:
        log_stage(self._logger, Stage.CACHE_STORE, "Response cached", cache_key=key[:20], ttl=ttl)

    def record_invalidation(self, key: str) -> None:
        log_stage(self._logger, Stage.INVALIDATION, "Cache invalidated", cache_key=key[:20])

    def record_error(self, operation: str, error: Exception, key: str | None = None) -> None:
        """
        Record a cache failure that was degraded to no-cache.

        Matches RemoteStore's on_error hook signature when key is omitted.
        """
        if self._metrics is not None:
            self._metrics.record_error(operation, error)
        log_stage(
            self._logger,
            Stage.CACHE_LOOKUP if operation == "get" else Stage.CACHE_STORE,
            f"Cache {operation} failed, continuing without cache",
            level="warning",
            cache_key=key[:20] if key else None,
            error_type=type(error).__name__,
            error=str(error),
        )

    def set_size(self, size: int) -> None:
        if self._metrics is not None:
            self._metrics.set_size(size)

    def snapshot(self) -> MetricsSnapshot | None:
        if self._metrics is None:
            return None
        return self._metrics.snapshot()

    def reset(self) -> None:
        if self._metrics is not None:
            self._metrics.reset()
