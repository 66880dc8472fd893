#!/usr/bin/env python3
"""
Cache Metrics with Prometheus Integration

Two views of the same counters:
- ``CacheMetrics``: per-engine hits / misses / size, read through
  ``CacheEngine.get_metrics()``
- Prometheus metrics: process-wide series scraped from ``/admin/metrics``

Increments happen from concurrent request paths, so CacheMetrics guards its
counters with a lock; prometheus-client counters are already thread-safe.

Architectural Decision: prometheus-client for industry-standard metrics
- Compatible with Grafana dashboards
- Efficient storage and aggregation
"""

import threading

from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, Counter, Gauge, generate_latest

from response_cache.core.models import MetricsSnapshot

# ============================================================================
# Metric Definitions
# ============================================================================

CACHE_HITS = Counter(
    "response_cache_hits_total",
    "Requests served from the response cache",
    ["backend"],
)

CACHE_MISSES = Counter(
    "response_cache_misses_total",
    "Eligible requests that were not in the response cache",
    ["backend"],
)

CACHE_ERRORS = Counter(
    "response_cache_errors_total",
    "Cache operations that failed and were degraded to no-cache",
    ["operation", "error_type"],
)

CACHE_ENTRIES = Gauge(
    "response_cache_entries",
    "Live entries in the response cache store (best effort for Redis)",
    ["backend"],
)


class CacheMetrics:
    """
    Hit / miss / size counters for one engine.

    Never reset automatically; reset() exists for operators and tests.
    """

    def __init__(self, backend: str = "memory"):
        self._backend = backend
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._size = 0

    def record_hit(self) -> None:
        with self._lock:
            self._hits += 1
        CACHE_HITS.labels(backend=self._backend).inc()

    def record_miss(self) -> None:
        with self._lock:
            self._misses += 1
        CACHE_MISSES.labels(backend=self._backend).inc()

    def set_size(self, size: int) -> None:
        with self._lock:
            self._size = size
        CACHE_ENTRIES.labels(backend=self._backend).set(size)

    def record_error(self, operation: str, error: Exception) -> None:
        CACHE_ERRORS.labels(operation=operation, error_type=type(error).__name__).inc()

    def snapshot(self) -> MetricsSnapshot:
        with self._lock:
            return MetricsSnapshot(hits=self._hits, misses=self._misses, size=self._size)

    def reset(self) -> None:
        with self._lock:
            self._hits = 0
            self._misses = 0
            self._size = 0

    @property
    def hit_rate(self) -> float:
        with self._lock:
            total = self._hits + self._misses
            return round(self._hits / total, 3) if total else 0.0


def render_latest() -> tuple[bytes, str]:
    """
    Render every registered metric in Prometheus text format.

    Returns:
        (payload, content type)
    """
    return generate_latest(REGISTRY), CONTENT_TYPE_LATEST
