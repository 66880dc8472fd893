"""
Unit Tests for Cache Metrics

Tests per-engine counters and Prometheus exposition.
"""

import threading

import pytest
from prometheus_client import REGISTRY

from response_cache.infrastructure.monitoring.metrics_collector import CacheMetrics, render_latest


@pytest.mark.unit
class TestCacheMetrics:
    """Test suite for CacheMetrics."""

    def test_initial_snapshot(self):
        snapshot = CacheMetrics().snapshot()
        assert snapshot.to_dict() == {"hits": 0, "misses": 0, "size": 0}

    def test_counts(self):
        metrics = CacheMetrics()
        metrics.record_hit()
        metrics.record_hit()
        metrics.record_miss()
        metrics.set_size(7)

        assert metrics.snapshot().to_dict() == {"hits": 2, "misses": 1, "size": 7}
        assert metrics.hit_rate == 0.667

    def test_hit_rate_without_traffic(self):
        assert CacheMetrics().hit_rate == 0.0

    def test_reset(self):
        metrics = CacheMetrics()
        metrics.record_miss()
        metrics.reset()
        assert metrics.snapshot().misses == 0

    def test_no_lost_updates_across_threads(self):
        """Test concurrent increments are all counted."""
        metrics = CacheMetrics()

        def work():
            for _ in range(1000):
                metrics.record_hit()
                metrics.record_miss()

        threads = [threading.Thread(target=work) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        snapshot = metrics.snapshot()
        assert snapshot.hits == 8000
        assert snapshot.misses == 8000


@pytest.mark.unit
class TestPrometheusExposition:
    """Test the scrape payload."""

    def test_render_contains_cache_series(self):
        labels = {"operation": "get", "error_type": "TimeoutError"}
        errors_before = REGISTRY.get_sample_value("response_cache_errors_total", labels) or 0
        metrics = CacheMetrics(backend="memory")
        metrics.record_hit()
        metrics.record_error("get", TimeoutError())

        payload, content_type = render_latest()
        text = payload.decode()

        assert content_type.startswith("text/plain")
        assert 'response_cache_hits_total{backend="memory"}' in text
        assert REGISTRY.get_sample_value("response_cache_errors_total", labels) == errors_before + 1
