"""
Monitoring

Cache counters and Prometheus exposition.
"""

from .metrics_collector import CacheMetrics, render_latest

__all__ = [
    "CacheMetrics",
    "render_latest",
]
