"""
response_cache
==============

HTTP response caching for FastAPI/Starlette services.

Usage:
    from response_cache import CacheEngine

    engine = CacheEngine(ttl=30, excludeRoutes=["/health"], metrics=True)
    app.middleware("http")(engine.middleware())
"""

from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.exceptions import (
    BackendUnavailableError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    ResponseCacheError,
    SerializationError,
)
from response_cache.core.models import CacheLookup, CacheOutcome, MetricsSnapshot, RequestDescriptor
from response_cache.engine import (
    CacheEngine,
    IdentityCodec,
    JsonCodec,
    default_key_generator,
    make_key_generator,
)
from response_cache.infrastructure.cache import MemoryStore, RemoteStore

__version__ = "1.0.0"

__all__ = [
    "BackendUnavailableError",
    "CacheConfig",
    "CacheEngine",
    "CacheError",
    "CacheKeyError",
    "CacheLookup",
    "CacheOutcome",
    "ConfigurationError",
    "IdentityCodec",
    "JsonCodec",
    "MemoryStore",
    "MetricsSnapshot",
    "RemoteStore",
    "RequestDescriptor",
    "ResponseCacheError",
    "SerializationError",
    "default_key_generator",
    "make_key_generator",
]
