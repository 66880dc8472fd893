"""
Cache Engine

Request-level decision logic: eligibility, key derivation, lookup, store,
invalidation and metrics. Host adapters live in response_cache.application.
"""

from .cache_engine import CacheEngine
from .codec import IdentityCodec, JsonCodec, select_codec
from .key_generator import default_key_generator, make_key_generator
from .observer import CacheObserver

__all__ = [
    "CacheEngine",
    "CacheObserver",
    "IdentityCodec",
    "JsonCodec",
    "default_key_generator",
    "make_key_generator",
    "select_codec",
]
