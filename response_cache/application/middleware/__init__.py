"""
Middleware Package
==================

AVAILABLE MIDDLEWARE:
---------------------
1. response_cache: Serve eligible GET responses from the response cache

Registration order matters: middleware added last runs first. Register the
cache after anything that must see every request (request IDs, logging).
"""

from .response_cache import (
    ResponseCacheMiddleware,
    add_response_cache_middleware,
    dispatch_with_cache,
    is_cacheable_response,
)

__all__ = [
    "ResponseCacheMiddleware",
    "add_response_cache_middleware",
    "dispatch_with_cache",
    "is_cacheable_response",
]
