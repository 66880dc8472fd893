"""
Application Layer

FastAPI/Starlette integration: the cache middleware, admin routes and a demo
application factory.
"""

from .app import build_engine, create_app
from .middleware import ResponseCacheMiddleware, add_response_cache_middleware

__all__ = [
    "ResponseCacheMiddleware",
    "add_response_cache_middleware",
    "build_engine",
    "create_app",
]
