"""
Response Cache Middleware
=========================

Starlette/FastAPI adapter for CacheEngine.

REQUEST FLOW:
-------------
    Client → ResponseCacheMiddleware → (hit)  cached envelope, X-Cache: HIT
                                     → (miss) route handler → store → client

On a miss the downstream response body is buffered so it can be decoded and
stored. Only 2xx application/json responses are cached; everything else is
passed through as is. The bytes sent to the client on a miss are exactly the
bytes the handler produced.

Two ways to register it:

    add_response_cache_middleware(app, engine)

    app.middleware("http")(engine.middleware())
"""

from collections.abc import Callable

import orjson
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from response_cache.core.config.constants import (
    HEADER_X_CACHE,
    JSON_MEDIA_TYPE,
    X_CACHE_HIT,
    X_CACHE_MISS,
)
from response_cache.core.models import RequestDescriptor


def is_cacheable_response(response: Response) -> bool:
    """True for 2xx responses with a JSON content type."""
    if not 200 <= response.status_code < 300:
        return False
    content_type = response.headers.get("content-type", "")
    return content_type.split(";", 1)[0].strip().lower() == JSON_MEDIA_TYPE


async def _read_body(response: Response) -> bytes:
    chunks = []
    async for chunk in response.body_iterator:
        chunks.append(chunk.encode("utf-8") if isinstance(chunk, str) else bytes(chunk))
    return b"".join(chunks)


def _rebuild(response: Response, body: bytes) -> Response:
    # Same bytes, so the original content-length and every raw header
    # (duplicates such as set-cookie included) stay valid.
    rebuilt = Response(
        content=body,
        status_code=response.status_code,
        background=getattr(response, "background", None),
    )
    rebuilt.raw_headers = list(response.raw_headers)
    return rebuilt


async def dispatch_with_cache(engine, request: Request, call_next: Callable) -> Response:
    """
    Serve request through engine.

    Args:
        engine: CacheEngine
        request: Incoming request
        call_next: Next handler in the middleware chain

    Returns:
        Response: Cached envelope on a hit, the handler's response otherwise
    """
    descriptor = RequestDescriptor.from_request(request)

    if not engine.is_eligible(descriptor):
        return await call_next(request)

    lookup = await engine.lookup(descriptor)
    if lookup is None:
        return await call_next(request)

    if lookup.hit:
        headers = {**engine.cache_control_headers(), HEADER_X_CACHE: X_CACHE_HIT}
        return Response(
            content=orjson.dumps(engine.hit_body(lookup.value)),
            media_type=JSON_MEDIA_TYPE,
            headers=headers,
        )

    response = await call_next(request)
    if not is_cacheable_response(response):
        return response

    body = await _read_body(response)
    try:
        payload = orjson.loads(body)
    except orjson.JSONDecodeError:
        return _rebuild(response, body)

    await engine.store_response(lookup.key, payload)

    rebuilt = _rebuild(response, body)
    rebuilt.headers[HEADER_X_CACHE] = X_CACHE_MISS
    return rebuilt


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """
    Middleware serving eligible requests from the response cache.

    The engine is owned by the caller; its lifecycle (initialize/shutdown)
    belongs in the application lifespan, not here.
    """

    def __init__(self, app, engine):
        """
        Initialize response cache middleware.

        Args:
            app: The ASGI application
            engine: CacheEngine making the caching decisions
        """
        super().__init__(app)
        self.engine = engine

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        return await dispatch_with_cache(self.engine, request, call_next)


def add_response_cache_middleware(app, engine) -> None:
    """
    Add response cache middleware to the FastAPI application.

    USAGE:
    ------
        engine = CacheEngine(ttl=30, exclude_routes=["/health"])
        add_response_cache_middleware(app, engine)
    """
    app.add_middleware(ResponseCacheMiddleware, engine=engine)
