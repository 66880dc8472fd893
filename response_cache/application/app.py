#!/usr/bin/env python3
"""
FastAPI Application Entry Point

Demo service wired with the response cache: a sample GET /test route that
returns a fresh timestamp on every uncached call, plus the admin router.

Run:
    python -m response_cache.application.app
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from response_cache.application.middleware.response_cache import add_response_cache_middleware
from response_cache.application.routes.admin import ADMIN_ROUTES
from response_cache.application.routes.admin import router as admin_router
from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.config.constants import HEADER_REQUEST_ID
from response_cache.core.config.settings import Settings, get_settings
from response_cache.core.exceptions import ResponseCacheError
from response_cache.core.logging.logger import (
    clear_request_id,
    get_logger,
    set_request_id,
    setup_logging,
)
from response_cache.engine.cache_engine import CacheEngine

logger = get_logger(__name__)


def build_engine(settings: Settings | None = None, **overrides) -> CacheEngine:
    """
    Build a CacheEngine from environment settings.

    Admin routes are always added to the excluded paths.

    Args:
        settings: Settings to read (defaults to get_settings())
        **overrides: snake_case CacheConfig fields that win over the environment
    """
    settings = settings or get_settings()
    excluded = set(overrides.pop("exclude_routes", settings.cache.CACHE_EXCLUDE_ROUTES))
    config = CacheConfig.from_settings(
        settings, exclude_routes=excluded | ADMIN_ROUTES, **overrides
    )
    return CacheEngine(config)


# ============================================================================
# Application Lifespan
# ============================================================================


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle (startup and shutdown).
    """
    settings = get_settings()

    setup_logging(log_level=settings.logging.LOG_LEVEL, log_format=settings.logging.LOG_FORMAT)

    engine: CacheEngine = app.state.cache_engine
    logger.info(
        "Starting response cache service",
        environment=settings.app.ENVIRONMENT,
        version=settings.app.APP_VERSION,
        backend=engine.config.backend,
    )

    try:
        await engine.initialize()
        logger.info("Response cache ready", ttl=engine.config.ttl)

        yield

    finally:
        logger.info("Shutting down application")
        await engine.shutdown()
        logger.info("Application shutdown complete")


# ============================================================================
# Application Factory
# ============================================================================


def create_app(engine: CacheEngine | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        engine: CacheEngine to serve with; built from settings when omitted

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    engine = engine or build_engine(settings)

    app = FastAPI(
        title=settings.app.APP_NAME,
        version=settings.app.APP_VERSION,
        description="Demo service behind an HTTP response cache",
        lifespan=lifespan,
    )
    app.state.cache_engine = engine

    # Middleware added last runs first: the request ID is bound before the
    # cache logs anything.
    add_response_cache_middleware(app, engine)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        """
        Inject a request ID into all requests for log correlation.
        """
        request_id = request.headers.get(HEADER_REQUEST_ID) or str(uuid.uuid4())
        set_request_id(request_id)
        try:
            response = await call_next(request)
            response.headers[HEADER_REQUEST_ID] = request_id
            return response
        finally:
            clear_request_id()

    @app.exception_handler(ResponseCacheError)
    async def response_cache_exception_handler(request: Request, exc: ResponseCacheError):
        logger.error(
            f"Response cache exception: {exc.message}",
            error_type=type(exc).__name__,
            request_id=exc.request_id,
        )
        return JSONResponse(status_code=500, content=exc.to_dict())

    @app.get("/test", tags=["Demo"])
    async def test_route():
        """Fresh timestamp on every call that reaches the handler."""
        return {"success": True, "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(admin_router)

    return app


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        create_app(),
        host=settings.app.API_HOST,
        port=settings.app.API_PORT,
        log_level=settings.logging.LOG_LEVEL.lower(),
    )
