#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

Environment-based configuration for the response cache. The values loaded
here are turned into an immutable ``CacheConfig`` by
``CacheConfig.from_settings``; nothing reads the environment at request time.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- Easy testing with reload_settings()
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from response_cache.core.config.constants import (
    DEFAULT_MEMORY_MAX_ENTRIES,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_MAX_CONNECTIONS,
    DEFAULT_REDIS_PORT,
    DEFAULT_SWEEP_INTERVAL,
    DEFAULT_TTL_SECONDS,
)


class RedisSettings(BaseSettings):
    """
    Redis configuration for the remote store.

    Architectural Decision: short socket timeouts
    - The cache must never stall a request, so connect/read timeouts are
      kept close to the per-operation budget.
    """

    REDIS_HOST: str = Field(default=DEFAULT_REDIS_HOST, description="Redis server host")
    REDIS_PORT: int = Field(default=DEFAULT_REDIS_PORT, description="Redis server port")
    REDIS_DB: int = Field(default=0, description="Redis database number")
    REDIS_PASSWORD: str | None = Field(default=None, description="Redis password (if required)")
    REDIS_URL: str | None = Field(default=None, description="Full Redis URL, overrides host/port")
    REDIS_MAX_CONNECTIONS: int = Field(
        default=DEFAULT_REDIS_MAX_CONNECTIONS, description="Maximum pooled connections"
    )
    REDIS_SOCKET_TIMEOUT: float | None = Field(
        default=None, description="Socket timeout in seconds (unset = CACHE_OPERATION_TIMEOUT)"
    )
    REDIS_SOCKET_CONNECT_TIMEOUT: float | None = Field(
        default=None, description="Connect timeout in seconds (unset = CACHE_OPERATION_TIMEOUT)"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class CacheSettings(BaseSettings):
    """
    Cache behaviour configuration.

    Mirrors the middleware option surface (ttl, excludeRoutes,
    allowedMethods, compression, metrics, logging, ...).
    """

    CACHE_BACKEND: Literal["memory", "redis"] = Field(default="memory", description="Store backend")
    CACHE_TTL: int = Field(default=DEFAULT_TTL_SECONDS, description="Entry TTL in seconds")
    CACHE_CONTROL: bool = Field(default=False, description="Emit Cache-Control on hits")
    CACHE_EXCLUDE_ROUTES: list[str] = Field(default_factory=list, description="Exact paths never cached")
    CACHE_ALLOWED_METHODS: list[str] = Field(default=["GET"], description="Cacheable HTTP methods")
    CACHE_COMPRESSION: bool = Field(default=False, description="Serialize payloads with the JSON codec")
    CACHE_METRICS: bool = Field(default=False, description="Maintain hit/miss counters")
    CACHE_EMBED_METRICS: bool = Field(default=False, description="Include metrics in hit responses")
    CACHE_LOGGING: bool = Field(default=False, description="Log cache decisions and failures")
    CACHE_OPERATION_TIMEOUT: float = Field(
        default=DEFAULT_OPERATION_TIMEOUT, description="Budget for a single store call (seconds)"
    )
    CACHE_MAX_ENTRIES: int = Field(
        default=DEFAULT_MEMORY_MAX_ENTRIES, description="Memory store LRU bound (0 = unbounded)"
    )
    CACHE_SWEEP_INTERVAL: float = Field(
        default=DEFAULT_SWEEP_INTERVAL, description="Background expiry sweep interval (0 = off)"
    )
    CACHE_WRITE_BEHIND: bool = Field(default=False, description="Store responses in background tasks")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class ApplicationSettings(BaseSettings):
    """General settings for the demo application."""

    ENVIRONMENT: Literal["development", "staging", "production", "test"] = Field(
        default="development",
        description="Application environment"
    )
    APP_NAME: str = Field(default="Response Cache Service", description="Application name")
    APP_VERSION: str = Field(default="1.0.0", description="Application version")
    API_HOST: str = Field(default="0.0.0.0", description="API host")
    API_PORT: int = Field(default=8000, description="API port")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    Usage:
        from response_cache.core.config import get_settings

        settings = get_settings()
        ttl = settings.cache.CACHE_TTL
        redis_host = settings.redis.REDIS_HOST
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    redis: RedisSettings = Field(default_factory=RedisSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    app: ApplicationSettings = Field(default_factory=ApplicationSettings)


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Re-read the environment and replace the global settings instance.

    Intended for tests that change environment variables.
    """
    global _settings

    _settings = Settings()
    return _settings
