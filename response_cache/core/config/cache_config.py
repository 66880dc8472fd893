"""
Immutable Cache Configuration

``CacheConfig`` is built once when a CacheEngine is created and never
mutated afterwards. It accepts both the snake_case field names and the
camelCase option names of the middleware surface (``ttl``,
``excludeRoutes``, ``allowedMethods``, ``keyGenerator``, ...).

Invalid values raise ConfigurationError, never a bare pydantic
ValidationError, so callers only have to handle one exception type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

from response_cache.core.config.constants import (
    DEFAULT_ALLOWED_METHODS,
    DEFAULT_MEMORY_MAX_ENTRIES,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_REDIS_HOST,
    DEFAULT_REDIS_MAX_CONNECTIONS,
    DEFAULT_REDIS_PORT,
    DEFAULT_SWEEP_INTERVAL,
    DEFAULT_TTL_SECONDS,
    REDIS_KEY_CACHE_RESPONSE,
)
from response_cache.core.exceptions import ConfigurationError

if TYPE_CHECKING:
    from response_cache.core.config.settings import Settings


class CacheConfig(BaseModel):
    """
    Configuration of one CacheEngine.

    Example:
        config = CacheConfig.create(ttl=5, excludeRoutes=["/health"], metrics=True)
    """

    model_config = ConfigDict(
        frozen=True,
        arbitrary_types_allowed=True,
        populate_by_name=True,
        extra="forbid",
    )

    backend: Literal["memory", "redis"] = Field(
        default="memory", validation_alias=AliasChoices("backend", "backendKind")
    )
    ttl: int = Field(default=DEFAULT_TTL_SECONDS, gt=0, description="Entry TTL in seconds")

    redis_host: str = Field(
        default=DEFAULT_REDIS_HOST, validation_alias=AliasChoices("redis_host", "redisHost")
    )
    redis_port: int = Field(
        default=DEFAULT_REDIS_PORT, gt=0, lt=65536,
        validation_alias=AliasChoices("redis_port", "redisPort"),
    )
    redis_db: int = Field(default=0, ge=0, validation_alias=AliasChoices("redis_db", "redisDb"))
    redis_password: str | None = Field(
        default=None, validation_alias=AliasChoices("redis_password", "redisPassword")
    )
    redis_url: str | None = Field(
        default=None, validation_alias=AliasChoices("redis_url", "remoteEndpoint", "redisUrl")
    )
    redis_max_connections: int = Field(
        default=DEFAULT_REDIS_MAX_CONNECTIONS, gt=0,
        validation_alias=AliasChoices("redis_max_connections", "redisMaxConnections"),
    )
    # None falls back to operation_timeout
    redis_socket_timeout: float | None = Field(
        default=None, gt=0,
        validation_alias=AliasChoices("redis_socket_timeout", "redisSocketTimeout"),
    )
    redis_socket_connect_timeout: float | None = Field(
        default=None, gt=0,
        validation_alias=AliasChoices("redis_socket_connect_timeout", "redisSocketConnectTimeout"),
    )

    cache_control: bool = Field(
        default=False, validation_alias=AliasChoices("cache_control", "cacheControl")
    )
    exclude_routes: frozenset[str] = Field(
        default_factory=frozenset, validation_alias=AliasChoices("exclude_routes", "excludeRoutes")
    )
    allowed_methods: frozenset[str] = Field(
        default=frozenset(DEFAULT_ALLOWED_METHODS),
        validation_alias=AliasChoices("allowed_methods", "allowedMethods"),
    )
    key_generator: Any = Field(
        default=None, validation_alias=AliasChoices("key_generator", "keyGenerator")
    )

    compression: bool = False
    metrics: bool = False
    embed_metrics: bool = Field(
        default=False, validation_alias=AliasChoices("embed_metrics", "embedMetrics")
    )
    logging: bool = False

    operation_timeout: float = Field(
        default=DEFAULT_OPERATION_TIMEOUT, gt=0,
        validation_alias=AliasChoices("operation_timeout", "operationTimeout"),
    )
    max_entries: int = Field(
        default=DEFAULT_MEMORY_MAX_ENTRIES, ge=0,
        validation_alias=AliasChoices("max_entries", "maxEntries"),
    )
    sweep_interval: float = Field(
        default=DEFAULT_SWEEP_INTERVAL, ge=0,
        validation_alias=AliasChoices("sweep_interval", "sweepInterval"),
    )
    write_behind: bool = Field(
        default=False, validation_alias=AliasChoices("write_behind", "writeBehind")
    )
    key_prefix: str = Field(
        default=REDIS_KEY_CACHE_RESPONSE, min_length=1,
        validation_alias=AliasChoices("key_prefix", "keyPrefix"),
    )

    @field_validator("backend", mode="before")
    @classmethod
    def coerce_backend(cls, v):
        """Accept the boolean ``redis`` flag as well as a backend name."""
        if isinstance(v, bool):
            return "redis" if v else "memory"
        if hasattr(v, "value"):
            return v.value
        return v

    @field_validator("allowed_methods", mode="before")
    @classmethod
    def normalize_methods(cls, v):
        if isinstance(v, str):
            v = [v]
        methods = frozenset(str(m).strip().upper() for m in v if str(m).strip())
        if not methods:
            raise ValueError("allowed_methods must contain at least one HTTP method")
        return methods

    @field_validator("exclude_routes", mode="before")
    @classmethod
    def normalize_routes(cls, v):
        if v is None:
            return frozenset()
        if isinstance(v, str):
            v = [v]
        return frozenset(v)

    @field_validator("key_generator")
    @classmethod
    def check_key_generator(cls, v):
        if v is not None and not callable(v):
            raise ValueError("key_generator must be callable")
        return v

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def create(cls, **options: Any) -> CacheConfig:
        """
        Validate options and build a config.

        The ``redis`` option is the boolean backend switch of the middleware
        surface and maps onto ``backend``.

        Raises:
            ConfigurationError: If any option is invalid
        """
        if "redis" in options:
            options.setdefault("backend", options.pop("redis"))
        try:
            return cls(**options)
        except ValidationError as e:
            raise ConfigurationError.from_exception(
                e,
                message=f"Invalid cache configuration: {e.error_count()} error(s)",
                errors=[
                    {"field": ".".join(str(p) for p in err["loc"]), "error": err["msg"]}
                    for err in e.errors()
                ],
            ) from e

    @classmethod
    def from_settings(cls, settings: Settings, **overrides: Any) -> CacheConfig:
        """
        Build a config from environment settings; keyword overrides win.
        """
        cache = settings.cache
        redis = settings.redis
        options: dict[str, Any] = {
            "backend": cache.CACHE_BACKEND,
            "ttl": cache.CACHE_TTL,
            "redis_host": redis.REDIS_HOST,
            "redis_port": redis.REDIS_PORT,
            "redis_db": redis.REDIS_DB,
            "redis_password": redis.REDIS_PASSWORD,
            "redis_url": redis.REDIS_URL,
            "redis_max_connections": redis.REDIS_MAX_CONNECTIONS,
            "redis_socket_timeout": redis.REDIS_SOCKET_TIMEOUT,
            "redis_socket_connect_timeout": redis.REDIS_SOCKET_CONNECT_TIMEOUT,
            "cache_control": cache.CACHE_CONTROL,
            "exclude_routes": cache.CACHE_EXCLUDE_ROUTES,
            "allowed_methods": cache.CACHE_ALLOWED_METHODS,
            "compression": cache.CACHE_COMPRESSION,
            "metrics": cache.CACHE_METRICS,
            "embed_metrics": cache.CACHE_EMBED_METRICS,
            "logging": cache.CACHE_LOGGING,
            "operation_timeout": cache.CACHE_OPERATION_TIMEOUT,
            "max_entries": cache.CACHE_MAX_ENTRIES,
            "sweep_interval": cache.CACHE_SWEEP_INTERVAL,
            "write_behind": cache.CACHE_WRITE_BEHIND,
        }
        options.update(overrides)
        return cls.create(**options)

    @property
    def is_remote(self) -> bool:
        return self.backend == "redis"

    @property
    def socket_timeouts(self) -> tuple[float, float]:
        """(socket_timeout, socket_connect_timeout) for the Redis pool."""
        return (
            self.redis_socket_timeout or self.operation_timeout,
            self.redis_socket_connect_timeout or self.operation_timeout,
        )
