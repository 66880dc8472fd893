"""
Core Module

Foundational components: configuration, logging, exceptions and protocols.
"""

from .exceptions import (
    BackendUnavailableError,
    CacheError,
    CacheKeyError,
    ConfigurationError,
    ResponseCacheError,
    SerializationError,
)
from .logging import (
    NullLogger,
    clear_request_id,
    get_logger,
    get_request_id,
    log_stage,
    set_request_id,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "set_request_id",
    "get_request_id",
    "clear_request_id",
    "log_stage",
    "NullLogger",
    "ResponseCacheError",
    "ConfigurationError",
    "CacheError",
    "BackendUnavailableError",
    "CacheKeyError",
    "SerializationError",
]
