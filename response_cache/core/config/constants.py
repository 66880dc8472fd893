"""
System Constants and Enumerations

This module defines constants and enumerations shared across the response cache.

Architectural Decision: Centralized constants for maintainability
- Single source of truth for magic numbers
- Type-safe enums for stage labels in structured logs
"""

from enum import Enum

# ============================================================================
# Stage Identifiers (for structured logging)
# ============================================================================


class Stage(str, Enum):
    """
    Cache decision stages, used as the ``stage`` field of every log entry.

    Format: {SEQUENCE}_{DESCRIPTIVE_NAME}
    """

    INITIALIZATION = "0.0_INITIALIZATION"
    ELIGIBILITY = "1.0_ELIGIBILITY_CHECK"
    KEY_DERIVATION = "2.0_KEY_DERIVATION"
    CACHE_LOOKUP = "3.0_CACHE_LOOKUP"
    CACHE_HIT = "3.1_CACHE_HIT"
    CACHE_MISS = "3.2_CACHE_MISS"
    CACHE_STORE = "4.0_CACHE_STORE"
    INVALIDATION = "5.0_INVALIDATION"
    SHUTDOWN = "6.0_SHUTDOWN"

    # Cross-cutting
    REDIS = "R_REDIS_BACKEND"
    MEMORY = "M_MEMORY_BACKEND"
    CODEC = "C_CODEC"


class BackendKind(str, Enum):
    """Store backends a CacheEngine can be configured with."""

    MEMORY = "memory"
    REDIS = "redis"


# ============================================================================
# Cache Defaults
# ============================================================================

DEFAULT_TTL_SECONDS = 60
DEFAULT_ALLOWED_METHODS = ("GET",)
DEFAULT_OPERATION_TIMEOUT = 0.5  # seconds a single store call may take
DEFAULT_REDIS_HOST = "127.0.0.1"
DEFAULT_REDIS_PORT = 6379
DEFAULT_REDIS_MAX_CONNECTIONS = 50

# 0 means unbounded for both settings
DEFAULT_MEMORY_MAX_ENTRIES = 0
DEFAULT_SWEEP_INTERVAL = 0.0

# Redis connection retry on startup
REDIS_CONNECT_ATTEMPTS = 3
REDIS_CONNECT_MAX_WAIT = 2.0

# ============================================================================
# Redis Key Prefixes
# ============================================================================

REDIS_KEY_CACHE_RESPONSE = "cache:response"

# ============================================================================
# HTTP Headers and Envelope Fields
# ============================================================================

HEADER_CACHE_CONTROL = "Cache-Control"
HEADER_X_CACHE = "X-Cache"
HEADER_REQUEST_ID = "X-Request-ID"

X_CACHE_HIT = "HIT"
X_CACHE_MISS = "MISS"

ENVELOPE_FROM_CACHE = "fromCache"
ENVELOPE_DATA = "data"
ENVELOPE_METRICS = "metrics"

JSON_MEDIA_TYPE = "application/json"
