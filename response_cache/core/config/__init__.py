"""
Configuration Module

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Stage labels, key prefixes, header names and defaults

Usage:
------
```python
from response_cache.core.config import get_settings
from response_cache.core.config.constants import Stage

settings = get_settings()
ttl = settings.cache.CACHE_TTL
```

Testing:
-------
```python
os.environ["CACHE_TTL"] = "5"
settings = reload_settings()
assert settings.cache.CACHE_TTL == 5
```
"""

from response_cache.core.config.constants import (
    DEFAULT_ALLOWED_METHODS,
    DEFAULT_OPERATION_TIMEOUT,
    DEFAULT_TTL_SECONDS,
    HEADER_CACHE_CONTROL,
    HEADER_REQUEST_ID,
    HEADER_X_CACHE,
    REDIS_KEY_CACHE_RESPONSE,
    BackendKind,
    Stage,
)
from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.config.settings import Settings, get_settings, reload_settings

__all__ = [
    # Settings
    "CacheConfig",
    "Settings",
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "BackendKind",
    # Defaults
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_ALLOWED_METHODS",
    "DEFAULT_OPERATION_TIMEOUT",
    # Redis keys
    "REDIS_KEY_CACHE_RESPONSE",
    # HTTP headers
    "HEADER_CACHE_CONTROL",
    "HEADER_X_CACHE",
    "HEADER_REQUEST_ID",
]
