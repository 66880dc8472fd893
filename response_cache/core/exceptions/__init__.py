"""
Exception Module

Structured exception hierarchy for the response cache.

Module Structure:
-----------------
- **base.py**: ResponseCacheError base class + ConfigurationError
- **cache.py**: Store and codec exceptions (Redis, serialization)

Usage:
------
```python
from response_cache.core.exceptions import BackendUnavailableError, ConfigurationError
```
"""

from response_cache.core.exceptions.base import ConfigurationError, ResponseCacheError
from response_cache.core.exceptions.cache import (
    BackendUnavailableError,
    CacheError,
    CacheKeyError,
    SerializationError,
)

__all__ = [
    # Base
    "ResponseCacheError",
    "ConfigurationError",
    # Cache
    "CacheError",
    "BackendUnavailableError",
    "CacheKeyError",
    "SerializationError",
]
