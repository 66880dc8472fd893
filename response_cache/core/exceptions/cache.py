"""
Cache-Related Exceptions

All exceptions raised by cache stores and codecs. None of them is ever
allowed to reach the request path: the engine degrades every one of them
to "no caching for this request".
"""

from response_cache.core.exceptions.base import ResponseCacheError


class CacheError(ResponseCacheError):
    """Base exception for cache-related errors."""
    pass


class BackendUnavailableError(CacheError):
    """
    Raised when the remote store cannot be reached.

    Common causes:
    - Redis server is down
    - Network connectivity issues
    - Operation exceeded its timeout budget
    - Authentication failure

    Reads treat it as a miss, writes log and drop it.
    """
    pass


class CacheKeyError(CacheError):
    """
    Raised when a single-key command fails on a reachable backend.

    Common causes:
    - Wrong value type stored under the key
    - Memory limit exceeded on the server
    """
    pass


class SerializationError(CacheError):
    """
    Raised when a codec cannot encode or decode a payload.

    On encode the write is dropped; on decode the entry is treated as a
    miss and evicted.
    """
    pass
