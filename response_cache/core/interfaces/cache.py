"""
Cache Protocols

Abstract protocols for the pluggable parts of the cache engine: the store
backend, the payload codec and the key generator.

Architectural Decision: Protocol-based abstraction
- Memory and Redis stores are interchangeable behind CacheStore
- Tests can inject fakes without subclassing
- Runtime checking with @runtime_checkable
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from response_cache.core.models import RequestDescriptor


@runtime_checkable
class CacheStore(Protocol):
    """
    Key -> value store with per-entry TTL.

    Implementations:
    - MemoryStore: in-process expiring map
    - RemoteStore: Redis-backed, fail closed on reads, silent on writes

    Contract:
    - get returns None once an entry has expired, even if it has not been
      physically removed yet
    - set overwrites and restarts the expiry window (last write wins)
    - delete is idempotent
    """

    async def get(self, key: str) -> Any | None:
        """
        Get value from the store.

        Returns:
            The stored value, or None if absent, invalidated or expired
        """
        ...

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Store value under key for ttl seconds.
        """
        ...

    async def delete(self, key: str) -> None:
        """
        Remove key immediately. No error if the key is absent.
        """
        ...

    async def size(self) -> int:
        """
        Number of live entries (best effort for remote stores).
        """
        ...

    async def clear(self) -> None:
        """
        Remove every entry owned by this store.
        """
        ...

    async def close(self) -> None:
        """
        Release backend resources.
        """
        ...


@runtime_checkable
class Codec(Protocol):
    """
    Serialize/deserialize pair applied to cached payloads.

    Law: decode(encode(v)) == v for every value the engine stores.
    Implementations raise SerializationError on failure.
    """

    name: str

    def encode(self, value: Any) -> Any:
        ...

    def decode(self, raw: Any) -> Any:
        ...


# A key generator is any callable mapping a request descriptor to a cache key.
# It must be pure and must not raise for a well-formed descriptor.
KeyGenerator = Callable[["RequestDescriptor"], str]
