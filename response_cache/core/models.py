"""
Cache Engine Data Models

Plain value objects passed between the host adapter, the engine and its
collaborators. None of them carries behaviour beyond construction helpers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from starlette.requests import Request


def _freeze(headers: Mapping[str, str] | None) -> Mapping[str, str]:
    return MappingProxyType({k.lower(): v for k, v in (headers or {}).items()})


@dataclass(frozen=True)
class RequestDescriptor:
    """
    The minimal view of an inbound request the engine needs.

    Attributes:
        method: HTTP method as received (e.g. "GET")
        path: Request path without query string, used for route exclusion
        url: Path plus "?query" when a query string is present; the stable
            identifier the default key generator hashes
        headers: Lower-cased, read-only request headers for custom generators
    """

    method: str
    path: str
    url: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.url:
            object.__setattr__(self, "url", self.path)
        object.__setattr__(self, "headers", _freeze(self.headers))

    @classmethod
    def from_request(cls, request: Request) -> RequestDescriptor:
        """Build a descriptor from a Starlette/FastAPI request."""
        path = request.url.path
        query = request.url.query
        url = f"{path}?{query}" if query else path
        return cls(method=request.method, path=path, url=url, headers=dict(request.headers))


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the cache counters."""

    hits: int = 0
    misses: int = 0
    size: int = 0

    def to_dict(self) -> dict[str, int]:
        return {"hits": self.hits, "misses": self.misses, "size": self.size}


@dataclass(frozen=True)
class CacheLookup:
    """Result of looking a request up in the store."""

    key: str
    hit: bool
    value: Any = None


@dataclass
class CacheOutcome:
    """
    What the engine decided for one request.

    from_cache is True when the downstream handler was skipped and data
    came from the store. body is what the host should send: the hit
    envelope on hits, the downstream payload otherwise. headers holds
    response headers the host should attach (Cache-Control on hits).
    key is None for requests that never reached the store.
    """

    from_cache: bool
    data: Any
    body: Any = None
    key: str | None = None
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if self.body is None and not self.from_cache:
            self.body = self.data
