"""
Cache Key Generation

A key generator maps a RequestDescriptor to an opaque cache key. The engine
calls whatever generator it was configured with; ``default_key_generator``
is just the one it falls back to.

Uses MD5 for fast hashing (collision risk acceptable for a cache: the worst
case is serving the wrong cached entry for a colliding request, which is
practically impossible for distinct method/URL pairs).
"""

import hashlib
from collections.abc import Iterable

from response_cache.core.interfaces.cache import KeyGenerator
from response_cache.core.models import RequestDescriptor


def default_key_generator(request: RequestDescriptor) -> str:
    """
    Hash the canonical URL (path + query) together with the lower-cased method.

    Identical logical requests always map to the same key, and the same URL
    requested with different methods maps to different keys.
    """
    data = f"{request.url}:{request.method.lower()}"
    return hashlib.md5(data.encode("utf-8")).hexdigest()


def make_key_generator(
    vary_headers: Iterable[str] = (),
    include_query: bool = True,
) -> KeyGenerator:
    """
    Build a generator that also varies the key by selected request headers.

    Args:
        vary_headers: Header names (case-insensitive) folded into the key,
            e.g. ("accept-language", "x-user-segment")
        include_query: When False the query string is ignored

    Returns:
        A pure KeyGenerator
    """
    headers = tuple(sorted(h.lower() for h in vary_headers))

    def generate(request: RequestDescriptor) -> str:
        base = request.url if include_query else request.path
        parts = [base, request.method.lower()]
        parts.extend(f"{name}={request.headers.get(name, '')}" for name in headers)
        return hashlib.md5(":".join(parts).encode("utf-8")).hexdigest()

    return generate
