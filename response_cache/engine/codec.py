"""
Payload Codecs

A codec turns a response payload into the representation a store keeps and
back again. The memory store can hold Python objects directly, so the
identity codec is the default there; Redis only stores bytes, so a remote
store is always paired with the JSON codec.

orjson is used for JSON: it is several times faster than the stdlib json
module and returns bytes directly, which is what Redis wants.
"""

from typing import Any

import orjson

from response_cache.core.config.cache_config import CacheConfig
from response_cache.core.exceptions import SerializationError
from response_cache.core.interfaces.cache import Codec


class IdentityCodec:
    """Codec used when compression is disabled: values pass through untouched."""

    name = "identity"

    def encode(self, value: Any) -> Any:
        return value

    def decode(self, raw: Any) -> Any:
        return raw


class JsonCodec:
    """
    orjson-backed codec.

    encode: JSON-compatible value -> bytes
    decode: bytes/str -> value

    Both directions raise SerializationError instead of orjson's own errors.
    """

    name = "json"

    def __init__(self, option: int = 0):
        self._option = option

    def encode(self, value: Any) -> bytes:
        try:
            return orjson.dumps(value, option=self._option)
        except TypeError as e:
            raise SerializationError.from_exception(
                e, message="Value is not JSON serializable", value_type=type(value).__name__
            ) from e

    def decode(self, raw: Any) -> Any:
        try:
            return orjson.loads(raw)
        except (orjson.JSONDecodeError, TypeError) as e:
            raise SerializationError.from_exception(
                e, message="Cached entry is not valid JSON", raw_type=type(raw).__name__
            ) from e


def select_codec(config: CacheConfig) -> Codec:
    """
    Pick the codec for a configuration.

    JSON when compression is on, or when the backend is remote (Redis cannot
    hold Python objects); identity otherwise.
    """
    if config.compression or config.is_remote:
        return JsonCodec()
    return IdentityCodec()
