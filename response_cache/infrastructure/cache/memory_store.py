"""
In-Process Expiring Store

Entries are kept as ``(value, expires_at)`` pairs. Expiry is checked on
every read, so an entry is never returned after its TTL has elapsed even if
nobody has removed it yet. The optional sweeper task only reclaims memory;
correctness never depends on it having run.

Implementation Details:
- OrderedDict gives O(1) access and LRU ordering for the optional size bound
- A threading.Lock guards the map; critical sections never await, so the
  store is safe to share between event loops and worker threads
- The clock is injectable so expiry can be tested without sleeping
"""

import asyncio
import threading
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Any

from response_cache.core.config.constants import Stage
from response_cache.core.logging.logger import NullLogger, log_stage


class MemoryStore:
    """
    In-memory TTL store.

    This is a per-process cache, not shared across workers. For a cache
    shared between instances use RemoteStore (Redis).

    Args:
        max_entries: LRU bound; 0 keeps every live entry
        clock: Monotonic time source in seconds
        logger: Structured logger; NullLogger when logging is disabled
    """

    def __init__(
        self,
        max_entries: int = 0,
        clock: Callable[[], float] = time.monotonic,
        logger=None,
    ):
        self._max_entries = max_entries
        self._clock = clock
        self._logger = logger or NullLogger()
        self._entries: OrderedDict[str, tuple[Any, float]] = OrderedDict()
        self._lock = threading.Lock()
        self._sweeper: asyncio.Task | None = None

    async def get(self, key: str) -> Any | None:
        """
        Get a live value, or None.

        An expired entry found here is removed on the spot.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return value

    async def set(self, key: str, value: Any, ttl: int) -> None:
        """
        Store value for ttl seconds, replacing any previous entry and its expiry.

        Evicts the least recently used entries when over max_entries.
        """
        expires_at = self._clock() + ttl
        with self._lock:
            self._entries[key] = (value, expires_at)
            self._entries.move_to_end(key)
            if self._max_entries:
                while len(self._entries) > self._max_entries:
                    self._entries.popitem(last=False)

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def size(self) -> int:
        return self.live_size()

    def live_size(self) -> int:
        """Count entries that have not expired."""
        now = self._clock()
        with self._lock:
            return sum(1 for _, expires_at in self._entries.values() if expires_at > now)

    async def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    async def close(self) -> None:
        await self.stop_sweeper()
        await self.clear()

    # -------------------------------------------------------------------------
    # Memory reclamation
    # -------------------------------------------------------------------------

    def purge_expired(self) -> int:
        """
        Physically remove expired entries.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            expired = [k for k, (_, expires_at) in self._entries.items() if expires_at <= now]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def start_sweeper(self, interval: float) -> None:
        """
        Start a background task that purges expired entries every interval seconds.

        Must be called from a running event loop. Calling it twice is a no-op.
        """
        if self._sweeper is not None and not self._sweeper.done():
            return
        self._sweeper = asyncio.create_task(self._sweep(interval))
        log_stage(
            self._logger, Stage.MEMORY, "Expiry sweeper started", level="debug", interval=interval
        )

    async def stop_sweeper(self) -> None:
        if self._sweeper is None:
            return
        self._sweeper.cancel()
        try:
            await self._sweeper
        except asyncio.CancelledError:
            pass
        self._sweeper = None

    async def _sweep(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            removed = self.purge_expired()
            if removed:
                log_stage(
                    self._logger, Stage.MEMORY, "Purged expired entries", level="debug", removed=removed
                )

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def keys(self) -> list[str]:
        """All stored keys (live or not yet purged), least recently used first."""
        with self._lock:
            return list(self._entries.keys())
