"""In-memory TTL memoizer for slow-changing API resources."""
from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, TypeVar

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _retrieve_exception(task: asyncio.Task) -> None:
    # Waiters may all have been cancelled; mark a failure as seen so asyncio
    # does not report it as never retrieved.
    if not task.cancelled():
        task.exception()


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache:
    """Memoize coroutine results per key until their TTL elapses.

    Stale entries are not evicted; they are overwritten the next time the key
    is requested. Concurrent misses on the same key share a single call to the
    producer.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry[Any]] = {}
        self._in_flight: dict[str, asyncio.Task] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    async def get_or_set(self, key: str, produce: Callable[[], Awaitable[T]], ttl_seconds: float) -> T:
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expires_at:
            logger.debug("Cache hit for %s", key)
            return entry.value

        task = self._in_flight.get(key)
        if task is None:
            logger.debug("Cache miss for %s, fetching", key)
            task = asyncio.ensure_future(self._refresh(key, produce, ttl_seconds))
            task.add_done_callback(_retrieve_exception)
            self._in_flight[key] = task
        else:
            logger.debug("Joining in-flight fetch for %s", key)
        # A cancelled waiter must not cancel the fetch other waiters depend on.
        return await asyncio.shield(task)

    async def _refresh(self, key: str, produce: Callable[[], Awaitable[T]], ttl_seconds: float) -> T:
        try:
            value = await produce()
            self._entries[key] = CacheEntry(value, self._clock() + ttl_seconds)
            return value
        finally:
            self._in_flight.pop(key, None)
