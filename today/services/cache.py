"""Single-slot TTL cache in front of a today service."""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from today.services.base import TodayService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    """A cached answer and the monotonic time it stops being valid."""

    value: str
    expires_at: float


class CachingTodayService:
    """Serve the last answer until it expires, then ask the wrapped service.

    Usage::

        service = CachingTodayService(BackendService(), duration=5.0)
        service.today_as_string()  # slow, stores the result
        service.today_as_string()  # served from the cache for 5 seconds

    There is exactly one cached identity, so the cache is one slot rather
    than a keyed store.  The lock only guards swapping the slot; the wrapped
    call runs outside it, so concurrent misses may each reach the wrapped
    service (last writer wins).  Errors from the wrapped service propagate
    unchanged and leave the slot untouched.
    """

    def __init__(
        self,
        underlying: TodayService,
        duration: float,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._underlying = underlying
        self._duration = duration
        self._clock = clock
        self._lock = threading.Lock()
        self._entry: CacheEntry | None = None

    @property
    def entry(self) -> CacheEntry | None:
        """The current slot, expired or not."""
        with self._lock:
            return self._entry

    def expire(self) -> None:
        """Drop the cached value so the next call refetches."""
        with self._lock:
            self._entry = None

    def today_as_string(self) -> str:
        with self._lock:
            entry = self._entry
        if entry is not None and entry.expires_at > self._clock():
            logger.debug("Cache hit: %s", entry.value)
            return entry.value

        result = self._underlying.today_as_string()
        logger.info("Storing %s in cache for %.1fs", result, self._duration)
        with self._lock:
            self._entry = CacheEntry(result, self._clock() + self._duration)
        return result
