"""Fallback to the last good answer when a deadline-bounded call times out.

Once any call has succeeded, timeouts are masked: the caller gets the most
recent good value instead.  Before that first success there is nothing to
fall back to and ``ServiceTimeout`` reaches the caller.  The fallback value
never expires, so every masked timeout is logged and reported to an
optional observer; otherwise a dead backend would look healthy forever.
"""

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from today.services.base import DeadlineService, ServiceTimeout

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DegradedEvent:
    """A timeout that was answered with the fallback value."""

    value: str
    error: ServiceTimeout
    degraded_count: int
    last_success_at: float


@dataclass(frozen=True)
class FallbackStatus:
    """Point-in-time view of the fallback state, for health reporting."""

    primed: bool
    last_good: str | None
    degraded_count: int
    last_success_at: float | None
    last_degraded_at: float | None


class FallbackTodayService:
    """Wrap a deadline-aware service and mask its timeouts once primed."""

    def __init__(
        self,
        underlying: DeadlineService,
        *,
        on_degraded: Callable[[DegradedEvent], None] | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._underlying = underlying
        self._on_degraded = on_degraded
        self._clock = clock
        self._lock = threading.Lock()
        self._last_good: str | None = None
        self._last_success_at: float | None = None
        self._last_degraded_at: float | None = None
        self._degraded_count = 0

    @property
    def underlying(self) -> DeadlineService:
        return self._underlying

    @property
    def acceptable_delay(self) -> float:
        return self._underlying.acceptable_delay

    @property
    def primed(self) -> bool:
        """True once any wrapped call has succeeded."""
        with self._lock:
            return self._last_good is not None

    def status(self) -> FallbackStatus:
        with self._lock:
            return FallbackStatus(
                primed=self._last_good is not None,
                last_good=self._last_good,
                degraded_count=self._degraded_count,
                last_success_at=self._last_success_at,
                last_degraded_at=self._last_degraded_at,
            )

    def today_as_string(self, deadline: float | None = None) -> str:
        try:
            value = self._underlying.today_as_string(deadline)
        except ServiceTimeout as exc:
            with self._lock:
                fallback = self._last_good
                if fallback is None:
                    raise
                self._degraded_count += 1
                self._last_degraded_at = self._clock()
                event = DegradedEvent(
                    value=fallback,
                    error=exc,
                    degraded_count=self._degraded_count,
                    last_success_at=self._last_success_at,
                )
            logger.warning(
                "Served fallback value %s after timeout (%d masked so far): %s",
                fallback,
                event.degraded_count,
                exc,
            )
            if self._on_degraded is not None:
                self._on_degraded(event)
            return fallback

        with self._lock:
            self._last_good = value
            self._last_success_at = self._clock()
        return value
