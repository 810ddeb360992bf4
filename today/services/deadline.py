"""Deadline-bounded calls: race the wrapped service against a timer.

The wrapped call runs on a small, fixed-size thread pool that models the
backend's real concurrency limit.  The caller waits at most ``deadline``
seconds; a call that is still running then is abandoned, never interrupted.
It keeps its worker until it finishes on its own, and whatever it returns
is dropped.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeout

from today.services.base import ServiceTimeout, TodayService

logger = logging.getLogger(__name__)

# The backend can serve this many requests at once
DEFAULT_MAX_WORKERS = 2


class DeadlineTodayService:
    """Return a fresh answer within the deadline or raise ``ServiceTimeout``.

    Any error raised by the wrapped call is reported as ``ServiceTimeout``
    too: the caller only learns whether a fresh value arrived in time.
    Time spent queueing for a free worker counts against the deadline.
    """

    def __init__(
        self,
        underlying: TodayService,
        acceptable_delay: float,
        *,
        executor: ThreadPoolExecutor | None = None,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        self._underlying = underlying
        self._acceptable_delay = acceptable_delay
        self._owns_executor = executor is None
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="today-backend"
        )

    @property
    def acceptable_delay(self) -> float:
        return self._acceptable_delay

    def today_as_string(self, deadline: float | None = None) -> str:
        timeout = self._acceptable_delay if deadline is None else deadline
        start = time.monotonic()
        future = self._executor.submit(self._underlying.today_as_string)
        try:
            return future.result(timeout=timeout)
        except FutureTimeout:
            # Only succeeds if the call never left the queue
            future.cancel()
            logger.warning(
                "No result after %.0f ms (deadline %.0f ms), abandoning call",
                (time.monotonic() - start) * 1000,
                timeout * 1000,
            )
            raise ServiceTimeout(timeout) from None
        except Exception as exc:
            logger.warning("Wrapped call failed: %s", exc)
            raise ServiceTimeout(timeout, f"wrapped call failed: {exc}") from exc

    def close(self) -> None:
        """Shut the pool down without waiting for abandoned calls."""
        if self._owns_executor:
            self._executor.shutdown(wait=False, cancel_futures=True)
