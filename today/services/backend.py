"""Slow backend — answers with today's date after an unpredictable delay.

Stands in for the expensive dependency every other layer protects against.
It knows nothing about caching, deadlines or fallbacks.
"""

import logging
import random
import time
from collections.abc import Callable
from datetime import date

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"

# Upper bound of the simulated latency, in seconds
DEFAULT_MAX_DELAY = 10.0


class BackendService:
    """Blocking date source with a random delay in ``[0, max_delay)`` seconds.

    ``delay``, ``today`` and ``sleep`` can be swapped out so tests control
    exactly how long each call takes and which date it reports.
    """

    def __init__(
        self,
        max_delay: float = DEFAULT_MAX_DELAY,
        *,
        delay: Callable[[], float] | None = None,
        today: Callable[[], date] = date.today,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._max_delay = max_delay
        self._delay = delay or (lambda: random.uniform(0, self._max_delay))
        self._today = today
        self._sleep = sleep

    def today_as_string(self) -> str:
        logger.info("Backend service working")
        self._sleep(self._delay())
        return self._today().strftime(DATE_FORMAT)
