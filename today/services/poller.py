"""Poll a today service on a fixed interval and report each outcome."""

import logging
import sys
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from today.services.base import ServiceTimeout, TodayService
from today.services.today import call_service

logger = logging.getLogger(__name__)


@dataclass
class PollSummary:
    """Outcome counts from a poll run."""

    successes: int = 0
    timeouts: int = 0


def poll(
    service: TodayService,
    *,
    interval: float = 1.0,
    iterations: int | None = None,
    deadline: float | None = None,
    out: TextIO | None = None,
    err: TextIO | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> PollSummary:
    """Call *service* every *interval* seconds, *iterations* times (None = forever).

    Successes go to *out* as ``RESULT: <value> after <ms> ms``; timeouts go
    to *err* as ``**** REQUEST timed out after <ms> ms``.
    """
    out = out or sys.stdout
    err = err or sys.stderr
    summary = PollSummary()
    count = 0

    while iterations is None or count < iterations:
        count += 1
        sleep(interval)

        start = clock()
        try:
            value = call_service(service, deadline)
        except ServiceTimeout:
            elapsed_ms = int((clock() - start) * 1000)
            summary.timeouts += 1
            print(f"**** REQUEST timed out after {elapsed_ms} ms", file=err)
            err.flush()
            continue

        elapsed_ms = int((clock() - start) * 1000)
        summary.successes += 1
        print(f"RESULT: {value} after {elapsed_ms} ms", file=out)
        out.flush()

    logger.info("Poll finished: %d ok, %d timed out", summary.successes, summary.timeouts)
    return summary
