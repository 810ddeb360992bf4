"""Poll the today service from the command line, once per interval.

Usage:
    python -m scripts.poll                       # configured mode, forever
    python -m scripts.poll --mode caching        # pick a layer composition
    python -m scripts.poll --iterations 10 --interval 0.5
"""

import argparse
import logging
import sys

from today.config import get_settings
from today.services.poller import poll
from today.services.today import MODES, build_today_service, close_service

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--mode", choices=MODES, default=settings.service_mode)
    parser.add_argument(
        "--interval", type=float, default=settings.poll_interval_seconds
    )
    parser.add_argument(
        "--iterations", type=int, default=None, help="stop after N calls"
    )
    parser.add_argument(
        "--deadline", type=float, default=None, help="override the deadline (s)"
    )
    args = parser.parse_args(argv)

    service = build_today_service(settings, args.mode)
    print(f"Polling {args.mode} service every {args.interval}s...")
    try:
        summary = poll(
            service,
            interval=args.interval,
            iterations=args.iterations,
            deadline=args.deadline,
        )
    except KeyboardInterrupt:
        return 0
    finally:
        close_service(service)

    print(f"\nDone: {summary.successes} ok, {summary.timeouts} timed out")
    return 1 if summary.successes == 0 else 0


if __name__ == "__main__":
    sys.exit(main())
