"""Layer composition and the application-wide today service.

Builds one of four stacks, each adding one layer to the previous:

    backend   BackendService
    caching   Caching(Backend)
    deadline  Deadline(Caching(Backend))
    fallback  Fallback(Deadline(Caching(Backend)))
"""

import logging

from today.config import ServiceMode, Settings, get_settings
from today.services.backend import BackendService
from today.services.base import DeadlineService, TodayService
from today.services.cache import CachingTodayService
from today.services.deadline import DeadlineTodayService
from today.services.fallback import FallbackStatus, FallbackTodayService

logger = logging.getLogger(__name__)

MODES: tuple[str, ...] = ("backend", "caching", "deadline", "fallback")

# Module-level service (built lazily, lives for the process lifetime)
_service: TodayService | None = None


def build_today_service(
    settings: Settings, mode: ServiceMode | None = None
) -> TodayService:
    """Compose the layers selected by *mode* (defaults to the configured mode)."""
    mode = mode or settings.service_mode
    if mode not in MODES:
        raise ValueError(f"unknown service mode: {mode!r}")

    service: TodayService = BackendService(settings.backend_max_delay_seconds)
    if mode == "backend":
        return service

    service = CachingTodayService(service, settings.cache_duration_seconds)
    if mode == "caching":
        return service

    service = DeadlineTodayService(
        service,
        settings.acceptable_delay_seconds,
        max_workers=settings.worker_pool_size,
    )
    if mode == "deadline":
        return service

    return FallbackTodayService(service)


def get_today_service() -> TodayService:
    """Return the shared today service, building it on first call."""
    global _service
    if _service is None:
        settings = get_settings()
        _service = build_today_service(settings)
        logger.info("Built %s today service", settings.service_mode)
    return _service


def close_service(service: TodayService) -> None:
    """Release the worker pool held by *service*, if any."""
    if isinstance(service, FallbackTodayService):
        service = service.underlying
    if isinstance(service, DeadlineTodayService):
        service.close()


def close_today_service() -> None:
    """Shut down the shared service's worker pool and forget it."""
    global _service
    if _service is not None:
        close_service(_service)
        _service = None


def call_service(service: TodayService, deadline: float | None = None) -> str:
    """Ask *service* for today's date, passing *deadline* where it applies.

    Stacks without a deadline layer block for as long as the backend takes.
    """
    if isinstance(service, DeadlineService):
        return service.today_as_string(deadline)
    return service.today_as_string()


def get_current_value(deadline: float | None = None) -> str:
    """Today's date from the shared service.

    Raises:
        ServiceTimeout: no fresh value in time and nothing to fall back to.
    """
    return call_service(get_today_service(), deadline)


def get_fallback_status() -> FallbackStatus | None:
    """Fallback state of the shared service, or None without a fallback layer."""
    service = get_today_service()
    if isinstance(service, FallbackTodayService):
        return service.status()
    return None
