"""Today's date endpoint — the fully composed service over HTTP."""

import logging
import time

from fastapi import APIRouter, HTTPException, Query

from today.config import get_settings
from today.models.today import ServiceStatus, TodayResponse
from today.services.base import ServiceTimeout
from today.services.today import get_current_value, get_fallback_status

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/today", tags=["today"])


# Plain ``def``: the service blocks, so FastAPI runs it in its threadpool
@router.get("", response_model=TodayResponse)
def read_today(
    deadline_ms: int | None = Query(
        default=None,
        ge=1,
        description="Maximum wait for a fresh value (defaults to the configured delay)",
    ),
):
    """Get today's date, within the deadline or from the fallback."""
    deadline = deadline_ms / 1000 if deadline_ms is not None else None
    start = time.monotonic()
    try:
        value = get_current_value(deadline)
    except ServiceTimeout as exc:
        elapsed_ms = int((time.monotonic() - start) * 1000)
        logger.warning("Request timed out after %d ms", elapsed_ms)
        raise HTTPException(
            status_code=504, detail=f"Request timed out after {elapsed_ms} ms"
        ) from exc

    return TodayResponse(
        value=value,
        latency_ms=int((time.monotonic() - start) * 1000),
        mode=get_settings().service_mode,
    )


@router.get("/status", response_model=ServiceStatus)
def read_status():
    """Report whether timeouts are currently being masked by the fallback."""
    mode = get_settings().service_mode
    status = get_fallback_status()
    if status is None:
        return ServiceStatus(mode=mode)
    return ServiceStatus(
        mode=mode,
        primed=status.primed,
        last_good=status.last_good,
        degraded_count=status.degraded_count,
        last_success_at=status.last_success_at,
        last_degraded_at=status.last_degraded_at,
    )
