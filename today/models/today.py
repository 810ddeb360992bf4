"""Response models for the today endpoints."""

from pydantic import BaseModel


class TodayResponse(BaseModel):
    """Today's date and how long it took to get it."""

    value: str  # YYYY-MM-DD
    latency_ms: int
    mode: str


class ServiceStatus(BaseModel):
    """Fallback state, so masked timeouts are visible from outside."""

    mode: str
    primed: bool | None = None
    last_good: str | None = None
    degraded_count: int = 0
    last_success_at: float | None = None  # unix timestamp
    last_degraded_at: float | None = None
