"""Application configuration via environment variables."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings

ServiceMode = Literal["backend", "caching", "deadline", "fallback"]


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Which layer composition serves /api/today (and the poll script)
    service_mode: ServiceMode = "fallback"

    # Layer durations, in seconds
    cache_duration_seconds: float = Field(5.0, gt=0)
    acceptable_delay_seconds: float = Field(7.0, gt=0)

    # The backend answers at most this many requests at once
    worker_pool_size: int = Field(2, ge=1)

    # Simulated backend latency is drawn from [0, backend_max_delay_seconds)
    backend_max_delay_seconds: float = Field(10.0, ge=0)

    # Poll script
    poll_interval_seconds: float = Field(1.0, ge=0)

    model_config = {"env_file": ".env", "extra": "ignore"}


@lru_cache
def get_settings() -> Settings:
    return Settings()
