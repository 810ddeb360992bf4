"""Shared fixtures for today-service tests."""

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from today.config import get_settings

    get_settings.cache_clear()

    # 2. Shared today service (and its worker pool)
    from today.services.today import close_today_service

    close_today_service()


@pytest.fixture
def mock_settings(monkeypatch):
    """Provide a Settings object with fast, deterministic test defaults."""
    from today.config import Settings, get_settings

    test_settings = Settings(
        service_mode="fallback",
        cache_duration_seconds=5.0,
        acceptable_delay_seconds=1.0,
        worker_pool_size=2,
        backend_max_delay_seconds=0.0,
        poll_interval_seconds=0.0,
    )

    get_settings.cache_clear()
    monkeypatch.setattr("today.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    # (from today.config import get_settings creates a local binding that
    # the today.config monkeypatch above does not affect)
    for mod_path in [
        "today.services.today",
        "today.routers.today",
        "today.main",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings
