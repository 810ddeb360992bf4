"""Tests for CachingTodayService — single-slot TTL cache."""

import threading
import time

import pytest

from today.services.base import UnderlyingFailure
from today.services.cache import CacheEntry, CachingTodayService


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class CountingService:
    """Returns "day-1", "day-2", ... and counts calls.

    Set ``fail_with`` to make the following calls raise instead.
    """

    def __init__(self) -> None:
        self.calls = 0
        self.fail_with: Exception | None = None
        self._lock = threading.Lock()

    def today_as_string(self) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        with self._lock:
            self.calls += 1
            return f"day-{self.calls}"


class FailingService:
    def __init__(self, exc: Exception) -> None:
        self.exc = exc

    def today_as_string(self) -> str:
        raise self.exc


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def source():
    return CountingService()


class TestCacheValidity:
    """Answers within the validity period come from the cache."""

    def test_first_call_fetches_and_stores(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)

        assert cache.today_as_string() == "day-1"
        assert source.calls == 1
        assert cache.entry == CacheEntry("day-1", 1005.0)

    def test_repeat_calls_within_duration_skip_the_source(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        cache.today_as_string()

        for step in (0.0, 1.0, 4.999):
            clock.now = 1000.0 + step
            assert cache.today_as_string() == "day-1"

        assert source.calls == 1

    def test_empty_cache_has_no_entry(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        assert cache.entry is None


class TestCacheExpiry:
    """Expired entries trigger exactly one new fetch."""

    def test_call_after_expiry_refetches_once(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        cache.today_as_string()

        clock.now = 1006.0
        assert cache.today_as_string() == "day-2"
        assert cache.today_as_string() == "day-2"

        assert source.calls == 2
        assert cache.entry == CacheEntry("day-2", 1011.0)

    def test_entry_is_expired_at_exactly_expires_at(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        cache.today_as_string()

        clock.now = 1005.0
        assert cache.today_as_string() == "day-2"

    def test_expire_forces_refetch(self, source, clock):
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        cache.today_as_string()

        cache.expire()

        assert cache.entry is None
        assert cache.today_as_string() == "day-2"
        assert source.calls == 2

    def test_real_clock_expiry(self, source):
        cache = CachingTodayService(source, duration=0.01)
        cache.today_as_string()
        time.sleep(0.02)
        assert cache.today_as_string() == "day-2"


class TestCacheErrors:
    """Errors from the wrapped service pass through untouched."""

    def test_underlying_failure_propagates_unchanged(self, clock):
        failure = UnderlyingFailure("backend down")
        cache = CachingTodayService(FailingService(failure), duration=5.0, clock=clock)

        with pytest.raises(UnderlyingFailure) as exc_info:
            cache.today_as_string()

        assert exc_info.value is failure
        assert cache.entry is None

    def test_failure_keeps_the_previous_entry(self, clock):
        source = CountingService()
        cache = CachingTodayService(source, duration=5.0, clock=clock)
        cache.today_as_string()

        source.fail_with = RuntimeError("boom")
        clock.now = 1010.0
        with pytest.raises(RuntimeError, match="boom"):
            cache.today_as_string()

        assert cache.entry == CacheEntry("day-1", 1005.0)


class TestConcurrentMisses:
    """Concurrent misses each reach the source; the slot stays whole."""

    def test_racing_misses_all_get_a_value(self):
        barrier = threading.Barrier(8)

        class RacingService(CountingService):
            def today_as_string(self) -> str:
                # Hold every caller inside the miss until all have arrived
                barrier.wait(timeout=5)
                return super().today_as_string()

        source = RacingService()
        cache = CachingTodayService(source, duration=5.0)
        results: list[str] = []
        results_lock = threading.Lock()

        def call() -> None:
            value = cache.today_as_string()
            with results_lock:
                results.append(value)

        callers = [threading.Thread(target=call) for _ in range(8)]
        for t in callers:
            t.start()
        for t in callers:
            t.join(timeout=5)

        # No single-flight: every racing miss called the source
        assert source.calls == 8
        assert sorted(results) == sorted(f"day-{n}" for n in range(1, 9))

        # Last writer wins, and the entry is one of the stored answers
        entry = cache.entry
        assert isinstance(entry, CacheEntry)
        assert entry.value in results
        assert entry.expires_at > time.monotonic()

        # The stored entry now serves without another source call
        assert cache.today_as_string() == entry.value
        assert source.calls == 8
