"""The capabilities layers implement, and the errors they raise."""

from typing import Protocol, runtime_checkable


class TodayService(Protocol):
    """Anything that can answer with today's date as ``YYYY-MM-DD``."""

    def today_as_string(self) -> str: ...


@runtime_checkable
class DeadlineService(Protocol):
    """A today service that bounds each call by a deadline, in seconds.

    ``deadline=None`` means the service's own ``acceptable_delay``.
    """

    @property
    def acceptable_delay(self) -> float: ...

    def today_as_string(self, deadline: float | None = None) -> str: ...


class ServiceTimeout(TimeoutError):
    """No fresh value arrived within the caller's deadline."""

    def __init__(self, deadline: float, message: str | None = None) -> None:
        self.deadline = deadline
        super().__init__(message or f"no result within {deadline:.3f}s")


class UnderlyingFailure(Exception):
    """The wrapped source raised instead of merely being slow."""

    pass
