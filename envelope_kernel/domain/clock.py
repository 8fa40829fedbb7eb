"""
Clock -- Injectable source of "now".

Only ``Period.current()`` asks for the time, to pick the default month
when a caller names none.  Engines and the overview calculator never read
the clock.

Architecture position:
    Kernel > Domain.  SystemClock is the one sanctioned read of wall time.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Returns timezone-aware instants."""

    @abstractmethod
    def now(self) -> datetime:
        ...


class SystemClock(Clock):
    """Current UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """Always returns the instant it was built with. Naive values are taken as UTC."""

    def __init__(self, fixed: datetime):
        if fixed.tzinfo is None:
            fixed = fixed.replace(tzinfo=timezone.utc)
        self._fixed = fixed

    def now(self) -> datetime:
        return self._fixed
