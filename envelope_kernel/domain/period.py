"""
Period -- Calendar-month value object and half-open date ranges.

Responsibility:
    Represents the unit of allocation and reporting granularity (a calendar
    month, written ``YYYY-MM``) and converts it to the ``[start, end)``
    instant range used when bucketing transactions.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.

Invariants enforced:
    - A Period is always a valid calendar month from 0001-01 to 9999-11;
      9999-12 has no representable end instant and is rejected.
    - Periods are totally ordered chronologically and hashable.
    - ``end()`` of a period is exactly ``start()`` of the next one, so
      consecutive ranges never overlap and never leave gaps.

Failure modes:
    - InvalidPeriodError from ``Period.parse`` for anything that is not
      ``YYYY-MM`` with a two-digit month between 01 and 12, or that lies
      past the last supported period.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo

from envelope_kernel.domain.clock import Clock
from envelope_kernel.exceptions import InvalidPeriodError

_PERIOD_PATTERN = re.compile(r"^\d{4}-(0[1-9]|1[0-2])$")

# Last month whose end() still fits in datetime
_LAST = (9999, 11)

# Aware instants may sit up to a day past a naive month end before a
# time zone folds them back into the month
TIMEZONE_SLACK = timedelta(days=1)


@dataclass(frozen=True, slots=True, order=True)
class Period:
    """
    A calendar month.

    Contract:
        Construct via ``Period.parse("2026-02")`` or ``Period(2026, 2)``.
        ``str(period)`` round-trips through ``parse``.

    Guarantees:
        - Immutable and hashable; usable as a dict key.
        - Ordering follows the calendar.
    """

    year: int
    month: int

    def __post_init__(self) -> None:
        if not (1 <= self.year and 1 <= self.month <= 12) or (self.year, self.month) > _LAST:
            raise InvalidPeriodError(f"{self.year}-{self.month}")

    @classmethod
    def parse(cls, value: str | Period) -> Period:
        """Parse a ``YYYY-MM`` string. Period instances pass through."""
        if isinstance(value, Period):
            return value
        if not isinstance(value, str) or not _PERIOD_PATTERN.match(value):
            raise InvalidPeriodError(value)
        year, month = value.split("-")
        return cls(int(year), int(month))

    @classmethod
    def from_moment(cls, moment: date | datetime) -> Period:
        """Period containing a date or (wall-clock) datetime."""
        return cls(moment.year, moment.month)

    @classmethod
    def current(cls, clock: Clock, tz: tzinfo | None = None) -> Period:
        """Period containing the clock's current instant, optionally in ``tz``."""
        now = clock.now()
        if tz is not None:
            now = now.astimezone(tz)
        return cls.from_moment(now)

    def __str__(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    def next(self) -> Period:
        if self.month == 12:
            return Period(self.year + 1, 1)
        return Period(self.year, self.month + 1)

    def previous(self) -> Period:
        if self.month == 1:
            return Period(self.year - 1, 12)
        return Period(self.year, self.month - 1)

    def start(self) -> datetime:
        """First instant of the month (naive wall-clock)."""
        return datetime(self.year, self.month, 1)

    def end(self) -> datetime:
        """First instant of the following month (exclusive bound)."""
        if self.month == 12:
            return datetime(self.year + 1, 1, 1)
        return datetime(self.year, self.month + 1, 1)

    def date_range(self) -> DateRange:
        return DateRange(self.start(), self.end())

    @staticmethod
    def iterate(first: Period, last: Period) -> Iterator[Period]:
        """Yield every period from ``first`` to ``last`` inclusive, in order.

        Yields nothing when ``first`` is after ``last``.
        """
        current = first
        while current <= last:
            yield current
            if current == last:
                return
            current = current.next()


@dataclass(frozen=True, slots=True)
class DateRange:
    """Half-open instant range ``[start, end)`` on naive wall-clock datetimes."""

    start: datetime
    end: datetime

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise ValueError(
                f"DateRange end {self.end.isoformat()} must be after "
                f"start {self.start.isoformat()}"
            )

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def widened(self, slack: timedelta) -> DateRange:
        """The range grown by ``slack`` on both sides, clamped to datetime's limits."""
        start = self.start - slack if self.start - datetime.min > slack else datetime.min
        end = self.end + slack if datetime.max - self.end > slack else datetime.max
        return DateRange(start, end)


def to_wall_clock(moment: date | datetime, tz: tzinfo | None = None) -> datetime:
    """
    Normalise a transaction moment to a naive wall-clock datetime.

    Plain dates become midnight.  Naive datetimes are already wall-clock.
    Aware datetimes are converted to ``tz`` (when given) and then stripped
    of their offset, so they compare against ``Period.start()/end()``.
    """
    if isinstance(moment, datetime):
        if moment.tzinfo is None:
            return moment
        if tz is not None:
            moment = moment.astimezone(tz)
        return moment.replace(tzinfo=None)
    return datetime(moment.year, moment.month, moment.day)
