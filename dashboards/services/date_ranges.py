"""
Calendar helpers for dashboard statistics.

All bucketing happens on UTC calendar days: a range bound ``date`` covers
``00:00:00`` to ``23:59:59.999999`` UTC of that day.
"""

import calendar
from datetime import date, datetime, time, timedelta, timezone as dt_timezone
from typing import List, Optional, Tuple


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min, tzinfo=dt_timezone.utc)


def end_of_day(day: date) -> datetime:
    return datetime.combine(day, time.max, tzinfo=dt_timezone.utc)


def utc_date(value: datetime) -> date:
    """Calendar day of an aware timestamp, in UTC."""
    return value.astimezone(dt_timezone.utc).date()


def month_bounds(today: date, months_back: int) -> Tuple[datetime, datetime]:
    """
    First and last instant of the calendar month ``months_back`` months
    before the month of ``today``.
    """
    year, month = today.year, today.month - months_back
    while month <= 0:
        month += 12
        year -= 1
    last_day = calendar.monthrange(year, month)[1]
    return start_of_day(date(year, month, 1)), end_of_day(date(year, month, last_day))


class DateRange:
    """
    Inclusive range of calendar days.
    """

    def __init__(self, start: date, end: date):
        if start > end:
            raise ValueError(f"Range start {start} is after its end {end}")
        self.start = start
        self.end = end

    @classmethod
    def single_day(cls, day: date) -> 'DateRange':
        return cls(day, day)

    @classmethod
    def trailing(cls, today: date, days: int) -> 'DateRange':
        """The ``days`` calendar days ending with ``today``."""
        return cls(today - timedelta(days=days - 1), today)

    @classmethod
    def from_bounds(cls, start: Optional[date], end: Optional[date], today: date) -> 'DateRange':
        """
        Build a range from optional request bounds.
        A missing start is today; a missing end is the start day.
        """
        start = start or today
        return cls(start, end or start)

    @property
    def start_at(self) -> datetime:
        return start_of_day(self.start)

    @property
    def end_at(self) -> datetime:
        return end_of_day(self.end)

    @property
    def day_count(self) -> int:
        return (self.end - self.start).days + 1

    def days(self) -> List[date]:
        return [self.start + timedelta(days=offset) for offset in range(self.day_count)]

    def as_dict(self):
        return {'from': self.start.isoformat(), 'to': self.end.isoformat()}

    def __eq__(self, other):
        if not isinstance(other, DateRange):
            return NotImplemented
        return (self.start, self.end) == (other.start, other.end)

    def __repr__(self):
        return f"DateRange({self.start.isoformat()}, {self.end.isoformat()})"
