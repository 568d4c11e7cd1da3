"""
Calendar range helpers.

A CalendarRange is the inclusive window of days currently visible in the
calendar. It decides which holiday years need to be loaded.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from .timezone import local_midnight


@dataclass(frozen=True)
class CalendarRange:
    """Inclusive range of calendar days."""

    start: date
    end: date

    def __post_init__(self):
        if self.end < self.start:
            raise ValueError(
                f"Range end {self.end.isoformat()} is before start {self.start.isoformat()}"
            )

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> Iterator[date]:
        """Iterate every day from start to end, inclusive."""
        return iter_dates(self.start, self.end)

    def bounds_in(self, tz_name: str) -> tuple[datetime, datetime]:
        """
        Instants bounding the range in a timezone.

        Returns:
            (midnight at the start day, midnight after the end day)
        """
        return (
            local_midnight(self.start, tz_name),
            local_midnight(self.end + timedelta(days=1), tz_name),
        )


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield each day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def get_years_in_range(calendar_range: CalendarRange | None) -> list[int]:
    """
    Calendar years touched by a range, in ascending order.

    Walks day by day so the end date's year is always included, even when
    the range only just crosses into it.
    """
    if calendar_range is None:
        return []
    years: list[int] = []
    for day in calendar_range.days():
        if day.year not in years:
            years.append(day.year)
    return years


def month_range(today: date) -> CalendarRange:
    """The whole month containing `today` (the calendar's initial view)."""
    last_day = calendar.monthrange(today.year, today.month)[1]
    return CalendarRange(
        start=date(today.year, today.month, 1),
        end=date(today.year, today.month, last_day),
    )
