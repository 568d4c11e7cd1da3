"""Calendar events handed to the presentation layer."""

from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from .availability import DayFilter
from .constants import (
    COUNTRY_COLORS,
    FILTER_COLORS,
    FILTER_TITLES,
    OTHER_HOLIDAY_COLOR,
)
from .holidays import HolidayIndex, project_to_display
from .timezone import local_midnight


@dataclass
class EventResource:
    """Tag telling the renderer what an event is and how to colour it."""

    type: str  # "countryHoliday", "otherHoliday" or "filter"
    color: str
    code: Optional[str] = None
    holiday_type: Optional[str] = None
    description: Optional[str] = None
    local_name: Optional[str] = None
    filter_type: Optional[str] = None


@dataclass
class Event:
    title: str
    start: datetime
    end: datetime
    all_day: bool
    resource: EventResource

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "allDay": self.all_day,
            "resource": {k: v for k, v in asdict(self.resource).items() if v is not None},
        }


def build_holiday_events(index: HolidayIndex, display_timezone: str) -> list[Event]:
    """
    One event per holiday per country that overlaps the visible range.

    Public holidays get the country's palette colour; other observances are
    grey. Holidays are placed on the display timezone's timeline, so a
    foreign all-day holiday may cover parts of two displayed days.
    """
    if index.calendar_range is None:
        return []
    range_start, range_end = index.calendar_range.bounds_in(display_timezone)

    events = []
    for idx, (code, holidays) in enumerate(index.by_country().items()):
        for holiday in holidays:
            start, end = project_to_display(holiday, display_timezone)
            if not (end > range_start and start < range_end):
                continue
            color = (
                COUNTRY_COLORS[idx % len(COUNTRY_COLORS)]
                if holiday.is_public
                else OTHER_HOLIDAY_COLOR
            )
            events.append(
                Event(
                    title=f"{code}: {holiday.local_name}",
                    start=start,
                    end=end,
                    all_day=True,
                    resource=EventResource(
                        type="countryHoliday" if holiday.is_public else "otherHoliday",
                        color=color,
                        code=code,
                        holiday_type=holiday.type,
                        description=holiday.name,
                        local_name=holiday.local_name,
                    ),
                )
            )
    return events


def build_filter_events(
    dates: Iterable[date],
    day_filter: DayFilter | str,
    display_timezone: str,
) -> list[Event]:
    """All-day highlight for every day that passed the group filter."""
    day_filter = DayFilter(day_filter)
    events = []
    for day in dates:
        start = local_midnight(day, display_timezone)
        events.append(
            Event(
                title=FILTER_TITLES[day_filter.value],
                start=start,
                end=start,
                all_day=True,
                resource=EventResource(
                    type="filter",
                    color=FILTER_COLORS[day_filter.value],
                    filter_type=day_filter.value,
                ),
            )
        )
    return events


def build_calendar_events(
    index: HolidayIndex,
    filtered_dates: Iterable[date],
    day_filter: DayFilter | str,
    display_timezone: str,
) -> list[Event]:
    """Country holidays followed by the filter highlights."""
    return build_holiday_events(index, display_timezone) + build_filter_events(
        filtered_dates, day_filter, display_timezone
    )
