"""
Group availability across timezones.

Answers two questions for a set of participants:
- Which days in a range are common workdays, weekends or holidays
- Which hours of a day fall inside everyone's awake window

The awake window is one (start, end) pair of hours, applied to each
participant's own local clock. Hours are compared by converting the same
instant into every participant's timezone, so DST is handled per date.
"""

import enum
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable

from .constants import DEFAULT_AWAKE_END, DEFAULT_AWAKE_START, WEEKEND_DAYS
from .dates import CalendarRange
from .holidays import HolidayIndex
from .participants import Participant
from .timezone import format_datetime_in_timezone, localize_hour, to_local_date, to_timezone


class DayFilter(str, enum.Enum):
    workday = "workday"
    weekend = "weekend"
    holiday = "holiday"


@dataclass(frozen=True)
class DayClassification:
    """
    Group status of one calendar day.

    weekend and holiday can both be true (a Saturday that is a Public
    holiday everywhere); workday means neither.
    """

    date: date
    weekend: bool
    holiday: bool

    @property
    def workday(self) -> bool:
        return not self.weekend and not self.holiday

    @property
    def kind(self) -> DayFilter:
        """Single label for display: holiday, then weekend, then workday."""
        if self.holiday:
            return DayFilter.holiday
        if self.weekend:
            return DayFilter.weekend
        return DayFilter.workday

    def matches(self, day_filter: DayFilter | str) -> bool:
        day_filter = DayFilter(day_filter)
        if day_filter == DayFilter.workday:
            return self.workday
        if day_filter == DayFilter.weekend:
            return self.weekend
        return self.holiday


def is_weekend(day: date | datetime, display_timezone: str = "UTC") -> bool:
    """Saturday or Sunday, judged on the display timezone's calendar."""
    return to_local_date(day, display_timezone).weekday() in WEEKEND_DAYS


def classify_date(
    day: date | datetime,
    index: HolidayIndex,
    display_timezone: str = "UTC",
    public_dates: dict[str, set[date]] | None = None,
) -> DayClassification:
    """Classify a day for the whole group."""
    local_day = to_local_date(day, display_timezone)
    return DayClassification(
        date=local_day,
        weekend=local_day.weekday() in WEEKEND_DAYS,
        holiday=index.is_group_holiday(day, public_dates),
    )


def filter_range(
    calendar_range: CalendarRange,
    day_filter: DayFilter | str,
    index: HolidayIndex,
    display_timezone: str = "UTC",
) -> list[date]:
    """Days in the range (inclusive) matching the filter, in order."""
    day_filter = DayFilter(day_filter)
    public_dates = index.public_dates()
    return [
        day
        for day in calendar_range.days()
        if classify_date(day, index, display_timezone, public_dates).matches(day_filter)
    ]


def _validate_awake_window(awake_start: int, awake_end: int) -> None:
    if not 0 <= awake_start <= 24 or not 0 <= awake_end <= 24:
        raise ValueError(
            f"Awake window must be within 0-24, got {awake_start}-{awake_end}"
        )


def _validate_hour(hour: int) -> None:
    if not 0 <= hour <= 23:
        raise ValueError(f"Hour must be within 0-23, got {hour}")


def is_awake(local_hour: int, awake_start: int, awake_end: int) -> bool:
    return awake_start <= local_hour < awake_end


def common_awake_hours(
    day: date | datetime,
    participants: Iterable[Participant],
    display_timezone: str = "UTC",
    awake_start: int = DEFAULT_AWAKE_START,
    awake_end: int = DEFAULT_AWAKE_END,
) -> list[int]:
    """
    Hours of `day` (display timezone) when every participant is awake.

    For each hour h, the instant h:00 in the display timezone is converted
    to each participant's timezone; h qualifies if every local hour lies in
    [awake_start, awake_end).

    Returns:
        Sorted hours 0-23; empty when there are no participants
    """
    _validate_awake_window(awake_start, awake_end)
    participants = list(participants)
    if not participants:
        return []

    local_day = to_local_date(day, display_timezone)
    hours = []
    for h in range(24):
        instant = localize_hour(local_day, h, display_timezone)
        if all(
            is_awake(to_timezone(instant, p.zone).hour, awake_start, awake_end)
            for p in participants
        ):
            hours.append(h)
    return hours


def resolve_local_time(
    day: date | datetime,
    hour: int,
    display_timezone: str,
    participant: Participant,
) -> datetime:
    """The participant's wall-clock time at `hour`:00 on `day` (display timezone)."""
    _validate_hour(hour)
    local_day = to_local_date(day, display_timezone)
    instant = localize_hour(local_day, hour, display_timezone)
    return to_timezone(instant, participant.zone)


@dataclass
class MeetingTime:
    """Where a chosen meeting slot lands for one participant."""

    participant_id: str
    name: str
    timezone: str
    local: datetime

    @property
    def local_date(self) -> str:
        return self.local.strftime("%Y-%m-%d")

    @property
    def local_time(self) -> str:
        return self.local.strftime("%H:%M")

    @property
    def label(self) -> str:
        return format_datetime_in_timezone(self.local, self.timezone)

    def to_dict(self) -> dict:
        return {
            "participant_id": self.participant_id,
            "name": self.name,
            "timezone": self.timezone,
            "local_date": self.local_date,
            "local_time": self.local_time,
            "label": self.label,
        }


def resolve_meeting_times(
    day: date | datetime,
    hour: int,
    display_timezone: str,
    participants: Iterable[Participant],
) -> list[MeetingTime]:
    """Local meeting time for every participant, in participant order."""
    return [
        MeetingTime(
            participant_id=p.id,
            name=p.name,
            timezone=p.zone,
            local=resolve_local_time(day, hour, display_timezone, p),
        )
        for p in participants
    ]
