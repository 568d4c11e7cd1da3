"""
Meeting planner routes.

Endpoints:
- POST /api/planner/calendar - Common workdays/weekends/holidays and calendar events
- POST /api/planner/hours - Hours of a day when all participants are awake
- POST /api/planner/meeting - Local time of a chosen slot for each participant

Requests carry the full participant list; nothing is stored between calls
except the shared holiday cache.
"""

import logging
from datetime import date
from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from planner import (
    CalendarRange,
    DayFilter,
    Participant,
    ParticipantRegistry,
    build_calendar_events,
    check_dst_warnings,
    common_awake_hours,
    current_local_time,
    default_display_timezone,
    filter_range,
    get_holiday_loader,
    month_range,
    resolve_meeting_times,
    timezone_options,
)
from planner.constants import DEFAULT_AWAKE_END, DEFAULT_AWAKE_START, FALLBACK_TIMEZONE

router = APIRouter(prefix="/api/planner", tags=["planner"])

logger = logging.getLogger(__name__)


class ParticipantIn(BaseModel):
    """Schema for a selected location."""

    id: str
    name: str = "Unknown"
    timezone: str = FALLBACK_TIMEZONE
    country_code: str = ""
    warning: str = ""
    lat: float | None = None
    lng: float | None = None

    def to_participant(self) -> Participant:
        return Participant(
            id=self.id,
            name=self.name,
            timezone=self.timezone,
            country_code=self.country_code.upper(),
            warning=self.warning,
            lat=self.lat,
            lng=self.lng,
        )


def _registry(participants: list[ParticipantIn]) -> ParticipantRegistry:
    return ParticipantRegistry([p.to_participant() for p in participants])


def _participant_out(participant: Participant) -> dict[str, Any]:
    return {
        "id": participant.id,
        "name": participant.name,
        "country_code": participant.country_code,
        "timezone": participant.timezone_label,
        "time": current_local_time(participant.zone),
    }


class CalendarRequest(BaseModel):
    """Schema for the calendar view."""

    participants: list[ParticipantIn]
    start: date | None = None
    end: date | None = None
    display_timezone: str = FALLBACK_TIMEZONE
    filter: DayFilter = DayFilter.workday


class HoursRequest(BaseModel):
    """Schema for the awake-hours view of one day."""

    participants: list[ParticipantIn]
    date: date
    display_timezone: str = FALLBACK_TIMEZONE
    awake_start: int = Field(DEFAULT_AWAKE_START, ge=0, le=23)
    awake_end: int = Field(DEFAULT_AWAKE_END, ge=1, le=24)


class MeetingRequest(BaseModel):
    """Schema for confirming a meeting slot."""

    participants: list[ParticipantIn]
    date: date
    hour: int = Field(ge=0, le=23)
    display_timezone: str = FALLBACK_TIMEZONE


@router.post("/calendar")
async def get_calendar(request: CalendarRequest) -> dict[str, Any]:
    """
    Compute the group calendar for a visible range.

    Loads any missing holidays first and waits for them to settle, then
    returns the dates matching the filter plus events for rendering.
    Defaults to the current month when no range is given.
    """
    registry = _registry(request.participants)
    display_timezone = default_display_timezone(registry, request.display_timezone)

    try:
        if request.start and request.end:
            calendar_range = CalendarRange(request.start, request.end)
        else:
            calendar_range = month_range(request.start or date.today())
    except ValueError as e:
        raise HTTPException(400, str(e))

    loader = get_holiday_loader()
    index = loader.index(registry.country_codes(), calendar_range)
    await loader.load(index)

    dates = filter_range(calendar_range, request.filter, index, display_timezone)
    events = build_calendar_events(index, dates, request.filter, display_timezone)
    range_start, range_end = calendar_range.bounds_in(display_timezone)

    return {
        "participants": [_participant_out(p) for p in registry],
        "display_timezone": display_timezone,
        "timezone_options": timezone_options(registry),
        "start": calendar_range.start.isoformat(),
        "end": calendar_range.end.isoformat(),
        "years": index.relevant_years(),
        "filter": request.filter.value,
        "dates": [d.isoformat() for d in dates],
        "events": [e.to_dict() for e in events],
        "dst_warnings": check_dst_warnings(registry.timezones(), range_start, range_end),
    }


@router.post("/hours")
async def get_common_hours(request: HoursRequest) -> dict[str, Any]:
    """Hours (display timezone) when every participant is inside the awake window."""
    registry = _registry(request.participants)
    try:
        hours = common_awake_hours(
            request.date,
            registry,
            request.display_timezone,
            request.awake_start,
            request.awake_end,
        )
    except ValueError as e:
        raise HTTPException(400, str(e))

    return {
        "date": request.date.isoformat(),
        "display_timezone": request.display_timezone,
        "awake_start": request.awake_start,
        "awake_end": request.awake_end,
        "hours": hours,
    }


@router.post("/meeting")
async def get_meeting_times(request: MeetingRequest) -> dict[str, Any]:
    """Where the chosen slot falls on each participant's clock."""
    registry = _registry(request.participants)
    try:
        times = resolve_meeting_times(
            request.date, request.hour, request.display_timezone, registry
        )
    except ValueError as e:
        raise HTTPException(400, str(e))

    logger.info(
        f"Meeting resolved for {len(times)} participants at "
        f"{request.date.isoformat()} {request.hour:02d}:00 {request.display_timezone}"
    )
    return {
        "date": request.date.isoformat(),
        "hour": request.hour,
        "display_timezone": request.display_timezone,
        "meeting": [t.to_dict() for t in times],
    }
