"""
Meeting planner business logic - platform-agnostic.
Can be used by the web API, a CLI, or any other interface.
"""

# Constants
from .constants import (
    DAY_NAMES, DEFAULT_AWAKE_START, DEFAULT_AWAKE_END,
    PUBLIC_HOLIDAY_TYPE, COUNTRY_COLORS,
)

# Timezone utilities
from .timezone import (
    get_timezone, get_timezone_by_country_code, localize_hour,
    check_dst_warnings, format_datetime_in_timezone, current_local_time,
)

# Date ranges
from .dates import CalendarRange, get_years_in_range, month_range

# Participants
from .participants import (
    Participant, ParticipantRegistry, LocationResolver,
    participant_from_location, default_display_timezone, timezone_options,
)

# Holidays
from .holidays import (
    HolidayRecord, HolidayCache, HolidayIndex,
    HolidayError, HolidaysNotSettledError, project_to_display, fetch_key,
)
from .holiday_fetcher import (
    HolidayFetchError, HolidayLoader, fetch_holidays,
    get_holiday_loader, set_holiday_loader,
)

# Availability
from .availability import (
    DayFilter, DayClassification, MeetingTime,
    is_weekend, classify_date, filter_range,
    common_awake_hours, resolve_local_time, resolve_meeting_times,
)

# Calendar events
from .events import Event, EventResource, build_calendar_events

__all__ = [
    # Constants
    'DAY_NAMES', 'DEFAULT_AWAKE_START', 'DEFAULT_AWAKE_END',
    'PUBLIC_HOLIDAY_TYPE', 'COUNTRY_COLORS',
    # Timezone
    'get_timezone', 'get_timezone_by_country_code', 'localize_hour',
    'check_dst_warnings', 'format_datetime_in_timezone', 'current_local_time',
    # Dates
    'CalendarRange', 'get_years_in_range', 'month_range',
    # Participants
    'Participant', 'ParticipantRegistry', 'LocationResolver',
    'participant_from_location', 'default_display_timezone', 'timezone_options',
    # Holidays
    'HolidayRecord', 'HolidayCache', 'HolidayIndex',
    'HolidayError', 'HolidaysNotSettledError', 'project_to_display', 'fetch_key',
    'HolidayFetchError', 'HolidayLoader', 'fetch_holidays',
    'get_holiday_loader', 'set_holiday_loader',
    # Availability
    'DayFilter', 'DayClassification', 'MeetingTime',
    'is_weekend', 'classify_date', 'filter_range',
    'common_awake_hours', 'resolve_local_time', 'resolve_meeting_times',
    # Events
    'Event', 'EventResource', 'build_calendar_events',
]
