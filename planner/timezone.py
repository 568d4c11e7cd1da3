"""
Timezone conversion utilities.

All wall-clock construction goes through pytz so that offsets follow the
tz database (including DST) rather than fixed UTC arithmetic.
"""

from datetime import date, datetime

import pytz

from .constants import FALLBACK_TIMEZONE


def get_timezone(tz_name: str | None) -> pytz.BaseTzInfo:
    """
    Look up a pytz timezone, falling back to UTC.

    Args:
        tz_name: IANA identifier (e.g., "Asia/Tokyo"). Anything after the
            first space is ignored, so advisory suffixes are harmless.

    Returns:
        pytz timezone object (UTC for empty or unknown names)
    """
    name = strip_advisory(tz_name)
    if not name:
        return pytz.UTC
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def is_known_timezone(tz_name: str | None) -> bool:
    """Check whether the tz database knows this identifier."""
    name = strip_advisory(tz_name)
    return bool(name) and name in pytz.all_timezones_set


def strip_advisory(tz_name: str | None) -> str:
    """Return the raw identifier from a label like "UTC (Timezone could not...)"."""
    if not tz_name:
        return ""
    parts = tz_name.split()
    return parts[0] if parts else ""


def get_timezone_by_country_code(country_code: str | None) -> str:
    """
    Get a representative IANA timezone for a country.

    Multi-zone countries use the first zone the tz database lists for them
    (e.g. "US" -> "America/New_York"). This is an approximation: a holiday is
    placed on one zone's timeline, not per region.

    Returns:
        Timezone identifier, or "UTC" for empty/unknown codes
    """
    code = (country_code or "").upper()
    if not code:
        return FALLBACK_TIMEZONE
    zones = pytz.country_timezones.get(code)
    if zones:
        return zones[0]
    return FALLBACK_TIMEZONE


def localize_hour(day: date, hour: int, tz_name: str) -> datetime:
    """
    Build the aware datetime for `hour`:00:00 on `day` in a timezone.

    Hours that do not exist (spring-forward gap) are normalized forward,
    e.g. 02:00 on a US transition day becomes 03:00 EDT. Ambiguous hours
    (fall-back) resolve to the standard-time occurrence.
    """
    tz = get_timezone(tz_name)
    naive = datetime(day.year, day.month, day.day, hour, 0, 0)
    return tz.normalize(tz.localize(naive, is_dst=False))


def local_midnight(day: date, tz_name: str) -> datetime:
    """Start of `day` in the given timezone."""
    return localize_hour(day, 0, tz_name)


def to_timezone(dt: datetime, tz_name: str) -> datetime:
    """Convert an aware datetime (naive is treated as UTC) to a timezone."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(get_timezone(tz_name))


def to_local_date(value: date | datetime, tz_name: str) -> date:
    """
    Calendar date of `value` as seen in a timezone.

    Plain dates are already calendar days and are returned unchanged;
    datetimes are converted first.
    """
    if isinstance(value, datetime):
        return to_timezone(value, tz_name).date()
    return value


def get_dst_transitions(
    timezone_str: str,
    start: datetime,
    end: datetime,
) -> list[datetime]:
    """
    Find DST transitions for a timezone between two instants.

    Args:
        timezone_str: Timezone string (e.g., "America/New_York")
        start: Window start (aware, or naive treated as UTC)
        end: Window end (inclusive)

    Returns:
        List of UTC datetimes when the zone's offset changes
    """
    try:
        tz = pytz.timezone(strip_advisory(timezone_str))
    except pytz.UnknownTimeZoneError:
        return []

    # Note: Using pytz private attribute _utc_transition_times.
    # pytz doesn't expose a public API for DST transitions.
    if not hasattr(tz, "_utc_transition_times") or not tz._utc_transition_times:
        return []  # No DST for this timezone

    start = to_timezone(start, "UTC")
    end = to_timezone(end, "UTC")

    transitions = []
    for transition_time in tz._utc_transition_times:
        if transition_time is None:
            continue
        transition_dt = pytz.UTC.localize(transition_time)
        if start <= transition_dt <= end:
            transitions.append(transition_dt)

    return transitions


def check_dst_warnings(
    timezones: list[str],
    start: datetime,
    end: datetime,
) -> list[str]:
    """
    Check for DST transitions inside a window across multiple timezones.

    Returns:
        List of warning messages, one per transition date
    """
    tz_transitions: dict[str, list[datetime]] = {}

    for tz_str in sorted(set(timezones)):
        if not tz_str or tz_str == "UTC":
            continue
        transitions = get_dst_transitions(tz_str, start, end)
        if transitions:
            tz_transitions[tz_str] = transitions

    if not tz_transitions:
        return []

    # Group timezones by transition date
    date_to_timezones: dict[date, list[str]] = {}
    for tz_str, transitions in tz_transitions.items():
        for dt in transitions:
            date_to_timezones.setdefault(dt.date(), []).append(tz_str)

    warnings = []
    for day, affected_tzs in sorted(date_to_timezones.items()):
        date_str = day.strftime("%B %d, %Y")
        if len(affected_tzs) == 1:
            warnings.append(
                f"DST transition on {date_str} for {affected_tzs[0]}. "
                f"Local meeting times shift by 1 hour for participants in this timezone."
            )
        else:
            tz_list = ", ".join(affected_tzs[:3])
            if len(affected_tzs) > 3:
                tz_list += f" and {len(affected_tzs) - 3} more"
            warnings.append(
                f"DST transition on {date_str} for {tz_list}. "
                f"Local meeting times shift by 1 hour for affected participants."
            )

    return warnings


def format_datetime_in_timezone(
    utc_dt: datetime,
    tz_name: str,
) -> str:
    """
    Format a datetime in a participant's timezone with explicit offset.

    Args:
        utc_dt: Aware datetime (naive datetimes treated as UTC)
        tz_name: Timezone string (e.g., "America/New_York")

    Returns:
        Formatted string like "Wednesday at 3:00 PM (UTC-5)"
    """
    local_dt = to_timezone(utc_dt, tz_name)

    day_name = local_dt.strftime("%A")
    time_str = local_dt.strftime("%I:%M %p").lstrip("0")  # "3:00 PM" not "03:00 PM"

    # Get UTC offset string (e.g., "UTC+7" or "UTC-5")
    offset = local_dt.strftime("%z")  # "+0700" or "-0500"
    if offset:
        hours = int(offset[:3])
        minutes = int(offset[0] + offset[3:5])
        if minutes == 0:
            offset_str = f"UTC{hours:+d}" if hours != 0 else "UTC"
        else:
            offset_str = f"UTC{hours:+d}:{abs(minutes):02d}"
    else:
        offset_str = "UTC"

    return f"{day_name} at {time_str} ({offset_str})"


def current_local_time(tz_name: str, now: datetime | None = None) -> str:
    """
    Current wall-clock time in a timezone, e.g. "14:05, Wed".

    Args:
        tz_name: Timezone string
        now: Reference instant (defaults to the current time)
    """
    if now is None:
        now = datetime.now(pytz.UTC)
    return to_timezone(now, tz_name).strftime("%H:%M, %a")
