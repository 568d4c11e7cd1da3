"""
Shared constants used across the planner.
"""

# Day name list for ordering (index matches date.weekday())
DAY_NAMES = [
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
    "Sunday",
]

# date.weekday() values for Saturday and Sunday
WEEKEND_DAYS = {5, 6}

# Default awake window, in each participant's own local hours
DEFAULT_AWAKE_START = 8
DEFAULT_AWAKE_END = 22

# Fallbacks used when a map click cannot be resolved
UNKNOWN_COUNTRY = "Unknown"
FALLBACK_TIMEZONE = "UTC"
TIMEZONE_FALLBACK_WARNING = " (Timezone could not be detected, using UTC)"

# Holiday type that counts as a day off for everyone in a country
PUBLIC_HOLIDAY_TYPE = "Public"

# Colour per country, assigned by position in the participant list
COUNTRY_COLORS = [
    "#f87171",  # red
    "#60a5fa",  # blue
    "#34d399",  # green
    "#fbbf24",  # yellow
    "#a78bfa",  # purple
    "#fb7185",  # pink
    "#f472b6",  # peach
    "#38bdf8",  # cyan
    "#facc15",  # gold
]

# Non-public observances are drawn in grey
OTHER_HOLIDAY_COLOR = "#d1d5db"

# Highlight colour per group filter
FILTER_COLORS = {
    "workday": "#34d399",
    "weekend": "#fbbf24",
    "holiday": "#f87171",
}

FILTER_TITLES = {
    "workday": "All: Workday",
    "weekend": "All: Weekend",
    "holiday": "All: Holiday",
}
