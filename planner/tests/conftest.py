"""Shared fixtures for planner tests."""

from datetime import date

import pytest

from planner.dates import CalendarRange
from planner.holidays import HolidayCache
from planner.participants import Participant

from factories import make_holiday


@pytest.fixture
def new_york():
    return Participant(
        id="40.71,-74.0", name="United States", timezone="America/New_York", country_code="US"
    )


@pytest.fixture
def tokyo():
    return Participant(id="35.68,139.69", name="Japan", timezone="Asia/Tokyo", country_code="JP")


@pytest.fixture
def london():
    return Participant(
        id="51.5,-0.12", name="United Kingdom", timezone="Europe/London", country_code="GB"
    )


@pytest.fixture
def july_2024():
    return CalendarRange(date(2024, 7, 1), date(2024, 7, 31))


@pytest.fixture
def holiday_cache():
    """Cache with US and JP holidays for 2024 (subset of real data)."""
    cache = HolidayCache()
    cache.put(
        "US",
        2024,
        [
            make_holiday("2024-01-01", "US", "New Year's Day"),
            make_holiday("2024-07-04", "US", "Independence Day"),
            make_holiday("2024-10-14", "US", "Columbus Day", "Optional"),
            make_holiday("2024-12-25", "US", "Christmas Day"),
        ],
    )
    cache.put(
        "JP",
        2024,
        [
            make_holiday("2024-01-01", "JP", "元日"),
            make_holiday("2024-07-15", "JP", "海の日"),
            make_holiday("2024-12-25", "JP", "クリスマス", "Observance"),
        ],
    )
    return cache

