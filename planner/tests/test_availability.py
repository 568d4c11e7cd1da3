"""Tests for group day classification and common awake hours."""

from datetime import date, datetime, timedelta
from unittest.mock import patch

import pytest
import pytz

from planner.availability import (
    DayFilter,
    classify_date,
    common_awake_hours,
    filter_range,
    is_weekend,
    resolve_local_time,
    resolve_meeting_times,
)
from planner.dates import CalendarRange
from planner.holidays import HolidayCache, HolidayIndex
from planner.participants import Participant, ParticipantRegistry
from planner.timezone import to_timezone

from factories import make_holiday, make_index


@pytest.fixture
def utc_participant():
    return Participant(id="0,0", name="Unknown", timezone="UTC")


class TestClassifyDate:
    def test_public_holiday_is_holiday(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        result = classify_date(date(2024, 7, 4), index, "America/New_York")

        assert result.holiday
        assert result.kind == DayFilter.holiday
        assert not result.workday

    def test_adjacent_weekday_is_workday(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        result = classify_date(date(2024, 7, 5), index, "America/New_York")

        assert result.kind == DayFilter.workday
        assert result.matches("workday")

    def test_weekend(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        result = classify_date(date(2024, 7, 6), index)

        assert result.weekend
        assert result.kind == DayFilter.weekend

    def test_weekend_holiday_matches_both_filters(self):
        """2022-12-25 is a Sunday and a Public holiday."""
        cache = HolidayCache()
        cache.put("US", 2022, [make_holiday("2022-12-25", "US", "Christmas Day")])
        index = HolidayIndex(cache, ["US"], CalendarRange(date(2022, 12, 1), date(2022, 12, 31)))

        result = classify_date(date(2022, 12, 25), index)

        assert result.matches(DayFilter.weekend)
        assert result.matches(DayFilter.holiday)
        assert not result.matches(DayFilter.workday)

    def test_only_one_country_off_is_workday(self, holiday_cache, new_york, tokyo, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york, tokyo]), july_2024)

        assert classify_date(date(2024, 7, 4), index).workday

    def test_weekend_uses_display_calendar_for_instants(self):
        # Friday 20:00 in New York is already Saturday in Tokyo
        instant = pytz.timezone("America/New_York").localize(datetime(2024, 7, 5, 20, 0))

        assert not is_weekend(instant, "America/New_York")
        assert is_weekend(instant, "Asia/Tokyo")


class TestFilterRange:
    def test_workdays_exclude_group_holidays(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        workdays = filter_range(july_2024, "workday", index)

        assert len(workdays) == 22
        assert date(2024, 7, 4) not in workdays
        assert workdays[0] == date(2024, 7, 1)
        assert workdays == sorted(workdays)

    def test_weekends(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        weekends = filter_range(july_2024, DayFilter.weekend, index)

        assert [d.day for d in weekends] == [6, 7, 13, 14, 20, 21, 27, 28]

    def test_holidays(self, holiday_cache, new_york, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry([new_york]), july_2024)

        assert filter_range(july_2024, "holiday", index) == [date(2024, 7, 4)]

    def test_empty_registry_has_no_holidays(self, holiday_cache, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry(), july_2024)

        assert filter_range(july_2024, "holiday", index) == []
        assert len(filter_range(july_2024, "workday", index)) == 23

    def test_holidays_merged_once_per_range(self):
        cache = HolidayCache()
        for year in range(2024, 2028):
            cache.put("US", year, [make_holiday(f"{year}-12-25", "US", "Christmas Day")])
            cache.put("GB", year, [make_holiday(f"{year}-12-25", "GB", "Christmas Day")])
        four_years = CalendarRange(date(2024, 1, 1), date(2027, 12, 31))
        index = HolidayIndex(cache, ["US", "GB"], four_years)

        with patch.object(index, "by_country", wraps=index.by_country) as by_country:
            holidays = filter_range(four_years, "holiday", index)

        assert by_country.call_count == 1
        assert holidays == [date(year, 12, 25) for year in range(2024, 2028)]

    def test_unknown_filter_rejected(self, holiday_cache, july_2024):
        index = make_index(holiday_cache, ParticipantRegistry(), july_2024)

        with pytest.raises(ValueError):
            filter_range(july_2024, "holidays", index)


class TestCommonAwakeHours:
    def test_new_york_and_tokyo_never_overlap_in_january(self, new_york, tokyo):
        """NY 9-18 EST is 14:00-23:00 UTC, Tokyo 9-18 JST is 00:00-09:00 UTC."""
        hours = common_awake_hours(date(2024, 1, 15), [new_york, tokyo], "UTC", 9, 18)

        assert hours == []

    def test_london_and_new_york_in_winter(self, london, new_york):
        hours = common_awake_hours(date(2024, 1, 15), [london, new_york], "UTC", 9, 18)

        assert hours == [14, 15, 16, 17]

    def test_london_and_new_york_in_summer(self, london, new_york):
        """Both zones are on summer time, so the UTC window moves an hour earlier."""
        hours = common_awake_hours(date(2024, 7, 15), [london, new_york], "UTC", 9, 18)

        assert hours == [13, 14, 15, 16]

    def test_hours_are_in_display_timezone(self, london, new_york):
        hours = common_awake_hours(
            date(2024, 1, 15), [london, new_york], "America/New_York", 9, 18
        )

        assert hours == [9, 10, 11, 12]

    def test_dst_transition_day(self, utc_participant):
        """New York loses 02:00 on 2024-03-10, shifting the evening hours."""
        before = common_awake_hours(
            date(2024, 3, 9), [utc_participant], "America/New_York", 0, 7
        )
        after = common_awake_hours(
            date(2024, 3, 10), [utc_participant], "America/New_York", 0, 7
        )

        assert before == [0, 1, 19, 20, 21, 22, 23]
        assert after == [0, 1, 20, 21, 22, 23]

    def test_no_participants_means_no_hours(self):
        assert common_awake_hours(date(2024, 1, 15), [], "UTC", 0, 24) == []

    def test_registry_is_accepted(self, tokyo):
        registry = ParticipantRegistry([tokyo])

        hours = common_awake_hours(date(2024, 1, 15), registry, "Asia/Tokyo", 9, 18)

        assert hours == list(range(9, 18))

    def test_result_is_subset_of_day_hours(self, london, new_york, tokyo):
        hours = common_awake_hours(date(2024, 7, 15), [london, new_york, tokyo], "UTC", 0, 24)

        assert hours == list(range(24))
        assert set(hours) <= set(range(24))

    def test_empty_window(self, london):
        assert common_awake_hours(date(2024, 1, 15), [london], "UTC", 18, 9) == []

    def test_invalid_window_rejected(self, london):
        with pytest.raises(ValueError):
            common_awake_hours(date(2024, 1, 15), [london], "UTC", -1, 25)


class TestResolveLocalTime:
    def test_participant_wall_clock(self, tokyo):
        local = resolve_local_time(date(2024, 1, 15), 10, "Europe/London", tokyo)

        assert local.strftime("%Y-%m-%d %H:%M") == "2024-01-15 19:00"

    def test_crosses_date_line(self, new_york):
        local = resolve_local_time(date(2024, 1, 15), 2, "Asia/Tokyo", new_york)

        assert local.strftime("%Y-%m-%d %H:%M") == "2024-01-14 12:00"

    def test_round_trip_back_to_display_hour(self, london, new_york, tokyo):
        for participant in (london, new_york, tokyo):
            for hour in (0, 7, 13, 23):
                local = resolve_local_time(date(2024, 7, 15), hour, "Asia/Tokyo", participant)
                back = to_timezone(local, "Asia/Tokyo")

                assert back.date() == date(2024, 7, 15)
                assert back.hour == hour

    def test_round_trip_on_spring_forward_day(self, london, tokyo):
        """02:00 does not exist in New York on 2024-03-10 and becomes 03:00 EDT."""
        for participant in (london, tokyo):
            for hour in (0, 1, 3, 12, 23):
                local = resolve_local_time(date(2024, 3, 10), hour, "America/New_York", participant)
                back = to_timezone(local, "America/New_York")

                assert back.date() == date(2024, 3, 10)
                assert back.hour == hour

            local = resolve_local_time(date(2024, 3, 10), 2, "America/New_York", participant)
            back = to_timezone(local, "America/New_York")
            assert back.hour == 3
            assert back.utcoffset() == timedelta(hours=-4)

    def test_round_trip_on_fall_back_day(self, london, tokyo):
        """01:00 happens twice in New York on 2024-11-03; the EST one is chosen."""
        for participant in (london, tokyo):
            for hour in (0, 1, 2, 12, 23):
                local = resolve_local_time(date(2024, 11, 3), hour, "America/New_York", participant)
                back = to_timezone(local, "America/New_York")

                assert back.date() == date(2024, 11, 3)
                assert back.hour == hour

            local = resolve_local_time(date(2024, 11, 3), 1, "America/New_York", participant)
            assert local.astimezone(pytz.UTC).hour == 6

    def test_invalid_hour(self, tokyo):
        with pytest.raises(ValueError):
            resolve_local_time(date(2024, 1, 15), 24, "UTC", tokyo)


def test_resolve_meeting_times(london, tokyo):
    times = resolve_meeting_times(date(2024, 1, 10), 15, "UTC", [london, tokyo])

    assert [t.participant_id for t in times] == [london.id, tokyo.id]
    assert times[0].local_time == "15:00"
    assert times[1].local_date == "2024-01-11"
    assert times[1].local_time == "00:00"
    assert times[1].label == "Thursday at 12:00 AM (UTC+9)"
