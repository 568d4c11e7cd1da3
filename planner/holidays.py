"""
Holiday cache and merge index.

Holidays arrive per (country, year) from an external source and are kept in
an in-memory cache that is never evicted. The index combines the cache with
the current participant countries and visible range to answer:
- which holidays each country has in view (by_country)
- whether a day is a Public holiday in every country (is_group_holiday)
- where a country's all-day holiday falls on another timezone's timeline
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from .constants import PUBLIC_HOLIDAY_TYPE
from .dates import CalendarRange, get_years_in_range
from .timezone import (
    get_timezone_by_country_code,
    local_midnight,
    to_local_date,
    to_timezone,
)

logger = logging.getLogger(__name__)


class HolidayError(Exception):
    """Base exception for holiday data errors."""

    pass


class HolidaysNotSettledError(HolidayError):
    """Raised when holidays are read while fetches for the view are in flight."""

    pass


@dataclass(frozen=True)
class HolidayRecord:
    """One holiday of one country, on that country's local calendar."""

    date: date
    local_name: str
    name: str
    country_code: str
    type: str = PUBLIC_HOLIDAY_TYPE

    @property
    def is_public(self) -> bool:
        return self.type == PUBLIC_HOLIDAY_TYPE

    @property
    def date_str(self) -> str:
        return self.date.isoformat()

    @classmethod
    def from_api(cls, data: dict, country_code: str = "") -> "HolidayRecord":
        """
        Build a record from a holiday source payload item.

        Accepts both the single "type" field and the newer "types" list; a
        list containing "Public" counts as Public.
        """
        holiday_type = data.get("type")
        if not holiday_type:
            types = data.get("types") or []
            if PUBLIC_HOLIDAY_TYPE in types:
                holiday_type = PUBLIC_HOLIDAY_TYPE
            elif types:
                holiday_type = types[0]
            else:
                holiday_type = PUBLIC_HOLIDAY_TYPE
        name = data.get("name") or data.get("localName") or ""
        return cls(
            date=date.fromisoformat(data["date"]),
            local_name=data.get("localName") or name,
            name=name,
            country_code=(data.get("countryCode") or country_code).upper(),
            type=holiday_type,
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date_str,
            "localName": self.local_name,
            "name": self.name,
            "countryCode": self.country_code,
            "type": self.type,
        }


class HolidayCache:
    """
    country code -> year -> holidays.

    Entries are written once per (country, year) and never evicted. Pairs
    being fetched are tracked as pending so readers can tell a missing year
    from one that is still loading.
    """

    def __init__(self):
        self._data: dict[str, dict[int, list[HolidayRecord]]] = {}
        self._pending: set[tuple[str, int]] = set()

    def has(self, country_code: str, year: int) -> bool:
        return year in self._data.get(country_code.upper(), {})

    def get(self, country_code: str, year: int) -> list[HolidayRecord]:
        """Cached holidays for the pair, or an empty list if not cached."""
        return list(self._data.get(country_code.upper(), {}).get(year, []))

    def put(
        self,
        country_code: str,
        year: int,
        holidays: Iterable[HolidayRecord],
    ) -> None:
        code = country_code.upper()
        self._data.setdefault(code, {})[year] = list(holidays)
        self._pending.discard((code, year))

    def missing(
        self, country_codes: Iterable[str], years: Iterable[int]
    ) -> list[tuple[str, int]]:
        """(country, year) pairs with no cache entry yet."""
        years = list(years)
        return [
            (code.upper(), year)
            for code in country_codes
            for year in years
            if not self.has(code, year)
        ]

    def mark_pending(self, country_code: str, year: int) -> None:
        self._pending.add((country_code.upper(), year))

    def clear_pending(self, country_code: str, year: int) -> None:
        self._pending.discard((country_code.upper(), year))

    def is_pending(self, country_code: str, year: int) -> bool:
        return (country_code.upper(), year) in self._pending


def project_to_display(
    record: HolidayRecord,
    display_timezone: str,
) -> tuple[datetime, datetime]:
    """
    Place a country's all-day holiday on the display timezone's timeline.

    The holiday spans local midnight to the next local midnight in the
    issuing country's representative timezone (first listed zone for
    multi-zone countries).

    Returns:
        (start, end) as aware datetimes in display_timezone
    """
    home_tz = get_timezone_by_country_code(record.country_code)
    start = local_midnight(record.date, home_tz)
    end = local_midnight(record.date + timedelta(days=1), home_tz)
    return (
        to_timezone(start, display_timezone),
        to_timezone(end, display_timezone),
    )


def fetch_key(country_codes: Iterable[str], years: Iterable[int]) -> str:
    """Composite key for a view: sorted countries | sorted years."""
    codes = sorted({code.upper() for code in country_codes if code})
    return ",".join(codes) + "|" + ",".join(str(y) for y in sorted(set(years)))


class HolidayIndex:
    """Holidays for a set of countries over a visible range."""

    def __init__(
        self,
        cache: HolidayCache,
        country_codes: Iterable[str],
        calendar_range: Optional[CalendarRange],
    ):
        self.cache = cache
        self.country_codes = [code.upper() for code in country_codes if code]
        self.calendar_range = calendar_range
        self._years = get_years_in_range(calendar_range)

    def relevant_years(self) -> list[int]:
        return list(self._years)

    def fetch_key(self) -> str:
        return fetch_key(self.country_codes, self._years)

    def missing(self) -> list[tuple[str, int]]:
        """Pairs the caller still has to load before reading."""
        return self.cache.missing(self.country_codes, self._years)

    def ensure(self, country_code: str, year: int, loader) -> list[HolidayRecord]:
        """
        Make sure the cache holds an entry for (country, year).

        `loader(country_code, year)` is only called when the pair is absent.
        A loader failure is stored as an empty list ("no holidays known").
        """
        if not self.cache.has(country_code, year):
            try:
                holidays = loader(country_code, year)
            except Exception as e:
                logger.warning(f"Holiday load failed for {country_code} {year}: {e}")
                holidays = []
            self.cache.put(country_code, year, holidays or [])
        return self.cache.get(country_code, year)

    @property
    def settled(self) -> bool:
        """True once no fetch for this view's pairs is still in flight."""
        return not any(
            self.cache.is_pending(code, year)
            for code in self.country_codes
            for year in self._years
        )

    def _require_settled(self) -> None:
        if not self.settled:
            raise HolidaysNotSettledError(
                f"Holiday fetches still in flight for {self.fetch_key()}"
            )

    def by_country(self) -> dict[str, list[HolidayRecord]]:
        """
        All cached holidays per country for the years in view.

        Years with no cache entry contribute nothing.

        Raises:
            HolidaysNotSettledError: If fetches for the view are in flight
        """
        self._require_settled()
        merged: dict[str, list[HolidayRecord]] = {}
        for code in self.country_codes:
            merged[code] = []
            for year in self._years:
                merged[code].extend(self.cache.get(code, year))
        return merged

    def public_dates(self) -> dict[str, set[date]]:
        """
        Public holiday dates per country, for checking many days at once.

        Raises:
            HolidaysNotSettledError: If fetches for the view are in flight
        """
        return {
            code: {h.date for h in holidays if h.is_public}
            for code, holidays in self.by_country().items()
        }

    def is_group_holiday(
        self,
        day: date | datetime,
        public_dates: Optional[dict[str, set[date]]] = None,
    ) -> bool:
        """
        Check whether `day` is a Public holiday in every country.

        A plain date is matched as-is. A datetime is first converted to each
        country's representative timezone and matched on that local date.
        With no countries this is False: there is no group to be on holiday.

        Pass the result of `public_dates()` when checking a whole range so
        the merge is done once.
        """
        if not self.country_codes:
            return False
        if public_dates is None:
            public_dates = self.public_dates()
        for code in self.country_codes:
            local_day = to_local_date(day, get_timezone_by_country_code(code))
            if local_day not in public_dates.get(code, ()):
                return False
        return True
