"""Fetch public holidays from the holiday data source (Nager.Date API)."""

import asyncio
import logging

import httpx
import sentry_sdk

from .config import get_holiday_api_url, get_holiday_fetch_timeout
from .holidays import HolidayCache, HolidayError, HolidayIndex, HolidayRecord

logger = logging.getLogger(__name__)


class HolidayFetchError(HolidayError):
    """Raised when fetching holidays from the source fails."""

    pass


def _get_holidays_url(country_code: str, year: int) -> str:
    """Get the PublicHolidays endpoint URL for a country and year."""
    return f"{get_holiday_api_url()}/PublicHolidays/{year}/{country_code.upper()}"


async def fetch_holidays(
    country_code: str,
    year: int,
    client: httpx.AsyncClient | None = None,
) -> list[HolidayRecord]:
    """Fetch one country's holidays for one year.

    Args:
        country_code: ISO 3166-1 alpha-2 code (e.g., "US")
        year: Calendar year
        client: Optional shared client (a new one is opened otherwise)

    Returns:
        Holidays in source order

    Raises:
        HolidayFetchError: On non-200 responses, transport errors or bad payloads
    """
    url = _get_holidays_url(country_code, year)

    try:
        if client is None:
            async with httpx.AsyncClient(timeout=get_holiday_fetch_timeout()) as own:
                response = await own.get(url)
        else:
            response = await client.get(url)
    except httpx.HTTPError as e:
        raise HolidayFetchError(f"Failed to fetch {country_code} {year}: {e}") from e

    if response.status_code != 200:
        raise HolidayFetchError(
            f"Failed to fetch {country_code} {year}: HTTP {response.status_code}"
        )

    try:
        payload = response.json()
        return [HolidayRecord.from_api(item, country_code) for item in payload]
    except (ValueError, TypeError, KeyError) as e:
        raise HolidayFetchError(
            f"Invalid holiday payload for {country_code} {year}: {e}"
        ) from e


async def fetch_holidays_or_empty(
    country_code: str,
    year: int,
    client: httpx.AsyncClient | None = None,
) -> list[HolidayRecord]:
    """Fetch holidays, degrading any failure to an empty list (no retry)."""
    try:
        return await fetch_holidays(country_code, year, client=client)
    except HolidayFetchError as e:
        logger.warning(f"{e}; treating as no holidays")
        return []
    except Exception as e:
        logger.error(f"Unexpected error fetching holidays for {country_code} {year}: {e}")
        sentry_sdk.capture_exception(e)
        return []


class HolidayLoader:
    """
    Loads holidays for a view into the shared cache.

    Only (country, year) pairs absent from the cache are requested, so a
    range change that keeps the same fetch key issues no new requests.
    Fetches for different pairs run concurrently and are shared between
    overlapping loads; `load` returns only after all of them settle.
    `last_fetch_key` records the key of the last view that settled.
    """

    def __init__(self, cache: HolidayCache | None = None, fetch=None):
        self.cache = cache if cache is not None else HolidayCache()
        self._fetch = fetch or fetch_holidays_or_empty
        self.last_fetch_key = ""
        self._in_flight: dict[tuple[str, int], asyncio.Task] = {}

    def index(self, country_codes, calendar_range) -> HolidayIndex:
        """Build an index over the shared cache."""
        return HolidayIndex(self.cache, country_codes, calendar_range)

    async def _load_pair(self, country_code: str, year: int) -> None:
        try:
            holidays = await self._fetch(country_code, year)
        except Exception as e:
            logger.warning(f"Holiday fetch failed for {country_code} {year}: {e}")
            holidays = []
        # Late results are harmless: the slot is keyed by (country, year)
        self.cache.put(country_code, year, holidays or [])

    def _start(self, country_code: str, year: int) -> asyncio.Task:
        key = (country_code, year)
        task = self._in_flight.get(key)
        if task is None:
            self.cache.mark_pending(country_code, year)
            task = asyncio.create_task(self._load_pair(country_code, year))
            self._in_flight[key] = task
            task.add_done_callback(lambda _t, key=key: self._finish(key))
        return task

    def _finish(self, key: tuple[str, int]) -> None:
        self._in_flight.pop(key, None)
        self.cache.clear_pending(*key)

    async def load(self, index: HolidayIndex) -> bool:
        """
        Load everything the index needs, then return.

        Returns:
            True if new fetches were issued, False if nothing was missing
            or every missing pair was already in flight
        """
        if not index.country_codes or index.calendar_range is None:
            return False

        key = index.fetch_key()
        # Cached pairs are never requested again, so an unchanged key costs
        # nothing here; a pair whose fetch was cancelled is simply missing
        missing = index.missing()
        pending = [pair for pair in missing if pair not in self._in_flight]
        if pending:
            logger.info(f"Fetching holidays for {len(pending)} country-years ({key})")
        for code, year in missing:
            self._start(code, year)

        # Barrier: wait for every in-flight fetch this view depends on.
        # Shielded so a cancelled request leaves shared fetches running.
        waiting = [
            self._in_flight[(code, year)]
            for code in index.country_codes
            for year in index.relevant_years()
            if (code, year) in self._in_flight
        ]
        if waiting:
            await asyncio.gather(*(asyncio.shield(task) for task in waiting))
        self.last_fetch_key = key
        return bool(pending)


# Global loader singleton
_loader: HolidayLoader | None = None


def get_holiday_loader() -> HolidayLoader:
    """Get the process-wide holiday loader, creating it on first use."""
    global _loader
    if _loader is None:
        _loader = HolidayLoader()
    return _loader


def set_holiday_loader(loader: HolidayLoader | None) -> None:
    """Replace the process-wide loader (used by tests)."""
    global _loader
    _loader = loader
