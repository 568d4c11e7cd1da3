"""
Participant registry.

Participants are places picked on the map. Each carries the country it
falls in (for holidays) and its IANA timezone (for awake hours).
"""

import logging
from dataclasses import dataclass
from typing import Iterator, Optional, Protocol

from .constants import (
    FALLBACK_TIMEZONE,
    TIMEZONE_FALLBACK_WARNING,
    UNKNOWN_COUNTRY,
)
from .timezone import is_known_timezone, strip_advisory

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Participant:
    """A selected location taking part in the meeting."""

    id: str
    name: str
    timezone: str = FALLBACK_TIMEZONE
    country_code: str = ""
    warning: str = ""  # Advisory shown next to the timezone, e.g. UTC fallback
    lat: Optional[float] = None
    lng: Optional[float] = None

    @property
    def zone(self) -> str:
        """Raw IANA identifier, without any advisory text."""
        return strip_advisory(self.timezone) or FALLBACK_TIMEZONE

    @property
    def timezone_label(self) -> str:
        """Timezone as displayed, including the advisory if any."""
        return f"{self.zone}{self.warning}"


class LocationResolver(Protocol):
    """Geodata lookups for a map click. Either may return None or raise."""

    def resolve_country(self, lat: float, lng: float) -> Optional[tuple[str, str]]:
        """Return (country name, ISO2 code) for the point."""
        ...

    def resolve_timezone(self, lat: float, lng: float) -> Optional[str]:
        """Return the IANA timezone for the point."""
        ...


def participant_from_location(
    lat: float,
    lng: float,
    resolver: LocationResolver,
) -> Participant:
    """
    Build a participant for a clicked point.

    Lookup failures never propagate: an unresolved country becomes
    "Unknown" with an empty code, an unresolved or unrecognised timezone
    becomes UTC with an advisory attached.
    """
    name, code = UNKNOWN_COUNTRY, ""
    try:
        country = resolver.resolve_country(lat, lng)
    except Exception as e:
        logger.warning(f"Country lookup failed for {lat},{lng}: {e}")
        country = None
    if country:
        name = country[0] or UNKNOWN_COUNTRY
        code = (country[1] or "").upper()

    try:
        timezone = resolver.resolve_timezone(lat, lng)
    except Exception as e:
        logger.warning(f"Timezone lookup failed for {lat},{lng}: {e}")
        timezone = None

    warning = ""
    if not is_known_timezone(timezone):
        timezone = FALLBACK_TIMEZONE
        warning = TIMEZONE_FALLBACK_WARNING

    return Participant(
        id=f"{lat},{lng}",
        name=name,
        timezone=strip_advisory(timezone),
        country_code=code,
        warning=warning,
        lat=lat,
        lng=lng,
    )


class ParticipantRegistry:
    """
    Ordered set of participants keyed by id.

    Adding an id that is already present and removing one that is absent
    are both no-ops.
    """

    def __init__(self, participants: Optional[list[Participant]] = None):
        self._participants: dict[str, Participant] = {}
        for participant in participants or []:
            self.add(participant)

    def __len__(self) -> int:
        return len(self._participants)

    def __iter__(self) -> Iterator[Participant]:
        return iter(list(self._participants.values()))

    def __contains__(self, participant_id: str) -> bool:
        return participant_id in self._participants

    def add(self, participant: Participant) -> bool:
        """Insert a participant. Returns False if the id was already present."""
        if participant.id in self._participants:
            return False
        self._participants[participant.id] = participant
        return True

    def remove(self, participant_id: str) -> bool:
        """Remove by id. Returns False if nothing was removed."""
        return self._participants.pop(participant_id, None) is not None

    def get(self, participant_id: str) -> Optional[Participant]:
        return self._participants.get(participant_id)

    def clear(self) -> None:
        self._participants.clear()

    @property
    def participants(self) -> list[Participant]:
        return list(self._participants.values())

    def country_codes(self) -> list[str]:
        """Distinct non-empty country codes, in first-seen order."""
        codes: list[str] = []
        for participant in self._participants.values():
            code = participant.country_code
            if code and code not in codes:
                codes.append(code)
        return codes

    def timezones(self) -> list[str]:
        """Distinct raw timezone identifiers, in first-seen order."""
        zones: list[str] = []
        for participant in self._participants.values():
            if participant.zone not in zones:
                zones.append(participant.zone)
        return zones


def default_display_timezone(registry: ParticipantRegistry, current: str) -> str:
    """
    Pick the calendar's display timezone.

    Keeps `current` while it belongs to some participant; otherwise switches
    to the first participant's timezone. With no participants `current`
    stays as is.
    """
    zones = registry.timezones()
    if zones and current not in zones:
        return zones[0]
    return current


def timezone_options(registry: ParticipantRegistry) -> list[str]:
    """Timezones offered in the display selector (participants' plus UTC)."""
    zones = registry.timezones()
    if FALLBACK_TIMEZONE not in zones:
        zones.append(FALLBACK_TIMEZONE)
    return zones
