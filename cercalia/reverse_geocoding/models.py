"""
Reverse geocoding data models.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from ..core.models import Coordinate
from ..geocoding.models import GeocodingCandidate


class ReverseGeocodeLevel(StrEnum):
    """Requested detail level (rqge)."""

    CADR = "cadr"  # Certified address
    ADR = "adr"  # Address
    ST = "st"  # Street
    CT = "ct"  # Locality
    PCODE = "pcode"  # Postal code
    MUN = "mun"  # Municipality
    SUBREG = "subreg"  # Subregion / province
    REG = "reg"  # Region
    CTRY = "ctry"  # Country
    TIMEZONE = "timezone"


@dataclass(frozen=True, slots=True)
class ReverseGeocodeOptions:
    """Reverse geocoding request options.

    Attributes:
        level: Detail level, "adr" is requested when neither level nor category is set
        dateTime: ISO 8601 date time, used by timezone level
        category: Special POI category, e.g. "D00SECCEN" (census section) or "D00SIGPAC"
    """

    level: Optional[ReverseGeocodeLevel] = None
    dateTime: Optional[str] = None
    category: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TimezoneOptions:
    dateTime: Optional[str] = None


@dataclass(frozen=True, slots=True)
class TimezoneInfo:
    """Timezone of a location."""

    id: str
    name: str
    localDateTime: str
    utcDateTime: str
    utcOffset: int  # Milliseconds
    daylightSavingTime: int  # Milliseconds


@dataclass(frozen=True, slots=True)
class SigpacInfo:
    """SIGPAC agricultural parcel info (category D00SIGPAC)."""

    id: str
    municipalityCode: str
    usage: str
    extensionHa: float
    vulnerableType: Optional[str] = None
    vulnerableCode: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ReverseGeocodeResult:
    """Single reverse geocoding result.

    Attributes:
        ge: Geographic element found near the coordinate
        distance: Distance from the requested coordinate to the element (meters)
        km: Road milestone
        direction: Road direction
        maxSpeed: Road speed limit (km/h)
        timezone: Timezone info, only for "timezone" level
        censusId: Census section id, only for "D00SECCEN" category
        sigpac: SIGPAC parcel, only for "D00SIGPAC" category
    """

    ge: GeocodingCandidate
    distance: Optional[float] = None
    km: Optional[str] = None
    direction: Optional[str] = None
    maxSpeed: Optional[float] = None
    timezone: Optional[TimezoneInfo] = None
    censusId: Optional[str] = None
    sigpac: Optional[SigpacInfo] = None


@dataclass(frozen=True, slots=True)
class TimezoneResult:
    """Timezone lookup result."""

    coord: Coordinate
    id: str
    name: str
    localDateTime: str
    utcDateTime: str
    utcOffset: int
    daylightSavingTime: int
