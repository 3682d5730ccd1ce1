"""
Geocoding data models.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional

from ..core.models import Coordinate


class GeocodingCandidateType(StrEnum):
    """Kind of geocoding candidate."""

    ADDRESS = "address"
    STREET = "street"
    POI = "poi"
    LOCALITY = "locality"
    MUNICIPALITY = "municipality"
    ROAD = "road"
    MILESTONE = "milestone"
    POSTAL_CODE = "postal_code"

    @classmethod
    def fromCercaliaType(cls, cercaliaType: Optional[str]) -> "GeocodingCandidateType":
        """Map vendor ge@type to candidate type, unknown types are addresses."""
        if cercaliaType is None:
            return cls.ADDRESS
        return _CERCALIA_TYPE_MAP.get(cercaliaType.lower(), cls.ADDRESS)


_CERCALIA_TYPE_MAP = {
    "poi": GeocodingCandidateType.POI,
    "ct": GeocodingCandidateType.LOCALITY,
    "municipality": GeocodingCandidateType.MUNICIPALITY,
    "pcode": GeocodingCandidateType.POSTAL_CODE,
    "postal_code": GeocodingCandidateType.POSTAL_CODE,
    "rd": GeocodingCandidateType.ROAD,
    "road": GeocodingCandidateType.ROAD,
    "st": GeocodingCandidateType.STREET,
    "pk": GeocodingCandidateType.MILESTONE,
    "milestone": GeocodingCandidateType.MILESTONE,
}


class GeocodingLevel(StrEnum):
    """Vendor geocoding level (ge@type)."""

    ADR = "adr"
    ST = "st"
    CT = "ct"
    PCODE = "pcode"
    MUN = "mun"
    SUBREG = "subreg"
    REG = "reg"
    CTRY = "ctry"
    RD = "rd"
    PK = "pk"
    POI = "poi"

    @classmethod
    def fromValue(cls, value: Optional[str]) -> Optional["GeocodingLevel"]:
        """Case-insensitive lookup, None for unknown values."""
        if value is None:
            return None
        try:
            return cls(value.lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class GeocodingOptions:
    """Structured geocoding request.

    Attributes:
        countryCode: ISO 3166-1 alpha-3 country code (default: "ESP")
        locality: City / locality name (ctn)
        municipality: Municipality name (munn)
        street: Street with optional house number (adr)
        postalCode: Postal code (pcode)
        region: Region name (regn)
        subregion: Subregion / province name (subregn)
        country: Country name (ctryn)
        limit: Maximum number of candidates (num)
        fullSearch: Enable vendor full search mode (fullsearch=3)
    """

    countryCode: Optional[str] = None
    locality: Optional[str] = None
    municipality: Optional[str] = None
    street: Optional[str] = None
    postalCode: Optional[str] = None
    region: Optional[str] = None
    subregion: Optional[str] = None
    country: Optional[str] = None
    limit: Optional[int] = None
    fullSearch: Optional[bool] = None

    @property
    def hasSpecificSearch(self) -> bool:
        """True when the search targets something below country level."""
        return self.locality is not None or self.street is not None or self.postalCode is not None


@dataclass(frozen=True, slots=True)
class GeocodingCandidate:
    """Single geocoding candidate.

    Every administrative name comes together with its vendor code.
    """

    id: str
    name: str
    coord: Coordinate
    type: GeocodingCandidateType
    label: Optional[str] = None
    street: Optional[str] = None
    streetCode: Optional[str] = None
    locality: Optional[str] = None
    localityCode: Optional[str] = None
    municipality: Optional[str] = None
    municipalityCode: Optional[str] = None
    district: Optional[str] = None
    districtCode: Optional[str] = None
    subregion: Optional[str] = None
    subregionCode: Optional[str] = None
    region: Optional[str] = None
    regionCode: Optional[str] = None
    country: Optional[str] = None
    countryCode: Optional[str] = None
    postalCode: Optional[str] = None
    houseNumber: Optional[str] = None
    level: Optional[GeocodingLevel] = None


@dataclass(frozen=True, slots=True)
class PostalCodeCity:
    """City covered by a postal code."""

    id: str
    name: str
    coord: Coordinate
    municipality: Optional[str] = None
    municipalityCode: Optional[str] = None
    subregion: Optional[str] = None
    subregionCode: Optional[str] = None
    region: Optional[str] = None
    regionCode: Optional[str] = None
    country: Optional[str] = None
    countryCode: Optional[str] = None
