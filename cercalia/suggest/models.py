"""
Address suggestion (autocomplete) data models.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional, Sequence

from ..core.models import Coordinate


class SuggestGeoType(StrEnum):
    """Kind of elements to suggest (getype)."""

    STREET = "st"
    CITY = "ct"
    POI = "poi"
    ALL = "all"


class SuggestResultType(StrEnum):
    STREET = "street"
    CITY = "city"
    POI = "poi"
    ADDRESS = "address"


@dataclass(frozen=True, slots=True)
class SuggestOptions:
    """Suggest search options.

    Attributes:
        text: Partial text typed by the user (required, empty text gives no results)
        geoType: Restrict suggestions to streets, cities or POIs
        countryCode: ISO country code, sent upper-cased
        regionCode: Region code filter
        subregionCode: Subregion (province) code filter
        municipalityCode: Municipality code filter
        streetCode: Street code filter
        postalCodePrefix: Postal code prefix filter
        language: Result language
        center: Prefer suggestions near this point
        radius: Proximity radius in meters, used only together with center
        poiCategories: POI category codes
    """

    text: str
    geoType: Optional[SuggestGeoType] = None
    countryCode: Optional[str] = None
    regionCode: Optional[str] = None
    subregionCode: Optional[str] = None
    municipalityCode: Optional[str] = None
    streetCode: Optional[str] = None
    postalCodePrefix: Optional[str] = None
    language: Optional[str] = None
    center: Optional[Coordinate] = None
    radius: Optional[int] = None
    poiCategories: Sequence[str] = ()


@dataclass(frozen=True, slots=True)
class SuggestGeocodeOptions:
    cityCode: Optional[str] = None
    postalCode: Optional[str] = None
    streetCode: Optional[str] = None
    streetNumber: Optional[str] = None
    countryCode: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SuggestAdminEntity:
    code: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SuggestStreet:
    code: Optional[str] = None
    name: Optional[str] = None
    description: Optional[str] = None
    type: Optional[str] = None
    article: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SuggestCity:
    code: Optional[str] = None
    name: Optional[str] = None
    bracketLocality: Optional[str] = None  # district shown in brackets after the city name


@dataclass(frozen=True, slots=True)
class SuggestHouseNumbers:
    """House number availability of a street suggestion.

    Attributes:
        available: True if the street has a known house number range
        min: Lowest house number
        max: Highest house number
        current: House number typed by the user
        adjusted: Closest existing house number
        isEnglishFormat: Number goes before the street name
        hint: "min-max" range, for display
    """

    available: bool
    min: Optional[int] = None
    max: Optional[int] = None
    current: Optional[int] = None
    adjusted: Optional[int] = None
    isEnglishFormat: Optional[bool] = None
    hint: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SuggestPoi:
    code: Optional[str] = None
    name: Optional[str] = None
    categoryCode: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SuggestResult:
    id: str
    displayText: str
    type: SuggestResultType
    street: Optional[SuggestStreet] = None
    city: Optional[SuggestCity] = None
    postalCode: Optional[str] = None
    municipality: Optional[SuggestAdminEntity] = None
    subregion: Optional[SuggestAdminEntity] = None
    region: Optional[SuggestAdminEntity] = None
    country: Optional[SuggestAdminEntity] = None
    coord: Optional[Coordinate] = None
    houseNumbers: Optional[SuggestHouseNumbers] = None
    poi: Optional[SuggestPoi] = None
    isOfficial: Optional[bool] = None
    score: Optional[float] = None


@dataclass(frozen=True, slots=True)
class SuggestGeocodeResult:
    """Geocoded suggestion, every administrative name comes with its code."""

    coord: Coordinate
    formattedAddress: str
    name: Optional[str] = None
    streetCode: Optional[str] = None
    streetName: Optional[str] = None
    houseNumber: Optional[str] = None
    postalCode: Optional[str] = None
    cityCode: Optional[str] = None
    cityName: Optional[str] = None
    municipalityCode: Optional[str] = None
    municipalityName: Optional[str] = None
    subregionCode: Optional[str] = None
    subregionName: Optional[str] = None
    regionCode: Optional[str] = None
    regionName: Optional[str] = None
    countryCode: Optional[str] = None
    countryName: Optional[str] = None
