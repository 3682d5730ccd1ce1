"""
Administrative geometry (geoment) data models.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Optional


class GeographicElementType(StrEnum):
    MUNICIPALITY = "municipality"
    POSTAL_CODE = "postal_code"
    POI = "poi"
    REGION = "region"


@dataclass(frozen=True, slots=True)
class GeomentMunicipalityOptions:
    """Municipality (munc) or subregion (subregc) geometry request.

    Tolerance is the simplification tolerance in meters.
    """

    municipalityCode: Optional[str] = None
    subregionCode: Optional[str] = None
    tolerance: Optional[int] = None


@dataclass(frozen=True, slots=True)
class GeomentPostalCodeOptions:
    postalCode: str
    countryCode: Optional[str] = None
    tolerance: Optional[int] = None


@dataclass(frozen=True, slots=True)
class GeomentPoiOptions:
    poiCode: str
    tolerance: Optional[int] = None


@dataclass(frozen=True, slots=True)
class GeographicElementResult:
    """Geometry of an administrative element.

    Attributes:
        wkt: Geometry as WKT, in WGS84
        code: Element code ("" if the vendor sent none)
        name: Element name
        type: Requested element kind
        level: Geometry type as reported by the vendor
    """

    wkt: str
    code: str
    name: Optional[str]
    type: GeographicElementType
    level: Optional[str] = None
