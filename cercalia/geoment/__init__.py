"""
Cercalia Geoment (administrative geometries)

Example usage:
    from cercalia import CercaliaConfig
    from cercalia.geoment import GeomentPostalCodeOptions, GeomentService

    service = GeomentService(CercaliaConfig.fromEnvironment())
    area = service.getPostalCodeGeometry(GeomentPostalCodeOptions(postalCode="08025", countryCode="ESP"))
    print(area.wkt)
"""

from .models import (
    GeographicElementResult,
    GeographicElementType,
    GeomentMunicipalityOptions,
    GeomentPoiOptions,
    GeomentPostalCodeOptions,
)
from .service import GeomentService

__all__ = [
    "GeomentService",
    "GeomentMunicipalityOptions",
    "GeomentPostalCodeOptions",
    "GeomentPoiOptions",
    "GeographicElementResult",
    "GeographicElementType",
]
