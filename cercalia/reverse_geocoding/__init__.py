"""
Cercalia Reverse Geocoding

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.reverse_geocoding import ReverseGeocodeLevel, ReverseGeocodeOptions, ReverseGeocodingService

    service = ReverseGeocodingService(CercaliaConfig.fromEnvironment())

    # Address at coordinate
    result = service.reverseGeocode(Coordinate(41.3874, 2.1686))

    # Municipality only
    result = service.reverseGeocode(Coordinate(41.3874, 2.1686), ReverseGeocodeOptions(level=ReverseGeocodeLevel.MUN))

    # Timezone
    timezone = service.getTimezone(Coordinate(41.3874, 2.1686))
"""

from .models import (
    ReverseGeocodeLevel,
    ReverseGeocodeOptions,
    ReverseGeocodeResult,
    SigpacInfo,
    TimezoneInfo,
    TimezoneOptions,
    TimezoneResult,
)
from .service import ReverseGeocodingService

__all__ = [
    "ReverseGeocodingService",
    "ReverseGeocodeLevel",
    "ReverseGeocodeOptions",
    "ReverseGeocodeResult",
    "SigpacInfo",
    "TimezoneInfo",
    "TimezoneOptions",
    "TimezoneResult",
]
