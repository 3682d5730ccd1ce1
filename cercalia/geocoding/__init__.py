"""
Cercalia Geocoding

Example usage:
    from cercalia import CercaliaConfig
    from cercalia.geocoding import GeocodingOptions, GeocodingService

    service = GeocodingService(CercaliaConfig.fromEnvironment())

    # Structured address search
    candidates = service.geocode(GeocodingOptions(locality="Madrid", street="Gran Via 1"))

    # Road milestone
    milestones = service.geocodeRoad("A-2", 15)

    # Cities sharing a postal code
    cities = service.geocodeCitiesByPostalCode("40160")
"""

from .models import GeocodingCandidate, GeocodingCandidateType, GeocodingLevel, GeocodingOptions, PostalCodeCity
from .service import GeocodingService

__all__ = [
    "GeocodingService",
    "GeocodingOptions",
    "GeocodingCandidate",
    "GeocodingCandidateType",
    "GeocodingLevel",
    "PostalCodeCity",
]
