"""
Cercalia Suggest (address autocomplete)

Example usage:
    from cercalia import CercaliaConfig
    from cercalia.suggest import SuggestOptions, SuggestService

    service = SuggestService(CercaliaConfig.fromEnvironment())

    for suggestion in service.search(SuggestOptions(text="Provença 58", countryCode="ESP")):
        print(suggestion.type, suggestion.displayText)

    result = service.findAndGeocode("Carrer de Provença, Barcelona", "ESP", "589")
"""

from .models import (
    SuggestAdminEntity,
    SuggestCity,
    SuggestGeocodeOptions,
    SuggestGeocodeResult,
    SuggestGeoType,
    SuggestHouseNumbers,
    SuggestOptions,
    SuggestPoi,
    SuggestResult,
    SuggestResultType,
    SuggestStreet,
)
from .service import SuggestService

__all__ = [
    "SuggestService",
    "SuggestOptions",
    "SuggestGeoType",
    "SuggestResult",
    "SuggestResultType",
    "SuggestStreet",
    "SuggestCity",
    "SuggestAdminEntity",
    "SuggestHouseNumbers",
    "SuggestPoi",
    "SuggestGeocodeOptions",
    "SuggestGeocodeResult",
]
