"""
Cercalia SDK

Python client library for the Cercalia geospatial web API: geocoding, reverse
geocoding, routing, isochrones, proximity and POI search, geofencing, GPS
map matching, static maps, address suggestions and administrative geometries.

Every service has sync methods and async twins (suffixed with "Async").

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.routing import RoutingService

    config = CercaliaConfig.fromEnvironment()
    routing = RoutingService(config)

    route = routing.calculateRoute(Coordinate(41.3851, 2.1734), Coordinate(40.4168, -3.7038))
    print(f"{route.distance / 1000:.1f} km, {route.duration / 60:.0f} min")

    # Or, inside a coroutine
    route = await routing.calculateRouteAsync(Coordinate(41.3851, 2.1734), Coordinate(40.4168, -3.7038))
"""

from .config import CercaliaConfig
from .core import (
    BoundingBox,
    CercaliaApiError,
    CercaliaError,
    CercaliaHttpError,
    CercaliaResponseError,
    CercaliaTransportError,
    CercaliaValidationError,
    Coordinate,
)

__all__ = [
    "CercaliaConfig",
    "Coordinate",
    "BoundingBox",
    "CercaliaError",
    "CercaliaApiError",
    "CercaliaHttpError",
    "CercaliaResponseError",
    "CercaliaTransportError",
    "CercaliaValidationError",
]
