"""
Cercalia POI

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.poi import MapExtent, PoiInExtentOptions, PoiNearestOptions, PoiService

    service = PoiService(CercaliaConfig.fromEnvironment())

    # Five nearest gas stations
    pois = service.searchNearest(Coordinate(41.3851, 2.1734), PoiNearestOptions(categories=["C001"], limit=5))

    # POIs on the visible map, clustered by 100 px grid
    extent = MapExtent(Coordinate(41.40, 2.15), Coordinate(41.37, 2.19))
    pois = service.searchInExtent(extent, PoiInExtentOptions(categories=["D00GAS"], gridSize=100))

    # Weather
    forecast = service.getWeatherForecast(Coordinate(41.3851, 2.1734))
"""

from ..core.models import MapExtent
from .models import (
    PixelCoordinate,
    Poi,
    PoiAlongRouteOptions,
    PoiGeographicElement,
    PoiInExtentOptions,
    PoiInPolygonOptions,
    PoiNearestOptions,
    PoiNearestWithRoutingOptions,
    PoiRouteWeight,
    WeatherDayForecast,
    WeatherForecast,
)
from .service import PoiService

__all__ = [
    "PoiService",
    "Poi",
    "PoiGeographicElement",
    "PixelCoordinate",
    "MapExtent",
    "PoiRouteWeight",
    "PoiNearestOptions",
    "PoiNearestWithRoutingOptions",
    "PoiAlongRouteOptions",
    "PoiInExtentOptions",
    "PoiInPolygonOptions",
    "WeatherDayForecast",
    "WeatherForecast",
]
