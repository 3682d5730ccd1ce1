"""
POI data models.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional

from ..core.models import Coordinate


class PoiRouteWeight(StrEnum):
    TIME = "time"
    DISTANCE = "distance"
    MONEY = "money"
    REALTIME = "realtime"
    FAST = "fast"
    SHORT = "short"


@dataclass(frozen=True, slots=True)
class PixelCoordinate:
    x: int
    y: int


@dataclass(frozen=True, slots=True)
class PoiGeographicElement:
    """Address of a POI, every administrative name comes with its code."""

    houseNumber: Optional[str] = None
    street: Optional[str] = None
    streetCode: Optional[str] = None
    locality: Optional[str] = None
    localityCode: Optional[str] = None
    municipality: Optional[str] = None
    municipalityCode: Optional[str] = None
    subregion: Optional[str] = None
    subregionCode: Optional[str] = None
    region: Optional[str] = None
    regionCode: Optional[str] = None
    country: Optional[str] = None
    countryCode: Optional[str] = None


@dataclass(frozen=True, slots=True)
class Poi:
    """Point of interest.

    Attributes:
        distance: Straight line distance from search center (meters)
        position: Position in result list
        routeDistance: Route distance (meters), routing searches only
        routeTime: Route time, routing searches only
        pixels: Position on rendered map, extent searches only
    """

    id: str
    name: str
    categoryCode: str
    coord: Coordinate
    info: Optional[str] = None
    subcategoryCode: Optional[str] = None
    geometry: Optional[str] = None
    distance: Optional[int] = None
    position: Optional[int] = None
    routeDistance: Optional[int] = None
    routeTime: Optional[int] = None
    routeRealtime: Optional[int] = None
    routeWeight: Optional[int] = None
    ge: Optional[PoiGeographicElement] = None
    pixels: Optional[PixelCoordinate] = None


@dataclass(frozen=True, slots=True)
class PoiNearestOptions:
    """Nearest POIs by straight line distance.

    Attributes:
        categories: Category codes, e.g. ["C001"] (rqpoicats)
        limit: Maximum number of POIs (num)
        radius: Search radius in meters (rad)
    """

    categories: List[str]
    limit: Optional[int] = None
    radius: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PoiNearestWithRoutingOptions:
    """Nearest POIs by route distance or time.

    Attributes:
        inverse: Route direction, 1 for POI to center
        includeRealtime: Also compute realtime traffic weight (iweight=realtime)
        departureTime: Departure time for realtime traffic
    """

    categories: List[str]
    weight: PoiRouteWeight = PoiRouteWeight.TIME
    limit: Optional[int] = None
    radius: Optional[int] = None
    inverse: Optional[int] = None
    includeRealtime: Optional[bool] = None
    departureTime: Optional[str] = None


@dataclass(frozen=True, slots=True)
class PoiAlongRouteOptions:
    """POIs along an already calculated route.

    Attributes:
        routeId: Route id from a previous route calculation
        buffer: Distance from route (meters)
        tolerance: Route simplification tolerance (meters)
    """

    routeId: str
    categories: List[str]
    routeWeight: PoiRouteWeight = PoiRouteWeight.TIME
    buffer: Optional[int] = None
    tolerance: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PoiInExtentOptions:
    """POIs inside a map extent.

    Attributes:
        includeMap: Also render map (map=1)
        gridSize: Enables grid clustering, one POI per grid cell of this size (pixels)
    """

    categories: List[str]
    includeMap: Optional[bool] = None
    gridSize: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PoiInPolygonOptions:
    categories: List[str]
    wkt: str


@dataclass(frozen=True, slots=True)
class WeatherDayForecast:
    """Forecast of one day.

    "0012" / "1224" fields are for the 00-12h and 12-24h halves of the day,
    later days only have the first half filled.
    """

    date: str
    precipitationChance0012: Optional[float] = None
    precipitationChance1224: Optional[float] = None
    snowLevel0012: Optional[float] = None
    snowLevel1224: Optional[float] = None
    skyConditions0012: Optional[float] = None
    skyConditions1224: Optional[float] = None
    windSpeed0012: Optional[float] = None
    windSpeed1224: Optional[float] = None
    temperatureMax: Optional[float] = None
    temperatureMin: Optional[float] = None


@dataclass(frozen=True, slots=True)
class WeatherForecast:
    locationName: str
    coord: Coordinate
    lastUpdate: Optional[str] = None
    forecasts: List[WeatherDayForecast] = field(default_factory=list)
