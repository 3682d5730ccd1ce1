"""
Cercalia POI Service

Points of interest search: nearest (straight line or by route), along a
route, inside a map extent or a polygon, plus weather forecast which the
vendor serves as a special POI category.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_GDD, CS_WGS84
from ..core.errors import CercaliaResponseError
from ..core.models import Coordinate, MapExtent
from ..core.parser import (
    asList,
    attrAt,
    extractFirst,
    firstElement,
    getAdminPairs,
    getCercaliaAttr,
    getCercaliaValue,
    getPath,
    parseCoordNode,
    parseFloatOrNone,
    parseIntOrNone,
    valueAt,
)
from .models import (
    PixelCoordinate,
    Poi,
    PoiAlongRouteOptions,
    PoiGeographicElement,
    PoiInExtentOptions,
    PoiInPolygonOptions,
    PoiNearestOptions,
    PoiNearestWithRoutingOptions,
    WeatherDayForecast,
    WeatherForecast,
)

logger = logging.getLogger(__name__)

WEATHER_CATEGORY = "D00M05"
WEATHER_MAX_DAYS = 6

# POI addresses have no district level
POI_ADMIN_LEVELS = (
    ("city", "locality"),
    ("municipality", "municipality"),
    ("subregion", "subregion"),
    ("region", "region"),
    ("country", "country"),
)

# Weather info field names per day layout, after the date
WEATHER_FULL_DAY = (
    "precipitationChance0012",
    "precipitationChance1224",
    "snowLevel0012",
    "snowLevel1224",
    "skyConditions0012",
    "skyConditions1224",
    "windSpeed0012",
    "windSpeed1224",
    "temperatureMax",
    "temperatureMin",
)
WEATHER_NO_WIND_DAY = (
    "precipitationChance0012",
    "precipitationChance1224",
    "snowLevel0012",
    "snowLevel1224",
    "skyConditions0012",
    "skyConditions1224",
    "temperatureMax",
    "temperatureMin",
)
WEATHER_SHORT_DAY = (
    "precipitationChance0012",
    "snowLevel0012",
    "skyConditions0012",
    "temperatureMax",
    "temperatureMin",
)


def parsePoiGeographicElement(ge: Any) -> PoiGeographicElement:
    """Parse POI address node."""
    street = ge.get("street") if isinstance(ge, dict) else None
    return PoiGeographicElement(
        houseNumber=getCercaliaValue(getPath(ge, "housenumber")),
        street=extractFirst(street, valueAt(), attrAt("name")),
        streetCode=getCercaliaAttr(street, "id"),
        **getAdminPairs(ge, POI_ADMIN_LEVELS),
    )


def parseSubcategory(poi: Any) -> Optional[str]:
    """Get subcategory code, "-1" means none."""
    subcategory = getCercaliaAttr(poi, "subcategory_id")
    return None if subcategory == "-1" else subcategory


def parsePoi(poi: Any) -> Poi:
    """Parse single POI node.

    Raises:
        ValueError: If coordinates are missing or invalid
    """
    if not isinstance(poi, dict):
        raise ValueError("POI is not an object")
    try:
        coord = parseCoordNode(poi.get("coord"))
    except ValueError as e:
        raise ValueError(f"POI coordinates are invalid: {e}") from e

    ge = poi.get("ge")
    pixels = poi.get("pixels")
    pixelX = parseIntOrNone(getCercaliaAttr(pixels, "x"))
    pixelY = parseIntOrNone(getCercaliaAttr(pixels, "y"))

    return Poi(
        id=getCercaliaAttr(poi, "id") or "",
        name=getCercaliaValue(poi.get("name")) or "",
        categoryCode=getCercaliaAttr(poi, "category_id") or "",
        coord=coord,
        info=getCercaliaValue(poi.get("info")),
        subcategoryCode=parseSubcategory(poi),
        geometry=getCercaliaAttr(poi, "geometry"),
        distance=parseIntOrNone(getCercaliaAttr(poi, "dist")),
        position=parseIntOrNone(getCercaliaAttr(poi, "pos")),
        routeDistance=parseIntOrNone(getCercaliaAttr(poi, "routedist")),
        routeTime=parseIntOrNone(getCercaliaAttr(poi, "routetime")),
        routeRealtime=parseIntOrNone(getCercaliaAttr(poi, "routerealtime")),
        routeWeight=parseIntOrNone(getCercaliaAttr(poi, "routeweight")),
        ge=parsePoiGeographicElement(ge) if isinstance(ge, dict) else None,
        pixels=PixelCoordinate(pixelX, pixelY) if pixelX is not None and pixelY is not None else None,
    )


def parsePoiList(poiList: Any) -> List[Poi]:
    """Parse poilist node, skipping malformed POIs."""
    results: List[Poi] = []
    for node in asList(getPath(poiList, "poi")):
        try:
            results.append(parsePoi(node))
        except ValueError as e:
            logger.warning(f"Failed to parse POI: {e}")
    return results


def parseWeatherInfo(info: Optional[str]) -> Tuple[Optional[str], List[WeatherDayForecast]]:
    """Parse weather info string.

    Format: "lastUpdate|date|values...|date|values...". Days 1-2 carry ten
    values, day 3 eight (no wind), days 4-6 five (first half of the day only).

    Returns:
        Tuple of (last update, day forecasts)
    """
    if not info:
        return None, []
    parts = info.split("|")
    if len(parts) < 2:
        return None, []

    days: List[WeatherDayForecast] = []
    i = 1
    while i < len(parts) and len(days) < WEATHER_MAX_DAYS:
        date = parts[i]
        if "-" not in date:
            i += 1
            continue

        dayNum = len(days) + 1
        if dayNum <= 2:
            fieldNames = WEATHER_FULL_DAY
        elif dayNum == 3:
            fieldNames = WEATHER_NO_WIND_DAY
        else:
            fieldNames = WEATHER_SHORT_DAY

        if i + len(fieldNames) >= len(parts):
            logger.debug(f"Weather info truncated at day {dayNum}")
            break

        values = {name: parseFloatOrNone(parts[i + 1 + n]) for n, name in enumerate(fieldNames)}
        days.append(WeatherDayForecast(date=date, **values))
        i += len(fieldNames) + 1

    return parts[0], days


def joinCategories(categories: Sequence[str]) -> str:
    return ",".join(categories)


class PoiService(CercaliaClient):
    """Cercalia POI client, dood!

    Example:
        >>> service = PoiService(config)
        >>> pois = service.searchNearest(Coordinate(41.3851, 2.1734), PoiNearestOptions(categories=["C001"], limit=5))
        >>> forecast = service.getWeatherForecast(Coordinate(41.3851, 2.1734))
    """

    # Nearest

    def _buildNearestParams(self, center: Coordinate, options: PoiNearestOptions) -> Params:
        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        params["mo"] = center.toLatLngString()
        params["rqpoicats"] = joinCategories(options.categories)
        self._addIfPresent(params, "num", options.limit)
        self._addIfPresent(params, "rad", options.radius)
        return params

    def searchNearest(self, center: Coordinate, options: PoiNearestOptions) -> List[Poi]:
        """Get nearest POIs by straight line distance.

        Returns:
            POIs ordered by distance, empty if nothing was found
        """
        response = self._requestOptional(self._buildNearestParams(center, options), "PoiNearest")
        return self._parseProximityPois(response)

    async def searchNearestAsync(self, center: Coordinate, options: PoiNearestOptions) -> List[Poi]:
        """Async version of searchNearest()."""
        response = await self._requestOptionalAsync(self._buildNearestParams(center, options), "PoiNearest")
        return self._parseProximityPois(response)

    # Nearest by route

    def _buildNearestWithRoutingParams(self, center: Coordinate, options: PoiNearestWithRoutingOptions) -> Params:
        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        params["mo"] = center.toLatLngString()
        params["rqpoicats"] = joinCategories(options.categories)
        params["weight"] = str(options.weight)
        self._addIfPresent(params, "num", options.limit)
        self._addIfPresent(params, "rad", options.radius)
        self._addIfPresent(params, "inverse", options.inverse)
        self._addIfTrue(params, "iweight", options.includeRealtime, "realtime")
        self._addIfPresent(params, "departuretime", options.departureTime)
        return params

    def searchNearestWithRouting(self, center: Coordinate, options: PoiNearestWithRoutingOptions) -> List[Poi]:
        """Get nearest POIs by route distance or time."""
        response = self._requestOptional(
            self._buildNearestWithRoutingParams(center, options), "PoiNearestWithRouting"
        )
        return self._parseProximityPois(response)

    async def searchNearestWithRoutingAsync(
        self, center: Coordinate, options: PoiNearestWithRoutingOptions
    ) -> List[Poi]:
        """Async version of searchNearestWithRouting()."""
        response = await self._requestOptionalAsync(
            self._buildNearestWithRoutingParams(center, options), "PoiNearestWithRouting"
        )
        return self._parseProximityPois(response)

    # Along route

    def _buildAlongRouteParams(self, options: PoiAlongRouteOptions) -> Params:
        params = self._newParams("geom")
        params["routeid"] = options.routeId
        params["routeweight"] = str(options.routeWeight)
        params["getpoicats"] = joinCategories(options.categories)
        self._addIfPresent(params, "buffer", options.buffer)
        self._addIfPresent(params, "tolerance", options.tolerance)
        return params

    def searchAlongRoute(self, options: PoiAlongRouteOptions) -> List[Poi]:
        """Get POIs along a previously calculated route."""
        response = self._requestOptional(self._buildAlongRouteParams(options), "PoiAlongRoute")
        return parsePoiList(getPath(response, "getpoicats", "poilist"))

    async def searchAlongRouteAsync(self, options: PoiAlongRouteOptions) -> List[Poi]:
        """Async version of searchAlongRoute()."""
        response = await self._requestOptionalAsync(self._buildAlongRouteParams(options), "PoiAlongRoute")
        return parsePoiList(getPath(response, "getpoicats", "poilist"))

    # In extent

    def _buildInExtentParams(self, extent: MapExtent, options: PoiInExtentOptions) -> Params:
        params = self._newParams("map")
        params["map"] = "1" if options.includeMap else "0"
        params["extent"] = extent.toCercaliaString()
        params["cs"] = CS_GDD
        params["mocs"] = CS_GDD
        if options.gridSize is not None:
            params["gpoicats"] = joinCategories(options.categories)
            params["gridsize"] = str(options.gridSize)
        else:
            params["getpoicats"] = joinCategories(options.categories)
        return params

    def searchInExtent(self, extent: MapExtent, options: PoiInExtentOptions) -> List[Poi]:
        """Get POIs inside map extent, optionally one per grid cell."""
        response = self._requestOptional(self._buildInExtentParams(extent, options), "PoiInExtent")
        return self._parseMapPois(response, options)

    async def searchInExtentAsync(self, extent: MapExtent, options: PoiInExtentOptions) -> List[Poi]:
        """Async version of searchInExtent()."""
        response = await self._requestOptionalAsync(self._buildInExtentParams(extent, options), "PoiInExtent")
        return self._parseMapPois(response, options)

    # In polygon

    def _buildInPolygonParams(self, options: PoiInPolygonOptions) -> Params:
        params = self._newParams("prox")
        params["cs"] = CS_WGS84
        params["rqpoicats"] = joinCategories(options.categories)
        params["wkt"] = options.wkt
        return params

    def searchInPolygon(self, options: PoiInPolygonOptions) -> List[Poi]:
        """Get POIs inside WKT polygon (WGS84)."""
        response = self._requestOptional(self._buildInPolygonParams(options), "PoiInPolygon")
        return self._parseProximityPois(response)

    async def searchInPolygonAsync(self, options: PoiInPolygonOptions) -> List[Poi]:
        """Async version of searchInPolygon()."""
        response = await self._requestOptionalAsync(self._buildInPolygonParams(options), "PoiInPolygon")
        return self._parseProximityPois(response)

    # Weather

    def _buildWeatherParams(self, center: Coordinate) -> Params:
        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        params["mo"] = center.toLatLngString()
        params["rqpoicats"] = WEATHER_CATEGORY
        return params

    def getWeatherForecast(self, center: Coordinate) -> Optional[WeatherForecast]:
        """Get weather forecast for location, None if not available.

        Raises:
            CercaliaResponseError: If the weather POI has no valid coordinates
        """
        response = self._requestOptional(self._buildWeatherParams(center), "WeatherForecast")
        return self._parseWeather(response)

    async def getWeatherForecastAsync(self, center: Coordinate) -> Optional[WeatherForecast]:
        """Async version of getWeatherForecast()."""
        response = await self._requestOptionalAsync(self._buildWeatherParams(center), "WeatherForecast")
        return self._parseWeather(response)

    # Parsing

    @staticmethod
    def _parseProximityPois(response: Optional[Dict[str, Any]]) -> List[Poi]:
        return parsePoiList(getPath(response, "proximity", "poilist"))

    @staticmethod
    def _parseMapPois(response: Optional[Dict[str, Any]], options: PoiInExtentOptions) -> List[Poi]:
        containerKey = "gpoicats" if options.gridSize is not None else "getpoicats"
        return parsePoiList(getPath(response, "map", containerKey, "poilist"))

    @staticmethod
    def _parseWeather(response: Optional[Dict[str, Any]]) -> Optional[WeatherForecast]:
        poi = firstElement(getPath(response, "proximity", "poilist", "poi"))
        if not isinstance(poi, dict):
            return None

        try:
            coord = parseCoordNode(poi.get("coord"))
        except ValueError as e:
            logger.error(f"[WeatherForecast] Invalid weather POI coordinates: {poi}")
            raise CercaliaResponseError(f"Weather POI coordinates are invalid: {e}", response=response) from e

        lastUpdate, days = parseWeatherInfo(getCercaliaValue(poi.get("info")))
        return WeatherForecast(
            locationName=getCercaliaValue(poi.get("name")) or "",
            coord=coord,
            lastUpdate=lastUpdate,
            forecasts=days,
        )
