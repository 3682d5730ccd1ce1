"""
Cercalia Routing Service

Route calculation (cmd=route) for cars, trucks and pedestrians.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_GDD, SRS_EPSG_4326
from ..core.errors import CercaliaResponseError
from ..core.models import Coordinate
from ..core.parser import asList, getCercaliaAttr, getCercaliaValue, getPath, parseFloatOrNone
from ..utils import parseDuration
from .models import DistanceTime, RouteNetwork, RouteResult, RouteWeight, RoutingOptions, VehicleType

logger = logging.getLogger(__name__)

LINESTRING_PATTERN = re.compile(r"LINESTRING\s*\((.*)\)")

# (param, value attribute, block attribute, avoid attribute, divisor to API unit)
TRUCK_DIMENSIONS = (
    ("vweight", "truckWeight", "blockTruckWeight", "avoidTruckWeight", 1000.0),
    ("vaxleweight", "truckAxleWeight", "blockTruckAxleWeight", "avoidTruckAxleWeight", 1000.0),
    ("vheight", "truckHeight", "blockTruckHeight", "avoidTruckHeight", 100.0),
    ("vwidth", "truckWidth", "blockTruckWidth", "avoidTruckWidth", 100.0),
    ("vlength", "truckLength", "blockTruckLength", "avoidTruckLength", 100.0),
)


def addTruckRestriction(params: Params, key: str, block: Optional[bool], avoid: Optional[bool]) -> None:
    """Add block<key>/avoid<key> flags.

    Restriction is avoided unless it is explicitly blocked or avoid is explicitly False.
    """
    if block is True:
        params[f"block{key}"] = "true"
    if avoid is True or (avoid is None and block is not True):
        params[f"avoid{key}"] = "true"


def mergeStageGeometry(stages: Sequence[Any]) -> str:
    """Merge LINESTRING of every stage into a single MULTILINESTRING WKT.

    Returns:
        MULTILINESTRING WKT or "" if no stage has a geometry
    """
    lineStrings: List[str] = []
    for stage in stages:
        wkt = getCercaliaValue(stage.get("wkt")) if isinstance(stage, dict) else None
        if not wkt:
            continue
        match = LINESTRING_PATTERN.search(wkt)
        if match:
            lineStrings.append(f"({match.group(1)})")

    if not lineStrings:
        return ""
    return f"MULTILINESTRING({', '.join(lineStrings)})"


class RoutingService(CercaliaClient):
    """Cercalia routing client.

    Example:
        >>> service = RoutingService(config)
        >>> route = service.calculateRoute(
        ...     Coordinate(41.3851, 2.1734),
        ...     Coordinate(40.4168, -3.7038),
        ...     RoutingOptions(vehicleType=VehicleType.TRUCK, truckWeight=18000, truckHeight=400),
        ... )
        >>> print(route.distance, route.duration)
    """

    def _buildBaseParams(self, origin: Coordinate, destination: Coordinate) -> Params:
        params = self._newParams("route")
        params["v"] = "1"
        params["srs"] = SRS_EPSG_4326
        params["mocs"] = CS_GDD
        params["mo_o"] = origin.toLatLngString()
        params["mo_d"] = destination.toLatLngString()
        return params

    def _buildRouteParams(
        self, origin: Coordinate, destination: Coordinate, options: Optional[RoutingOptions]
    ) -> Params:
        options = options or RoutingOptions()
        params = self._buildBaseParams(origin, destination)

        if options.avoidTolls:
            params["weight"] = RouteWeight.MONEY.value
        else:
            params["weight"] = str(options.weight or RouteWeight.TIME)
        params["stagegeometry"] = "1"
        params["stagegeometrysrs"] = SRS_EPSG_4326
        params["report"] = "0"
        params["lang"] = "en"

        for i, waypoint in enumerate(options.waypoints, start=1):
            params[f"mo_{i}"] = waypoint.toLatLngString()

        if options.vehicleType == VehicleType.TRUCK:
            self._addTruckParams(params, options)
        elif options.net is not None:
            params["net"] = str(options.net)
        return params

    @staticmethod
    def _addTruckParams(params: Params, options: RoutingOptions) -> None:
        params["net"] = RouteNetwork.LOGISTICS.value

        for key, valueAttr, blockAttr, avoidAttr, divisor in TRUCK_DIMENSIONS:
            value = getattr(options, valueAttr)
            if value is None:
                continue
            params[key] = str(value / divisor)
            addTruckRestriction(params, key, getattr(options, blockAttr), getattr(options, avoidAttr))

        if options.truckMaxVelocity is not None:
            params["vmaxvel"] = str(options.truckMaxVelocity)

    def calculateRoute(
        self, origin: Coordinate, destination: Coordinate, options: Optional[RoutingOptions] = None
    ) -> RouteResult:
        """Calculate route from origin to destination.

        Args:
            origin: Start point
            destination: End point
            options: Vehicle, weight, waypoints and truck restrictions

        Returns:
            Route with merged stage geometry, distance in meters and duration in seconds

        Raises:
            CercaliaResponseError: If the answer has no route
        """
        params = self._buildRouteParams(origin, destination, options)
        response = self._request(params, "Routing")
        return self._parseRoute(response, origin, destination, options)

    async def calculateRouteAsync(
        self, origin: Coordinate, destination: Coordinate, options: Optional[RoutingOptions] = None
    ) -> RouteResult:
        """Async version of calculateRoute()."""
        params = self._buildRouteParams(origin, destination, options)
        response = await self._requestAsync(params, "Routing")
        return self._parseRoute(response, origin, destination, options)

    def _buildDistanceTimeParams(self, origin: Coordinate, destination: Coordinate) -> Params:
        params = self._buildBaseParams(origin, destination)
        params["weight"] = RouteWeight.TIME.value
        params["stagegeometry"] = "0"
        params["report"] = "0"
        return params

    def getDistanceTime(
        self, origin: Coordinate, destination: Coordinate, vehicleType: Optional[VehicleType] = None
    ) -> DistanceTime:
        """Get route distance and duration only, without geometry."""
        if vehicleType is not None:
            logger.debug(f"getDistanceTime() ignores vehicle type {vehicleType}")
        response = self._request(self._buildDistanceTimeParams(origin, destination), "RoutingDistanceTime")
        return self._parseDistanceTime(response)

    async def getDistanceTimeAsync(
        self, origin: Coordinate, destination: Coordinate, vehicleType: Optional[VehicleType] = None
    ) -> DistanceTime:
        """Async version of getDistanceTime()."""
        if vehicleType is not None:
            logger.debug(f"getDistanceTimeAsync() ignores vehicle type {vehicleType}")
        response = await self._requestAsync(
            self._buildDistanceTimeParams(origin, destination), "RoutingDistanceTime"
        )
        return self._parseDistanceTime(response)

    # Parsing

    @staticmethod
    def _getRouteNode(response: Dict[str, Any]) -> Dict[str, Any]:
        route = response.get("route")
        if not isinstance(route, dict):
            raise CercaliaResponseError("No route found", response=response)
        return route

    def _parseRoute(
        self,
        response: Dict[str, Any],
        origin: Coordinate,
        destination: Coordinate,
        options: Optional[RoutingOptions],
    ) -> RouteResult:
        route = self._getRouteNode(response)
        stages = asList(getPath(route, "stages", "stage"))

        return RouteResult(
            wkt=mergeStageGeometry(stages),
            distance=(parseFloatOrNone(getCercaliaAttr(route, "dist")) or 0.0) * 1000,
            duration=parseDuration(getCercaliaAttr(route, "time")),
            origin=origin,
            destination=destination,
            waypoints=list(options.waypoints) if options is not None else [],
        )

    def _parseDistanceTime(self, response: Dict[str, Any]) -> DistanceTime:
        route = self._getRouteNode(response)
        return DistanceTime(
            distance=(parseFloatOrNone(getCercaliaAttr(route, "dist")) or 0.0) * 1000,
            duration=parseDuration(getCercaliaAttr(route, "time")),
        )
