"""
Cercalia Proximity Service

Nearest points of interest around a center, optionally with route
distance and time to each of them.
"""

import logging
from typing import Any, Dict, List, Optional

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_GDD
from ..core.models import Coordinate
from ..core.parser import asList, getCercaliaAttr, getCercaliaValue, getPath, parseCoordNode, parseIntOrNone
from ..poi.service import parsePoiGeographicElement, parseSubcategory
from .models import ProximityItem, ProximityOptions, ProximityResult, ProximityRouteWeight

logger = logging.getLogger(__name__)

DEFAULT_COUNT = 5


class ProximityService(CercaliaClient):
    """Cercalia proximity client.

    Example:
        >>> service = ProximityService(config)
        >>> result = service.findNearestByCategory(Coordinate(41.3851, 2.1734), "C001", 3)
        >>> for item in result.items:
        ...     print(item.name, item.distance)
    """

    def _buildParams(self, options: ProximityOptions) -> Params:
        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        params["mo"] = options.center.toLatLngString()
        self._addIfPresent(params, "num", options.count)
        self._addIfPresent(params, "rad", options.maxRadius)
        if options.categories:
            params["rqpoicats"] = ",".join(options.categories)
        if options.includeRouting and options.routeWeight is not None:
            params["weight"] = str(options.routeWeight)
        return params

    def findNearest(self, options: ProximityOptions) -> ProximityResult:
        """Find nearest POIs.

        Returns:
            Result with found items, empty if nothing was found
        """
        response = self._requestOptional(self._buildParams(options), "Proximity")
        return self._parseResult(response, options.center)

    async def findNearestAsync(self, options: ProximityOptions) -> ProximityResult:
        """Async version of findNearest()."""
        response = await self._requestOptionalAsync(self._buildParams(options), "Proximity")
        return self._parseResult(response, options.center)

    def findNearestByCategory(
        self, center: Coordinate, categoryCode: str, count: int = DEFAULT_COUNT
    ) -> ProximityResult:
        return self.findNearest(ProximityOptions(center=center, categories=[categoryCode], count=count))

    async def findNearestByCategoryAsync(
        self, center: Coordinate, categoryCode: str, count: int = DEFAULT_COUNT
    ) -> ProximityResult:
        return await self.findNearestAsync(ProximityOptions(center=center, categories=[categoryCode], count=count))

    @staticmethod
    def _routingOptions(
        center: Coordinate, categoryCode: str, weight: ProximityRouteWeight, count: int
    ) -> ProximityOptions:
        return ProximityOptions(
            center=center,
            categories=[categoryCode],
            count=count,
            includeRouting=True,
            routeWeight=weight,
        )

    def findNearestWithRouting(
        self,
        center: Coordinate,
        categoryCode: str,
        weight: ProximityRouteWeight = ProximityRouteWeight.TIME,
        count: int = DEFAULT_COUNT,
    ) -> ProximityResult:
        """Find nearest POIs of category with route distance and time to each."""
        return self.findNearest(self._routingOptions(center, categoryCode, weight, count))

    async def findNearestWithRoutingAsync(
        self,
        center: Coordinate,
        categoryCode: str,
        weight: ProximityRouteWeight = ProximityRouteWeight.TIME,
        count: int = DEFAULT_COUNT,
    ) -> ProximityResult:
        """Async version of findNearestWithRouting()."""
        return await self.findNearestAsync(self._routingOptions(center, categoryCode, weight, count))

    # Parsing

    def _parseResult(self, response: Optional[Dict[str, Any]], center: Coordinate) -> ProximityResult:
        items: List[ProximityItem] = []
        for node in asList(getPath(response, "proximity", "poilist", "poi")):
            try:
                items.append(self._parseItem(node))
            except ValueError as e:
                logger.warning(f"Failed to parse proximity item: {e}")
        return ProximityResult(items=items, center=center, totalFound=len(items))

    @staticmethod
    def _parseItem(poi: Any) -> ProximityItem:
        if not isinstance(poi, dict):
            raise ValueError("item is not an object")
        try:
            coord = parseCoordNode(poi.get("coord"))
        except ValueError as e:
            raise ValueError(f"Invalid POI: {e}") from e

        ge = poi.get("ge")
        return ProximityItem(
            id=getCercaliaAttr(poi, "id") or "",
            name=getCercaliaValue(poi.get("name")) or "",
            coord=coord,
            distance=parseIntOrNone(getCercaliaAttr(poi, "dist")) or 0,
            position=parseIntOrNone(getCercaliaAttr(poi, "pos")),
            categoryCode=getCercaliaAttr(poi, "category_id"),
            subcategoryCode=parseSubcategory(poi),
            geometry=getCercaliaAttr(poi, "geometry"),
            info=getCercaliaValue(poi.get("info")),
            ge=parsePoiGeographicElement(ge) if isinstance(ge, dict) else None,
            routeDistance=parseIntOrNone(getCercaliaAttr(poi, "routedist")),
            routeTime=parseIntOrNone(getCercaliaAttr(poi, "routetime")),
            routeRealtime=parseIntOrNone(getCercaliaAttr(poi, "routerealtime")),
            routeWeight=parseIntOrNone(getCercaliaAttr(poi, "routeweight")),
        )
