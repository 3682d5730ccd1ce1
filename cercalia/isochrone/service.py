"""
Cercalia Isochrone Service

Reachable area (service area) polygons around a point, by time or distance.
"""

import logging
from typing import Any, Dict, List, Sequence

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_WGS84
from ..core.errors import CercaliaResponseError, CercaliaValidationError
from ..core.models import Coordinate
from ..core.parser import asList, getCercaliaAttr, getCercaliaValue, getPath
from .models import IsochroneMethod, IsochroneOptions, IsochroneResult, IsochroneWeight

logger = logging.getLogger(__name__)

MS_PER_MINUTE = 60 * 1000


def toApiValue(value: int, weight: IsochroneWeight) -> int:
    """Convert caller value to vendor units: minutes to milliseconds, meters unchanged."""
    if weight == IsochroneWeight.TIME:
        return value * MS_PER_MINUTE
    return value


class IsochroneService(CercaliaClient):
    """Cercalia isochrone client.

    Example:
        >>> service = IsochroneService(config)
        >>> area = service.calculate(Coordinate(41.3851, 2.1734), IsochroneOptions.time(10))
        >>> areas = service.calculateMultiple(Coordinate(41.3851, 2.1734), [5, 10, 15], IsochroneWeight.TIME)
    """

    def _buildParams(
        self, center: Coordinate, values: Sequence[int], weight: IsochroneWeight, method: IsochroneMethod
    ) -> Params:
        params = self._newParams("isochrone")
        params["mo"] = center.toCercaliaString()
        params["isolevels"] = ",".join(str(toApiValue(value, weight)) for value in values)
        params["weight"] = str(weight)
        params["method"] = str(method)
        params["mocs"] = CS_WGS84
        params["ocs"] = CS_WGS84
        return params

    @staticmethod
    def _validateValue(options: IsochroneOptions) -> None:
        if options.value <= 0:
            raise CercaliaValidationError("Isochrone value must be greater than zero")

    @staticmethod
    def _validateValues(values: Sequence[int]) -> None:
        if not values:
            raise CercaliaValidationError("At least one value is required")

    def calculate(self, center: Coordinate, options: IsochroneOptions) -> IsochroneResult:
        """Calculate single isochrone.

        Raises:
            CercaliaValidationError: If value is not positive
            CercaliaResponseError: If the answer has no isochrone
        """
        self._validateValue(options)
        params = self._buildParams(center, [options.value], options.weight, options.method)
        response = self._request(params, "Isochrone")
        return self._firstResult(self._parseIsochrones(response, center, [options.value], options.weight))

    async def calculateAsync(self, center: Coordinate, options: IsochroneOptions) -> IsochroneResult:
        """Async version of calculate()."""
        self._validateValue(options)
        params = self._buildParams(center, [options.value], options.weight, options.method)
        response = await self._requestAsync(params, "Isochrone")
        return self._firstResult(self._parseIsochrones(response, center, [options.value], options.weight))

    def calculateMultiple(
        self,
        center: Coordinate,
        values: Sequence[int],
        weight: IsochroneWeight = IsochroneWeight.TIME,
        method: IsochroneMethod = IsochroneMethod.CONCAVEHULL,
    ) -> List[IsochroneResult]:
        """Calculate concentric isochrones in one request.

        Args:
            center: Center point
            values: Values in caller units, e.g. [5, 10, 15] minutes
            weight: What values measure
            method: Polygon construction method

        Returns:
            One result per returned polygon, in answer order
        """
        self._validateValues(values)
        response = self._request(self._buildParams(center, values, weight, method), "MultiIsochrone")
        return self._parseIsochrones(response, center, values, weight)

    async def calculateMultipleAsync(
        self,
        center: Coordinate,
        values: Sequence[int],
        weight: IsochroneWeight = IsochroneWeight.TIME,
        method: IsochroneMethod = IsochroneMethod.CONCAVEHULL,
    ) -> List[IsochroneResult]:
        """Async version of calculateMultiple()."""
        self._validateValues(values)
        response = await self._requestAsync(self._buildParams(center, values, weight, method), "MultiIsochrone")
        return self._parseIsochrones(response, center, values, weight)

    # Parsing

    @staticmethod
    def _firstResult(results: List[IsochroneResult]) -> IsochroneResult:
        if not results:
            raise CercaliaResponseError("No isochrone data found in response")
        return results[0]

    def _parseIsochrones(
        self, response: Dict[str, Any], center: Coordinate, values: Sequence[int], weight: IsochroneWeight
    ) -> List[IsochroneResult]:
        if response.get("isochrones") is None:
            raise CercaliaResponseError("No isochrones data found in response", response=response)
        nodes = getPath(response, "isochrones", "isochrone")
        if nodes is None:
            raise CercaliaResponseError("No isochrone data found in response", response=response)

        results: List[IsochroneResult] = []
        for i, node in enumerate(asList(nodes)):
            # More polygons than values: reuse the last value
            value = values[i] if i < len(values) else values[-1]
            results.append(self._parseIsochrone(node, center, value, weight))
        return results

    @staticmethod
    def _parseIsochrone(node: Any, center: Coordinate, value: int, weight: IsochroneWeight) -> IsochroneResult:
        wkt = getCercaliaValue(node)
        if not wkt:
            raise CercaliaResponseError("No WKT polygon found in isochrone response")
        level = getCercaliaAttr(node, "level")
        if level is None:
            raise CercaliaResponseError("No level attribute found in isochrone response")
        return IsochroneResult(wkt=wkt, center=center, value=value, weight=weight, level=level)
