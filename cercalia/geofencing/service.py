"""
Cercalia Geofencing Service

Checks which points lie inside which shapes (cmd=insidegeoms). Shapes and
points are sent as bracketed lists: "[WKT|id],..." and "[lng,lat|id],...".
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.client import CercaliaClient, Params
from ..core.constants import SRS_EPSG_4326
from ..core.errors import CercaliaValidationError
from ..core.models import Coordinate
from ..core.parser import asList, getCercaliaAttr, getCercaliaValue, getPath, parseCoordNode
from .models import GeofenceMatch, GeofenceOptions, GeofencePoint, GeofenceResult, GeofenceShape, MatchedPoint

logger = logging.getLogger(__name__)

SINGLE_POINT_ID = "point"
CIRCLE_SHAPE_ID = "circle"
POLYGON_SHAPE_ID = "polygon"


def formatGeoms(shapes: Sequence[GeofenceShape]) -> str:
    """Format shapes as "[WKT|id],[WKT|id]"."""
    return ",".join(f"[{shape.wkt}|{shape.id}]" for shape in shapes)


def formatMoList(points: Sequence[GeofencePoint]) -> str:
    """Format points as "[lng,lat|id],[lng,lat|id]"."""
    return ",".join(f"[{point.coord.toCercaliaString()}|{point.id}]" for point in points)


class GeofencingService(CercaliaClient):
    """Cercalia geofencing client.

    Example:
        >>> service = GeofencingService(config)
        >>> zone = GeofenceShape.circle("store", Coordinate(41.3851, 2.1734), 500)
        >>> result = service.check([zone], [GeofencePoint("van-1", Coordinate(41.386, 2.174))])
        >>> for match in result.matches:
        ...     print(match.shapeId, [p.id for p in match.pointsInside])
    """

    def _buildParams(
        self, shapes: Sequence[GeofenceShape], points: Sequence[GeofencePoint], options: Optional[GeofenceOptions]
    ) -> Params:
        if not shapes:
            raise CercaliaValidationError("Geofencing requires at least one shape")
        if not points:
            raise CercaliaValidationError("Geofencing requires at least one point")

        options = options or GeofenceOptions()
        params = self._newParams("insidegeoms")
        params["geoms"] = formatGeoms(shapes)
        params["molist"] = formatMoList(points)
        params["srs"] = options.shapeSrs or SRS_EPSG_4326
        self._addIfPresent(params, "mocs", options.pointSrs)
        return params

    def check(
        self,
        shapes: Sequence[GeofenceShape],
        points: Sequence[GeofencePoint],
        options: Optional[GeofenceOptions] = None,
    ) -> GeofenceResult:
        """Check which points are inside which shapes.

        Returns:
            Result listing shapes with at least one point inside

        Raises:
            CercaliaValidationError: If shapes or points are empty
        """
        params = self._buildParams(shapes, points, options)
        response = self._request(params, "Geofencing")
        return self._parseResult(response, len(shapes), len(points))

    async def checkAsync(
        self,
        shapes: Sequence[GeofenceShape],
        points: Sequence[GeofencePoint],
        options: Optional[GeofenceOptions] = None,
    ) -> GeofenceResult:
        """Async version of check()."""
        params = self._buildParams(shapes, points, options)
        response = await self._requestAsync(params, "Geofencing")
        return self._parseResult(response, len(shapes), len(points))

    # Helpers

    @staticmethod
    def _shapeIdsContaining(result: GeofenceResult, pointId: str) -> List[str]:
        return [
            match.shapeId for match in result.matches if any(point.id == pointId for point in match.pointsInside)
        ]

    def checkPoint(self, shapes: Sequence[GeofenceShape], point: Coordinate) -> List[str]:
        """Get ids of the shapes containing the point."""
        result = self.check(shapes, [GeofencePoint(SINGLE_POINT_ID, point)])
        return self._shapeIdsContaining(result, SINGLE_POINT_ID)

    async def checkPointAsync(self, shapes: Sequence[GeofenceShape], point: Coordinate) -> List[str]:
        """Async version of checkPoint()."""
        result = await self.checkAsync(shapes, [GeofencePoint(SINGLE_POINT_ID, point)])
        return self._shapeIdsContaining(result, SINGLE_POINT_ID)

    def isInsideCircle(self, center: Coordinate, radiusMeters: float, point: Coordinate) -> bool:
        shape = GeofenceShape.circle(CIRCLE_SHAPE_ID, center, radiusMeters)
        return CIRCLE_SHAPE_ID in self.checkPoint([shape], point)

    async def isInsideCircleAsync(self, center: Coordinate, radiusMeters: float, point: Coordinate) -> bool:
        shape = GeofenceShape.circle(CIRCLE_SHAPE_ID, center, radiusMeters)
        return CIRCLE_SHAPE_ID in await self.checkPointAsync([shape], point)

    def isInsidePolygon(self, polygonWkt: str, point: Coordinate) -> bool:
        return POLYGON_SHAPE_ID in self.checkPoint([GeofenceShape(POLYGON_SHAPE_ID, polygonWkt)], point)

    async def isInsidePolygonAsync(self, polygonWkt: str, point: Coordinate) -> bool:
        return POLYGON_SHAPE_ID in await self.checkPointAsync([GeofenceShape(POLYGON_SHAPE_ID, polygonWkt)], point)

    @staticmethod
    def _pointsInside(
        result: GeofenceResult, shape: GeofenceShape, points: Sequence[GeofencePoint]
    ) -> List[GeofencePoint]:
        insideIds = set()
        for match in result.matches:
            if match.shapeId == shape.id:
                insideIds = {point.id for point in match.pointsInside}
                break
        return [point for point in points if point.id in insideIds]

    def filterPointsInShape(self, shape: GeofenceShape, points: Sequence[GeofencePoint]) -> List[GeofencePoint]:
        """Keep only the points inside the shape, in the original order."""
        if not points:
            return []
        return self._pointsInside(self.check([shape], points), shape, points)

    async def filterPointsInShapeAsync(
        self, shape: GeofenceShape, points: Sequence[GeofencePoint]
    ) -> List[GeofencePoint]:
        """Async version of filterPointsInShape()."""
        if not points:
            return []
        return self._pointsInside(await self.checkAsync([shape], points), shape, points)

    @staticmethod
    def createCircle(id: str, center: Coordinate, radiusMeters: float) -> GeofenceShape:
        return GeofenceShape.circle(id, center, radiusMeters)

    @staticmethod
    def createRectangle(id: str, southwest: Coordinate, northeast: Coordinate) -> GeofenceShape:
        return GeofenceShape.rectangle(id, southwest, northeast)

    # Parsing

    def _parseResult(self, response: Dict[str, Any], totalShapes: int, totalPoints: int) -> GeofenceResult:
        geometries = asList(getPath(response, "insidegeoms", "geometry"))
        if not geometries:
            return GeofenceResult.empty(totalPoints, totalShapes)

        matches = [self._parseGeometry(geometry) for geometry in geometries]
        return GeofenceResult(
            matches=[match for match in matches if match.hasPointsInside],
            totalPointsChecked=totalPoints,
            totalShapesChecked=totalShapes,
        )

    @staticmethod
    def _parseGeometry(geometry: Any) -> GeofenceMatch:
        pointsInside: List[MatchedPoint] = []
        for mo in asList(getPath(geometry, "molist", "mo")):
            pointId = getCercaliaAttr(mo, "id") or ""
            try:
                coord = parseCoordNode(getPath(mo, "coord"))
            except ValueError as e:
                logger.warning(f"Skipping point '{pointId}' with invalid coordinates: {e}")
                continue
            pointsInside.append(MatchedPoint(id=pointId, coord=coord))

        return GeofenceMatch(
            shapeId=getCercaliaAttr(geometry, "id") or "",
            shapeWkt=getCercaliaValue(getPath(geometry, "wkt")) or "",
            pointsInside=pointsInside,
        )
