"""
Cercalia Snap To Road Service

Matches raw GPS tracks to the road network (cmd=geomtrack).
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.client import CercaliaClient, Params
from ..core.constants import SRS_EPSG_4326
from ..core.errors import CercaliaResponseError, CercaliaValidationError
from ..core.models import Coordinate
from ..core.parser import asList, getCercaliaAttr, getCercaliaValue, getPath, parseFloatOrNone, parseIntOrNone
from .models import SnapToRoadOptions, SnapToRoadPoint, SnapToRoadResult, SnapToRoadSegment

logger = logging.getLogger(__name__)

MIN_TRACK_POINTS = 2
DEFAULT_GROUP_SIZE = 10

# Group attributes are single letters A..Z
MAX_GROUPS = 26


def buildTrackString(points: Sequence[SnapToRoadPoint]) -> str:
    """Build "track" param, points joined by commas in the given order."""
    return ",".join(point.toTrackString() for point in points)


def groupPoints(coords: Sequence[Coordinate], groupSize: int = DEFAULT_GROUP_SIZE) -> List[SnapToRoadPoint]:
    """Assign attributes "A", "B", ... to consecutive runs of groupSize points.

    Raises:
        CercaliaValidationError: If points need more than 26 groups
    """
    if groupSize <= 0:
        groupSize = DEFAULT_GROUP_SIZE
    if len(coords) > MAX_GROUPS * groupSize:
        raise CercaliaValidationError(
            f"Too many points for groups of {groupSize}: {len(coords)}, at most {MAX_GROUPS * groupSize} allowed"
        )
    return [
        SnapToRoadPoint(coord=coord, attribute=chr(ord("A") + i // groupSize)) for i, coord in enumerate(coords)
    ]


class SnapToRoadService(CercaliaClient):
    """Cercalia map matching client.

    Example:
        >>> service = SnapToRoadService(config)
        >>> track = [SnapToRoadPoint(Coordinate(41.3851, 2.1734)), SnapToRoadPoint(Coordinate(41.3870, 2.1700))]
        >>> result = service.match(track)
        >>> print(result.totalDistance, [s.wkt for s in result.segments])
    """

    def _buildParams(self, points: Sequence[SnapToRoadPoint], options: Optional[SnapToRoadOptions]) -> Params:
        if len(points) < MIN_TRACK_POINTS:
            raise CercaliaValidationError("SnapToRoad requires at least 2 GPS points")

        options = options or SnapToRoadOptions()
        params = self._newParams("geomtrack")
        params["srs"] = SRS_EPSG_4326
        params["track"] = buildTrackString(points)

        if options.weight is not None:
            params["weight"] = str(options.weight)
        self._addIfPresent(params, "net", options.net)
        self._addIfPresent(params, "geometrysrs", options.geometrySrs)
        self._addIfPresent(params, "geometrytolerance", options.geometryTolerance)
        self._addIfTrue(params, "points", options.points, "true")

        if options.speeding:
            params["speeding"] = "true"
            self._addIfPresent(params, "speedtolerance", options.speedTolerance)

        self._addIfTrue(params, "onlytrack", options.onlyTrack, "true")
        self._addIfPresent(params, "maxdirectionsearchdistance", options.maxDirectionSearchDistance)
        self._addIfPresent(params, "maxsearchdistance", options.maxSearchDistance)
        self._addIfPresent(params, "factor", options.factor)
        return params

    def match(
        self, points: Sequence[SnapToRoadPoint], options: Optional[SnapToRoadOptions] = None
    ) -> SnapToRoadResult:
        """Match GPS track to the road network.

        Args:
            points: Track points in temporal order (at least 2)
            options: Map matching options

        Returns:
            Matched segments (one per attribute group) with total distance

        Raises:
            CercaliaValidationError: Fewer than 2 points
            CercaliaResponseError: Response has no track node
        """
        params = self._buildParams(points, options)
        response = self._request(params, "SnapToRoad")
        return self._parseResponse(response)

    async def matchAsync(
        self, points: Sequence[SnapToRoadPoint], options: Optional[SnapToRoadOptions] = None
    ) -> SnapToRoadResult:
        """Async version of match()."""
        params = self._buildParams(points, options)
        response = await self._requestAsync(params, "SnapToRoad")
        return self._parseResponse(response)

    def matchWithGroups(
        self,
        coords: Sequence[Coordinate],
        groupSize: int = DEFAULT_GROUP_SIZE,
        options: Optional[SnapToRoadOptions] = None,
    ) -> SnapToRoadResult:
        """Match track split into segments of groupSize points each."""
        return self.match(groupPoints(coords, groupSize), options)

    async def matchWithGroupsAsync(
        self,
        coords: Sequence[Coordinate],
        groupSize: int = DEFAULT_GROUP_SIZE,
        options: Optional[SnapToRoadOptions] = None,
    ) -> SnapToRoadResult:
        return await self.matchAsync(groupPoints(coords, groupSize), options)

    def matchWithSpeedingDetection(self, points: Sequence[SnapToRoadPoint], toleranceKmh: int = 10) -> SnapToRoadResult:
        """Match track and flag segments driven above the speed limit."""
        return self.match(points, SnapToRoadOptions(speeding=True, speedTolerance=toleranceKmh))

    async def matchWithSpeedingDetectionAsync(
        self, points: Sequence[SnapToRoadPoint], toleranceKmh: int = 10
    ) -> SnapToRoadResult:
        return await self.matchAsync(points, SnapToRoadOptions(speeding=True, speedTolerance=toleranceKmh))

    def matchSimplified(self, points: Sequence[SnapToRoadPoint], tolerance: int = 50) -> SnapToRoadResult:
        """Match track with simplified geometry, tolerance in meters."""
        return self.match(points, SnapToRoadOptions(geometryTolerance=tolerance))

    async def matchSimplifiedAsync(self, points: Sequence[SnapToRoadPoint], tolerance: int = 50) -> SnapToRoadResult:
        return await self.matchAsync(points, SnapToRoadOptions(geometryTolerance=tolerance))

    # Parsing

    def _parseResponse(self, response: Dict[str, Any]) -> SnapToRoadResult:
        track = response.get("track")
        if track is None:
            raise CercaliaResponseError("Cercalia SnapToRoad: No track data in response", response=response)

        segments: List[SnapToRoadSegment] = []
        for geometry in asList(getPath(track, "geometry")):
            segment = self._parseSegment(geometry)
            if segment is not None:
                segments.append(segment)

        return SnapToRoadResult(segments=segments, totalDistance=sum(segment.distance for segment in segments))

    @staticmethod
    def _extractWkt(geometry: Any) -> Optional[str]:
        wkt = getCercaliaValue(getPath(geometry, "wkt"))
        if wkt:
            return wkt
        return getCercaliaValue(getPath(geometry, "geometry", "wkt"))

    def _parseSegment(self, geometry: Any) -> Optional[SnapToRoadSegment]:
        attribute = getCercaliaAttr(geometry, "attribute")
        wkt = self._extractWkt(geometry)
        if not wkt:
            logger.warning(f"Skipping track segment '{attribute}' without WKT")
            return None

        speedingAttr = getCercaliaAttr(geometry, "speeding")
        speeding: Optional[bool] = None
        speedingLevel: Optional[int] = None
        if speedingAttr in ("true", "1"):
            speeding = True
            speedingLevel = parseIntOrNone(getCercaliaAttr(geometry, "speedinglevel"))
        elif speedingAttr is not None:
            speeding = False

        return SnapToRoadSegment(
            wkt=wkt,
            distance=parseFloatOrNone(getCercaliaAttr(geometry, "distance")) or 0.0,
            attribute=attribute,
            speeding=speeding,
            speedingLevel=speedingLevel,
        )
