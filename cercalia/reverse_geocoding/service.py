"""
Cercalia Reverse Geocoding Service

Coordinates to address / administrative level / timezone (cmd=prox), plus
special POI categories (census sections, SIGPAC parcels) and regions
intersecting a WKT geometry.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Union

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_GDD, CS_WGS84
from ..core.errors import CercaliaValidationError
from ..core.models import Coordinate
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
from ..geocoding.models import GeocodingCandidate, GeocodingCandidateType, GeocodingLevel
from .models import (
    ReverseGeocodeLevel,
    ReverseGeocodeOptions,
    ReverseGeocodeResult,
    SigpacInfo,
    TimezoneInfo,
    TimezoneOptions,
    TimezoneResult,
)

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 100

CATEGORY_CENSUS_SECTION = "D00SECCEN"
CATEGORY_SIGPAC = "D00SIGPAC"

# Response types answered with a flat gelist
GELIST_TYPES = ("timezone", "mun", "ct", "subreg", "reg", "ctry")

ROAD_CLASSES = ("ap", "av", "na1", "a2", "pl", "ep", "cl", "pt")

LEVEL_MAP = {
    "adr": GeocodingLevel.ADR,
    "cadr": GeocodingLevel.ADR,
    "st": GeocodingLevel.ST,
    "ct": GeocodingLevel.CT,
    "pcode": GeocodingLevel.PCODE,
    "mun": GeocodingLevel.MUN,
    "subreg": GeocodingLevel.SUBREG,
    "reg": GeocodingLevel.REG,
    "ctry": GeocodingLevel.CTRY,
    "rd": GeocodingLevel.RD,
    "pk": GeocodingLevel.PK,
    "poi": GeocodingLevel.POI,
    "timezone": GeocodingLevel.POI,
}


def mapCandidateType(frc: Optional[str], responseType: Optional[str]) -> GeocodingCandidateType:
    """Map functional road class (or response type if no frc) to candidate type."""
    value = (frc or responseType or "").lower()
    if value in ROAD_CLASSES:
        return GeocodingCandidateType.ROAD
    if value in ("poi", "timezone"):
        return GeocodingCandidateType.POI
    if value in ("ct", "municipality", "mun"):
        return GeocodingCandidateType.MUNICIPALITY
    return GeocodingCandidateType.ADDRESS


def mapLevel(geType: Optional[str], responseType: Optional[str]) -> Optional[GeocodingLevel]:
    """Map ge@type (or response type if missing) to geocoding level."""
    value = (geType or responseType or "").lower()
    return LEVEL_MAP.get(value)


def formatMoList(coords: Sequence[Coordinate]) -> str:
    """Format coordinates as "[lat,lng],[lat,lng]"."""
    return ",".join(f"[{coord.toLatLngString()}]" for coord in coords)


class ReverseGeocodingService(CercaliaClient):
    """Cercalia reverse geocoding client.

    Example:
        >>> service = ReverseGeocodingService(config)
        >>> result = service.reverseGeocode(Coordinate(41.3874, 2.1686))
        >>> if result:
        ...     print(result.ge.name, result.ge.municipality, result.ge.municipalityCode)
    """

    # Reverse geocode

    def _buildReverseParams(self, coords: Sequence[Coordinate], options: Optional[ReverseGeocodeOptions]) -> Params:
        if len(coords) > MAX_BATCH_SIZE:
            raise CercaliaValidationError(f"Maximum {MAX_BATCH_SIZE} coordinates allowed per request")

        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        if len(coords) == 1:
            params["mo"] = coords[0].toLatLngString()
        else:
            params["molist"] = formatMoList(coords)

        options = options or ReverseGeocodeOptions()
        if options.level is not None:
            params["rqge"] = str(options.level)
        elif options.category is None:
            params["rqge"] = ReverseGeocodeLevel.ADR.value

        self._addIfPresent(params, "rqpoicats", options.category)
        self._addIfPresent(params, "datetime", options.dateTime)
        return params

    def reverseGeocode(
        self, coord: Coordinate, options: Optional[ReverseGeocodeOptions] = None
    ) -> Optional[ReverseGeocodeResult]:
        """Get address (or level / category element) at coordinate.

        Returns:
            First result or None if nothing was found
        """
        results = self.reverseGeocodeBatch([coord], options)
        return results[0] if results else None

    async def reverseGeocodeAsync(
        self, coord: Coordinate, options: Optional[ReverseGeocodeOptions] = None
    ) -> Optional[ReverseGeocodeResult]:
        """Async version of reverseGeocode()."""
        results = await self.reverseGeocodeBatchAsync([coord], options)
        return results[0] if results else None

    def reverseGeocodeBatch(
        self, coords: Sequence[Coordinate], options: Optional[ReverseGeocodeOptions] = None
    ) -> List[ReverseGeocodeResult]:
        """Reverse geocode up to 100 coordinates in one request.

        Raises:
            CercaliaValidationError: If more than 100 coordinates are given
        """
        if not coords:
            return []
        response = self._requestOptional(self._buildReverseParams(coords, options), "ReverseGeocoding")
        if response is None:
            return []
        return self._parseProximityResponse(response)

    async def reverseGeocodeBatchAsync(
        self, coords: Sequence[Coordinate], options: Optional[ReverseGeocodeOptions] = None
    ) -> List[ReverseGeocodeResult]:
        """Async version of reverseGeocodeBatch()."""
        if not coords:
            return []
        response = await self._requestOptionalAsync(self._buildReverseParams(coords, options), "ReverseGeocoding")
        if response is None:
            return []
        return self._parseProximityResponse(response)

    # Intersecting regions

    def _buildRegionsParams(self, wkt: str, level: Union[ReverseGeocodeLevel, str]) -> Params:
        params = self._newParams("prox")
        params["cs"] = CS_WGS84
        params["wkt"] = wkt
        params["rqge"] = str(level)
        return params

    def getIntersectingRegions(self, wkt: str, level: Union[ReverseGeocodeLevel, str]) -> List[ReverseGeocodeResult]:
        """Get administrative regions of given level intersecting WKT geometry.

        Args:
            wkt: Geometry in WGS84, e.g. "LINESTRING(2.17 41.38, -3.70 40.41)"
            level: Region level, e.g. ReverseGeocodeLevel.SUBREG
        """
        response = self._requestOptional(self._buildRegionsParams(wkt, level), "IntersectingRegions")
        if response is None:
            return []
        return self._parseGelist(response, str(level))

    async def getIntersectingRegionsAsync(
        self, wkt: str, level: Union[ReverseGeocodeLevel, str]
    ) -> List[ReverseGeocodeResult]:
        """Async version of getIntersectingRegions()."""
        response = await self._requestOptionalAsync(self._buildRegionsParams(wkt, level), "IntersectingRegions")
        if response is None:
            return []
        return self._parseGelist(response, str(level))

    # Timezone

    def _buildTimezoneParams(self, coord: Coordinate, options: Optional[TimezoneOptions]) -> Params:
        params = self._newParams("prox")
        params["mocs"] = CS_GDD
        params["mo"] = coord.toLatLngString()
        params["rqge"] = ReverseGeocodeLevel.TIMEZONE.value
        if options is not None:
            self._addIfPresent(params, "datetime", options.dateTime)
        return params

    def getTimezone(self, coord: Coordinate, options: Optional[TimezoneOptions] = None) -> Optional[TimezoneResult]:
        """Get timezone at coordinate, None if unknown."""
        response = self._requestOptional(self._buildTimezoneParams(coord, options), "Timezone")
        if response is None:
            return None
        return self._parseTimezone(response, coord)

    async def getTimezoneAsync(
        self, coord: Coordinate, options: Optional[TimezoneOptions] = None
    ) -> Optional[TimezoneResult]:
        """Async version of getTimezone()."""
        response = await self._requestOptionalAsync(self._buildTimezoneParams(coord, options), "Timezone")
        if response is None:
            return None
        return self._parseTimezone(response, coord)

    # Parsing

    def _parseProximityResponse(self, response: Dict[str, Any]) -> List[ReverseGeocodeResult]:
        """Parse prox answer, its nesting depends on what was requested."""
        proximity = response.get("proximity")
        if not isinstance(proximity, dict):
            return []

        responseType = getCercaliaAttr(proximity, "type")
        if responseType == "poi":
            return self._parsePoiList(proximity)
        if responseType in GELIST_TYPES:
            return self._parseGelist(response, responseType)

        moList = getPath(proximity, "molist", "mo")
        if moList is not None:
            results: List[ReverseGeocodeResult] = []
            for mo in asList(moList):
                ge = mo.get("ge") if isinstance(mo, dict) else None
                if not isinstance(ge, dict):
                    continue
                result = self._safeMapGe(ge, responseType or "adr")
                if result is not None:
                    results.append(result)
            return results

        return self._parseGelist(response, responseType or "adr")

    def _parseGelist(self, response: Dict[str, Any], responseType: Optional[str]) -> List[ReverseGeocodeResult]:
        results: List[ReverseGeocodeResult] = []
        for ge in asList(getPath(response, "proximity", "gelist", "ge")):
            result = self._safeMapGe(ge, responseType)
            if result is not None:
                results.append(result)
        return results

    def _parsePoiList(self, proximity: Dict[str, Any]) -> List[ReverseGeocodeResult]:
        results: List[ReverseGeocodeResult] = []
        for poi in asList(getPath(proximity, "poilist", "poi")):
            try:
                results.append(self._mapPoi(poi))
            except ValueError as e:
                logger.warning(f"Skipping invalid poi element: {e}")
        return results

    def _safeMapGe(self, ge: Any, responseType: Optional[str]) -> Optional[ReverseGeocodeResult]:
        try:
            return self._mapGe(ge, responseType)
        except ValueError as e:
            logger.warning(f"Skipping invalid ge element: {e}")
            return None

    def _mapGe(self, ge: Any, responseType: Optional[str]) -> ReverseGeocodeResult:
        if not isinstance(ge, dict):
            raise ValueError("geographic element is not an object")
        try:
            coord = parseCoordNode(ge.get("coord"))
        except ValueError as e:
            raise ValueError(f"Invalid geographic element: {e}") from e

        street = ge.get("street")
        candidate = GeocodingCandidate(
            id=getCercaliaAttr(ge, "id") or "unknown",
            name=extractFirst(ge, attrAt("name"), valueAt("name"), default="Unknown") or "Unknown",
            street=extractFirst(street, valueAt(), attrAt("name")),
            streetCode=getCercaliaAttr(street, "id"),
            postalCode=extractFirst(ge, valueAt("postalcode"), attrAt("postalcode", "id")),
            houseNumber=getCercaliaValue(ge.get("housenumber")),
            coord=coord,
            type=mapCandidateType(getCercaliaAttr(ge, "frc"), responseType),
            level=mapLevel(getCercaliaAttr(ge, "type"), responseType),
            **getAdminPairs(ge),
        )

        timezone: Optional[TimezoneInfo] = None
        if responseType == "timezone":
            timezone = TimezoneInfo(
                id=getCercaliaAttr(ge, "id") or "",
                name=getCercaliaAttr(ge, "name") or "",
                localDateTime=getCercaliaAttr(ge, "localdatetime") or "",
                utcDateTime=getCercaliaAttr(ge, "utcdatetime") or "",
                utcOffset=parseIntOrNone(getCercaliaAttr(ge, "utctimeoffset")) or 0,
                daylightSavingTime=parseIntOrNone(getCercaliaAttr(ge, "daylightsavingtime")) or 0,
            )

        return ReverseGeocodeResult(
            ge=candidate,
            distance=parseFloatOrNone(getCercaliaAttr(ge, "dist")),
            maxSpeed=parseFloatOrNone(getCercaliaAttr(ge, "kmh")),
            km=getCercaliaValue(ge.get("km")),
            direction=getCercaliaValue(ge.get("direction")),
            timezone=timezone,
        )

    def _mapPoi(self, poi: Any) -> ReverseGeocodeResult:
        if not isinstance(poi, dict):
            raise ValueError("poi element is not an object")
        try:
            coord = parseCoordNode(poi.get("coord"))
        except ValueError as e:
            raise ValueError(f"Invalid POI: {e}") from e

        candidate = GeocodingCandidate(
            id=getCercaliaAttr(poi, "id") or "",
            name=getCercaliaValue(poi.get("name")) or "",
            coord=coord,
            type=GeocodingCandidateType.POI,
            **getAdminPairs(poi.get("ge")),
        )

        category = getCercaliaAttr(poi, "category_id")
        censusId: Optional[str] = None
        sigpac: Optional[SigpacInfo] = None
        if category == CATEGORY_CENSUS_SECTION:
            censusId = extractFirst(poi, valueAt("info"), valueAt("name"))
        elif category == CATEGORY_SIGPAC:
            sigpac = self._parseSigpac(poi)

        return ReverseGeocodeResult(ge=candidate, censusId=censusId, sigpac=sigpac)

    @staticmethod
    def _parseSigpac(poi: Dict[str, Any]) -> SigpacInfo:
        """Parse "municipalityCode|usage|extensionHa|vulnerableType|vulnerableCode" info string."""
        parts = (getCercaliaValue(poi.get("info")) or "").split("|")
        return SigpacInfo(
            id=getCercaliaValue(poi.get("name")) or "",
            municipalityCode=parts[0],
            usage=parts[1] if len(parts) > 1 else "",
            extensionHa=(parseFloatOrNone(parts[2]) or 0.0) if len(parts) > 2 else 0.0,
            vulnerableType=parts[3] if len(parts) > 3 else None,
            vulnerableCode=parts[4] if len(parts) > 4 else None,
        )

    @staticmethod
    def _parseTimezone(response: Dict[str, Any], coord: Coordinate) -> Optional[TimezoneResult]:
        ge = firstElement(getPath(response, "proximity", "gelist", "ge"))
        if not isinstance(ge, dict):
            return None
        return TimezoneResult(
            coord=coord,
            id=getCercaliaAttr(ge, "id") or "",
            name=getCercaliaAttr(ge, "name") or "",
            localDateTime=getCercaliaAttr(ge, "localdatetime") or "",
            utcDateTime=getCercaliaAttr(ge, "utcdatetime") or "",
            utcOffset=parseIntOrNone(getCercaliaAttr(ge, "utctimeoffset")) or 0,
            daylightSavingTime=parseIntOrNone(getCercaliaAttr(ge, "daylightsavingtime")) or 0,
        )
