"""
Cercalia Static Maps Service

Renders map images (cmd=map) with optional shapes and markers. When the
requested city name is ambiguous the vendor answers with a candidate list
instead of a map, in that case the first candidate is requested again by
its "ctc" id.
"""

import logging
from dataclasses import replace
from typing import Any, Dict, Optional, Sequence

import httpx

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_GDD
from ..core.errors import CercaliaResponseError
from ..core.models import Coordinate, MapExtent
from ..core.parser import (
    asList,
    firstElement,
    getCercaliaAttr,
    getCercaliaValue,
    getPath,
    parseFloatOrNone,
    parseIntOrNone,
)
from .models import (
    StaticMapCircle,
    StaticMapLabel,
    StaticMapLine,
    StaticMapMarker,
    StaticMapOptions,
    StaticMapPolyline,
    StaticMapRectangle,
    StaticMapResult,
    StaticMapSector,
    StaticMapShape,
)

logger = logging.getLogger(__name__)

MAX_WIDTH = 1680
MAX_HEIGHT = 1280
EXTENT_PADDING = 0.01
DEFAULT_IMAGE_HOST = "https://lb.cercalia.com"


def formatMarkers(markers: Sequence[StaticMapMarker]) -> str:
    return ",".join(marker.toCercaliaString() for marker in markers)


def formatShapes(shapes: Sequence[StaticMapShape]) -> str:
    return ",".join(shape.toCercaliaString() for shape in shapes)


def getCandidateCtc(response: Dict[str, Any]) -> str:
    """Get "ctc" url param of the first disambiguation candidate.

    Raises:
        CercaliaResponseError: If there is no candidate or it has no ctc param
    """
    candidate = firstElement(getPath(response, "candidates", "candidate"))
    if candidate is None:
        raise CercaliaResponseError("No valid candidates found for city", response=response)

    urlParams = getPath(candidate, "urlparams")
    if urlParams is None:
        raise CercaliaResponseError("No urlparams in candidate", response=response)

    for param in asList(getPath(urlParams, "param")):
        if getCercaliaAttr(param, "name") == "ctc":
            ctc = getCercaliaAttr(param, "value")
            if ctc:
                return ctc

    raise CercaliaResponseError("No ctc parameter found in candidate", response=response)


class StaticMapsService(CercaliaClient):
    """Cercalia static map client.

    Example:
        >>> service = StaticMapsService(config)
        >>> result = service.generateCityMap("Girona", "ESP", 800, 600)
        >>> print(result.imageUrl)
    """

    def _imageHost(self) -> str:
        """Get "scheme://host" of the configured base URL."""
        try:
            url = httpx.URL(self.config.baseUrl)
        except httpx.InvalidURL:
            return DEFAULT_IMAGE_HOST
        if not url.scheme or not url.host:
            return DEFAULT_IMAGE_HOST
        return f"{url.scheme}://{url.host}"

    @staticmethod
    def _addSizeAndDrawings(params: Params, options: StaticMapOptions) -> None:
        if options.width is not None:
            params["width"] = str(min(options.width, MAX_WIDTH))
        if options.height is not None:
            params["height"] = str(min(options.height, MAX_HEIGHT))
        if options.markers:
            params["molist"] = formatMarkers(options.markers)
        if options.shapes:
            params["shape"] = formatShapes(options.shapes)

    def _buildParams(self, options: StaticMapOptions) -> Params:
        coordinateSystem = options.coordinateSystem or CS_GDD
        params = self._newParams("map")
        params["mocs"] = coordinateSystem
        params["cs"] = coordinateSystem

        self._addIfPresent(params, "ctn", options.cityName)
        self._addIfPresent(params, "ctryc", options.countryCode)
        if options.extent is not None:
            params["extent"] = options.extent.toCercaliaString()
        if options.center is not None:
            params["mo"] = options.center.toLatLngString()
        self._addIfPresent(params, "labelop", options.labelOp)
        params["mode"] = str(options.mode)
        params["priorityfilter"] = "true" if options.priorityFilter else "false"

        self._addSizeAndDrawings(params, options)
        return params

    def _buildCandidateParams(self, ctc: str, options: StaticMapOptions) -> Params:
        params = self._newParams("map")
        params["ctc"] = ctc
        if options.coordinateSystem:
            params["mocs"] = options.coordinateSystem
            params["cs"] = options.coordinateSystem
        self._addSizeAndDrawings(params, options)
        return params

    @staticmethod
    def _isDisambiguation(response: Dict[str, Any]) -> bool:
        return "candidates" in response and "map" not in response

    def generateMap(self, options: StaticMapOptions) -> StaticMapResult:
        """Render static map.

        Args:
            options: Map options, returnImage=True also downloads the image

        Returns:
            Image URL and map metadata

        Raises:
            CercaliaResponseError: Response has no map image or unusable candidates
        """
        response = self._request(self._buildParams(options), "StaticMaps")

        if self._isDisambiguation(response):
            ctc = getCandidateCtc(response)
            logger.info(f"[StaticMaps] Using candidate with ctc={ctc}")
            response = self._request(self._buildCandidateParams(ctc, options), "StaticMaps (Retry)")

        result = self._parseMapResponse(response)
        if options.returnImage:
            return replace(result, imageData=self.downloadImage(result.imageUrl))
        return result

    async def generateMapAsync(self, options: StaticMapOptions) -> StaticMapResult:
        """Async version of generateMap()."""
        response = await self._requestAsync(self._buildParams(options), "StaticMaps")

        if self._isDisambiguation(response):
            ctc = getCandidateCtc(response)
            logger.info(f"[StaticMaps] Using candidate with ctc={ctc}")
            response = await self._requestAsync(self._buildCandidateParams(ctc, options), "StaticMaps (Retry)")

        result = self._parseMapResponse(response)
        if options.returnImage:
            return replace(result, imageData=await self.downloadImageAsync(result.imageUrl))
        return result

    def downloadImage(self, imageUrl: str) -> bytes:
        """Download rendered image.

        Raises:
            CercaliaTransportError: Network failure or non-2xx status
        """
        return self._download(imageUrl)

    async def downloadImageAsync(self, imageUrl: str) -> bytes:
        return await self._downloadAsync(imageUrl)

    def generateMapAsImage(self, options: StaticMapOptions) -> StaticMapResult:
        """Render static map and download its image."""
        result = self.generateMap(options)
        if result.imageData is not None:
            return result
        return replace(result, imageData=self.downloadImage(result.imageUrl))

    async def generateMapAsImageAsync(self, options: StaticMapOptions) -> StaticMapResult:
        result = await self.generateMapAsync(options)
        if result.imageData is not None:
            return result
        return replace(result, imageData=await self.downloadImageAsync(result.imageUrl))

    # Convenience helpers

    def generateCityMap(
        self, cityName: str, countryCode: str, width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        return self.generateMap(cityMapOptions(cityName, countryCode, width, height))

    async def generateCityMapAsync(
        self, cityName: str, countryCode: str, width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        return await self.generateMapAsync(cityMapOptions(cityName, countryCode, width, height))

    def generateMapWithCircle(
        self,
        center: Coordinate,
        radius: int,
        circle: Optional[StaticMapCircle] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        """Render map centered on a circle, radius in meters."""
        return self.generateMap(circleMapOptions(center, radius, circle, width, height))

    async def generateMapWithCircleAsync(
        self,
        center: Coordinate,
        radius: int,
        circle: Optional[StaticMapCircle] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        return await self.generateMapAsync(circleMapOptions(center, radius, circle, width, height))

    def generateMapWithRectangle(
        self,
        upperLeft: Coordinate,
        lowerRight: Coordinate,
        rectangle: Optional[StaticMapRectangle] = None,
        cityName: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        return self.generateMap(rectangleMapOptions(upperLeft, lowerRight, rectangle, cityName, width, height))

    async def generateMapWithRectangleAsync(
        self,
        upperLeft: Coordinate,
        lowerRight: Coordinate,
        rectangle: Optional[StaticMapRectangle] = None,
        cityName: Optional[str] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        return await self.generateMapAsync(
            rectangleMapOptions(upperLeft, lowerRight, rectangle, cityName, width, height)
        )

    def generateMapWithLine(
        self,
        start: Coordinate,
        end: Coordinate,
        line: Optional[StaticMapLine] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        """Render line between two points, extent fitted to both ends."""
        return self.generateMap(lineMapOptions(start, end, line, width, height))

    async def generateMapWithLineAsync(
        self,
        start: Coordinate,
        end: Coordinate,
        line: Optional[StaticMapLine] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        return await self.generateMapAsync(lineMapOptions(start, end, line, width, height))

    def generateMapWithPolyline(
        self,
        coordinates: Sequence[Coordinate],
        polyline: Optional[StaticMapPolyline] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        """Render polyline, extent fitted to its points, labels disabled."""
        return self.generateMap(polylineMapOptions(coordinates, polyline, width, height))

    async def generateMapWithPolylineAsync(
        self,
        coordinates: Sequence[Coordinate],
        polyline: Optional[StaticMapPolyline] = None,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        return await self.generateMapAsync(polylineMapOptions(coordinates, polyline, width, height))

    def generateMapWithMarkers(
        self, markers: Sequence[StaticMapMarker], width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        """Render markers, extent fitted to all of them."""
        return self.generateMap(markersMapOptions(markers, width, height))

    async def generateMapWithMarkersAsync(
        self, markers: Sequence[StaticMapMarker], width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        return await self.generateMapAsync(markersMapOptions(markers, width, height))

    def generateMapWithLabel(
        self, center: Coordinate, text: str, width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        return self.generateMap(labelMapOptions(center, text, width, height))

    async def generateMapWithLabelAsync(
        self, center: Coordinate, text: str, width: Optional[int] = None, height: Optional[int] = None
    ) -> StaticMapResult:
        return await self.generateMapAsync(labelMapOptions(center, text, width, height))

    def generateMapWithSector(
        self,
        center: Coordinate,
        innerRadius: int,
        outerRadius: int,
        startAngle: int,
        endAngle: int,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        sector = StaticMapSector(center, innerRadius, outerRadius, startAngle, endAngle)
        return self.generateMap(centeredShapeOptions(center, sector, width, height))

    async def generateMapWithSectorAsync(
        self,
        center: Coordinate,
        innerRadius: int,
        outerRadius: int,
        startAngle: int,
        endAngle: int,
        width: Optional[int] = None,
        height: Optional[int] = None,
    ) -> StaticMapResult:
        sector = StaticMapSector(center, innerRadius, outerRadius, startAngle, endAngle)
        return await self.generateMapAsync(centeredShapeOptions(center, sector, width, height))

    # Parsing

    def _parseMapResponse(self, response: Dict[str, Any]) -> StaticMapResult:
        mapNode = response.get("map")
        if mapNode is None:
            raise CercaliaResponseError("No map data in response", response=response)

        img = getPath(mapNode, "img")
        if img is None:
            raise CercaliaResponseError("No image data in response", response=response)

        href = getCercaliaAttr(img, "href")
        if href is None:
            raise CercaliaResponseError("No image href in response", response=response)

        return StaticMapResult(
            imageUrl=self._imageHost() + href,
            imagePath=href,
            width=parseIntOrNone(getCercaliaAttr(img, "width")),
            height=parseIntOrNone(getCercaliaAttr(img, "height")),
            format=getCercaliaAttr(img, "format"),
            scale=parseIntOrNone(getCercaliaAttr(img, "scale")),
            center=self._parseCenter(getCercaliaAttr(img, "center")),
            extent=self._parseExtent(getPath(img, "extent", "coord")),
            label=getCercaliaValue(getPath(mapNode, "label")),
        )

    @staticmethod
    def _parseCenter(value: Optional[str]) -> Optional[Coordinate]:
        if not value:
            return None
        try:
            return Coordinate.fromCercaliaString(value)
        except ValueError:
            logger.warning(f"Ignoring invalid map center: {value}")
            return None

    @staticmethod
    def _parseExtent(coordNode: Any) -> Optional[MapExtent]:
        coords = asList(coordNode)
        if len(coords) < 2:
            return None

        first, second = coords[0], coords[1]
        x0 = parseFloatOrNone(getCercaliaAttr(first, "x"))
        y0 = parseFloatOrNone(getCercaliaAttr(first, "y"))
        x1 = parseFloatOrNone(getCercaliaAttr(second, "x"))
        y1 = parseFloatOrNone(getCercaliaAttr(second, "y"))
        if x0 is None or y0 is None or x1 is None or y1 is None:
            return None
        return MapExtent(upperLeft=Coordinate(lat=y0, lng=x0), lowerRight=Coordinate(lat=y1, lng=x1))


# Option builders shared by the sync and async helpers


def cityMapOptions(
    cityName: str, countryCode: str, width: Optional[int], height: Optional[int]
) -> StaticMapOptions:
    return StaticMapOptions(cityName=cityName, countryCode=countryCode, width=width, height=height)


def centeredShapeOptions(
    center: Coordinate, shape: StaticMapShape, width: Optional[int], height: Optional[int]
) -> StaticMapOptions:
    return StaticMapOptions(center=center, shapes=[shape], width=width, height=height, coordinateSystem=CS_GDD)


def circleMapOptions(
    center: Coordinate,
    radius: int,
    circle: Optional[StaticMapCircle],
    width: Optional[int],
    height: Optional[int],
) -> StaticMapOptions:
    return centeredShapeOptions(center, circle or StaticMapCircle(center, radius), width, height)


def labelMapOptions(center: Coordinate, text: str, width: Optional[int], height: Optional[int]) -> StaticMapOptions:
    return centeredShapeOptions(center, StaticMapLabel(center, text), width, height)


def rectangleMapOptions(
    upperLeft: Coordinate,
    lowerRight: Coordinate,
    rectangle: Optional[StaticMapRectangle],
    cityName: Optional[str],
    width: Optional[int],
    height: Optional[int],
) -> StaticMapOptions:
    return StaticMapOptions(
        cityName=cityName,
        shapes=[rectangle or StaticMapRectangle(upperLeft, lowerRight)],
        width=width,
        height=height,
    )


def lineMapOptions(
    start: Coordinate,
    end: Coordinate,
    line: Optional[StaticMapLine],
    width: Optional[int],
    height: Optional[int],
) -> StaticMapOptions:
    return StaticMapOptions(
        extent=MapExtent.around([start, end], EXTENT_PADDING),
        shapes=[line or StaticMapLine(start, end)],
        width=width,
        height=height,
        coordinateSystem=CS_GDD,
    )


def polylineMapOptions(
    coordinates: Sequence[Coordinate],
    polyline: Optional[StaticMapPolyline],
    width: Optional[int],
    height: Optional[int],
) -> StaticMapOptions:
    return StaticMapOptions(
        extent=MapExtent.around(coordinates, EXTENT_PADDING),
        shapes=[polyline or StaticMapPolyline(list(coordinates))],
        width=width,
        height=height,
        coordinateSystem=CS_GDD,
        labelOp=0,
    )


def markersMapOptions(
    markers: Sequence[StaticMapMarker], width: Optional[int], height: Optional[int]
) -> StaticMapOptions:
    return StaticMapOptions(
        extent=MapExtent.around([marker.coord for marker in markers], EXTENT_PADDING),
        markers=list(markers),
        width=width,
        height=height,
        coordinateSystem=CS_GDD,
    )

