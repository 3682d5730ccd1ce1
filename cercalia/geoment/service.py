"""
Cercalia Geoment Service

Polygons of municipalities, subregions, postal codes and POIs (cmd=geoment).
"""

import logging
from typing import Any, Dict

from ..core.client import CercaliaClient, Params
from ..core.constants import CS_WGS84
from ..core.errors import CercaliaResponseError
from ..core.parser import extractFirst, firstElement, getCercaliaAttr, getPath, valueAt
from .models import (
    GeographicElementResult,
    GeographicElementType,
    GeomentMunicipalityOptions,
    GeomentPoiOptions,
    GeomentPostalCodeOptions,
)

logger = logging.getLogger(__name__)

# Vendor puts the WKT in different places depending on element kind
WKT_STRATEGIES = (
    valueAt("geometry", "wkt"),
    valueAt("geom", "wkt"),
    valueAt("geom"),
    valueAt("wkt"),
)


class GeomentService(CercaliaClient):
    """Cercalia administrative geometry client.

    Example:
        >>> service = GeomentService(config)
        >>> girona = service.getMunicipalityGeometry(GeomentMunicipalityOptions(municipalityCode="ESP171000000"))
        >>> print(girona.name, girona.wkt[:40])
    """

    def _newGeomentParams(self) -> Params:
        params = self._newParams("geoment")
        params["cs"] = CS_WGS84
        return params

    def _buildMunicipalityParams(self, options: GeomentMunicipalityOptions) -> Params:
        params = self._newGeomentParams()
        self._addIfPresent(params, "munc", options.municipalityCode)
        self._addIfPresent(params, "subregc", options.subregionCode)
        self._addIfPresent(params, "tolerance", options.tolerance)
        return params

    def _buildPostalCodeParams(self, options: GeomentPostalCodeOptions) -> Params:
        params = self._newGeomentParams()
        params["pcode"] = options.postalCode
        self._addIfPresent(params, "ctryc", options.countryCode)
        self._addIfPresent(params, "tolerance", options.tolerance)
        return params

    def _buildPoiParams(self, options: GeomentPoiOptions) -> Params:
        params = self._newGeomentParams()
        params["poic"] = options.poiCode
        self._addIfPresent(params, "tolerance", options.tolerance)
        return params

    @staticmethod
    def _municipalityType(options: GeomentMunicipalityOptions) -> GeographicElementType:
        if options.subregionCode is not None:
            return GeographicElementType.REGION
        return GeographicElementType.MUNICIPALITY

    def getMunicipalityGeometry(self, options: GeomentMunicipalityOptions) -> GeographicElementResult:
        """Get municipality geometry, or subregion geometry if subregionCode is given.

        Raises:
            CercaliaApiError: Vendor error, including unknown code
            CercaliaResponseError: No element or no WKT in response
        """
        response = self._request(self._buildMunicipalityParams(options), "Geoment")
        return self._parseResponse(response, self._municipalityType(options))

    async def getMunicipalityGeometryAsync(self, options: GeomentMunicipalityOptions) -> GeographicElementResult:
        """Async version of getMunicipalityGeometry()."""
        response = await self._requestAsync(self._buildMunicipalityParams(options), "Geoment")
        return self._parseResponse(response, self._municipalityType(options))

    def getPostalCodeGeometry(self, options: GeomentPostalCodeOptions) -> GeographicElementResult:
        response = self._request(self._buildPostalCodeParams(options), "Geoment")
        return self._parseResponse(response, GeographicElementType.POSTAL_CODE)

    async def getPostalCodeGeometryAsync(self, options: GeomentPostalCodeOptions) -> GeographicElementResult:
        response = await self._requestAsync(self._buildPostalCodeParams(options), "Geoment")
        return self._parseResponse(response, GeographicElementType.POSTAL_CODE)

    def getPoiGeometry(self, options: GeomentPoiOptions) -> GeographicElementResult:
        response = self._request(self._buildPoiParams(options), "Geoment")
        return self._parseResponse(response, GeographicElementType.POI)

    async def getPoiGeometryAsync(self, options: GeomentPoiOptions) -> GeographicElementResult:
        response = await self._requestAsync(self._buildPoiParams(options), "Geoment")
        return self._parseResponse(response, GeographicElementType.POI)

    # Parsing

    @staticmethod
    def _parseResponse(response: Dict[str, Any], elementType: GeographicElementType) -> GeographicElementResult:
        element: Any = firstElement(getPath(response, "geographic_elements", "geographic_element"))
        if element is None:
            element = firstElement(getPath(response, "ge"))
        if element is None:
            raise CercaliaResponseError("No geographic elements found in response", response=response)

        wkt = extractFirst(element, *WKT_STRATEGIES)
        if wkt is None:
            logger.error(f"[Geoment] Missing WKT in element: {element}")
            raise CercaliaResponseError("Geometry WKT missing in response", response=response)

        return GeographicElementResult(
            wkt=wkt,
            code=getCercaliaAttr(element, "id") or "",
            name=getCercaliaAttr(element, "name"),
            type=elementType,
            level=getCercaliaAttr(element, "type"),
        )
