"""
Cercalia Suggest Service

Address autocomplete. Unlike the other services it talks to a separate
Solr-based servlet, answers look like:

    {
        "responseHeader": {"status": 0},
        "response": {"docs": [{"id": "...", "calle_nombre": "...", "coord": "41.39,2.16"}]}
    }
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..core.client import CercaliaClient, Params
from ..core.constants import SUGGEST_BASE_URL
from ..core.errors import CercaliaApiError, CercaliaError, CercaliaResponseError
from ..core.models import Coordinate
from ..core.parser import asText, parseFloatOrNone
from .models import (
    SuggestAdminEntity,
    SuggestCity,
    SuggestGeocodeOptions,
    SuggestGeocodeResult,
    SuggestGeoType,
    SuggestHouseNumbers,
    SuggestOptions,
    SuggestPoi,
    SuggestResult,
    SuggestResultType,
    SuggestStreet,
)

logger = logging.getLogger(__name__)

# Any of these doc fields marks a POI suggestion
POI_MARKER_FIELDS = ("poi_id", "poi_cat", "category_id")


def docText(doc: Dict[str, Any], key: str) -> Optional[str]:
    return asText(doc.get(key))


def docInt(doc: Dict[str, Any], key: str) -> Optional[int]:
    value = doc.get(key)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def docBool(doc: Dict[str, Any], key: str) -> Optional[bool]:
    value = doc.get(key)
    return value if isinstance(value, bool) else None


def parseLatLng(value: Optional[str]) -> Optional[Coordinate]:
    """Parse "lat,lng" string, None if it is missing or invalid."""
    if not value:
        return None
    parts = value.split(",")
    if len(parts) != 2:
        return None
    lat = parseFloatOrNone(parts[0].strip())
    lng = parseFloatOrNone(parts[1].strip())
    if lat is None or lng is None:
        return None
    return Coordinate(lat=lat, lng=lng)


def adminEntity(doc: Dict[str, Any], codeKey: str, nameKey: str) -> Optional[SuggestAdminEntity]:
    code = docText(doc, codeKey)
    name = docText(doc, nameKey)
    if code is None and name is None:
        return None
    return SuggestAdminEntity(code=code, name=name)


def buildDisplayText(doc: Dict[str, Any]) -> str:
    """Build "street, number, city (district), municipality, province, country" label.

    Municipality is skipped when it equals the city. Falls back to "nombre"
    and then "id" when there are no address parts at all.
    """
    parts: List[str] = []

    street = docText(doc, "calle_descripcion") or docText(doc, "calle_nombre")
    if street is not None:
        number = docInt(doc, "portal")
        parts.append(f"{street}, {number}" if number is not None else street)

    city = docText(doc, "localidad_nombre")
    if city is not None:
        district = docText(doc, "distrito_nombre")
        parts.append(f"{city} ({district})" if district is not None else city)

    municipality = docText(doc, "municipio_nombre")
    if municipality is not None and municipality != city:
        parts.append(municipality)

    for key in ("provincia_nombre", "pais_nombre"):
        value = docText(doc, key)
        if value is not None:
            parts.append(value)

    if not parts:
        return docText(doc, "nombre") or docText(doc, "id") or ""
    return ", ".join(parts)


def determineType(doc: Dict[str, Any]) -> SuggestResultType:
    if any(key in doc for key in POI_MARKER_FIELDS):
        return SuggestResultType.POI

    hasStreetId = doc.get("calle_id") is not None
    if hasStreetId:
        return SuggestResultType.ADDRESS if doc.get("portal") is not None else SuggestResultType.STREET

    hasStreet = doc.get("calle_nombre") is not None
    if doc.get("localidad_id") is not None and not hasStreet:
        return SuggestResultType.CITY

    if "calle_nombre" in doc or "calle_descripcion" in doc:
        return SuggestResultType.STREET
    return SuggestResultType.ADDRESS


def parseSuggestion(doc: Dict[str, Any]) -> SuggestResult:
    """Map one Solr doc to SuggestResult."""
    resultId = docText(doc, "id") or ""
    displayText = buildDisplayText(doc)
    resultType = determineType(doc)

    street = None
    if any(doc.get(key) is not None for key in ("calle_id", "calle_nombre", "calle_descripcion")):
        street = SuggestStreet(
            code=docText(doc, "calle_id"),
            name=docText(doc, "calle_nombre"),
            description=docText(doc, "calle_descripcion"),
            type=docText(doc, "calle_tipo"),
            article=docText(doc, "calle_articulo"),
        )

    city = None
    if doc.get("localidad_id") is not None or doc.get("localidad_nombre") is not None:
        city = SuggestCity(
            code=docText(doc, "localidad_id"),
            name=docText(doc, "localidad_nombre"),
            bracketLocality=docText(doc, "distrito_nombre"),
        )

    houseNumbers = None
    portalMin = docInt(doc, "portal_min")
    portalMax = docInt(doc, "portal_max")
    portal = docInt(doc, "portal")
    portalAvailable = docInt(doc, "portal_disponible")
    if portalMin is not None or portalMax is not None or portal is not None or portalAvailable is not None:
        houseNumbers = SuggestHouseNumbers(
            available=portalMin is not None or portalMax is not None,
            min=portalMin,
            max=portalMax,
            current=portal,
            adjusted=portalAvailable,
            isEnglishFormat=docBool(doc, "portal_en"),
            hint=f"{portalMin}-{portalMax}" if portalMin is not None and portalMax is not None else None,
        )

    poi = None
    if resultType == SuggestResultType.POI:
        poiId = docText(doc, "poi_id")
        poiName = docText(doc, "poi_name")
        poiCategory = docText(doc, "poi_cat") or docText(doc, "category_id")
        if poiId is not None or poiName is not None or poiCategory is not None:
            poi = SuggestPoi(
                code=poiId if poiId is not None else resultId,
                name=poiName or docText(doc, "nombre") or displayText,
                categoryCode=poiCategory,
            )

    score = doc.get("score")
    return SuggestResult(
        id=resultId,
        displayText=displayText,
        type=resultType,
        street=street,
        city=city,
        postalCode=docText(doc, "codigo_postal"),
        municipality=adminEntity(doc, "municipio_id", "municipio_nombre"),
        subregion=adminEntity(doc, "provincia_id", "provincia_nombre"),
        region=adminEntity(doc, "comunidad_id", "comunidad_nombre"),
        country=adminEntity(doc, "pais_id", "pais_nombre"),
        coord=parseLatLng(docText(doc, "coord")),
        houseNumbers=houseNumbers,
        poi=poi,
        isOfficial=True if docText(doc, "oficial") == "Y" else None,
        score=float(score) if isinstance(score, (int, float)) and not isinstance(score, bool) else None,
    )


def suggestionToGeocodeResult(suggestion: SuggestResult) -> SuggestGeocodeResult:
    """Turn suggestion that already has coordinates into a geocode result."""
    if suggestion.coord is None:
        raise ValueError("Suggestion has no coordinates")

    def codeName(entity: Any) -> Tuple[Optional[str], Optional[str]]:
        return (entity.code, entity.name) if entity is not None else (None, None)

    streetCode, streetName = codeName(suggestion.street)
    cityCode, cityName = codeName(suggestion.city)
    municipalityCode, municipalityName = codeName(suggestion.municipality)
    subregionCode, subregionName = codeName(suggestion.subregion)
    regionCode, regionName = codeName(suggestion.region)
    countryCode, countryName = codeName(suggestion.country)

    return SuggestGeocodeResult(
        coord=suggestion.coord,
        formattedAddress=suggestion.displayText,
        name=suggestion.displayText,
        streetCode=streetCode,
        streetName=streetName,
        postalCode=suggestion.postalCode,
        cityCode=cityCode,
        cityName=cityName,
        municipalityCode=municipalityCode,
        municipalityName=municipalityName,
        subregionCode=subregionCode,
        subregionName=subregionName,
        regionCode=regionCode,
        regionName=regionName,
        countryCode=countryCode,
        countryName=countryName,
    )


class SuggestService(CercaliaClient):
    """Cercalia address autocomplete client.

    Example:
        >>> service = SuggestService(config)
        >>> for suggestion in service.searchStreets("Provença 5", "ESP"):
        ...     print(suggestion.displayText)
        >>> result = service.findAndGeocode("Carrer de Provença 589, Barcelona", "ESP", "589")
    """

    # Params

    def _buildSearchParams(self, options: SuggestOptions) -> Params:
        params = self._newParams()
        params["t"] = options.text
        if options.geoType is not None:
            params["getype"] = str(options.geoType)
        if options.countryCode:
            params["ctryc"] = options.countryCode.upper()
        self._addIfPresent(params, "regc", options.regionCode)
        self._addIfPresent(params, "subregc", options.subregionCode)
        self._addIfPresent(params, "munc", options.municipalityCode)
        self._addIfPresent(params, "rsc", options.streetCode)
        self._addIfPresent(params, "rscp", options.postalCodePrefix)
        self._addIfPresent(params, "lang", options.language)
        if options.center is not None:
            params["pt"] = options.center.toLatLngString()
            self._addIfPresent(params, "d", options.radius)
        if options.poiCategories:
            params["poicat"] = ",".join(options.poiCategories)
        return params

    def _buildGeocodeParams(self, options: SuggestGeocodeOptions) -> Params:
        params = self._newParams()
        self._addIfPresent(params, "ctc", options.cityCode)
        self._addIfPresent(params, "pcode", options.postalCode)
        self._addIfPresent(params, "stc", options.streetCode)
        self._addIfPresent(params, "stnum", options.streetNumber)
        if options.countryCode:
            params["ctryc"] = options.countryCode.upper()
        return params

    # Requests

    @staticmethod
    def _checkSolrResponse(data: Dict[str, Any], operationName: str) -> Dict[str, Any]:
        """Check Solr status and "response" node, return the node.

        Raises:
            CercaliaApiError: Non-zero responseHeader.status
            CercaliaResponseError: No "response" node
        """
        header = data.get("responseHeader")
        status = header.get("status") if isinstance(header, dict) else None
        if status is not None and status != 0:
            raise CercaliaApiError(
                f"Cercalia {operationName} API error: status {status}", code=str(status), response=data
            )

        responseNode = data.get("response")
        if not isinstance(responseNode, dict):
            raise CercaliaResponseError("Invalid Solr response format: missing response object", response=data)
        return responseNode

    def _requestSuggest(self, params: Params, operationName: str) -> Dict[str, Any]:
        try:
            data = self._requestRaw(params, operationName, SUGGEST_BASE_URL)
            return self._checkSolrResponse(data, operationName)
        except CercaliaError as e:
            logger.error(f"[{operationName}] Request error: {e}")
            raise

    async def _requestSuggestAsync(self, params: Params, operationName: str) -> Dict[str, Any]:
        try:
            data = await self._requestRawAsync(params, operationName, SUGGEST_BASE_URL)
            return self._checkSolrResponse(data, operationName)
        except CercaliaError as e:
            logger.error(f"[{operationName}] Request error: {e}")
            raise

    # Search

    def search(self, options: SuggestOptions) -> List[SuggestResult]:
        """Get suggestions for partially typed text.

        Args:
            options: Search options, empty text returns [] without any request

        Returns:
            Suggestions in the servlet relevance order

        Raises:
            CercaliaApiError: Servlet answered with non-zero status
        """
        if not options.text:
            return []
        responseNode = self._requestSuggest(self._buildSearchParams(options), "Suggest")
        return self._parseDocs(responseNode)

    async def searchAsync(self, options: SuggestOptions) -> List[SuggestResult]:
        """Async version of search()."""
        if not options.text:
            return []
        responseNode = await self._requestSuggestAsync(self._buildSearchParams(options), "Suggest")
        return self._parseDocs(responseNode)

    def searchStreets(self, text: str, countryCode: Optional[str] = None) -> List[SuggestResult]:
        return self.search(SuggestOptions(text=text, geoType=SuggestGeoType.STREET, countryCode=countryCode))

    async def searchStreetsAsync(self, text: str, countryCode: Optional[str] = None) -> List[SuggestResult]:
        return await self.searchAsync(SuggestOptions(text=text, geoType=SuggestGeoType.STREET, countryCode=countryCode))

    def searchCities(self, text: str, countryCode: Optional[str] = None) -> List[SuggestResult]:
        return self.search(SuggestOptions(text=text, geoType=SuggestGeoType.CITY, countryCode=countryCode))

    async def searchCitiesAsync(self, text: str, countryCode: Optional[str] = None) -> List[SuggestResult]:
        return await self.searchAsync(SuggestOptions(text=text, geoType=SuggestGeoType.CITY, countryCode=countryCode))

    @staticmethod
    def _poiOptions(
        text: str,
        countryCode: Optional[str],
        center: Optional[Coordinate],
        radius: Optional[int],
        poiCategories: Optional[Sequence[str]],
    ) -> SuggestOptions:
        return SuggestOptions(
            text=text,
            geoType=SuggestGeoType.POI,
            countryCode=countryCode,
            center=center,
            radius=radius,
            poiCategories=tuple(poiCategories or ()),
        )

    def searchPois(
        self,
        text: str,
        countryCode: Optional[str] = None,
        center: Optional[Coordinate] = None,
        radius: Optional[int] = None,
        poiCategories: Optional[Sequence[str]] = None,
    ) -> List[SuggestResult]:
        """Suggest POIs, optionally near center and within given categories."""
        return self.search(self._poiOptions(text, countryCode, center, radius, poiCategories))

    async def searchPoisAsync(
        self,
        text: str,
        countryCode: Optional[str] = None,
        center: Optional[Coordinate] = None,
        radius: Optional[int] = None,
        poiCategories: Optional[Sequence[str]] = None,
    ) -> List[SuggestResult]:
        return await self.searchAsync(self._poiOptions(text, countryCode, center, radius, poiCategories))

    # Geocode

    def geocode(self, options: SuggestGeocodeOptions) -> SuggestGeocodeResult:
        """Get coordinates of a suggested street or city by its codes.

        Raises:
            CercaliaResponseError: Response has no usable coordinates
        """
        responseNode = self._requestSuggest(self._buildGeocodeParams(options), "SuggestGeocode")
        return self._parseGeocode(responseNode)

    async def geocodeAsync(self, options: SuggestGeocodeOptions) -> SuggestGeocodeResult:
        """Async version of geocode()."""
        responseNode = await self._requestSuggestAsync(self._buildGeocodeParams(options), "SuggestGeocode")
        return self._parseGeocode(responseNode)

    @staticmethod
    def _geocodeOptionsFor(
        best: SuggestResult, countryCode: Optional[str], streetNumber: Optional[str]
    ) -> SuggestGeocodeOptions:
        return SuggestGeocodeOptions(
            streetCode=best.street.code if best.street is not None else None,
            cityCode=best.city.code if best.city is not None else None,
            streetNumber=streetNumber,
            countryCode=best.country.code if best.country is not None and best.country.code else countryCode,
        )

    def findAndGeocode(
        self, text: str, countryCode: Optional[str] = None, streetNumber: Optional[str] = None
    ) -> Optional[SuggestGeocodeResult]:
        """Search text and geocode the best suggestion.

        The best suggestion is returned as is when it already carries
        coordinates, otherwise it is geocoded by its street and city codes.

        Returns:
            Geocode result or None if nothing was suggested
        """
        suggestions = self.search(SuggestOptions(text=text, countryCode=countryCode))
        if not suggestions:
            return None

        best = suggestions[0]
        if best.coord is not None:
            return suggestionToGeocodeResult(best)
        return self.geocode(self._geocodeOptionsFor(best, countryCode, streetNumber))

    async def findAndGeocodeAsync(
        self, text: str, countryCode: Optional[str] = None, streetNumber: Optional[str] = None
    ) -> Optional[SuggestGeocodeResult]:
        """Async version of findAndGeocode()."""
        suggestions = await self.searchAsync(SuggestOptions(text=text, countryCode=countryCode))
        if not suggestions:
            return None

        best = suggestions[0]
        if best.coord is not None:
            return suggestionToGeocodeResult(best)
        return await self.geocodeAsync(self._geocodeOptionsFor(best, countryCode, streetNumber))

    # Parsing

    @staticmethod
    def _parseDocs(responseNode: Dict[str, Any]) -> List[SuggestResult]:
        docs = responseNode.get("docs")
        if not isinstance(docs, list):
            return []
        return [parseSuggestion(doc) for doc in docs if isinstance(doc, dict)]

    @staticmethod
    def _parseGeocode(responseNode: Dict[str, Any]) -> SuggestGeocodeResult:
        coordNode = responseNode.get("coord")
        coord: Optional[Coordinate] = None
        if isinstance(coordNode, str):
            coord = parseLatLng(coordNode)
        elif isinstance(coordNode, dict):
            lat = parseFloatOrNone(asText(coordNode.get("y")))
            lng = parseFloatOrNone(asText(coordNode.get("x")))
            if lat is not None and lng is not None:
                coord = Coordinate(lat=lat, lng=lng)

        if coord is None:
            raise CercaliaResponseError("Cercalia Suggest Geocode: No coordinates in response", response=responseNode)

        description = docText(responseNode, "desc")
        name = docText(responseNode, "name")
        return SuggestGeocodeResult(
            coord=coord,
            formattedAddress=description or name or "Unknown address",
            name=name,
            houseNumber=docText(responseNode, "housenumber"),
            postalCode=docText(responseNode, "postalcode"),
        )
