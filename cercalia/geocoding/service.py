"""
Cercalia Geocoding Service

Structured address / locality search (cmd=cand), road milestone lookup and
postal code to cities resolution.
"""

import logging
import re
from typing import Any, Dict, List, Optional

from ..core.client import CercaliaClient, Params
from ..core.constants import DEFAULT_COUNTRY_CODE
from ..core.parser import (
    asList,
    attrAt,
    extractFirst,
    getAdminPairs,
    getCercaliaAttr,
    getCercaliaValue,
    getCodeNamePair,
    getPath,
    matching,
    parseCoordNode,
    valueAt,
)
from .models import GeocodingCandidate, GeocodingCandidateType, GeocodingLevel, GeocodingOptions, PostalCodeCity

logger = logging.getLogger(__name__)

POSTAL_CODE_PATTERN = re.compile(r"^\d{5}$")
COUNTRY_NAMES = ("españa", "spain")


def isCountryResult(cercaliaType: Optional[str], geId: Optional[str], name: Optional[str]) -> bool:
    """Guess whether candidate is a country-level result.

    Heuristic, the vendor does not flag these explicitly: explicit country type,
    3-letter id (ISO alpha-3 country code) or a well-known country name.
    """
    if cercaliaType in ("ctry", "country"):
        return True
    if geId is not None and len(geId) == 3:
        return True
    if name is not None:
        return name.lower() in COUNTRY_NAMES
    return False


def shouldSkipCountryResult(options: GeocodingOptions, name: Optional[str]) -> bool:
    """Decide if a country-level candidate must be dropped for this search.

    Country-level candidates are noise when searching for something specific,
    unless the locality itself is the country name or a short code.
    """
    if not options.hasSpecificSearch:
        return False
    if options.locality is not None and name is not None:
        return not (options.locality.lower() == name.lower() or len(options.locality) <= 3)
    return True


class GeocodingService(CercaliaClient):
    """Cercalia geocoding client, dood!

    Example:
        >>> from cercalia import CercaliaConfig
        >>> from cercalia.geocoding import GeocodingService, GeocodingOptions
        >>>
        >>> service = GeocodingService(CercaliaConfig(apiKey="your_api_key"))
        >>> candidates = service.geocode(GeocodingOptions(locality="Barcelona", street="Gran Via 1"))
        >>> for candidate in candidates:
        ...     print(candidate.name, candidate.coord)
        >>>
        >>> # Same thing without blocking the event loop
        >>> candidates = await service.geocodeAsync(GeocodingOptions(postalCode="08001"))
    """

    # Geocode

    def _buildGeocodeParams(self, options: GeocodingOptions) -> Params:
        params = self._newParams("cand")
        params["detcand"] = "1"
        params["priorityfilter"] = "1"
        params["mode"] = "0"
        params["cleanadr"] = "1"
        params["ctryc"] = options.countryCode.upper() if options.countryCode else DEFAULT_COUNTRY_CODE

        self._addIfPresent(params, "ctn", options.locality)
        self._addIfPresent(params, "munn", options.municipality)
        self._addIfPresent(params, "adr", options.street)
        self._addIfPresent(params, "pcode", options.postalCode)
        self._addIfPresent(params, "regn", options.region)
        self._addIfPresent(params, "subregn", options.subregion)
        self._addIfPresent(params, "ctryn", options.country)
        self._addIfPresent(params, "num", options.limit)
        self._addIfTrue(params, "fullsearch", options.fullSearch, "3")
        return params

    def geocode(self, options: GeocodingOptions) -> List[GeocodingCandidate]:
        """Geocode structured address.

        Args:
            options: Search fields, at least one of them should be set

        Returns:
            List of candidates, empty if nothing was found
        """
        response = self._requestOptional(self._buildGeocodeParams(options), "Geocoding")
        if response is None:
            return []
        return self._parseCandidates(response, options)

    async def geocodeAsync(self, options: GeocodingOptions) -> List[GeocodingCandidate]:
        """Async version of geocode()."""
        response = await self._requestOptionalAsync(self._buildGeocodeParams(options), "Geocoding")
        if response is None:
            return []
        return self._parseCandidates(response, options)

    # Road milestones

    def _buildRoadParams(self, roadName: str, km: float, options: Optional[GeocodingOptions]) -> Params:
        params = self._newParams("cand")
        params["detcand"] = "1"
        params["rdn"] = roadName
        params["km"] = str(km)
        countryCode = options.countryCode if options is not None else None
        params["ctryc"] = countryCode.upper() if countryCode else DEFAULT_COUNTRY_CODE

        if options is not None:
            self._addIfPresent(params, "subregn", options.subregion)
            self._addIfPresent(params, "munn", options.municipality)
            self._addIfPresent(params, "pcode", options.postalCode)
        return params

    def geocodeRoad(
        self, roadName: str, km: float, options: Optional[GeocodingOptions] = None
    ) -> List[GeocodingCandidate]:
        """Find road milestone (kilometric point).

        Args:
            roadName: Road name, e.g. "A-2"
            km: Kilometric point
            options: Optional subregion / municipality / postal code / country filters

        Returns:
            List of MILESTONE candidates, empty if nothing was found
        """
        response = self._requestOptional(self._buildRoadParams(roadName, km, options), "GeocodingRoad")
        if response is None:
            return []
        return self._parseRoadCandidates(response, roadName, km)

    async def geocodeRoadAsync(
        self, roadName: str, km: float, options: Optional[GeocodingOptions] = None
    ) -> List[GeocodingCandidate]:
        """Async version of geocodeRoad()."""
        response = await self._requestOptionalAsync(self._buildRoadParams(roadName, km, options), "GeocodingRoad")
        if response is None:
            return []
        return self._parseRoadCandidates(response, roadName, km)

    # Postal code cities

    def _buildPostalCodeParams(self, postalCode: str, countryCode: Optional[str]) -> Params:
        params = self._newParams("prox")
        params["rqge"] = "ctpcode"
        params["ctryc"] = countryCode.upper() if countryCode else DEFAULT_COUNTRY_CODE
        params["pcode"] = postalCode
        return params

    def geocodeCitiesByPostalCode(
        self, postalCode: str, countryCode: Optional[str] = DEFAULT_COUNTRY_CODE
    ) -> List[PostalCodeCity]:
        """Get cities covered by a postal code.

        Args:
            postalCode: Postal code, e.g. "40160"
            countryCode: Country code (default: "ESP")

        Returns:
            List of cities, empty if nothing was found
        """
        response = self._requestOptional(
            self._buildPostalCodeParams(postalCode, countryCode), "GeocodeCitiesByPostalCode"
        )
        if response is None:
            return []
        return self._parsePostalCodeCities(response)

    async def geocodeCitiesByPostalCodeAsync(
        self, postalCode: str, countryCode: Optional[str] = DEFAULT_COUNTRY_CODE
    ) -> List[PostalCodeCity]:
        """Async version of geocodeCitiesByPostalCode()."""
        response = await self._requestOptionalAsync(
            self._buildPostalCodeParams(postalCode, countryCode), "GeocodeCitiesByPostalCode"
        )
        if response is None:
            return []
        return self._parsePostalCodeCities(response)

    # Parsing

    def _parseCandidates(self, response: Dict[str, Any], options: GeocodingOptions) -> List[GeocodingCandidate]:
        results: List[GeocodingCandidate] = []
        for cand in asList(getPath(response, "candidates", "candidate")):
            ge = cand.get("ge") if isinstance(cand, dict) else None
            if not isinstance(ge, dict) or ge.get("coord") is None:
                continue

            name = getCercaliaValue(ge.get("name"))
            if isCountryResult(getCercaliaAttr(ge, "type"), getCercaliaAttr(ge, "id"), name):
                if shouldSkipCountryResult(options, name):
                    logger.debug(f"Skipping country-level candidate '{name}'")
                    continue

            try:
                results.append(self._parseCandidate(cand, ge))
            except ValueError as e:
                logger.warning(f"Skipping malformed geocoding candidate: {e}")
        return results

    def _parseCandidate(self, cand: Dict[str, Any], ge: Dict[str, Any]) -> GeocodingCandidate:
        cercaliaType = getCercaliaAttr(ge, "type")
        desc = getCercaliaAttr(cand, "desc")
        coord = parseCoordNode(ge.get("coord"))
        postalCode = extractFirst(
            cand,
            valueAt("ge", "postalcode"),
            attrAt("ge", "postalcode", "id"),
            matching(attrAt("desc"), lambda value: POSTAL_CODE_PATTERN.match(value) is not None),
        )
        name = extractFirst(
            cand,
            valueAt("ge", "name"),
            attrAt("name"),
            attrAt("desc"),
            default="Unknown",
        )
        candidateId = extractFirst(ge, attrAt("id"), attrAt("country", "id"), default="unknown")
        street, streetCode = getCodeNamePair(ge, "street")

        return GeocodingCandidate(
            id=candidateId or "unknown",
            name=name or "Unknown",
            label=desc,
            street=street,
            streetCode=streetCode,
            postalCode=postalCode,
            houseNumber=getCercaliaValue(ge.get("housenumber")),
            coord=coord,
            type=GeocodingCandidateType.fromCercaliaType(cercaliaType),
            level=GeocodingLevel.fromValue(cercaliaType),
            **getAdminPairs(ge),
        )

    def _parseRoadCandidates(self, response: Dict[str, Any], roadName: str, km: float) -> List[GeocodingCandidate]:
        results: List[GeocodingCandidate] = []
        for cand in asList(getPath(response, "candidates", "candidate")):
            ge = cand.get("ge") if isinstance(cand, dict) else None
            if not isinstance(ge, dict) or ge.get("coord") is None:
                continue

            try:
                coord = parseCoordNode(ge.get("coord"))
            except ValueError as e:
                logger.warning(f"Skipping malformed road candidate: {e}")
                continue
            results.append(
                GeocodingCandidate(
                    id=getCercaliaAttr(ge, "id") or roadName,
                    name=getCercaliaValue(ge.get("name")) or f"{roadName} KM {km:.0f}",
                    label=getCercaliaAttr(cand, "desc"),
                    postalCode=extractFirst(ge, attrAt("postalcode", "id"), valueAt("postalcode")),
                    houseNumber=getCercaliaValue(ge.get("housenumber")),
                    coord=coord,
                    type=GeocodingCandidateType.MILESTONE,
                    level=GeocodingLevel.fromValue(getCercaliaAttr(ge, "type")),
                    **getAdminPairs(ge),
                )
            )
        return results

    def _parsePostalCodeCities(self, response: Dict[str, Any]) -> List[PostalCodeCity]:
        results: List[PostalCodeCity] = []
        for ge in asList(getPath(response, "proximity", "gelist", "ge")):
            if not isinstance(ge, dict) or ge.get("coord") is None:
                continue

            try:
                coord = parseCoordNode(ge.get("coord"))
            except ValueError as e:
                logger.warning(f"Skipping malformed postal code city: {e}")
                continue
            adminPairs = getAdminPairs(ge)
            results.append(
                PostalCodeCity(
                    id=getCercaliaAttr(ge, "id") or "unknown",
                    name=getCercaliaAttr(ge, "name") or "Unknown",
                    coord=coord,
                    municipality=adminPairs["municipality"],
                    municipalityCode=adminPairs["municipalityCode"],
                    subregion=adminPairs["subregion"],
                    subregionCode=adminPairs["subregionCode"],
                    region=adminPairs["region"],
                    regionCode=adminPairs["regionCode"],
                    country=adminPairs["country"],
                    countryCode=adminPairs["countryCode"],
                )
            )
        return results
