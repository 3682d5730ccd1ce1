"""
Cercalia API transport.

This module provides the CercaliaClient base class shared by every service.
It owns the single point where HTTP requests are made, so services only
build parameters and parse the returned "cercalia" node.
"""

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import httpx

from .constants import RESPONSE_LOG_LIMIT
from .errors import (
    CercaliaApiError,
    CercaliaHttpError,
    CercaliaResponseError,
    CercaliaTransportError,
)
from .parser import getCercaliaAttr, getCercaliaValue

if TYPE_CHECKING:
    from ..config import CercaliaConfig

logger = logging.getLogger(__name__)

Params = Dict[str, str]


class CercaliaClient:
    """Base class for Cercalia services, dood!

    Creates new HTTP session for each request, so a service instance can be
    shared between threads and between concurrent tasks. No retries and no
    caching: every call is a fresh round trip.

    Every request has a sync flavour (httpx.Client) and an async one
    (httpx.AsyncClient). Both go through the same response decoding.
    """

    def __init__(self, config: "CercaliaConfig"):
        """Initialize Cercalia client.

        Args:
            config: Cercalia configuration (API key, base URL, timeout)
        """
        self.config = config

    # Parameter helpers

    @staticmethod
    def _newParams(cmd: Optional[str] = None) -> Params:
        """Create params dict, optionally with "cmd" already set."""
        params: Params = {}
        if cmd:
            params["cmd"] = cmd
        return params

    @staticmethod
    def _addIfPresent(params: Params, key: str, value: Any) -> None:
        """Add param unless value is None or a blank string."""
        if value is None:
            return
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
            return
        text = str(value)
        if text.strip():
            params[key] = text

    @staticmethod
    def _addIfTrue(params: Params, key: str, flag: Optional[bool], value: str) -> None:
        """Add param with given value only if flag is True."""
        if flag:
            params[key] = value

    # Requests

    def _prepareRequest(self, params: Params, baseUrl: Optional[str]) -> tuple[str, Params]:
        url = baseUrl or self.config.baseUrl
        queryParams: Params = {"key": self.config.apiKey}
        queryParams.update(params)
        return url, queryParams

    def _logRequest(self, operationName: str, url: str, params: Params) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            safeParams = {k: ("***" if k == "key" else v) for k, v in params.items()}
            logger.debug(f"[{operationName}] Request URL: {url} params: {safeParams}")

    def _decodeResponse(self, response: httpx.Response, operationName: str) -> Dict[str, Any]:
        """Check HTTP status and decode JSON body.

        Raises:
            CercaliaHttpError: Non-2xx status
            CercaliaResponseError: Body is not a JSON object
        """
        if not 200 <= response.status_code < 300:
            logger.error(f"[{operationName}] HTTP Error {response.status_code}: {response.text}")
            raise CercaliaHttpError(
                f"Cercalia API error: {response.status_code} {response.reason_phrase}",
                statusCode=response.status_code,
                body=response.text,
            )

        rawData = response.text
        logger.debug(f"[{operationName}] Response: {rawData[:RESPONSE_LOG_LIMIT]}...")

        try:
            data = response.json()
        except json.JSONDecodeError as e:
            logger.error(f"[{operationName}] Invalid JSON response: {rawData}")
            raise CercaliaResponseError("Invalid JSON response from Cercalia API") from e

        if not isinstance(data, dict):
            raise CercaliaResponseError("Invalid JSON response from Cercalia API")
        return data

    @staticmethod
    def _extractCercaliaNode(data: Dict[str, Any]) -> Dict[str, Any]:
        """Get "cercalia" root node, raising if the vendor reported an error.

        Raises:
            CercaliaResponseError: No "cercalia" root
            CercaliaApiError: Response contains "cercalia.error" node
        """
        cercaliaNode = data.get("cercalia")
        if not isinstance(cercaliaNode, dict):
            raise CercaliaResponseError("Invalid response format: missing 'cercalia' root property", response=data)

        errorNode = cercaliaNode.get("error")
        if errorNode is not None:
            errorCode = getCercaliaAttr(errorNode, "id")
            errorMsg = getCercaliaValue(errorNode)
            raise CercaliaApiError(f"Cercalia error [{errorCode}]: {errorMsg}", code=errorCode, response=data)

        return cercaliaNode

    def _requestRaw(self, params: Params, operationName: str, baseUrl: Optional[str] = None) -> Dict[str, Any]:
        """Make GET request and return the decoded JSON body as is.

        Args:
            params: Query parameters ("key" is added automatically)
            operationName: Operation name, used for logging only
            baseUrl: Override for config.baseUrl

        Raises:
            CercaliaTransportError: Network failure or timeout
            CercaliaHttpError: Non-2xx status
            CercaliaResponseError: Invalid JSON
        """
        url, queryParams = self._prepareRequest(params, baseUrl)
        self._logRequest(operationName, url, queryParams)

        try:
            with httpx.Client(timeout=self.config.timeout) as session:
                response = session.get(url, params=queryParams)
        except httpx.TimeoutException as e:
            logger.error(f"[{operationName}] Request timeout")
            raise CercaliaTransportError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"[{operationName}] Network error: {e}")
            raise CercaliaTransportError(f"Request failed: {e}") from e

        return self._decodeResponse(response, operationName)

    async def _requestRawAsync(
        self, params: Params, operationName: str, baseUrl: Optional[str] = None
    ) -> Dict[str, Any]:
        """Async version of _requestRaw()."""
        url, queryParams = self._prepareRequest(params, baseUrl)
        self._logRequest(operationName, url, queryParams)

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as session:
                response = await session.get(url, params=queryParams)
        except httpx.TimeoutException as e:
            logger.error(f"[{operationName}] Request timeout")
            raise CercaliaTransportError(f"Request timeout: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"[{operationName}] Network error: {e}")
            raise CercaliaTransportError(f"Request failed: {e}") from e

        return self._decodeResponse(response, operationName)

    def _request(self, params: Params, operationName: str, baseUrl: Optional[str] = None) -> Dict[str, Any]:
        """Make request and return the "cercalia" node of the response.

        Raises:
            CercaliaError: See _requestRaw() and _extractCercaliaNode()
        """
        return self._extractCercaliaNode(self._requestRaw(params, operationName, baseUrl))

    async def _requestAsync(
        self, params: Params, operationName: str, baseUrl: Optional[str] = None
    ) -> Dict[str, Any]:
        """Async version of _request()."""
        return self._extractCercaliaNode(await self._requestRawAsync(params, operationName, baseUrl))

    def _requestOptional(
        self, params: Params, operationName: str, baseUrl: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Same as _request(), but "no results found" vendor answer gives None instead of error.

        Search-style operations use it to turn the sentinel into an empty result.
        """
        try:
            return self._request(params, operationName, baseUrl)
        except CercaliaApiError as e:
            if e.isNoResultsFound:
                logger.debug(f"[{operationName}] No results found")
                return None
            raise

    async def _requestOptionalAsync(
        self, params: Params, operationName: str, baseUrl: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        """Async version of _requestOptional()."""
        try:
            return await self._requestAsync(params, operationName, baseUrl)
        except CercaliaApiError as e:
            if e.isNoResultsFound:
                logger.debug(f"[{operationName}] No results found")
                return None
            raise

    def _download(self, url: str) -> bytes:
        """Download binary content (e.g. rendered map image).

        Raises:
            CercaliaTransportError: Network failure or non-2xx status
        """
        try:
            with httpx.Client(timeout=self.config.timeout) as session:
                response = session.get(url)
        except httpx.RequestError as e:
            raise CercaliaTransportError(f"Failed to download {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise CercaliaHttpError(
                f"Failed to download image: {response.status_code}", statusCode=response.status_code
            )
        return response.content

    async def _downloadAsync(self, url: str) -> bytes:
        """Async version of _download()."""
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as session:
                response = await session.get(url)
        except httpx.RequestError as e:
            raise CercaliaTransportError(f"Failed to download {url}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise CercaliaHttpError(
                f"Failed to download image: {response.status_code}", statusCode=response.status_code
            )
        return response.content

