"""
Cercalia SDK Exceptions

This module contains the exception hierarchy raised by the Cercalia services.

Every error inherits from CercaliaError, so callers can catch it in one place.
"No results" answers from search-style operations never reach the caller as
exceptions: services convert them into empty results.
"""

import logging
from typing import Any, Dict, Optional

from .constants import ERROR_CODE_NO_RESULTS

logger = logging.getLogger(__name__)


class CercaliaError(Exception):
    """Base exception class for all Cercalia SDK errors, dood!

    Attributes:
        message: Human-readable error message
        code: Vendor error code (if available)
        response: Raw response data (if available)
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        response: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.response = response
        logger.debug(f"CercaliaError: {message} (code: {code})")

    @property
    def isNoResultsFound(self) -> bool:
        """True when the vendor answered with the "no results found" code."""
        return self.code == ERROR_CODE_NO_RESULTS

    def __str__(self) -> str:
        return self.message


class CercaliaTransportError(CercaliaError):
    """Raised when the request never got an HTTP answer (DNS, connection, timeout)."""


class CercaliaHttpError(CercaliaTransportError):
    """Raised when the API answered with a non-2xx HTTP status."""

    def __init__(self, message: str, statusCode: int, body: Optional[str] = None) -> None:
        super().__init__(message, code=str(statusCode))
        self.statusCode = statusCode
        self.body = body


class CercaliaResponseError(CercaliaError):
    """Raised when the response is not valid JSON or misses required data.

    Examples: missing 'cercalia' root, "No route found", isochrone without polygons.
    """


class CercaliaApiError(CercaliaError):
    """Raised when the response carries a vendor error node (cercalia.error)."""


class CercaliaValidationError(CercaliaError, ValueError):
    """Raised when arguments are rejected locally, before any network call.

    This occurs on empty point lists, non-positive isochrone values,
    too many coordinates in a batch and similar input problems.
    """
