"""
Cercalia SDK core: transport client, errors, common models and parsing helpers.
"""

from .client import CercaliaClient
from .constants import DEFAULT_BASE_URL, ERROR_CODE_NO_RESULTS, SUGGEST_BASE_URL
from .errors import (
    CercaliaApiError,
    CercaliaError,
    CercaliaHttpError,
    CercaliaResponseError,
    CercaliaTransportError,
    CercaliaValidationError,
)
from .models import BoundingBox, Coordinate, MapExtent

__all__ = [
    "CercaliaClient",
    "DEFAULT_BASE_URL",
    "SUGGEST_BASE_URL",
    "ERROR_CODE_NO_RESULTS",
    "CercaliaError",
    "CercaliaApiError",
    "CercaliaHttpError",
    "CercaliaResponseError",
    "CercaliaTransportError",
    "CercaliaValidationError",
    "BoundingBox",
    "Coordinate",
    "MapExtent",
]
