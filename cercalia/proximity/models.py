"""
Proximity data models.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional

from ..core.models import Coordinate
from ..poi.models import PoiGeographicElement


class ProximityRouteWeight(StrEnum):
    TIME = "time"
    DISTANCE = "distance"


@dataclass(frozen=True, slots=True)
class ProximityOptions:
    """Nearest POIs search around a center.

    Attributes:
        center: Search center
        count: Maximum number of items (num)
        categories: Category codes (rqpoicats)
        maxRadius: Search radius in meters (rad)
        includeRouting: Compute route distance/time to every item, needs routeWeight
        routeWeight: Route weight used when includeRouting is set
    """

    center: Coordinate
    count: Optional[int] = None
    categories: List[str] = field(default_factory=list)
    maxRadius: Optional[int] = None
    includeRouting: Optional[bool] = None
    routeWeight: Optional[ProximityRouteWeight] = None


@dataclass(frozen=True, slots=True)
class ProximityItem:
    """Single POI found near the center.

    Attributes:
        distance: Straight line distance (meters)
    """

    id: str
    name: str
    coord: Coordinate
    distance: int = 0
    position: Optional[int] = None
    categoryCode: Optional[str] = None
    subcategoryCode: Optional[str] = None
    geometry: Optional[str] = None
    info: Optional[str] = None
    ge: Optional[PoiGeographicElement] = None
    routeDistance: Optional[int] = None
    routeTime: Optional[int] = None
    routeRealtime: Optional[int] = None
    routeWeight: Optional[int] = None


@dataclass(frozen=True, slots=True)
class ProximityResult:
    items: List[ProximityItem]
    center: Coordinate
    totalFound: int = 0
