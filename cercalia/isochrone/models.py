"""
Isochrone data models.
"""

from dataclasses import dataclass
from enum import StrEnum

from ..core.models import Coordinate


class IsochroneWeight(StrEnum):
    TIME = "time"  # Value in minutes
    DISTANCE = "distance"  # Value in meters


class IsochroneMethod(StrEnum):
    """Polygon construction method."""

    CONVEXHULL = "convexhull"
    CONCAVEHULL = "concavehull"
    NET = "net"


@dataclass(frozen=True, slots=True)
class IsochroneOptions:
    """Single isochrone request.

    Attributes:
        value: Minutes for TIME weight, meters for DISTANCE weight, must be positive
        weight: What value measures (default: TIME)
        method: Polygon construction method (default: CONCAVEHULL)
    """

    value: int
    weight: IsochroneWeight = IsochroneWeight.TIME
    method: IsochroneMethod = IsochroneMethod.CONCAVEHULL

    @classmethod
    def time(cls, minutes: int) -> "IsochroneOptions":
        return cls(value=minutes, weight=IsochroneWeight.TIME)

    @classmethod
    def distance(cls, meters: int) -> "IsochroneOptions":
        return cls(value=meters, weight=IsochroneWeight.DISTANCE)


@dataclass(frozen=True, slots=True)
class IsochroneResult:
    """Reachable area polygon.

    Attributes:
        wkt: Polygon WKT
        center: Requested center
        value: Requested value in caller units (minutes or meters)
        weight: Requested weight
        level: Vendor level attribute (value in vendor units: milliseconds or meters)
    """

    wkt: str
    center: Coordinate
    value: int
    weight: IsochroneWeight
    level: str
