"""
Snap to road (map matching) data models.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional

from ..core.models import Coordinate


class SnapToRoadWeight(StrEnum):
    DISTANCE = "distance"
    TIME = "time"


@dataclass(frozen=True, slots=True)
class SnapToRoadPoint:
    """GPS track point.

    Attributes:
        coord: Point position
        compass: Heading in degrees (angle defaults to 0 if only compass is given)
        angle: Travel angle tolerance in degrees
        speed: Speed in km/h
        attribute: Grouping identifier, points sharing it form one output segment
    """

    coord: Coordinate
    compass: Optional[int] = None
    angle: Optional[int] = None
    speed: Optional[int] = None
    attribute: Optional[str] = None

    def toTrackString(self) -> str:
        """Serialize as "[lng,lat@compass,angle@@speed@@@attribute]"."""
        result = f"{self.coord.lng},{self.coord.lat}"
        if self.compass is not None:
            result += f"@{self.compass},{self.angle if self.angle is not None else 0}"
        if self.speed is not None:
            result += f"@@{self.speed}"
        if self.attribute is not None:
            result += f"@@@{self.attribute}"
        return f"[{result}]"


@dataclass(frozen=True, slots=True)
class SnapToRoadOptions:
    weight: Optional[SnapToRoadWeight] = None
    net: Optional[str] = None
    geometrySrs: Optional[str] = None
    geometryTolerance: Optional[int] = None  # meters
    points: Optional[bool] = None
    speeding: Optional[bool] = None
    speedTolerance: Optional[int] = None  # km/h
    onlyTrack: Optional[bool] = None
    maxDirectionSearchDistance: Optional[int] = None
    maxSearchDistance: Optional[int] = None
    factor: Optional[float] = None


@dataclass(frozen=True, slots=True)
class SnapToRoadSegment:
    """Matched road geometry, distance as reported by the vendor (km)."""

    wkt: str
    distance: float
    attribute: Optional[str] = None
    speeding: Optional[bool] = None
    speedingLevel: Optional[int] = None


@dataclass(frozen=True, slots=True)
class SnapToRoadResult:
    segments: List[SnapToRoadSegment] = field(default_factory=list)
    totalDistance: float = 0.0

    @property
    def hasSegments(self) -> bool:
        return bool(self.segments)

    @property
    def segmentCount(self) -> int:
        return len(self.segments)
