"""
Geofencing data models.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ..core.models import Coordinate


@dataclass(frozen=True, slots=True)
class GeofenceShape:
    """Named shape, WKT may be any vendor geometry including CIRCLE(lng lat, radius)."""

    id: str
    wkt: str

    @classmethod
    def circle(cls, id: str, center: Coordinate, radiusMeters: float) -> "GeofenceShape":
        """Create circle shape: "CIRCLE(lng lat, radius)"."""
        return cls(id=id, wkt=f"CIRCLE({center.lng} {center.lat}, {radiusMeters})")

    @classmethod
    def rectangle(cls, id: str, southwest: Coordinate, northeast: Coordinate) -> "GeofenceShape":
        """Create closed rectangle polygon SW -> SE -> NE -> NW -> SW."""
        corners = [
            (southwest.lng, southwest.lat),
            (northeast.lng, southwest.lat),
            (northeast.lng, northeast.lat),
            (southwest.lng, northeast.lat),
            (southwest.lng, southwest.lat),
        ]
        return cls(id=id, wkt="POLYGON((" + ", ".join(f"{lng} {lat}" for lng, lat in corners) + "))")


@dataclass(frozen=True, slots=True)
class GeofencePoint:
    id: str
    coord: Coordinate


@dataclass(frozen=True, slots=True)
class GeofenceOptions:
    """Coordinate systems of shapes (srs, default "EPSG:4326") and points (mocs)."""

    shapeSrs: Optional[str] = None
    pointSrs: Optional[str] = None


@dataclass(frozen=True, slots=True)
class MatchedPoint:
    id: str
    coord: Coordinate


@dataclass(frozen=True, slots=True)
class GeofenceMatch:
    """Shape together with the points found inside it."""

    shapeId: str
    shapeWkt: str
    pointsInside: List[MatchedPoint] = field(default_factory=list)

    @property
    def hasPointsInside(self) -> bool:
        return bool(self.pointsInside)


@dataclass(frozen=True, slots=True)
class GeofenceResult:
    """Geofencing check result, only shapes with at least one point inside are listed."""

    matches: List[GeofenceMatch]
    totalPointsChecked: int
    totalShapesChecked: int

    @property
    def hasMatches(self) -> bool:
        return bool(self.matches)

    @property
    def matchCount(self) -> int:
        return len(self.matches)

    @classmethod
    def empty(cls, totalPoints: int, totalShapes: int) -> "GeofenceResult":
        return cls(matches=[], totalPointsChecked=totalPoints, totalShapesChecked=totalShapes)
