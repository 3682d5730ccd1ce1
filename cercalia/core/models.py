"""
Common Cercalia data models shared by every service.
"""

from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True, slots=True)
class Coordinate:
    """Geographic coordinate in WGS84 degrees.

    No range validation is performed, callers are expected to pass sane values.
    """

    lat: float
    lng: float

    def toCercaliaString(self) -> str:
        """Return the vendor x,y order: "lng,lat"."""
        return f"{self.lng},{self.lat}"

    def toLatLngString(self) -> str:
        """Return "lat,lng", the order used by mo/mo_o/mo_d parameters."""
        return f"{self.lat},{self.lng}"

    @classmethod
    def fromCercaliaString(cls, value: str) -> "Coordinate":
        """Parse a "lng,lat" string.

        Raises:
            ValueError: If the string is not two comma separated numbers
        """
        parts = value.split(",")
        if len(parts) != 2:
            raise ValueError(f"Invalid coordinate string: {value}")
        return cls(lat=float(parts[1].strip()), lng=float(parts[0].strip()))


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Rectangular area defined by its south-west and north-east corners."""

    minLat: float
    minLng: float
    maxLat: float
    maxLng: float

    @classmethod
    def fromCorners(cls, southwest: Coordinate, northeast: Coordinate) -> "BoundingBox":
        return cls(minLat=southwest.lat, minLng=southwest.lng, maxLat=northeast.lat, maxLng=northeast.lng)

    @property
    def southwest(self) -> Coordinate:
        return Coordinate(self.minLat, self.minLng)

    @property
    def northeast(self) -> Coordinate:
        return Coordinate(self.maxLat, self.maxLng)

    @property
    def center(self) -> Coordinate:
        return Coordinate((self.minLat + self.maxLat) / 2, (self.minLng + self.maxLng) / 2)

    def contains(self, coord: Coordinate) -> bool:
        """Check if coordinate lies inside the box (borders included)."""
        return self.minLat <= coord.lat <= self.maxLat and self.minLng <= coord.lng <= self.maxLng

    def toCercaliaString(self) -> str:
        """Return "minLng,minLat,maxLng,maxLat"."""
        return f"{self.minLng},{self.minLat},{self.maxLng},{self.maxLat}"


@dataclass(frozen=True, slots=True)
class MapExtent:
    """Map area given by its upper-left and lower-right corners."""

    upperLeft: Coordinate
    lowerRight: Coordinate

    def toCercaliaString(self) -> str:
        """Return "lat,lng|lat,lng" (upper-left first)."""
        return f"{self.upperLeft.toLatLngString()}|{self.lowerRight.toLatLngString()}"

    @classmethod
    def around(cls, coords: Sequence[Coordinate], padding: float = 0.01) -> "MapExtent":
        """Create extent covering all coordinates plus padding degrees on every side.

        Raises:
            ValueError: If coords is empty
        """
        if not coords:
            raise ValueError("At least one coordinate is required")
        minLat = min(coord.lat for coord in coords)
        maxLat = max(coord.lat for coord in coords)
        minLng = min(coord.lng for coord in coords)
        maxLng = max(coord.lng for coord in coords)
        return cls(
            upperLeft=Coordinate(lat=maxLat + padding, lng=minLng - padding),
            lowerRight=Coordinate(lat=minLat - padding, lng=maxLng + padding),
        )
