"""
Static map data models.

Shapes are drawn by the vendor from the "shape" param, every shape is one
bracketed group: "[outlineColor|outlineSize|fillColor|TYPE|geometry...]",
coordinates in "lat,lng" order.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional, Protocol, Sequence

from ..core.models import Coordinate, MapExtent


class StaticMapShapeType(StrEnum):
    CIRCLE = "CIRCLE"
    RECTANGLE = "RECTANGLE"
    SECTOR = "SECTOR"
    LINE = "LINE"
    POLYLINE = "POLYLINE"
    LABEL = "LABEL"


@dataclass(frozen=True, slots=True)
class RGBAColor:
    r: int
    g: int
    b: int
    a: Optional[int] = None

    def toCercaliaString(self) -> str:
        """Return "r,g,b" or "r,g,b,a"."""
        if self.a is not None:
            return f"{self.r},{self.g},{self.b},{self.a}"
        return f"{self.r},{self.g},{self.b}"

    @classmethod
    def red(cls, alpha: Optional[int] = None) -> "RGBAColor":
        return cls(255, 0, 0, alpha)

    @classmethod
    def green(cls, alpha: Optional[int] = None) -> "RGBAColor":
        return cls(0, 255, 0, alpha)

    @classmethod
    def blue(cls, alpha: Optional[int] = None) -> "RGBAColor":
        return cls(0, 0, 255, alpha)


BLACK = RGBAColor(0, 0, 0)
WHITE = RGBAColor(255, 255, 255)


class StaticMapShape(Protocol):
    """Anything that can be drawn on a static map."""

    @property
    def shapeType(self) -> StaticMapShapeType: ...

    def toCercaliaString(self) -> str: ...


def formatShape(
    shapeType: StaticMapShapeType, outlineColor: RGBAColor, outlineSize: int, fillColor: RGBAColor, *parts: object
) -> str:
    """Build "[outline|size|fill|TYPE|part|part...]"."""
    fields = [outlineColor.toCercaliaString(), str(outlineSize), fillColor.toCercaliaString(), str(shapeType)]
    fields.extend(str(part) for part in parts)
    return "[" + "|".join(fields) + "]"


@dataclass(frozen=True, slots=True)
class StaticMapCircle:
    center: Coordinate
    radius: int  # meters
    outlineColor: RGBAColor = field(default_factory=RGBAColor.red)
    outlineSize: int = 2
    fillColor: RGBAColor = field(default_factory=lambda: RGBAColor.green(128))

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.CIRCLE

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            self.center.toLatLngString(),
            self.radius,
        )


@dataclass(frozen=True, slots=True)
class StaticMapRectangle:
    upperLeft: Coordinate
    lowerRight: Coordinate
    outlineColor: RGBAColor = field(default_factory=RGBAColor.red)
    outlineSize: int = 3
    fillColor: RGBAColor = field(default_factory=lambda: RGBAColor.green(128))

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.RECTANGLE

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            self.upperLeft.toLatLngString(),
            self.lowerRight.toLatLngString(),
        )


@dataclass(frozen=True, slots=True)
class StaticMapSector:
    """Ring sector around center, radii in meters, angles in degrees."""

    center: Coordinate
    innerRadius: int = 0
    outerRadius: int = 1000
    startAngle: int = 0
    endAngle: int = 90
    outlineColor: RGBAColor = field(default_factory=RGBAColor.red)
    outlineSize: int = 2
    fillColor: RGBAColor = field(default_factory=lambda: RGBAColor.green(128))

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.SECTOR

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            self.center.toLatLngString(),
            self.innerRadius,
            self.outerRadius,
            self.startAngle,
            self.endAngle,
        )


@dataclass(frozen=True, slots=True)
class StaticMapLine:
    start: Coordinate
    end: Coordinate
    outlineColor: RGBAColor = field(default_factory=RGBAColor.red)
    outlineSize: int = 2
    fillColor: RGBAColor = BLACK  # ignored by the vendor for lines

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.LINE

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            self.start.toLatLngString(),
            self.end.toLatLngString(),
        )


@dataclass(frozen=True, slots=True)
class StaticMapPolyline:
    coordinates: List[Coordinate]
    outlineColor: RGBAColor = field(default_factory=RGBAColor.red)
    outlineSize: int = 2
    fillColor: RGBAColor = field(default_factory=RGBAColor.red)

    def __post_init__(self) -> None:
        if not self.coordinates:
            raise ValueError("Polyline must have at least one coordinate")

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.POLYLINE

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            *(coord.toLatLngString() for coord in self.coordinates),
        )


@dataclass(frozen=True, slots=True)
class StaticMapLabel:
    center: Coordinate
    text: str
    outlineColor: RGBAColor = BLACK
    outlineSize: int = 1
    fillColor: RGBAColor = WHITE

    @property
    def shapeType(self) -> StaticMapShapeType:
        return StaticMapShapeType.LABEL

    def toCercaliaString(self) -> str:
        return formatShape(
            self.shapeType,
            self.outlineColor,
            self.outlineSize,
            self.fillColor,
            self.center.toLatLngString(),
            self.text,
        )


@dataclass(frozen=True, slots=True)
class StaticMapMarker:
    coord: Coordinate
    icon: Optional[int] = None

    def toCercaliaString(self) -> str:
        """Return "[lat,lng]" or "[lat,lng|icon]"."""
        if self.icon is not None:
            return f"[{self.coord.toLatLngString()}|{self.icon}]"
        return f"[{self.coord.toLatLngString()}]"


@dataclass(frozen=True, slots=True)
class StaticMapOptions:
    """Static map request options.

    Attributes:
        width: Image width in pixels, clamped to 1680
        height: Image height in pixels, clamped to 1280
        cityName: City to center the map on (ctn)
        countryCode: Country of the city (ctryc)
        coordinateSystem: Coordinate system of every coordinate (default "gdd")
        extent: Visible area
        center: Map center
        labelOp: Label options (0 disables labels)
        markers: Markers to draw
        shapes: Shapes to draw
        returnImage: Download the image bytes together with the map
        mode: Vendor map mode
        priorityFilter: Vendor label priority filter
    """

    width: Optional[int] = None
    height: Optional[int] = None
    cityName: Optional[str] = None
    countryCode: Optional[str] = None
    coordinateSystem: Optional[str] = None
    extent: Optional[MapExtent] = None
    center: Optional[Coordinate] = None
    labelOp: Optional[int] = None
    markers: Sequence[StaticMapMarker] = ()
    shapes: Sequence[StaticMapShape] = ()
    returnImage: bool = False
    mode: int = 1
    priorityFilter: bool = True


@dataclass(frozen=True, slots=True)
class StaticMapResult:
    imageUrl: str
    imagePath: str
    width: Optional[int] = None
    height: Optional[int] = None
    format: Optional[str] = None
    scale: Optional[int] = None
    center: Optional[Coordinate] = None
    extent: Optional[MapExtent] = None
    label: Optional[str] = None
    imageData: Optional[bytes] = None
