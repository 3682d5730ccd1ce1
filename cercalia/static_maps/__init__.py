"""
Cercalia Static Maps

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.static_maps import StaticMapMarker, StaticMapOptions, StaticMapsService

    service = StaticMapsService(CercaliaConfig.fromEnvironment())

    cityMap = service.generateCityMap("Girona", "ESP", 800, 600)
    print(cityMap.imageUrl)

    markers = [StaticMapMarker(Coordinate(41.3851, 2.1734), icon=1), StaticMapMarker(Coordinate(41.40, 2.17))]
    withImage = service.generateMapAsImage(StaticMapOptions(markers=markers, width=640, height=480))
    open("map.png", "wb").write(withImage.imageData)
"""

from ..core.models import MapExtent
from .models import (
    RGBAColor,
    StaticMapCircle,
    StaticMapLabel,
    StaticMapLine,
    StaticMapMarker,
    StaticMapOptions,
    StaticMapPolyline,
    StaticMapRectangle,
    StaticMapResult,
    StaticMapSector,
    StaticMapShape,
    StaticMapShapeType,
)
from .service import StaticMapsService

__all__ = [
    "StaticMapsService",
    "StaticMapOptions",
    "StaticMapResult",
    "StaticMapShape",
    "StaticMapShapeType",
    "StaticMapCircle",
    "StaticMapRectangle",
    "StaticMapSector",
    "StaticMapLine",
    "StaticMapPolyline",
    "StaticMapLabel",
    "StaticMapMarker",
    "RGBAColor",
    "MapExtent",
]
