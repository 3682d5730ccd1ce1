"""
Cercalia Geofencing

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.geofencing import GeofencePoint, GeofenceShape, GeofencingService

    service = GeofencingService(CercaliaConfig.fromEnvironment())

    shapes = [
        GeofenceShape.circle("center", Coordinate(41.3851, 2.1734), 1000),
        GeofenceShape.rectangle("port", Coordinate(41.35, 2.15), Coordinate(41.38, 2.19)),
    ]
    points = [GeofencePoint("truck-1", Coordinate(41.386, 2.174))]
    result = service.check(shapes, points)

    inside = service.isInsideCircle(Coordinate(41.3851, 2.1734), 500, Coordinate(41.386, 2.174))
"""

from .models import GeofenceMatch, GeofenceOptions, GeofencePoint, GeofenceResult, GeofenceShape, MatchedPoint
from .service import GeofencingService

__all__ = [
    "GeofencingService",
    "GeofenceShape",
    "GeofencePoint",
    "GeofenceOptions",
    "GeofenceMatch",
    "GeofenceResult",
    "MatchedPoint",
]
