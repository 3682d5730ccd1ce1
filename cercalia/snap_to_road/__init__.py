"""
Cercalia Snap To Road (GPS map matching)

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.snap_to_road import SnapToRoadPoint, SnapToRoadService

    service = SnapToRoadService(CercaliaConfig.fromEnvironment())

    track = [
        SnapToRoadPoint(Coordinate(41.969279, 2.825850), compass=0, angle=45, speed=70, attribute="A"),
        SnapToRoadPoint(Coordinate(41.965995, 2.822355), compass=0, angle=45, speed=10, attribute="A"),
    ]
    result = service.match(track)

    # Speeding report with 10 km/h tolerance
    report = service.matchWithSpeedingDetection(track, 10)
"""

from .models import SnapToRoadOptions, SnapToRoadPoint, SnapToRoadResult, SnapToRoadSegment, SnapToRoadWeight
from .service import SnapToRoadService

__all__ = [
    "SnapToRoadService",
    "SnapToRoadPoint",
    "SnapToRoadOptions",
    "SnapToRoadResult",
    "SnapToRoadSegment",
    "SnapToRoadWeight",
]
