"""
Cercalia Proximity

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.proximity import ProximityOptions, ProximityService

    service = ProximityService(CercaliaConfig.fromEnvironment())
    result = service.findNearest(ProximityOptions(center=Coordinate(41.3851, 2.1734), categories=["C001"], count=3))
    print(result.totalFound)
"""

from .models import ProximityItem, ProximityOptions, ProximityResult, ProximityRouteWeight
from .service import ProximityService

__all__ = [
    "ProximityService",
    "ProximityOptions",
    "ProximityItem",
    "ProximityResult",
    "ProximityRouteWeight",
]
