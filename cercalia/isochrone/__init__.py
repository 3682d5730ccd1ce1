"""
Cercalia Isochrone

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.isochrone import IsochroneOptions, IsochroneService, IsochroneWeight

    service = IsochroneService(CercaliaConfig.fromEnvironment())

    # Area reachable in 10 minutes
    area = service.calculate(Coordinate(41.3851, 2.1734), IsochroneOptions.time(10))

    # 1, 2 and 3 km rings
    rings = service.calculateMultiple(Coordinate(41.3851, 2.1734), [1000, 2000, 3000], IsochroneWeight.DISTANCE)
"""

from .models import IsochroneMethod, IsochroneOptions, IsochroneResult, IsochroneWeight
from .service import IsochroneService

__all__ = [
    "IsochroneService",
    "IsochroneOptions",
    "IsochroneResult",
    "IsochroneMethod",
    "IsochroneWeight",
]
