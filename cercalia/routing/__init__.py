"""
Cercalia Routing

Example usage:
    from cercalia import CercaliaConfig, Coordinate
    from cercalia.routing import RoutingOptions, RoutingService, VehicleType

    service = RoutingService(CercaliaConfig.fromEnvironment())
    route = service.calculateRoute(
        Coordinate(41.3851, 2.1734),
        Coordinate(40.4168, -3.7038),
        RoutingOptions(vehicleType=VehicleType.TRUCK, truckWeight=18000, truckHeight=400),
    )
    print(route.distance, route.duration, route.wkt)
"""

from .models import DistanceTime, RouteNetwork, RouteResult, RouteWeight, RoutingOptions, VehicleType
from .service import RoutingService

__all__ = [
    "RoutingService",
    "RoutingOptions",
    "RouteResult",
    "DistanceTime",
    "RouteNetwork",
    "RouteWeight",
    "VehicleType",
]
