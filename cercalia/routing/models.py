"""
Routing data models.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import List, Optional

from ..core.models import Coordinate


class VehicleType(StrEnum):
    CAR = "car"
    TRUCK = "truck"
    WALKING = "walking"


class RouteWeight(StrEnum):
    """Route optimization criterion (weight)."""

    TIME = "time"
    DISTANCE = "distance"
    MONEY = "money"
    REALTIME = "realtime"
    FAST = "fast"
    SHORT = "short"
    SPTIME = "sptime"
    SPMONEY = "spmoney"
    TIMERIMP = "timerimp"


class RouteNetwork(StrEnum):
    """Road network used for calculation (net)."""

    CAR = "car"
    LOGISTICS = "logistics"
    ESPW = "espw"  # Spain walking
    USAW = "usaw"  # USA walking


@dataclass(frozen=True, slots=True)
class RoutingOptions:
    """Route calculation options.

    Truck dimensions are given in kilograms and centimetres, they are sent to
    the API in tonnes and metres. For every given dimension the restriction is
    avoided by default, set block<Dimension>=True to block it instead.

    Attributes:
        vehicleType: Vehicle type, TRUCK switches to the logistics network
        weight: Optimization criterion (default: TIME)
        avoidTolls: Prefer toll-free roads (sends weight=money)
        net: Road network, ignored for trucks
        waypoints: Intermediate stops in order
        truckWeight: Total weight (kg)
        truckAxleWeight: Weight per axle (kg)
        truckHeight: Height (cm)
        truckWidth: Width (cm)
        truckLength: Length (cm)
        truckMaxVelocity: Maximum speed (km/h)
    """

    vehicleType: Optional[VehicleType] = None
    weight: Optional[RouteWeight] = None
    avoidTolls: Optional[bool] = None
    net: Optional[RouteNetwork] = None
    waypoints: List[Coordinate] = field(default_factory=list)

    truckWeight: Optional[int] = None
    truckAxleWeight: Optional[int] = None
    truckHeight: Optional[int] = None
    truckWidth: Optional[int] = None
    truckLength: Optional[int] = None
    truckMaxVelocity: Optional[int] = None

    blockTruckWeight: Optional[bool] = None
    avoidTruckWeight: Optional[bool] = None
    blockTruckAxleWeight: Optional[bool] = None
    avoidTruckAxleWeight: Optional[bool] = None
    blockTruckHeight: Optional[bool] = None
    avoidTruckHeight: Optional[bool] = None
    blockTruckWidth: Optional[bool] = None
    avoidTruckWidth: Optional[bool] = None
    blockTruckLength: Optional[bool] = None
    avoidTruckLength: Optional[bool] = None


@dataclass(frozen=True, slots=True)
class RouteResult:
    """Calculated route.

    Attributes:
        wkt: Route geometry as MULTILINESTRING (one part per stage), "" if not returned
        distance: Total distance (meters)
        duration: Total duration (seconds)
    """

    wkt: str
    distance: float
    duration: float
    origin: Coordinate
    destination: Coordinate
    waypoints: List[Coordinate] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class DistanceTime:
    """Route distance (meters) and duration (seconds) without geometry."""

    distance: float
    duration: float
