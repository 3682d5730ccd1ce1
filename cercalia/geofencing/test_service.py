"""
Unit tests for Cercalia Geofencing Service
"""

from unittest.mock import patch

import pytest

from cercalia import CercaliaConfig
from cercalia.core import CercaliaValidationError, Coordinate
from cercalia.geofencing import GeofenceOptions, GeofencePoint, GeofenceShape, GeofencingService
from cercalia.geofencing.service import formatGeoms, formatMoList
from tests.utils import (
    assertParamsMissing,
    cercaliaPayload,
    createMockResponse,
    getRequestParams,
    setupAsyncClient,
    setupSyncClient,
)

CENTER = Coordinate(lat=41.3851, lng=2.1734)
INSIDE = Coordinate(lat=41.386, lng=2.174)
OUTSIDE = Coordinate(lat=41.5, lng=2.5)

SQUARE_WKT = "POLYGON((2.1 41.3, 2.2 41.3, 2.2 41.4, 2.1 41.4, 2.1 41.3))"


def geometry(shapeId, wkt, *points):
    node = {"@id": shapeId, "wkt": {"value": wkt}}
    if points:
        node["molist"] = {
            "mo": [{"@id": pointId, "coord": {"@x": str(coord.lng), "@y": str(coord.lat)}} for pointId, coord in points]
        }
    return node


def insideGeomsPayload(*geometries):
    return cercaliaPayload({"insidegeoms": {"geometry": list(geometries)}})


@pytest.fixture
def service():
    """Create geofencing service with test config"""
    return GeofencingService(CercaliaConfig(apiKey="test_key"))


def test_circle_wkt():
    """Circle is serialized as CIRCLE(lng lat, radius)"""
    shape = GeofenceShape.circle("zone", CENTER, 500)
    assert shape.wkt == "CIRCLE(2.1734 41.3851, 500)"


def test_rectangle_wkt():
    shape = GeofenceShape.rectangle("box", Coordinate(41.3, 2.1), Coordinate(41.4, 2.2))
    assert shape.wkt == SQUARE_WKT


def test_format_geoms_and_molist():
    shapes = [GeofenceShape.circle("zone", CENTER, 500), GeofenceShape("box", SQUARE_WKT)]
    points = [GeofencePoint("a", INSIDE), GeofencePoint("b", OUTSIDE)]

    assert formatGeoms(shapes) == f"[CIRCLE(2.1734 41.3851, 500)|zone],[{SQUARE_WKT}|box]"
    assert formatMoList(points) == "[2.174,41.386|a],[2.5,41.5|b]"


def test_check_params(service):
    shapes = [GeofenceShape.circle("zone", CENTER, 500)]
    points = [GeofencePoint("a", INSIDE)]

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(insideGeomsPayload()))

        service.check(shapes, points)

    params = getRequestParams(session)
    assert params == {
        "key": "test_key",
        "cmd": "insidegeoms",
        "geoms": "[CIRCLE(2.1734 41.3851, 500)|zone]",
        "molist": "[2.174,41.386|a]",
        "srs": "EPSG:4326",
    }


def test_check_custom_srs(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(insideGeomsPayload()))

        service.check(
            [GeofenceShape("box", SQUARE_WKT)],
            [GeofencePoint("a", INSIDE)],
            GeofenceOptions(shapeSrs="EPSG:3857", pointSrs="gdd"),
        )

    params = getRequestParams(session)
    assert params["srs"] == "EPSG:3857"
    assert params["mocs"] == "gdd"


def test_check_removes_shapes_without_points(service):
    """Shapes with zero matched points are absent from the result"""
    payload = insideGeomsPayload(
        geometry("zone", "CIRCLE(2.1734 41.3851, 500)", ("a", INSIDE)),
        geometry("box", SQUARE_WKT),
    )
    shapes = [GeofenceShape.circle("zone", CENTER, 500), GeofenceShape("box", SQUARE_WKT)]
    points = [GeofencePoint("a", INSIDE), GeofencePoint("b", OUTSIDE)]

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(payload))

        result = service.check(shapes, points)

    assert result.matchCount == 1
    assert result.hasMatches
    match = result.matches[0]
    assert match.shapeId == "zone"
    assert match.shapeWkt == "CIRCLE(2.1734 41.3851, 500)"
    assert [(p.id, p.coord) for p in match.pointsInside] == [("a", INSIDE)]
    assert result.totalShapesChecked == 2
    assert result.totalPointsChecked == 2


def test_check_without_insidegeoms_is_empty(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(cercaliaPayload({})))

        result = service.check([GeofenceShape("box", SQUARE_WKT)], [GeofencePoint("a", OUTSIDE)])

    assert not result.hasMatches
    assert result.totalPointsChecked == 1


def test_check_skips_points_with_invalid_coordinates(service):
    shapeNode = geometry("box", SQUARE_WKT, ("a", INSIDE))
    shapeNode["molist"]["mo"].append({"@id": "broken", "coord": {"@x": "2.1"}})

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(insideGeomsPayload(shapeNode)))

        result = service.check([GeofenceShape("box", SQUARE_WKT)], [GeofencePoint("a", INSIDE)])

    assert [p.id for p in result.matches[0].pointsInside] == ["a"]


def test_check_validation(service):
    with patch("httpx.Client") as mockClient:
        with pytest.raises(CercaliaValidationError):
            service.check([], [GeofencePoint("a", INSIDE)])
        with pytest.raises(CercaliaValidationError):
            service.check([GeofenceShape("box", SQUARE_WKT)], [])
        mockClient.assert_not_called()


def test_check_point(service):
    payload = insideGeomsPayload(geometry("box", SQUARE_WKT, ("point", INSIDE)))

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(payload))

        zones = service.checkPoint([GeofenceShape("box", SQUARE_WKT)], INSIDE)

    assert zones == ["box"]
    assert getRequestParams(session)["molist"] == "[2.174,41.386|point]"


def test_is_inside_circle(service):
    payload = insideGeomsPayload(geometry("circle", "CIRCLE(2.1734 41.3851, 500)", ("point", INSIDE)))

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(payload))

        assert service.isInsideCircle(CENTER, 500, INSIDE)

    assert getRequestParams(session)["geoms"] == "[CIRCLE(2.1734 41.3851, 500)|circle]"


def test_is_inside_polygon_false(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(insideGeomsPayload(geometry("polygon", SQUARE_WKT))))

        assert not service.isInsidePolygon(SQUARE_WKT, OUTSIDE)


def test_filter_points_in_shape(service):
    shape = GeofenceShape("box", SQUARE_WKT)
    points = [GeofencePoint("a", INSIDE), GeofencePoint("b", OUTSIDE), GeofencePoint("c", INSIDE)]
    payload = insideGeomsPayload(geometry("box", SQUARE_WKT, ("c", INSIDE), ("a", INSIDE)))

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(payload))

        inside = service.filterPointsInShape(shape, points)

    assert [p.id for p in inside] == ["a", "c"]


def test_filter_points_in_shape_empty(service):
    with patch("httpx.Client") as mockClient:
        assert service.filterPointsInShape(GeofenceShape("box", SQUARE_WKT), []) == []
        mockClient.assert_not_called()


def test_create_helpers():
    assert GeofencingService.createCircle("c", CENTER, 100.5).wkt == "CIRCLE(2.1734 41.3851, 100.5)"
    assert GeofencingService.createRectangle("r", Coordinate(41.3, 2.1), Coordinate(41.4, 2.2)).wkt == SQUARE_WKT


@pytest.mark.asyncio
async def test_check_point_async(service):
    payload = insideGeomsPayload(geometry("box", SQUARE_WKT, ("point", INSIDE)))

    with patch("httpx.AsyncClient") as mockClient:
        setupAsyncClient(mockClient, createMockResponse(payload))

        zones = await service.checkPointAsync([GeofenceShape("box", SQUARE_WKT)], INSIDE)

    assert zones == ["box"]


@pytest.mark.asyncio
async def test_check_async_without_mocs(service):
    with patch("httpx.AsyncClient") as mockClient:
        session = setupAsyncClient(mockClient, createMockResponse(insideGeomsPayload()))

        await service.checkAsync([GeofenceShape("box", SQUARE_WKT)], [GeofencePoint("a", INSIDE)])

    assertParamsMissing(getRequestParams(session), "mocs")
