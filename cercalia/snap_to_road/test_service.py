"""
Unit tests for Cercalia Snap To Road Service
"""

from unittest.mock import patch

import pytest

from cercalia import CercaliaConfig
from cercalia.core import CercaliaApiError, CercaliaResponseError, CercaliaValidationError, Coordinate
from cercalia.snap_to_road import SnapToRoadOptions, SnapToRoadPoint, SnapToRoadService, SnapToRoadWeight
from cercalia.snap_to_road.service import buildTrackString, groupPoints
from tests.utils import (
    assertParamsContain,
    assertParamsMissing,
    cercaliaPayload,
    createMockResponse,
    getRequestParams,
    noResultsPayload,
    setupAsyncClient,
    setupSyncClient,
)

FIRST = SnapToRoadPoint(Coordinate(lat=41.969279, lng=2.825850), compass=0, angle=45, speed=70, attribute="A")
SECOND = SnapToRoadPoint(Coordinate(lat=41.965995, lng=2.822355), compass=0, angle=45, speed=10, attribute="A")

TRACK_PAYLOAD = cercaliaPayload(
    {
        "track": {
            "geometry": [
                {
                    "@attribute": "A",
                    "@distance": "0.97",
                    "@speeding": "true",
                    "@speedinglevel": "2",
                    "wkt": {"value": "LINESTRING(2.82585 41.969279, 2.822355 41.965995)"},
                },
                {
                    "@attribute": "B",
                    "@distance": "1.5",
                    "@speeding": "false",
                    "wkt": {"value": "LINESTRING(2.822355 41.965995, 2.82 41.96)"},
                },
            ]
        }
    }
)


@pytest.fixture
def service():
    """Create snap to road service with test config"""
    return SnapToRoadService(CercaliaConfig(apiKey="test_key"))


def test_track_string():
    """Point fields keep their position inside the bracket"""
    assert buildTrackString([FIRST, SECOND]) == "[2.82585,41.969279@0,45@@70@@@A],[2.822355,41.965995@0,45@@10@@@A]"


def test_track_point_optional_parts():
    coord = Coordinate(lat=41.0, lng=2.0)

    assert SnapToRoadPoint(coord).toTrackString() == "[2.0,41.0]"
    assert SnapToRoadPoint(coord, compass=90).toTrackString() == "[2.0,41.0@90,0]"
    assert SnapToRoadPoint(coord, speed=50).toTrackString() == "[2.0,41.0@@50]"
    assert SnapToRoadPoint(coord, attribute="B").toTrackString() == "[2.0,41.0@@@B]"
    # Angle without compass is not sent
    assert SnapToRoadPoint(coord, angle=30).toTrackString() == "[2.0,41.0]"


def test_group_points():
    coords = [Coordinate(lat=41.0 + i / 100, lng=2.0) for i in range(5)]

    assert [p.attribute for p in groupPoints(coords, 2)] == ["A", "A", "B", "B", "C"]
    assert {p.attribute for p in groupPoints(coords, 0)} == {"A"}


def test_group_points_limit():
    coords = [Coordinate(lat=41.0, lng=2.0)] * 260

    points = groupPoints(coords, 10)
    assert points[-1].attribute == "Z"
    assert buildTrackString(points[-1:]) == "[2.0,41.0@@]"

    with pytest.raises(CercaliaValidationError):
        groupPoints(coords + [Coordinate(lat=41.0, lng=2.0)], 10)


def test_match_default_params(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.match([FIRST, SECOND])

    assert getRequestParams(session) == {
        "key": "test_key",
        "cmd": "geomtrack",
        "srs": "EPSG:4326",
        "track": "[2.82585,41.969279@0,45@@70@@@A],[2.822355,41.965995@0,45@@10@@@A]",
    }


def test_match_all_options(service):
    options = SnapToRoadOptions(
        weight=SnapToRoadWeight.DISTANCE,
        net="logistics",
        geometrySrs="EPSG:3857",
        geometryTolerance=20,
        points=True,
        speeding=True,
        speedTolerance=5,
        onlyTrack=True,
        maxDirectionSearchDistance=30,
        maxSearchDistance=60,
        factor=1.5,
    )

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.match([FIRST, SECOND], options)

    assertParamsContain(
        getRequestParams(session),
        {
            "weight": "distance",
            "net": "logistics",
            "geometrysrs": "EPSG:3857",
            "geometrytolerance": "20",
            "points": "true",
            "speeding": "true",
            "speedtolerance": "5",
            "onlytrack": "true",
            "maxdirectionsearchdistance": "30",
            "maxsearchdistance": "60",
            "factor": "1.5",
        },
    )


def test_speed_tolerance_needs_speeding(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.match([FIRST, SECOND], SnapToRoadOptions(speedTolerance=5))

    assertParamsMissing(getRequestParams(session), "speeding", "speedtolerance")


def test_match_parses_segments(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        result = service.match([FIRST, SECOND])

    assert result.segmentCount == 2
    assert result.totalDistance == pytest.approx(2.47)

    first, second = result.segments
    assert first.wkt.startswith("LINESTRING(")
    assert first.attribute == "A"
    assert first.speeding is True
    assert first.speedingLevel == 2
    assert second.speeding is False
    assert second.speedingLevel is None


def test_match_skips_segment_without_wkt(service):
    payload = cercaliaPayload(
        {
            "track": {
                "geometry": [
                    {"@attribute": "A", "@distance": "1.0"},
                    {"@attribute": "B", "@distance": "2.0", "geometry": {"wkt": "LINESTRING(2 41, 3 42)"}},
                ]
            }
        }
    )

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(payload))

        result = service.match([FIRST, SECOND])

    assert [s.attribute for s in result.segments] == ["B"]
    assert result.segments[0].wkt == "LINESTRING(2 41, 3 42)"
    assert result.totalDistance == 2.0


def test_match_without_geometry_is_empty(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(cercaliaPayload({"track": {}})))

        result = service.match([FIRST, SECOND])

    assert not result.hasSegments
    assert result.totalDistance == 0.0


def test_match_without_track_raises(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(cercaliaPayload({})))

        with pytest.raises(CercaliaResponseError):
            service.match([FIRST, SECOND])


def test_match_vendor_error_propagates(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(noResultsPayload()))

        with pytest.raises(CercaliaApiError):
            service.match([FIRST, SECOND])


def test_match_needs_two_points(service):
    with patch("httpx.Client") as mockClient:
        with pytest.raises(CercaliaValidationError):
            service.match([FIRST])
        mockClient.assert_not_called()


def test_match_with_speeding_detection(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.matchWithSpeedingDetection([FIRST, SECOND], 15)

    assertParamsContain(getRequestParams(session), {"speeding": "true", "speedtolerance": "15"})


def test_match_simplified(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.matchSimplified([FIRST, SECOND])

    assertParamsContain(getRequestParams(session), {"geometrytolerance": "50"})


def test_match_with_groups(service):
    coords = [FIRST.coord, SECOND.coord, FIRST.coord]

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        service.matchWithGroups(coords, 2)

    assert getRequestParams(session)["track"] == (
        "[2.82585,41.969279@@@A],[2.822355,41.965995@@@A],[2.82585,41.969279@@@B]"
    )


@pytest.mark.asyncio
async def test_match_async(service):
    with patch("httpx.AsyncClient") as mockClient:
        session = setupAsyncClient(mockClient, createMockResponse(TRACK_PAYLOAD))

        result = await service.matchWithSpeedingDetectionAsync([FIRST, SECOND])

    assertParamsContain(getRequestParams(session), {"speedtolerance": "10"})
    assert result.segmentCount == 2
