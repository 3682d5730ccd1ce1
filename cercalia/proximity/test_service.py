"""
Unit tests for Cercalia Proximity Service
"""

from unittest.mock import patch

import pytest

from cercalia import CercaliaConfig
from cercalia.core import Coordinate
from cercalia.proximity import ProximityOptions, ProximityRouteWeight, ProximityService
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

CENTER = Coordinate(lat=41.3851, lng=2.1734)

PHARMACY = {
    "@id": "777",
    "@category_id": "C005",
    "@subcategory_id": "12",
    "@dist": "340",
    "@pos": "1",
    "@routedist": "520",
    "@routetime": "95",
    "name": {"value": "Farmàcia Central"},
    "ge": {
        "street": {"@id": "0801900555", "value": "Carrer de Pelai"},
        "municipality": {"@id": "08019", "value": "Barcelona"},
        "region": {"@id": "09", "value": "Catalunya"},
    },
    "coord": {"@x": "2.1690", "@y": "41.3860"},
}


def proximityPayload(*pois):
    return cercaliaPayload({"proximity": {"poilist": {"poi": list(pois)}}})


@pytest.fixture
def service():
    """Create proximity service with test config"""
    return ProximityService(CercaliaConfig(apiKey="test_key"))


def test_find_nearest_minimal_params(service):
    """Only center is required"""
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(proximityPayload(PHARMACY)))

        result = service.findNearest(ProximityOptions(center=CENTER))

    assert getRequestParams(session) == {"key": "test_key", "cmd": "prox", "mocs": "gdd", "mo": "41.3851,2.1734"}
    assert result.totalFound == 1
    assert result.center == CENTER

    item = result.items[0]
    assert item.id == "777"
    assert item.name == "Farmàcia Central"
    assert item.distance == 340
    assert item.categoryCode == "C005"
    assert item.subcategoryCode == "12"
    assert item.routeDistance == 520
    assert item.ge is not None
    assert (item.ge.street, item.ge.streetCode) == ("Carrer de Pelai", "0801900555")
    assert (item.ge.municipality, item.ge.municipalityCode) == ("Barcelona", "08019")
    assert (item.ge.region, item.ge.regionCode) == ("Catalunya", "09")


def test_find_nearest_routing_weight_needs_include_routing(service):
    """Route weight is sent only together with includeRouting"""
    options = ProximityOptions(center=CENTER, categories=["C005"], routeWeight=ProximityRouteWeight.DISTANCE)

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(proximityPayload(PHARMACY)))

        service.findNearest(options)

    assertParamsMissing(getRequestParams(session), "weight")


def test_find_nearest_with_routing(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(proximityPayload(PHARMACY)))

        service.findNearestWithRouting(CENTER, "C005")

    assertParamsContain(getRequestParams(session), {"rqpoicats": "C005", "num": "5", "weight": "time"})


def test_find_nearest_by_category(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(proximityPayload(PHARMACY)))

        service.findNearestByCategory(CENTER, "C005", 3)

    params = getRequestParams(session)
    assertParamsContain(params, {"rqpoicats": "C005", "num": "3"})
    assertParamsMissing(params, "weight", "rad")


def test_find_nearest_no_results(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(noResultsPayload()))

        result = service.findNearest(ProximityOptions(center=CENTER, categories=["C005"]))

    assert result.items == []
    assert result.totalFound == 0
    assert result.center == CENTER


def test_find_nearest_skips_item_without_coordinates(service):
    broken = {"@id": "1", "name": {"value": "Broken"}, "coord": {"@x": "2.17"}}

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(proximityPayload(broken, PHARMACY)))

        result = service.findNearest(ProximityOptions(center=CENTER))

    assert [item.id for item in result.items] == ["777"]
    assert result.totalFound == 1


@pytest.mark.asyncio
async def test_find_nearest_async(service):
    with patch("httpx.AsyncClient") as mockClient:
        session = setupAsyncClient(mockClient, createMockResponse(proximityPayload(PHARMACY)))

        result = await service.findNearestWithRoutingAsync(CENTER, "C005", ProximityRouteWeight.DISTANCE, 2)

    assertParamsContain(getRequestParams(session), {"weight": "distance", "num": "2"})
    assert result.totalFound == 1
