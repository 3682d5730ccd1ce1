"""
Unit tests for Cercalia Suggest Service
"""

from unittest.mock import patch

import pytest

from cercalia import CercaliaConfig
from cercalia.core import CercaliaApiError, CercaliaResponseError, Coordinate
from cercalia.suggest import (
    SuggestGeocodeOptions,
    SuggestGeoType,
    SuggestOptions,
    SuggestResultType,
    SuggestService,
)
from cercalia.suggest.service import buildDisplayText, determineType, parseLatLng
from tests.utils import (
    assertParamsContain,
    assertParamsMissing,
    createMockResponse,
    getRequestParams,
    getRequestUrl,
    setupAsyncClient,
    setupSyncClient,
)

STREET_DOC = {
    "id": "st-1",
    "calle_id": "0801900123",
    "calle_nombre": "Provença",
    "calle_descripcion": "Carrer de Provença",
    "calle_tipo": "Carrer",
    "calle_articulo": "de",
    "localidad_id": "0801900000",
    "localidad_nombre": "Barcelona",
    "distrito_nombre": "Eixample",
    "municipio_id": "0801900000",
    "municipio_nombre": "Barcelona",
    "provincia_id": "08",
    "provincia_nombre": "Barcelona",
    "comunidad_id": "09",
    "comunidad_nombre": "Catalunya",
    "pais_id": "ESP",
    "pais_nombre": "España",
    "codigo_postal": "08025",
    "portal_min": 1,
    "portal_max": 601,
    "portal_en": False,
    "oficial": "Y",
    "score": 12.5,
}

CITY_DOC = {
    "id": "ct-1",
    "localidad_id": "1707900000",
    "localidad_nombre": "Girona",
    "municipio_id": "1707900000",
    "municipio_nombre": "Girona",
    "provincia_nombre": "Girona",
    "pais_id": "ESP",
    "coord": "41.9794,2.8214",
}

POI_DOC = {"id": "poi-9", "poi_cat": "C001", "nombre": "Sagrada Família", "coord": "41.4036,2.1744"}


def solrPayload(*docs, status=0):
    return {"responseHeader": {"status": status}, "response": {"numFound": len(docs), "docs": list(docs)}}


@pytest.fixture
def service():
    """Create suggest service with test config"""
    return SuggestService(CercaliaConfig(apiKey="test_key"))


def test_parse_lat_lng():
    assert parseLatLng("41.9794, 2.8214") == Coordinate(lat=41.9794, lng=2.8214)
    assert parseLatLng("41.9794") is None
    assert parseLatLng("north,east") is None
    assert parseLatLng(None) is None


def test_display_text():
    assert buildDisplayText(STREET_DOC) == "Carrer de Provença, Barcelona (Eixample), Barcelona, España"
    assert buildDisplayText({**STREET_DOC, "portal": 58}).startswith("Carrer de Provença, 58, ")
    assert buildDisplayText(CITY_DOC) == "Girona, Girona"
    assert buildDisplayText({"id": "x", "nombre": "Only name"}) == "Only name"
    assert buildDisplayText({"id": "x"}) == "x"


def test_determine_type():
    assert determineType(STREET_DOC) == SuggestResultType.STREET
    assert determineType({**STREET_DOC, "portal": 58}) == SuggestResultType.ADDRESS
    assert determineType(CITY_DOC) == SuggestResultType.CITY
    assert determineType(POI_DOC) == SuggestResultType.POI
    assert determineType({"calle_descripcion": "Somewhere"}) == SuggestResultType.STREET
    assert determineType({"id": "x"}) == SuggestResultType.ADDRESS


def test_search_params(service):
    options = SuggestOptions(
        text="Provença",
        geoType=SuggestGeoType.STREET,
        countryCode="esp",
        regionCode="09",
        language="es",
        center=Coordinate(41.39, 2.16),
        radius=5000,
        poiCategories=["C001", "C002"],
    )

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(solrPayload()))

        service.search(options)

    assert getRequestUrl(session) == "https://lb.cercalia.com/suggest/SuggestServlet"
    assert getRequestParams(session) == {
        "key": "test_key",
        "t": "Provença",
        "getype": "st",
        "ctryc": "ESP",
        "regc": "09",
        "lang": "es",
        "pt": "41.39,2.16",
        "d": "5000",
        "poicat": "C001,C002",
    }


def test_search_radius_needs_center(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(solrPayload()))

        service.search(SuggestOptions(text="Gir", radius=1000))

    assertParamsMissing(getRequestParams(session), "pt", "d", "getype", "ctryc")


def test_search_empty_text(service):
    with patch("httpx.Client") as mockClient:
        assert service.search(SuggestOptions(text="")) == []
        mockClient.assert_not_called()


def test_search_parses_street(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(solrPayload(STREET_DOC)))

        results = service.searchStreets("Provença", "ESP")

    assert len(results) == 1
    street = results[0]
    assert street.id == "st-1"
    assert street.type == SuggestResultType.STREET
    assert street.street is not None
    assert (street.street.code, street.street.name, street.street.article) == ("0801900123", "Provença", "de")
    assert street.city is not None
    assert street.city.bracketLocality == "Eixample"
    assert street.postalCode == "08025"
    assert (street.municipality.code, street.municipality.name) == ("0801900000", "Barcelona")
    assert (street.subregion.code, street.subregion.name) == ("08", "Barcelona")
    assert (street.region.code, street.region.name) == ("09", "Catalunya")
    assert (street.country.code, street.country.name) == ("ESP", "España")
    assert street.houseNumbers is not None
    assert street.houseNumbers.available
    assert street.houseNumbers.hint == "1-601"
    assert street.houseNumbers.isEnglishFormat is False
    assert street.isOfficial is True
    assert street.score == 12.5
    assert street.coord is None
    assert street.poi is None


def test_search_parses_poi(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(solrPayload(POI_DOC)))

        results = service.searchPois("Sagrada", "ESP", Coordinate(41.4, 2.17), 2000, ["C001"])

    assertParamsContain(getRequestParams(session), {"getype": "poi", "pt": "41.4,2.17", "d": "2000"})
    poi = results[0]
    assert poi.type == SuggestResultType.POI
    assert poi.poi is not None
    assert (poi.poi.code, poi.poi.name, poi.poi.categoryCode) == ("poi-9", "Sagrada Família", "C001")
    assert poi.coord == Coordinate(41.4036, 2.1744)


def test_search_error_status(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(solrPayload(status=400)))

        with pytest.raises(CercaliaApiError) as excInfo:
            service.searchCities("Gir")

    assert excInfo.value.code == "400"


def test_search_missing_response_node(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse({"responseHeader": {"status": 0}}))

        with pytest.raises(CercaliaResponseError):
            service.searchCities("Gir")


def test_geocode(service):
    payload = {
        "responseHeader": {"status": 0},
        "response": {
            "coord": {"x": 2.1655, "y": 41.3984},
            "desc": "Carrer de Provença, 589, Barcelona",
            "name": "Carrer de Provença",
            "housenumber": "589",
            "postalcode": "08025",
        },
    }

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(payload))

        result = service.geocode(SuggestGeocodeOptions(streetCode="0801900123", streetNumber="589", countryCode="esp"))

    assert getRequestParams(session) == {"key": "test_key", "stc": "0801900123", "stnum": "589", "ctryc": "ESP"}
    assert result.coord == Coordinate(lat=41.3984, lng=2.1655)
    assert result.formattedAddress == "Carrer de Provença, 589, Barcelona"
    assert result.houseNumber == "589"
    assert result.postalCode == "08025"


def test_geocode_without_coordinates(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(solrPayload()))

        with pytest.raises(CercaliaResponseError):
            service.geocode(SuggestGeocodeOptions(cityCode="1707900000"))


def test_find_and_geocode_uses_suggestion_coordinates(service):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(solrPayload(CITY_DOC)))

        result = service.findAndGeocode("Girona", "ESP")

    assert session.get.call_count == 1
    assert result is not None
    assert result.coord == Coordinate(41.9794, 2.8214)
    assert (result.cityCode, result.cityName) == ("1707900000", "Girona")
    assert (result.countryCode, result.countryName) == ("ESP", None)


def test_find_and_geocode_geocodes_best_suggestion(service):
    geocodePayload = {"responseHeader": {"status": 0}, "response": {"coord": "41.3984,2.1655", "name": "Provença"}}

    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(
            mockClient, createMockResponse(solrPayload(STREET_DOC)), createMockResponse(geocodePayload)
        )

        result = service.findAndGeocode("Provença", "ESP", "589")

    assert getRequestParams(session, 1) == {
        "key": "test_key",
        "ctc": "0801900000",
        "stc": "0801900123",
        "stnum": "589",
        "ctryc": "ESP",
    }
    assert result is not None
    assert result.formattedAddress == "Provença"


def test_find_and_geocode_nothing_found(service):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(solrPayload()))

        assert service.findAndGeocode("zzzz") is None


@pytest.mark.asyncio
async def test_search_cities_async(service):
    with patch("httpx.AsyncClient") as mockClient:
        session = setupAsyncClient(mockClient, createMockResponse(solrPayload(CITY_DOC)))

        results = await service.searchCitiesAsync("Gir", "esp")

    assertParamsContain(getRequestParams(session), {"getype": "ct", "ctryc": "ESP"})
    assert results[0].type == SuggestResultType.CITY


@pytest.mark.asyncio
async def test_find_and_geocode_async(service):
    with patch("httpx.AsyncClient") as mockClient:
        setupAsyncClient(mockClient, createMockResponse(solrPayload(CITY_DOC)))

        result = await service.findAndGeocodeAsync("Girona")

    assert result is not None
    assert result.name == "Girona, Girona"
