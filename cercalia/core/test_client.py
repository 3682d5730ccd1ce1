"""
Unit tests for CercaliaClient transport
"""

import json
from unittest.mock import patch

import httpx
import pytest

from cercalia import CercaliaConfig
from cercalia.core import (
    CercaliaApiError,
    CercaliaClient,
    CercaliaHttpError,
    CercaliaResponseError,
    CercaliaTransportError,
)
from tests.utils import (
    cercaliaPayload,
    createMockResponse,
    errorPayload,
    getRequestParams,
    getRequestUrl,
    noResultsPayload,
    setupAsyncClient,
    setupSyncClient,
)


@pytest.fixture
def client():
    """Create bare client with test config"""
    return CercaliaClient(CercaliaConfig(apiKey="test_key", timeout=5))


def test_add_if_present():
    params = CercaliaClient._newParams("cand")

    CercaliaClient._addIfPresent(params, "ctn", "Girona")
    CercaliaClient._addIfPresent(params, "blank", "  ")
    CercaliaClient._addIfPresent(params, "none", None)
    CercaliaClient._addIfPresent(params, "num", 0)
    CercaliaClient._addIfPresent(params, "flag", False)
    CercaliaClient._addIfTrue(params, "on", True, "1")
    CercaliaClient._addIfTrue(params, "off", None, "1")

    assert params == {"cmd": "cand", "ctn": "Girona", "num": "0", "flag": "false", "on": "1"}
    assert CercaliaClient._newParams() == {}


def test_request_adds_key_and_returns_cercalia_node(client):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(cercaliaPayload({"version": "5.0"})))

        result = client._request({"cmd": "prox"}, "Test")

    mockClient.assert_called_once_with(timeout=5)
    assert getRequestUrl(session) == "https://lb.cercalia.com/services/v2/json"
    assert getRequestParams(session) == {"key": "test_key", "cmd": "prox"}
    assert result == {"version": "5.0"}


def test_request_base_url_override(client):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse({"anything": 1}))

        result = client._requestRaw({}, "Test", baseUrl="https://example.com/other")

    assert getRequestUrl(session) == "https://example.com/other"
    assert result == {"anything": 1}


def test_request_http_error(client):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(statusCode=503, text="Service Unavailable"))

        with pytest.raises(CercaliaHttpError) as excInfo:
            client._request({}, "Test")

    assert excInfo.value.statusCode == 503
    assert excInfo.value.body == "Service Unavailable"
    assert excInfo.value.code == "503"
    assert isinstance(excInfo.value, CercaliaTransportError)


def test_request_invalid_json(client):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(text="<html>oops</html>"))

        with pytest.raises(CercaliaResponseError) as excInfo:
            client._request({}, "Test")

    assert isinstance(excInfo.value.__cause__, json.JSONDecodeError)


def test_request_missing_root(client):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse({"other": {}}))

        with pytest.raises(CercaliaResponseError, match="missing 'cercalia'"):
            client._request({}, "Test")


def test_request_vendor_error(client):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(errorPayload("10001", "Invalid key")))

        with pytest.raises(CercaliaApiError) as excInfo:
            client._request({}, "Test")

    assert excInfo.value.code == "10001"
    assert "Invalid key" in str(excInfo.value)
    assert not excInfo.value.isNoResultsFound


def test_request_optional(client):
    with patch("httpx.Client") as mockClient:
        setupSyncClient(
            mockClient, createMockResponse(noResultsPayload()), createMockResponse(errorPayload("10001", "Bad"))
        )

        assert client._requestOptional({}, "Test") is None
        with pytest.raises(CercaliaApiError):
            client._requestOptional({}, "Test")


def test_request_timeout(client):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient)
        session.get.side_effect = httpx.ReadTimeout("timed out")

        with pytest.raises(CercaliaTransportError, match="timeout"):
            client._request({}, "Test")


def test_request_network_error(client):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient)
        session.get.side_effect = httpx.ConnectError("refused")

        with pytest.raises(CercaliaTransportError, match="Request failed"):
            client._request({}, "Test")


def test_download(client):
    with patch("httpx.Client") as mockClient:
        session = setupSyncClient(mockClient, createMockResponse(content=b"\x89PNG"))

        assert client._download("https://lb.cercalia.com/img.png") == b"\x89PNG"

    assert getRequestUrl(session) == "https://lb.cercalia.com/img.png"


@pytest.mark.asyncio
async def test_request_async(client):
    with patch("httpx.AsyncClient") as mockClient:
        session = setupAsyncClient(mockClient, createMockResponse(cercaliaPayload({"ok": "1"})))

        result = await client._requestAsync({"cmd": "cand"}, "Test")

    assert result == {"ok": "1"}
    assert getRequestParams(session)["cmd"] == "cand"


@pytest.mark.asyncio
async def test_request_optional_async(client):
    with patch("httpx.AsyncClient") as mockClient:
        setupAsyncClient(mockClient, createMockResponse(noResultsPayload()))

        assert await client._requestOptionalAsync({}, "Test") is None


@pytest.mark.asyncio
async def test_download_async_http_error(client):
    with patch("httpx.AsyncClient") as mockClient:
        setupAsyncClient(mockClient, createMockResponse(statusCode=404))

        with pytest.raises(CercaliaHttpError):
            await client._downloadAsync("https://lb.cercalia.com/missing.png")


def test_request_log_masks_api_key(cercaliaConfig, debugLogging):
    client = CercaliaClient(cercaliaConfig)

    with patch("httpx.Client") as mockClient:
        setupSyncClient(mockClient, createMockResponse(cercaliaPayload({})))

        client._request({"cmd": "cand"}, "Masked")

    requestLogs = [record.getMessage() for record in debugLogging.records if "[Masked] Request" in record.getMessage()]
    assert len(requestLogs) == 1
    assert "'key': '***'" in requestLogs[0]
    assert "test_key" not in requestLogs[0]
