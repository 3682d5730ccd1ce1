"""
Test utility functions and helpers.

This module provides helpers for faking Cercalia HTTP answers and
inspecting the query parameters services send.
"""

import json
from typing import Any, Dict, Optional
from unittest.mock import AsyncMock, MagicMock

# ============================================================================
# Mock Creation Utilities
# ============================================================================


def createMockResponse(
    payload: Any = None,
    statusCode: int = 200,
    text: Optional[str] = None,
    content: bytes = b"",
) -> MagicMock:
    """
    Create a mock httpx.Response.

    Args:
        payload: Decoded JSON body (default: None)
        statusCode: HTTP status code (default: 200)
        text: Raw body, if set and not valid JSON then json() raises (default: json.dumps(payload))
        content: Binary body (default: b"")

    Returns:
        MagicMock: Configured response

    Example:
        response = createMockResponse(cercaliaPayload({"route": {}}))
        assert response.json()["cercalia"]["route"] == {}
    """
    response = MagicMock()
    response.status_code = statusCode
    response.reason_phrase = "OK" if statusCode == 200 else "Error"
    response.text = text if text is not None else json.dumps(payload)
    response.content = content

    if text is not None:
        response.json.side_effect = lambda: json.loads(text)
    else:
        response.json.return_value = payload

    return response


def cercaliaPayload(node: Dict[str, Any]) -> Dict[str, Any]:
    """Wrap node into {"cercalia": ...} envelope."""
    return {"cercalia": node}


def errorPayload(code: str, message: str) -> Dict[str, Any]:
    """Create vendor error answer."""
    return cercaliaPayload({"error": {"@id": code, "value": message}})


def noResultsPayload() -> Dict[str, Any]:
    """Create vendor "no results found" answer (error 30006)."""
    return errorPayload("30006", "No candidates found")


# ============================================================================
# HTTP Client Patching
# ============================================================================


def setupSyncClient(mockClient: MagicMock, *responses: MagicMock) -> MagicMock:
    """
    Make patched httpx.Client return given responses, one per request.

    Args:
        mockClient: Result of patch("httpx.Client")
        *responses: Responses returned by consecutive get() calls

    Returns:
        MagicMock: Session mock, use it to inspect get() calls

    Example:
        with patch("httpx.Client") as mockClient:
            session = setupSyncClient(mockClient, createMockResponse(payload))
            service.geocode(options)
            params = getRequestParams(session)
    """
    session = mockClient.return_value.__enter__.return_value
    if len(responses) == 1:
        session.get.return_value = responses[0]
    else:
        session.get.side_effect = list(responses)
    return session


def setupAsyncClient(mockClient: MagicMock, *responses: MagicMock) -> MagicMock:
    """
    Make patched httpx.AsyncClient return given responses, one per request.

    Returns:
        MagicMock: Session mock with AsyncMock get()
    """
    session = mockClient.return_value.__aenter__.return_value
    if len(responses) == 1:
        session.get = AsyncMock(return_value=responses[0])
    else:
        session.get = AsyncMock(side_effect=list(responses))
    return session


def getRequestParams(session: MagicMock, callIndex: int = 0) -> Dict[str, str]:
    """Get query parameters of the callIndex-th get() call."""
    return session.get.call_args_list[callIndex].kwargs["params"]


def getRequestUrl(session: MagicMock, callIndex: int = 0) -> str:
    """Get URL of the callIndex-th get() call."""
    return session.get.call_args_list[callIndex].args[0]


# ============================================================================
# Assertion Helpers
# ============================================================================


def assertParamsContain(params: Dict[str, str], expected: Dict[str, str]) -> None:
    """
    Assert params contain at least the expected key/value pairs.

    Raises:
        AssertionError: If a key is missing or has another value
    """
    for key, expectedValue in expected.items():
        assert key in params, f"Expected param '{key}' not found in {params}"
        assert params[key] == expectedValue, f"Expected {key}={expectedValue}, got {key}={params[key]}"


def assertParamsMissing(params: Dict[str, str], *keys: str) -> None:
    """Assert none of the keys were sent."""
    for key in keys:
        assert key not in params, f"Unexpected param '{key}'={params[key]}"
