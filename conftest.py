"""
Pytest configuration and common fixtures for Cercalia SDK tests.

All fixtures follow camelCase naming convention.
"""

import logging
from typing import Generator

import pytest

from cercalia import CercaliaConfig

# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def cercaliaConfig() -> CercaliaConfig:
    """
    Provide configuration with a fake API key.

    Returns:
        CercaliaConfig: Config pointing at the default Cercalia endpoint
    """
    return CercaliaConfig(apiKey="test_key")


@pytest.fixture(autouse=True)
def noApiKeyInEnvironment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure a developer's real API key never leaks into tests."""
    monkeypatch.delenv("CERCALIA_API_KEY", raising=False)
    monkeypatch.delenv("CERCALIA_BASE_URL", raising=False)


# ============================================================================
# Logging Fixtures
# ============================================================================


@pytest.fixture
def debugLogging(caplog: pytest.LogCaptureFixture) -> Generator[pytest.LogCaptureFixture, None, None]:
    """
    Capture SDK logs at DEBUG level.

    Yields:
        pytest.LogCaptureFixture: caplog, already set to DEBUG for "cercalia"
    """
    with caplog.at_level(logging.DEBUG, logger="cercalia"):
        yield caplog
