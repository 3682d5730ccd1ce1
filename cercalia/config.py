"""
Configuration management for Cercalia SDK.

Configuration can be created directly, read from environment variables or
loaded from a TOML file:

    [cercalia]
    api-key = "${CERCALIA_API_KEY}"
    base-url = "https://lb.cercalia.com/services/v2/json"
    timeout = 30

    [logging]
    level = "INFO"
    console = true

${VAR} placeholders are substituted with environment variables.
"""

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import tomli

from . import utils
from .core.constants import DEFAULT_BASE_URL, DEFAULT_TIMEOUT

logger = logging.getLogger(__name__)

ENV_API_KEY = "CERCALIA_API_KEY"
ENV_BASE_URL = "CERCALIA_BASE_URL"


def replaceMatchToEnv(match: re.Match[str]) -> str:
    """Replace environment variable placeholder with actual value.

    Args:
        match: A regex match object containing the environment variable name.

    Returns:
        str: The value of the environment variable or the original placeholder
             if the variable is not set.
    """
    key = match.group(1)
    return os.getenv(key, match.group(0))


def substituteEnvVars(value: Any) -> Any:
    """Recursively substitute ${VAR_NAME} placeholders in configuration values.

    Strings get placeholders replaced, dicts and lists are processed
    recursively, everything else is returned unchanged.
    """
    if isinstance(value, str):
        return re.sub(r"\$\{([A-Za-z_][A-Za-z0-9_-]*)\}", replaceMatchToEnv, value)
    elif isinstance(value, dict):
        return {k: substituteEnvVars(v) for k, v in value.items()}
    elif isinstance(value, list):
        return [substituteEnvVars(item) for item in value]
    return value


def loadConfigFile(configPath: str, dotEnvFile: Optional[str] = None) -> Dict[str, Any]:
    """Load TOML configuration file with environment substitution, dood!

    Args:
        configPath: Path to TOML file
        dotEnvFile: Optional .env file to load before substitution

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        tomli.TOMLDecodeError: If config file is not valid TOML
    """
    if dotEnvFile is not None and Path(dotEnvFile).exists():
        utils.load_dotenv(path=dotEnvFile)

    with open(configPath, "rb") as f:
        config = tomli.load(f)
    logger.info(f"Loaded config from {configPath}")

    return substituteEnvVars(config)


@dataclass(frozen=True, slots=True)
class CercaliaConfig:
    """Cercalia API configuration.

    Immutable, created once and shared by reference across all services.

    Attributes:
        apiKey: Cercalia API key (required)
        baseUrl: API base URL (default: https://lb.cercalia.com/services/v2/json)
        timeout: HTTP request timeout in seconds (default: 30)
    """

    apiKey: str = field(repr=False)
    baseUrl: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.apiKey or not self.apiKey.strip():
            raise ValueError("API key cannot be null or empty")
        if not self.baseUrl or not self.baseUrl.strip():
            raise ValueError("Base URL cannot be null or empty")
        if self.timeout <= 0:
            raise ValueError(f"Timeout must be positive, got {self.timeout}")

    def __repr__(self) -> str:
        return f"CercaliaConfig(apiKey='***', baseUrl='{self.baseUrl}', timeout={self.timeout})"

    @classmethod
    def fromEnvironment(cls) -> "CercaliaConfig":
        """Create config from CERCALIA_API_KEY and CERCALIA_BASE_URL environment variables.

        Raises:
            ValueError: If CERCALIA_API_KEY is not set
        """
        apiKey = os.getenv(ENV_API_KEY, "")
        if not apiKey.strip():
            raise ValueError(f"{ENV_API_KEY} environment variable is not set")

        baseUrl = os.getenv(ENV_BASE_URL, "")
        if not baseUrl.strip():
            baseUrl = DEFAULT_BASE_URL

        return cls(apiKey=apiKey, baseUrl=baseUrl)

    @classmethod
    def fromDict(cls, config: Dict[str, Any]) -> "CercaliaConfig":
        """Create config from dict with "api-key", "base-url" and "timeout" keys."""
        return cls(
            apiKey=config.get("api-key", ""),
            baseUrl=config.get("base-url", DEFAULT_BASE_URL),
            timeout=float(config.get("timeout", DEFAULT_TIMEOUT)),
        )

    @classmethod
    def fromToml(cls, configPath: str, dotEnvFile: Optional[str] = None) -> "CercaliaConfig":
        """Create config from [cercalia] table of TOML file.

        Raises:
            ValueError: If [cercalia] table is missing or has no api-key
        """
        config = loadConfigFile(configPath, dotEnvFile)
        section = config.get("cercalia")
        if not isinstance(section, dict):
            raise ValueError(f"No [cercalia] section in {configPath}")
        return cls.fromDict(section)


def getLoggingConfig(configPath: str, dotEnvFile: Optional[str] = None) -> Dict[str, Any]:
    """Get [logging] table of TOML file, suitable for logging_utils.initLogging()."""
    return loadConfigFile(configPath, dotEnvFile).get("logging", {})
