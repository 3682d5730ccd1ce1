"""
Common utilities for Cercalia SDK.
"""

import logging
import os
from typing import Dict, Optional

logger = logging.getLogger(__name__)


def parseDuration(timeStr: Optional[str]) -> float:
    """
    Parse vendor duration string to seconds.

    Args:
        timeStr: String in one of formats:
            1. `HH:MM:SS` (e.g., "2:30:15")
            2. `MM:SS` (e.g., "30:15")
            3. plain number of seconds (e.g., "9015.5")

    Returns:
        Duration in seconds, 0 if string is empty or can't be parsed.
    """
    if not timeStr:
        return 0.0

    try:
        if ":" in timeStr:
            parts = timeStr.split(":")
            if len(parts) == 3:
                return float(parts[0]) * 3600 + float(parts[1]) * 60 + float(parts[2])
            if len(parts) == 2:
                return float(parts[0]) * 60 + float(parts[1])
        return float(timeStr)
    except ValueError:
        logger.warning(f"Unable to parse duration '{timeStr}'")
        return 0.0


def load_dotenv(path: str = ".env", populateEnv: bool = True) -> Dict[str, str]:
    """
    Simple dotenv file loader.
    Just read file line by line and put key-value pairs into dictionary.

    Args:
        path: Path to .env file (default ".env")
        populateEnv: Whether to populate environment variables (default True),
            already set variables are not overwritten

    Returns:
        Dictionary of key-value pairs from .env file
    """
    ret: Dict[str, str] = {}
    with open(path, "rt") as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            splitted_line = line.split("=", 1)
            if len(splitted_line) == 2:
                key, value = splitted_line
                ret[key.strip()] = value.strip().strip('"')

    if populateEnv:
        for k, v in ret.items():
            os.environ.setdefault(k, v)
    return ret
