"""
Logging setup for applications using the Cercalia SDK.

SDK modules only create loggers under "cercalia". initLogging() attaches
handlers to that logger, never to the root one, so an application keeps
its own logging setup. It is driven by the [logging] table of the config
file (see cercalia.config.getLoggingConfig()):

    [logging]
    level = "INFO"
    console = true
    file = "logs/cercalia.log"
    rotate = true
    http-level = "WARNING"

    [logging.logger.routing]
    level = "DEBUG"

Keys under [logging.logger] are relative to the "cercalia" logger, so the
table above turns on debug output of cercalia.routing only.
"""

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

SDK_LOGGER_NAME = "cercalia"
HTTP_LOGGER_NAMES = ("httpx", "httpcore")

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Handlers created here carry this name prefix, so reconfiguring replaces only them
HANDLER_NAME_PREFIX = "cercalia-sdk"


def getLogLevelByStr(levelStr: str, default: Optional[int] = None) -> Optional[int]:
    """Get log level by string."""
    level = getattr(logging, levelStr.upper(), None)
    if not isinstance(level, int):
        logger.error(f"Invalid log level '{levelStr}'")
        return default
    return level


def levelFromConfig(config: Dict[str, Any], key: str, default: int) -> int:
    if key not in config:
        return default
    return getLogLevelByStr(config[key], default) or default


def createHandlers(config: Dict[str, Any], defaultLevel: int) -> List[logging.Handler]:
    """Create console and/or file handlers described by config.

    Supported keys: format, console, console-level, file, file-level, rotate.
    A file that can't be opened is reported and skipped.
    """
    formatter = logging.Formatter(config.get("format", DEFAULT_FORMAT))
    handlers: List[logging.Handler] = []

    if config.get("console", False):
        consoleHandler = logging.StreamHandler()
        consoleHandler.set_name(f"{HANDLER_NAME_PREFIX}-console")
        consoleHandler.setLevel(levelFromConfig(config, "console-level", defaultLevel))
        handlers.append(consoleHandler)

    logFile = config.get("file")
    if logFile:
        try:
            Path(logFile).parent.mkdir(parents=True, exist_ok=True)
            fileHandler: logging.Handler
            if config.get("rotate", False):
                fileHandler = TimedRotatingFileHandler(
                    filename=logFile, when="midnight", interval=1, backupCount=7, encoding="utf-8"
                )
            else:
                fileHandler = logging.FileHandler(logFile, encoding="utf-8")
        except OSError as e:
            logger.error(f"Failed to setup file logging to {logFile}: {e}")
        else:
            fileHandler.set_name(f"{HANDLER_NAME_PREFIX}-file")
            fileHandler.setLevel(levelFromConfig(config, "file-level", defaultLevel))
            handlers.append(fileHandler)

    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def removeSdkHandlers(localLogger: logging.Logger) -> None:
    """Detach and close handlers previously added by configureLogger()."""
    for handler in localLogger.handlers[:]:
        if (handler.get_name() or "").startswith(HANDLER_NAME_PREFIX):
            localLogger.removeHandler(handler)
            handler.close()


def configureLogger(localLogger: logging.Logger, config: Dict[str, Any]) -> None:
    """Configure one logger: level, propagate flag and SDK handlers.

    Handlers added by the application itself are left alone.
    """
    if "propagate" in config:
        localLogger.propagate = bool(config["propagate"])

    if "level" in config:
        logLevel = getLogLevelByStr(config["level"])
        if logLevel is not None:
            localLogger.setLevel(logLevel)

    removeSdkHandlers(localLogger)
    for handler in createHandlers(config, localLogger.getEffectiveLevel()):
        localLogger.addHandler(handler)
        logger.debug(f"Logging {localLogger.name} to {handler.get_name()}, logLevel: {handler.level}")


def resolveLoggerName(name: str) -> str:
    """Turn "routing" into "cercalia.routing", full SDK names are kept as is."""
    if name == SDK_LOGGER_NAME or name.startswith(f"{SDK_LOGGER_NAME}."):
        return name
    return f"{SDK_LOGGER_NAME}.{name}"


def initLogging(config: Dict[str, Any]) -> logging.Logger:
    """Configure SDK logging from the [logging] config table, dood!

    Returns:
        The configured "cercalia" logger
    """
    sdkLogger = logging.getLogger(SDK_LOGGER_NAME)
    configureLogger(sdkLogger, {"level": "INFO", **config})

    # httpx logs every request at INFO
    httpLevel = levelFromConfig(config, "http-level", logging.WARNING)
    for name in HTTP_LOGGER_NAMES:
        logging.getLogger(name).setLevel(httpLevel)

    for name, loggerConfig in config.get("logger", {}).items():
        configureLogger(logging.getLogger(resolveLoggerName(name)), loggerConfig)

    logger.info(f"SDK logging configured: level={logging.getLevelName(sdkLogger.level)}, http={httpLevel}")
    return sdkLogger
