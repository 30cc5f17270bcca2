"""
Logging Configuration
Sets up the 'coordinatediagrams' logger for the application.

The level comes from the caller or, when omitted, from the
COORDINATEDIAGRAMS_LOG_LEVEL environment variable. Python warnings (numpy
RuntimeWarnings from degenerate geometry, for instance) are routed through
logging as well.
"""
import logging
import os
import sys
from typing import Optional, Union

LOGGER_NAME: str = "coordinatediagrams"
LOG_LEVEL_ENV: str = "COORDINATEDIAGRAMS_LOG_LEVEL"
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT: str = "%H:%M:%S"


def parse_level(raw: Union[int, str, None], default: int = logging.INFO) -> int:
    """
    Turn a level name ("DEBUG", "info", ...) or number into a logging level.

    Anything unrecognised falls back to `default`.
    """
    if isinstance(raw, int):
        return raw
    raw = (raw or "").strip()
    if not raw:
        return default
    if raw.isdigit():
        return int(raw)
    level = logging.getLevelName(raw.upper())
    return level if isinstance(level, int) else default


def level_from_env(default: int = logging.INFO) -> int:
    """Resolve the log level from the environment."""
    return parse_level(os.environ.get(LOG_LEVEL_ENV), default)


def setup_logging(level: Union[int, str, None] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the application logger.

    Calling it again replaces the handlers of the previous call, so reopening
    the window never duplicates output.

    Args:
        level: Level name or number; None reads it from the environment.
        log_file: Optional path; the file is truncated on every run.

    Returns:
        The configured 'coordinatediagrams' logger.
    """
    resolved = level_from_env() if level is None else parse_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False

    logging.captureWarnings(True)
    warnings_logger = logging.getLogger("py.warnings")
    warnings_logger.handlers = list(handlers)
    warnings_logger.propagate = False

    logger.info("Logging initialized at %s.", logging.getLevelName(resolved))
    return logger
