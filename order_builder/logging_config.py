"""
Logging configuration for the order builder.

Usage:
    from order_builder.logging_config import setup_logging
    setup_logging()  # Call once at application startup

Environment variables:
    LOG_LEVEL: Set to DEBUG, INFO, WARNING, ERROR, or CRITICAL (default: INFO)
    LOG_FORMAT: Format string for log records (default: timestamp, logger, level, message)
"""
import logging
import os
import sys

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# HTTP client libraries that log every request at INFO/DEBUG.
# requests talks through urllib3; the FastAPI test client uses httpx.
QUIET_LOGGERS = ("urllib3", "httpx", "httpcore")


def setup_logging(level: str = None) -> None:
    """
    Configure logging for the order builder.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL).
               If not provided, reads from LOG_LEVEL env var, defaults to INFO.
               Unknown levels fall back to INFO.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    if level not in VALID_LEVELS:
        level = "INFO"

    numeric_level = getattr(logging, level)

    logging.basicConfig(
        level=numeric_level,
        format=os.getenv("LOG_FORMAT", DEFAULT_FORMAT),
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )

    logging.getLogger("order_builder").setLevel(numeric_level)

    if level != "DEBUG":
        for name in QUIET_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.debug("Logging configured at %s level", level)
