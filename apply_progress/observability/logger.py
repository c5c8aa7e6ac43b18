"""
Logger configuration.

Console logging for the CLI and the reference API. Records go to stderr
so the progress frames the CLI prints on stdout stay readable when
piped.

Dependencies: logging (stdlib)
System role: Centralized logging configuration
"""

import logging
import sys
from typing import TextIO

# Libraries that log every request at INFO while polling
NOISY_LOGGERS = ("httpx", "httpcore", "uvicorn.access")


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> None:
    """
    Configure root logging with ISO timestamps.

    Args:
        level: Root log level name (DEBUG, INFO, WARNING, ...)
        stream: Destination stream (defaults to stderr)

    Raises:
        ValueError: If level is not a known logging level name
    """
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S",
        )
    )
    root_logger.setLevel(numeric_level)
    root_logger.addHandler(handler)

    quiet_level = max(numeric_level, logging.WARNING)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(quiet_level)


def get_logger(name: str) -> logging.Logger:
    """Return the module logger for name (usually __name__)."""
    return logging.getLogger(name)
