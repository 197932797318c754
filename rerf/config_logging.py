"""Logging configuration for the rerf package."""

from __future__ import annotations

import logging

LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Module loggers are children of this one and inherit its handler and level
PACKAGE_LOGGER: str = "rerf"


def _package_logger() -> logging.Logger:
    logger = logging.getLogger(PACKAGE_LOGGER)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get a configured logger instance.

    Args:
        name: Logger name (typically __name__).

    Returns:
        Configured logger instance.
    """
    _package_logger()
    return logging.getLogger(name)


def setup_logging(level: int = logging.INFO) -> None:
    """Set the logging level of the whole package for command-line entry points.

    No handler is added to the root logger, so every record is written once.

    Args:
        level: Logging level for the package logger.
    """
    _package_logger().setLevel(level)
