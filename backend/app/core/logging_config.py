"""
Logging configuration for the deep-link service and CLI.
"""

import logging
from typing import Optional

from app.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None, name: str = "app") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Logging level name; defaults to ``Settings.log_level``
        name: Logger to configure

    Returns:
        The configured logger
    """
    if level is None:
        level = get_settings().log_level
    numeric = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(name)
    logger.setLevel(numeric)
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)
    return logger
