"""
Logging configuration for Listing Sheet Builder.

Provides consistent log formatting across all modules.
"""

import logging
import sys
from typing import Dict, Optional, Union

_loggers: Dict[str, logging.Logger] = {}


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
    """
    Get a configured logger for a module.

    Args:
        name: Logger name (e.g., 'listing_sheet.parser')
        level: Logging level; defaults to the configured `log_level`

    Returns:
        Configured logger
    """
    if name in _loggers:
        return _loggers[name]

    if level is None:
        from .config import get_config_value

        level = get_config_value("logging", "level", default="INFO")
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)

        formatter = logging.Formatter(
            "%(asctime)s [%(name)s] %(levelname)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    _loggers[name] = logger
    return logger
