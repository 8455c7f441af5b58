"""
Logging utilities for consistent logging across the package.

Every ``lightdark.*`` logger hands its records to the single ``lightdark``
package logger, so one handler serves the whole library and a script can
turn the whole package up or down at once. Loggers outside the package
(scripts, ``__main__``) get a handler of their own.
"""

import logging
import sys
from typing import Optional
from lightdark.config import Config

PACKAGE_LOGGER = "lightdark"


def _level(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def setup_logger(
    name: str = PACKAGE_LOGGER,
    level: Optional[str] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Set up a logger with a stdout handler.

    Args:
        name: Logger name (the package logger by default)
        level: Logging level (defaults to Config.LOG_LEVEL)
        format_string: Custom format string (defaults to Config.LOG_FORMAT)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    level = level or Config.LOG_LEVEL
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(format_string or Config.LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(_level(level))

    return logger


def _in_package(name: str) -> bool:
    return name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + ".")


def get_logger(name: str) -> logging.Logger:
    """Get a logger; package modules share the package logger's handler."""
    if _in_package(name):
        setup_logger(PACKAGE_LOGGER)
        return logging.getLogger(name)

    logger = logging.getLogger(name)
    if not logger.handlers:
        return setup_logger(name)
    return logger


def set_level(level: str, *names: str) -> None:
    """
    Change the level of the package logger and of any other named loggers.

    Used by the command-line scripts to honor ``--log-level``.
    """
    for name in (PACKAGE_LOGGER,) + names:
        setup_logger(name).setLevel(_level(level))
