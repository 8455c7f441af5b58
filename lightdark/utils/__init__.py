"""
Utility modules for the Light-Dark planning package.
"""

from .logging_utils import setup_logger, get_logger, set_level

__all__ = [
    "setup_logger",
    "get_logger",
    "set_level",
]
