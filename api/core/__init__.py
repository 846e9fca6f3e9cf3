"""Core utilities for the urshort redirect service.

This module exports commonly used utilities for easy importing:
    from core import get_logger, get_settings
"""

from core.config import Settings, get_settings
from core.logger import configure_logging, get_logger

__all__ = [
    "Settings",
    "configure_logging",
    "get_logger",
    "get_settings",
]
