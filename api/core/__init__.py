"""Core utilities for the certificate share service.

This module exports commonly used utilities for easy importing:
    from core import get_logger
"""

from core.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
