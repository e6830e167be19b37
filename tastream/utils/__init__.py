"""
Utility modules.
"""

from .logger import get_logger, setup_logger, TastreamLogger

__all__ = [
    # Logger
    "get_logger",
    "setup_logger",
    "TastreamLogger",
]
