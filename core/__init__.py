"""
Core module of the service.
Cross-cutting concerns: structured logging and service exceptions.
"""

from .exceptions import ReportSourceError
from .structured_logging import get_logger, setup_logging

__all__ = [
    "ReportSourceError",
    "get_logger",
    "setup_logging",
]
