"""
Configuration module.
"""

from .settings import (
    ServiceConfig,
    LoggingConfig,
    AnalyticsConfig,
    ReportSourceConfig,
)

__all__ = [
    "ServiceConfig",
    "LoggingConfig",
    "AnalyticsConfig",
    "ReportSourceConfig",
]
