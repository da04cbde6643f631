"""
Centralised service configuration.
Every environment variable and tunable constant is defined here.
"""

import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# ============================================================================
# SERVICE CONFIGURATION
# ============================================================================
class ServiceConfig:
    """General FastAPI service configuration."""

    HOST = os.getenv("SERVICE_HOST", "0.0.0.0")
    PORT = int(os.getenv("SERVICE_PORT", "8000"))

    APP_NAME = "hyperapp-analytics"

    APP_VERSION = "0.1.0"


# ============================================================================
# LOGGING CONFIGURATION
# ============================================================================
class LoggingConfig:
    """Structured logging configuration."""

    ENVIRONMENT = os.getenv("ENVIRONMENT", "production")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "") or None


# ============================================================================
# ANALYTICS CONFIGURATION
# ============================================================================
class AnalyticsConfig:
    """Thresholds and grid sizes for the community analytics engine."""

    # Grid cell sizes in degrees
    HOTSPOT_GRID_SIZE = 0.01        # ~1.1km
    CORRELATION_GRID_SIZE = 0.005   # ~0.55km

    # Hotspot detection
    HOTSPOT_DAYS_BACK = int(os.getenv("HOTSPOT_DAYS_BACK", "7"))
    HOTSPOT_MIN_REPORTS = 3
    HOTSPOT_MIN_CHANGE = 25.0       # percent
    # "first" = coordinates of the first report in the cell, "centroid" = mean
    HOTSPOT_CENTER_MODE = os.getenv("HOTSPOT_CENTER_MODE", "first")

    # Vibe correlations
    CORRELATION_MIN_CLUSTER_SIZE = 2
    CORRELATION_MIN_SAMPLE = 5
    CORRELATION_MIN_ABS = 0.1
    # "legacy" = p(A) = p(B) = p(A and B), "observed" = per-vibe cluster ratio
    CORRELATION_MARGINALS = os.getenv("CORRELATION_MARGINALS", "legacy")

    # Time patterns
    PEAK_HOUR_RATIO = 0.7

    # Safety trends
    TREND_HOURS_BACK = int(os.getenv("TREND_HOURS_BACK", "24"))

    # IANA zone for hour/day bucketing; empty = local time of this machine
    TIMEZONE = os.getenv("ANALYTICS_TIMEZONE", "") or None

    # Location clustering
    CLUSTER_MAX_DISTANCE_KM = float(os.getenv("CLUSTER_MAX_DISTANCE_KM", "1.0"))


# ============================================================================
# REPORTS SOURCE CONFIGURATION
# ============================================================================
class ReportSourceConfig:
    """PostgREST (Supabase) endpoint used to fetch reports."""

    SUPABASE_URL = os.getenv("SUPABASE_URL", "")
    SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "")
    REPORTS_TABLE = os.getenv("REPORTS_TABLE", "reports")
    REQUEST_TIMEOUT = 15.0  # seconds
    DEFAULT_LIMIT = int(os.getenv("REPORTS_DEFAULT_LIMIT", "500"))
