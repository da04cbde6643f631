"""
Data models for the community analytics API.
Defines the report input schema plus every value object the engine produces.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ============================================================================
# ENUMS
# ============================================================================

class VibeType(str, Enum):
    """Closed set of report categories. Declaration order is significant."""

    SAFE = "safe"
    CALM = "calm"
    LIVELY = "lively"
    FESTIVE = "festive"
    CROWDED = "crowded"
    SUSPICIOUS = "suspicious"
    DANGEROUS = "dangerous"
    NOISY = "noisy"
    QUIET = "quiet"
    # Infrastructure types
    STREETLIGHT = "streetlight"
    SIDEWALK = "sidewalk"
    CONSTRUCTION = "construction"
    POTHOLE = "pothole"
    TRAFFIC = "traffic"
    OTHER = "other"


class SafetyLevelName(str, Enum):
    SAFE = "safe"
    MODERATE = "moderate"
    CAUTION = "caution"
    UNKNOWN = "unknown"


class TrendDirection(str, Enum):
    """Direction of the safety score over the last hours."""

    IMPROVING = "improving"
    DECLINING = "declining"
    STABLE = "stable"
    UNKNOWN = "unknown"


# ============================================================================
# INPUT MODELS
# ============================================================================

class Report(BaseModel):
    """A single community vibe report, as fetched from the reports store."""

    model_config = ConfigDict(frozen=True)

    id: int
    vibe_type: VibeType
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    created_at: datetime
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)

    user_id: Optional[str] = None
    notes: Optional[str] = None
    location: Optional[str] = Field(default=None, description="Descriptive location text")
    emergency: bool = False

    @field_validator("created_at")
    @classmethod
    def _ensure_aware(cls, value: datetime) -> datetime:
        # Naive timestamps are read as local time of the executing machine
        if value.tzinfo is None:
            return value.astimezone()
        return value


class Bounds(BaseModel):
    """Map viewport as (lat, lng) corners."""

    north_east: tuple[float, float]
    south_west: tuple[float, float]


class ReportFilter(BaseModel):
    """Filter accepted by report sources."""

    limit: Optional[int] = Field(default=None, ge=1)
    offset: Optional[int] = Field(default=None, ge=0)
    emergency: Optional[bool] = None
    user_id: Optional[str] = None
    bounds: Optional[Bounds] = None


class ReportsRequest(BaseModel):
    """Request carrying an already-fetched list of reports."""

    reports: list[Report] = Field(..., description="Reports to analyse")


class HotspotRequest(ReportsRequest):
    days_back: int = Field(default=7, ge=0, description="Size of the recent window in days")


class SafetyRequest(ReportsRequest):
    """Request for a safety snapshot plus hourly trend."""

    hours_back: int = Field(default=24, ge=1, le=24 * 30, description="Number of hourly buckets")
    center: Optional[tuple[float, float]] = Field(
        default=None, description="Optional (lat, lng) to restrict reports to a radius"
    )
    radius_km: float = Field(default=1.0, gt=0)


class ClusterRequest(ReportsRequest):
    user_location: Optional[tuple[float, float]] = None
    max_distance_km: float = Field(default=1.0, gt=0)


# ============================================================================
# RESPONSE MODELS - ANALYTICS
# ============================================================================

class TimePattern(BaseModel):
    """Report density for one (day of week, hour) slot."""

    model_config = ConfigDict(frozen=True)

    hour: int = Field(..., ge=0, le=23)
    day_of_week: int = Field(..., ge=0, le=6, description="0 = Sunday")
    report_count: int
    percentage: float
    peak_hours: bool


class Hotspot(BaseModel):
    """Grid cell whose recent activity grew against its own history."""

    model_config = ConfigDict(frozen=True)

    latitude: float
    longitude: float
    activity_change: float = Field(..., description="Percentage change vs. historical baseline")
    current_reports: int
    previous_reports: int
    timeframe: str


class VibeCorrelation(BaseModel):
    """Spatial co-occurrence of two vibe categories."""

    model_config = ConfigDict(frozen=True)

    vibe_a: VibeType
    vibe_b: VibeType
    correlation: float = Field(..., ge=-1, le=1)
    confidence: float = Field(..., ge=0, le=1)
    sample_size: int
    description: str


class AnalyzedTimeframe(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime


class AnalyticsResult(BaseModel):
    """Complete community analytics result."""

    model_config = ConfigDict(frozen=True)

    busiest_hours: list[TimePattern] = Field(default_factory=list)
    emerging_hotspots: list[Hotspot] = Field(default_factory=list)
    vibe_correlations: list[VibeCorrelation] = Field(default_factory=list)
    total_reports: int
    analyzed_timeframe: AnalyzedTimeframe


# ============================================================================
# RESPONSE MODELS - SAFETY
# ============================================================================

class SafetyDataPoint(BaseModel):
    """Safety score of a single one-hour window."""

    model_config = ConfigDict(frozen=True)

    time: datetime
    safety_score: int = Field(..., ge=0, le=100)
    total_reports: int
    positive_reports: int
    negative_reports: int
    hour_label: str


class SafetyLevel(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: SafetyLevelName
    color: str
    description: str


class SafetySummary(BaseModel):
    """Snapshot score, its level, and the hourly trend behind it."""

    score: int
    level: SafetyLevel
    trend: TrendDirection
    data_points: list[SafetyDataPoint]


# ============================================================================
# RESPONSE MODELS - CLUSTERING
# ============================================================================

class VibeShare(BaseModel):
    model_config = ConfigDict(frozen=True)

    type: str
    percentage: int
    count: int


class LocationCluster(BaseModel):
    """Group of nearby reports sharing a location name."""

    model_config = ConfigDict(frozen=True)

    id: str
    center: tuple[float, float]
    reports: list[Report]
    location_name: str
    dominant_vibe: VibeShare
    top_vibes: list[VibeShare]
    report_count: int
    distance: float = Field(..., description="Distance from the user location in km")
