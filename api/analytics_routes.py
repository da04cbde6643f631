"""
FastAPI routes for community analytics.

Provides endpoints for:
- Full community analysis (posted reports or fetched from the report store)
- Time patterns, emerging hotspots and vibe correlations
- Safety score, level and hourly trend
- Location clustering
"""

import time
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from analytics import CommunityAnalytics, cluster_reports, get_safety_level, reports_within_radius
from api.analytics_models import (
    AnalyticsResult,
    ClusterRequest,
    Hotspot,
    HotspotRequest,
    LocationCluster,
    ReportFilter,
    ReportsRequest,
    SafetyLevel,
    SafetyRequest,
    SafetySummary,
    TimePattern,
    VibeCorrelation,
)
from core.exceptions import ReportSourceError
from core.structured_logging import get_logger, get_trace_id, set_user_id
from services import ReportSource, RestReportSource

logger = get_logger(__name__)

router = APIRouter(prefix="/analytics", tags=["Analytics"])

# Singleton instances
_engine: CommunityAnalytics | None = None
_report_source: ReportSource | None = None


def get_engine() -> CommunityAnalytics:
    """Get or create the analytics engine singleton."""
    global _engine
    if _engine is None:
        _engine = CommunityAnalytics()
    return _engine


def get_report_source() -> ReportSource:
    """Get or create the report source used by the GET endpoints."""
    global _report_source
    if _report_source is None:
        _report_source = RestReportSource()
    return _report_source


def _run_community_analysis(
    engine: CommunityAnalytics, request_reports: list, origin: str
) -> AnalyticsResult:
    start_time = time.time()
    trace_id = get_trace_id()

    try:
        result = engine.analyze_community(request_reports)
    except Exception as e:
        logger.error("Community analysis failed", context={
            "origin": origin,
            "total_reports": len(request_reports),
            "error": str(e),
            "error_type": type(e).__name__,
            "trace_id": trace_id,
        })
        raise HTTPException(status_code=500, detail="Community analysis failed")

    logger.info("Community analysis completed", context={
        "origin": origin,
        "total_reports": result.total_reports,
        "hotspots": len(result.emerging_hotspots),
        "correlations": len(result.vibe_correlations),
        "duration_ms": round((time.time() - start_time) * 1000, 2),
        "trace_id": trace_id,
    })
    return result


@router.post("/community", response_model=AnalyticsResult)
async def analyze_posted_reports(
    request: ReportsRequest,
    engine: CommunityAnalytics = Depends(get_engine),
) -> AnalyticsResult:
    """
    Run the complete analytics suite on the posted reports.

    Returns busiest hours, emerging hotspots, vibe correlations and the
    analysed timeframe. An empty list yields empty results.
    """
    return _run_community_analysis(engine, request.reports, origin="request")


@router.get("/community", response_model=AnalyticsResult)
async def analyze_stored_reports(
    user_id: Optional[str] = Query(default=None, description="Only this user's reports"),
    limit: Optional[int] = Query(default=None, ge=1, le=5000),
    emergency: Optional[bool] = Query(default=None),
    engine: CommunityAnalytics = Depends(get_engine),
    source: ReportSource = Depends(get_report_source),
) -> AnalyticsResult:
    """Fetch reports from the report store and analyse them."""
    set_user_id(user_id)
    report_filter = ReportFilter(user_id=user_id, limit=limit, emergency=emergency)

    try:
        reports = await source.get_reports(report_filter)
    except ReportSourceError as e:
        logger.error("Report fetch failed", context={
            "error": str(e),
            "upstream_status": e.status_code,
            "trace_id": get_trace_id(),
        })
        raise HTTPException(status_code=502, detail="Could not fetch reports")

    return _run_community_analysis(engine, reports, origin="store")


@router.post("/time-patterns", response_model=list[TimePattern])
async def time_patterns(
    request: ReportsRequest,
    engine: CommunityAnalytics = Depends(get_engine),
) -> list[TimePattern]:
    """Report density for every (day of week, hour) slot, busiest first."""
    return engine.time_patterns.analyze(request.reports)


@router.post("/hotspots", response_model=list[Hotspot])
async def emerging_hotspots(
    request: HotspotRequest,
    engine: CommunityAnalytics = Depends(get_engine),
) -> list[Hotspot]:
    """Grid cells whose activity in the last ``days_back`` days grew by 25% or more."""
    return engine.hotspot_detector.detect(request.reports, request.days_back)


@router.post("/correlations", response_model=list[VibeCorrelation])
async def vibe_correlations(
    request: ReportsRequest,
    engine: CommunityAnalytics = Depends(get_engine),
) -> list[VibeCorrelation]:
    """Vibe categories that tend to (or rarely) appear in the same area."""
    return engine.correlation_analyzer.analyze(request.reports)


@router.post("/safety", response_model=SafetySummary)
async def safety_summary(
    request: SafetyRequest,
    engine: CommunityAnalytics = Depends(get_engine),
) -> SafetySummary:
    """
    Safety score, level and hourly trend.

    When ``center`` is given only reports within ``radius_km`` of it count.
    """
    reports = request.reports
    if request.center is not None:
        reports = reports_within_radius(
            reports, request.center[0], request.center[1], request.radius_km
        )
    return engine.safety_summary(reports, request.hours_back)


@router.get("/safety-level/{score}", response_model=SafetyLevel)
async def safety_level(score: float) -> SafetyLevel:
    """Qualitative level and display color for a score."""
    return get_safety_level(score)


@router.post("/clusters", response_model=list[LocationCluster])
async def location_clusters(request: ClusterRequest) -> list[LocationCluster]:
    """Group named reports into location clusters, nearest first."""
    return cluster_reports(request.reports, request.user_location, request.max_distance_km)


@router.get("/health")
async def analytics_health():
    """Health check for analytics service."""
    return {
        "status": "ok",
        "service": "analytics",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
