"""
Community Analytics - main orchestrator for report analytics.

Coordinates the independent analyzers:
- Time patterns (busiest hours)
- Emerging hotspots
- Vibe correlations
- Safety scoring and trends
"""

import logging
import time
from datetime import datetime
from typing import Optional

from api.analytics_models import (
    AnalyticsResult,
    AnalyzedTimeframe,
    Report,
    SafetySummary,
)
from config import AnalyticsConfig
from .hotspot_detector import HotspotDetector
from .safety_score import SafetyScoreCalculator
from .time_patterns import TimePatternAnalyzer
from .timeutils import resolve_timezone, utc_now
from .vibe_correlation import VibeCorrelationAnalyzer

logger = logging.getLogger(__name__)


class CommunityAnalytics:
    """Main analytics engine that composes all analyzers."""

    def __init__(self, timezone_name: Optional[str] = AnalyticsConfig.TIMEZONE):
        tz = resolve_timezone(timezone_name)
        self.days_back = AnalyticsConfig.HOTSPOT_DAYS_BACK
        self.time_patterns = TimePatternAnalyzer(tz=tz)
        self.hotspot_detector = HotspotDetector()
        self.correlation_analyzer = VibeCorrelationAnalyzer()
        self.safety_calculator = SafetyScoreCalculator(
            hours_back=AnalyticsConfig.TREND_HOURS_BACK, tz=tz
        )

    def analyze_community(
        self, reports: list[Report], now: Optional[datetime] = None
    ) -> AnalyticsResult:
        """
        Run the complete analytics suite on an already-fetched report list.

        The analyzers share no state, so their order does not matter.
        """
        start_time = time.time()
        now = now or utc_now()

        busiest_hours = self.time_patterns.analyze(reports)
        emerging_hotspots = self.hotspot_detector.detect(reports, self.days_back, now)
        vibe_correlations = self.correlation_analyzer.analyze(reports)

        if reports:
            timestamps = [r.created_at for r in reports]
            timeframe = AnalyzedTimeframe(start=min(timestamps), end=max(timestamps))
        else:
            timeframe = AnalyzedTimeframe(start=now, end=now)

        logger.info(
            "Community analysis: %d reports, %d hotspots, %d correlations in %dms",
            len(reports),
            len(emerging_hotspots),
            len(vibe_correlations),
            int((time.time() - start_time) * 1000),
        )

        return AnalyticsResult(
            busiest_hours=busiest_hours,
            emerging_hotspots=emerging_hotspots,
            vibe_correlations=vibe_correlations,
            total_reports=len(reports),
            analyzed_timeframe=timeframe,
        )

    def safety_summary(
        self,
        reports: list[Report],
        hours_back: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SafetySummary:
        """Safety score, level and hourly trend for a set of reports."""
        return self.safety_calculator.summarize(reports, hours_back, now)


def analyze_community(reports: list[Report]) -> AnalyticsResult:
    """Run time patterns, hotspot detection and vibe correlations at once."""
    return CommunityAnalytics().analyze_community(reports)
