"""
Community analytics engine for vibe reports.

Pure, stateless computations over an in-memory list of reports:
- Time patterns (busiest hours of the week)
- Emerging hotspots (grid cells with growing activity)
- Vibe correlations (categories that co-occur spatially)
- Safety score, hourly safety trend, level and trend direction
- Location clustering helpers
"""

from .clustering import (
    analyze_cluster_vibes,
    calculate_distance,
    cluster_reports,
    format_distance,
    reports_within_radius,
)
from .engine import CommunityAnalytics, analyze_community
from .hotspot_detector import HotspotDetector, detect_emerging_hotspots
from .safety_score import (
    SafetyScoreCalculator,
    calculate_safety_score,
    calculate_safety_trends,
    get_safety_level,
    get_safety_trend,
)
from .time_patterns import TimePatternAnalyzer, analyze_time_patterns
from .vibe_correlation import VibeCorrelationAnalyzer, calculate_vibe_correlations

__all__ = [
    "CommunityAnalytics",
    "HotspotDetector",
    "SafetyScoreCalculator",
    "TimePatternAnalyzer",
    "VibeCorrelationAnalyzer",
    "analyze_cluster_vibes",
    "analyze_community",
    "analyze_time_patterns",
    "calculate_distance",
    "calculate_safety_score",
    "calculate_safety_trends",
    "calculate_vibe_correlations",
    "cluster_reports",
    "detect_emerging_hotspots",
    "format_distance",
    "get_safety_level",
    "get_safety_trend",
    "reports_within_radius",
]
