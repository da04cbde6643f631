"""
Safety scoring.

Turns a set of reports into a 0-100 score (share of positive vibes),
either as one snapshot or as a series of hourly windows, and maps scores
to qualitative levels and trend directions.

Only positive vibes drive the score: a set of purely neutral reports and a
set of purely negative ones both score 0. Negative vibes are counted per
window for display only.
"""

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from api.analytics_models import (
    Report,
    SafetyDataPoint,
    SafetyLevel,
    SafetyLevelName,
    SafetySummary,
    TrendDirection,
    VibeType,
)
from .timeutils import hour_label, round_half_up, to_zone, utc_now

logger = logging.getLogger(__name__)

POSITIVE_SAFETY_VIBES = frozenset({VibeType.SAFE, VibeType.CALM, VibeType.QUIET})
NEGATIVE_SAFETY_VIBES = frozenset({VibeType.DANGEROUS, VibeType.SUSPICIOUS})

NEUTRAL_SCORE = 50

# Last N hourly points considered by the trend, and the dead band around zero
TREND_WINDOW = 3
TREND_THRESHOLD = 5

_LEVELS = {
    SafetyLevelName.SAFE: ("#10b981", "Safe"),
    SafetyLevelName.MODERATE: ("#f59e0b", "Moderate"),
    SafetyLevelName.CAUTION: ("#ef4444", "Caution"),
    SafetyLevelName.UNKNOWN: ("#6b7280", "Unknown"),
}


def _count_positive(reports: list[Report]) -> int:
    return sum(1 for r in reports if r.vibe_type in POSITIVE_SAFETY_VIBES)


def _count_negative(reports: list[Report]) -> int:
    return sum(1 for r in reports if r.vibe_type in NEGATIVE_SAFETY_VIBES)


def calculate_safety_score(reports: list[Report]) -> int:
    """
    Percentage (0-100) of reports with a positive safety vibe.

    Returns the neutral score 50 when there are no reports.
    """
    if not reports:
        return NEUTRAL_SCORE
    return round_half_up(_count_positive(reports) / len(reports) * 100)


def calculate_safety_trends(
    reports: list[Report],
    hours_back: int = 24,
    now: Optional[datetime] = None,
    tz: Optional[tzinfo] = None,
) -> list[SafetyDataPoint]:
    """
    Build ``hours_back`` consecutive one-hour windows, oldest first.

    Window ``i`` (counting back from 0) spans
    ``[now - i hours, now - i hours + 1 hour)``. Every window yields a data
    point; windows without reports get the neutral score.
    """
    now = now or utc_now()
    data_points: list[SafetyDataPoint] = []

    for i in range(hours_back - 1, -1, -1):
        hour_start = now - timedelta(hours=i)
        hour_end = hour_start + timedelta(hours=1)

        hour_reports = [r for r in reports if hour_start <= r.created_at < hour_end]
        total = len(hour_reports)
        positive = _count_positive(hour_reports)

        safety_score = round_half_up(positive / total * 100) if total > 0 else NEUTRAL_SCORE

        data_points.append(
            SafetyDataPoint(
                time=hour_start,
                safety_score=safety_score,
                total_reports=total,
                positive_reports=positive,
                negative_reports=_count_negative(hour_reports),
                hour_label=hour_label(to_zone(hour_start, tz)),
            )
        )

    logger.debug("Safety trend computed over %d hours for %d reports", hours_back, len(reports))
    return data_points


def get_safety_level(score: float) -> SafetyLevel:
    """Map a score to a level: >=70 safe, >=40 moderate, >=0 caution, else unknown."""
    if score >= 70:
        name = SafetyLevelName.SAFE
    elif score >= 40:
        name = SafetyLevelName.MODERATE
    elif score >= 0:
        name = SafetyLevelName.CAUTION
    else:
        # Negative values and NaN
        name = SafetyLevelName.UNKNOWN

    color, description = _LEVELS[name]
    return SafetyLevel(level=name, color=color, description=description)


def get_safety_trend(data_points: list[SafetyDataPoint]) -> TrendDirection:
    """Compare the first and last of the last three hourly scores."""
    if len(data_points) < TREND_WINDOW:
        return TrendDirection.UNKNOWN

    recent = data_points[-TREND_WINDOW:]
    scores = [p.safety_score for p in recent if p.safety_score is not None]
    if len(scores) < 2:
        return TrendDirection.UNKNOWN

    diff = scores[-1] - scores[0]
    if diff > TREND_THRESHOLD:
        return TrendDirection.IMPROVING
    if diff < -TREND_THRESHOLD:
        return TrendDirection.DECLINING
    return TrendDirection.STABLE


class SafetyScoreCalculator:
    """Bundles snapshot score, hourly trend, level and direction."""

    def __init__(self, hours_back: int = 24, tz: Optional[tzinfo] = None):
        self.hours_back = hours_back
        self.tz = tz

    def score(self, reports: list[Report]) -> int:
        return calculate_safety_score(reports)

    def trends(
        self,
        reports: list[Report],
        hours_back: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> list[SafetyDataPoint]:
        return calculate_safety_trends(
            reports,
            self.hours_back if hours_back is None else hours_back,
            now=now,
            tz=self.tz,
        )

    def summarize(
        self,
        reports: list[Report],
        hours_back: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> SafetySummary:
        """Snapshot score and level for ``reports`` plus their hourly trend."""
        score = self.score(reports)
        data_points = self.trends(reports, hours_back, now)
        return SafetySummary(
            score=score,
            level=get_safety_level(score),
            trend=get_safety_trend(data_points),
            data_points=data_points,
        )
