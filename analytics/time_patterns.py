"""
Reporting density over the week.

Builds a 7 x 24 table of (day of week, hour of day) report counts and
flags the busiest slots.
"""

import logging
from collections import Counter
from datetime import tzinfo
from typing import Optional

from api.analytics_models import Report, TimePattern
from config import AnalyticsConfig
from .timeutils import day_of_week, to_zone

logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
HOURS_PER_DAY = 24


class TimePatternAnalyzer:
    """Computes hourly/day-of-week report density."""

    def __init__(
        self,
        peak_ratio: float = AnalyticsConfig.PEAK_HOUR_RATIO,
        tz: Optional[tzinfo] = None,
    ):
        self.peak_ratio = peak_ratio
        # None buckets in the local timezone of the executing machine
        self.tz = tz

    def analyze(self, reports: list[Report]) -> list[TimePattern]:
        """
        Return one TimePattern per (day, hour) slot, busiest first.

        Empty input returns an empty list rather than 168 zeroed slots.
        """
        if not reports:
            return []

        counts: Counter[tuple[int, int]] = Counter()
        for report in reports:
            created = to_zone(report.created_at, self.tz)
            counts[(day_of_week(created), created.hour)] += 1

        total = len(reports)
        max_count = max(counts.values())
        peak_threshold = max_count * self.peak_ratio

        patterns: list[TimePattern] = []
        for day in range(DAYS_PER_WEEK):
            for hour in range(HOURS_PER_DAY):
                count = counts.get((day, hour), 0)
                patterns.append(
                    TimePattern(
                        hour=hour,
                        day_of_week=day,
                        report_count=count,
                        percentage=count / total * 100,
                        peak_hours=count >= peak_threshold,
                    )
                )

        logger.debug(
            "Time patterns computed: %d reports, %d active slots, max %d",
            total, len(counts), max_count,
        )

        # sorted() is stable, so ties keep day-major generation order
        return sorted(patterns, key=lambda p: p.report_count, reverse=True)


def analyze_time_patterns(
    reports: list[Report], tz: Optional[tzinfo] = None
) -> list[TimePattern]:
    """Compute report density for every (day of week, hour) slot."""
    return TimePatternAnalyzer(tz=tz).analyze(reports)
