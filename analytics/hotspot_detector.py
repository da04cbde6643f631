"""
Emerging hotspot detection.

Compares how many reports each grid cell received in a recent window
against the same cell's activity before that window.
"""

import logging
from datetime import datetime, timedelta
from typing import Optional

from api.analytics_models import Hotspot, Report
from config import AnalyticsConfig
from .grid import GridCell, bucket_reports
from .timeutils import utc_now

logger = logging.getLogger(__name__)

CENTER_FIRST = "first"
CENTER_CENTROID = "centroid"


class HotspotDetector:
    """Flags grid cells whose recent report volume grew significantly."""

    def __init__(
        self,
        grid_size: float = AnalyticsConfig.HOTSPOT_GRID_SIZE,
        min_reports: int = AnalyticsConfig.HOTSPOT_MIN_REPORTS,
        min_change: float = AnalyticsConfig.HOTSPOT_MIN_CHANGE,
        center_mode: str = AnalyticsConfig.HOTSPOT_CENTER_MODE,
    ):
        if center_mode not in (CENTER_FIRST, CENTER_CENTROID):
            raise ValueError(f"Unknown hotspot center mode: {center_mode!r}")
        self.grid_size = grid_size
        self.min_reports = min_reports
        self.min_change = min_change
        self.center_mode = center_mode

    def detect(
        self,
        reports: list[Report],
        days_back: int = 7,
        now: Optional[datetime] = None,
    ) -> list[Hotspot]:
        """
        Detect cells whose activity in the last ``days_back`` days grew by at
        least ``min_change`` percent over everything older.

        Cells need ``min_reports`` recent reports to qualify. A cell with no
        history uses a baseline of 1, so 10 new reports read as +1000%.
        Reports without coordinates are ignored.
        """
        if not reports:
            return []

        now = now or utc_now()
        cutoff = now - timedelta(days=days_back)

        recent = [r for r in reports if r.created_at >= cutoff]
        historical = [r for r in reports if r.created_at < cutoff]

        recent_cells = bucket_reports(recent, self.grid_size)
        historical_cells = bucket_reports(historical, self.grid_size)

        hotspots: list[Hotspot] = []
        for key, cell in recent_cells.items():
            current_reports = len(cell.reports)
            if current_reports < self.min_reports:
                continue

            previous_cell = historical_cells.get(key)
            previous_reports = len(previous_cell.reports) if previous_cell else 0

            baseline = max(previous_reports, 1)
            activity_change = (current_reports - previous_reports) / baseline * 100

            if activity_change < self.min_change:
                continue

            latitude, longitude = self._center(cell)
            hotspots.append(
                Hotspot(
                    latitude=latitude,
                    longitude=longitude,
                    activity_change=activity_change,
                    current_reports=current_reports,
                    previous_reports=previous_reports,
                    timeframe=f"{days_back} days",
                )
            )

        logger.debug(
            "Hotspot detection: %d recent cells, %d historical cells, %d hotspots",
            len(recent_cells), len(historical_cells), len(hotspots),
        )

        return sorted(hotspots, key=lambda h: h.activity_change, reverse=True)

    def _center(self, cell: GridCell) -> tuple[float, float]:
        if self.center_mode == CENTER_CENTROID:
            return cell.centroid()
        return cell.center


def detect_emerging_hotspots(
    reports: list[Report],
    days_back: int = 7,
    now: Optional[datetime] = None,
) -> list[Hotspot]:
    """Flag grid cells with a significant recent increase in reports."""
    return HotspotDetector().detect(reports, days_back, now)
