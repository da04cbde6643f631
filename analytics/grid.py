"""
Grid bucketing for reports.

Spatial clustering is approximated by snapping coordinates to a fixed
lat/lng grid instead of using a spatial index. Two points share a cell
iff their rounded grid coordinates match.
"""

import math
from dataclasses import dataclass, field
from typing import Iterable

from api.analytics_models import Report
from .timeutils import round_half_up

GridKey = tuple[int, int]


@dataclass
class GridCell:
    """Reports that fell into one grid cell."""

    center: tuple[float, float]
    reports: list[Report] = field(default_factory=list)

    def centroid(self) -> tuple[float, float]:
        """Mean coordinates of the member reports."""
        count = len(self.reports)
        lat = sum(r.latitude for r in self.reports) / count
        lng = sum(r.longitude for r in self.reports) / count
        return (lat, lng)

    def vibes(self) -> set[str]:
        return {r.vibe_type.value for r in self.reports}


def grid_key(latitude: float, longitude: float, cell_size: float) -> GridKey:
    """Snap a coordinate pair to its grid cell."""
    return (round_half_up(latitude / cell_size), round_half_up(longitude / cell_size))


def has_coordinates(report: Report) -> bool:
    """Both coordinates present and finite. NaN or infinite values count as missing."""
    return (
        report.latitude is not None
        and report.longitude is not None
        and math.isfinite(report.latitude)
        and math.isfinite(report.longitude)
    )


def bucket_reports(reports: Iterable[Report], cell_size: float) -> dict[GridKey, GridCell]:
    """
    Group reports into grid cells.

    Reports without usable coordinates are skipped; they are never attributed to
    a cell (and in particular never to (0, 0)). The cell center is the
    position of the first report bucketed into it. Cells keep insertion
    order.
    """
    cells: dict[GridKey, GridCell] = {}

    for report in reports:
        if not has_coordinates(report):
            continue

        key = grid_key(report.latitude, report.longitude, cell_size)
        cell = cells.get(key)
        if cell is None:
            cell = GridCell(center=(report.latitude, report.longitude))
            cells[key] = cell
        cell.reports.append(report)

    return cells
