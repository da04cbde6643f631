"""
Distance-based location clustering for the map and hub views.

Unlike the grid bucketing used by the analyzers, clusters here are seeded
by a report and grow to every other report within a fixed radius of that
seed (haversine distance). Only reports with a location name take part.
"""

import logging
import re
from collections import Counter
from math import atan2, cos, radians, sin, sqrt
from typing import Optional

from api.analytics_models import LocationCluster, Report, VibeShare
from config import AnalyticsConfig
from .grid import has_coordinates
from .timeutils import round_half_up

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
TOP_VIBES = 3

_WHITESPACE = re.compile(r"\s+")


def calculate_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in kilometres (haversine)."""
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)

    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * atan2(sqrt(a), sqrt(1 - a))


def format_distance(distance_km: float) -> str:
    """"850m" below one kilometre, "2.3km" above."""
    if distance_km < 1:
        return f"{round_half_up(distance_km * 1000)}m"
    return f"{distance_km:.1f}km"


def reports_within_radius(
    reports: list[Report], latitude: float, longitude: float, radius_km: float
) -> list[Report]:
    """Reports located within ``radius_km`` of a point. Unlocated reports are dropped."""
    return [
        r
        for r in reports
        if has_coordinates(r)
        and calculate_distance(latitude, longitude, r.latitude, r.longitude) <= radius_km
    ]


def analyze_cluster_vibes(reports: list[Report]) -> tuple[VibeShare, list[VibeShare]]:
    """
    Vibe distribution of a group of reports.

    Returns the dominant vibe and up to three runners-up, each with its
    count and rounded percentage.
    """
    if not reports:
        return VibeShare(type="unknown", percentage=0, count=0), []

    counts = Counter(r.vibe_type.value for r in reports)
    total = len(reports)
    shares = [
        VibeShare(type=vibe, count=count, percentage=round_half_up(count / total * 100))
        for vibe, count in counts.most_common()
    ]
    return shares[0], shares[1:1 + TOP_VIBES]


def _has_location_name(report: Report) -> bool:
    return bool(report.location and report.location.strip())


def cluster_reports(
    reports: list[Report],
    user_location: Optional[tuple[float, float]] = None,
    max_distance_km: float = AnalyticsConfig.CLUSTER_MAX_DISTANCE_KM,
) -> list[LocationCluster]:
    """
    Group named reports into location clusters, nearest to the user first.

    Located reports are clustered greedily around seed reports. Unlocated
    reports are grouped by their location text, but only when the user's
    location is known, since it stands in as their center.
    """
    clusters: list[LocationCluster] = []
    processed: set[int] = set()

    located = [r for r in reports if has_coordinates(r)]
    unlocated = [r for r in reports if not has_coordinates(r)]

    for seed in located:
        if seed.id in processed or not _has_location_name(seed):
            continue

        members = [seed]
        processed.add(seed.id)

        for other in located:
            if other.id in processed or not _has_location_name(other):
                continue
            distance = calculate_distance(
                seed.latitude, seed.longitude, other.latitude, other.longitude
            )
            if distance <= max_distance_km:
                members.append(other)
                processed.add(other.id)

        center_lat = sum(r.latitude for r in members) / len(members)
        center_lng = sum(r.longitude for r in members) / len(members)

        distance_from_user = 0.0
        if user_location:
            distance_from_user = calculate_distance(
                user_location[0], user_location[1], center_lat, center_lng
            )

        dominant, top = analyze_cluster_vibes(members)
        clusters.append(
            LocationCluster(
                id=f"cluster_coord_{seed.id}",
                center=(center_lat, center_lng),
                reports=members,
                location_name=seed.location,
                dominant_vibe=dominant,
                top_vibes=top,
                report_count=len(members),
                distance=distance_from_user,
            )
        )

    location_groups: dict[str, list[Report]] = {}
    for report in unlocated:
        if report.id in processed or not _has_location_name(report):
            continue
        location_groups.setdefault(report.location, []).append(report)
        processed.add(report.id)

    if user_location:
        for name, members in location_groups.items():
            dominant, top = analyze_cluster_vibes(members)
            clusters.append(
                LocationCluster(
                    id=f"cluster_location_{_WHITESPACE.sub('_', name)}",
                    center=(user_location[0], user_location[1]),
                    reports=members,
                    location_name=name,
                    dominant_vibe=dominant,
                    top_vibes=top,
                    report_count=len(members),
                    distance=0.0,
                )
            )

    logger.debug(
        "Clustered %d reports into %d clusters (radius %.2fkm)",
        len(reports), len(clusters), max_distance_km,
    )

    return sorted(clusters, key=lambda c: (c.distance, -c.report_count))
