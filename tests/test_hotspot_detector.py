"""
Tests for emerging hotspot detection.
"""

from datetime import timedelta

import pytest

from conftest import NOW, make_report

DOWNTOWN = (40.7128, -74.0060)
UPTOWN = (40.8000, -73.9500)
BROOKLYN = (40.6500, -73.9500)


def _reports(start_id, count, location, age):
    lat, lng = location
    return [
        make_report(start_id + i, lat=lat, lng=lng, created_at=NOW - age)
        for i in range(count)
    ]


def test_empty_input():
    from analytics import detect_emerging_hotspots

    assert detect_emerging_hotspots([], now=NOW) == []


def test_new_cell_with_ten_reports():
    from analytics import detect_emerging_hotspots

    reports = _reports(1, 10, DOWNTOWN, timedelta(days=3))

    hotspots = detect_emerging_hotspots(reports, now=NOW)

    assert len(hotspots) == 1
    hotspot = hotspots[0]
    assert hotspot.current_reports == 10
    assert hotspot.previous_reports == 0
    assert hotspot.activity_change == 1000
    assert (hotspot.latitude, hotspot.longitude) == DOWNTOWN
    assert hotspot.timeframe == "7 days"


def test_growth_against_history():
    from analytics import detect_emerging_hotspots

    reports = (
        _reports(1, 4, DOWNTOWN, timedelta(days=1))
        + _reports(100, 3, DOWNTOWN, timedelta(days=20))
        # Flat activity, no hotspot
        + _reports(200, 4, UPTOWN, timedelta(days=1))
        + _reports(300, 4, UPTOWN, timedelta(days=20))
        # New but below the minimum of three reports
        + _reports(400, 2, BROOKLYN, timedelta(days=1))
    )

    hotspots = detect_emerging_hotspots(reports, now=NOW)

    assert len(hotspots) == 1
    assert hotspots[0].current_reports == 4
    assert hotspots[0].previous_reports == 3
    assert hotspots[0].activity_change == pytest.approx(100 / 3)


def test_sorted_by_activity_change():
    from analytics import detect_emerging_hotspots

    reports = (
        _reports(1, 3, DOWNTOWN, timedelta(days=1))
        + _reports(100, 6, UPTOWN, timedelta(days=1))
        + _reports(200, 4, BROOKLYN, timedelta(days=1))
        + _reports(300, 2, BROOKLYN, timedelta(days=30))
    )

    hotspots = detect_emerging_hotspots(reports, now=NOW)

    changes = [h.activity_change for h in hotspots]
    assert changes == sorted(changes, reverse=True)
    assert changes[0] == 600
    for hotspot in hotspots:
        assert hotspot.current_reports >= 3
        assert hotspot.activity_change >= 25


def test_days_back_moves_the_cutoff():
    from analytics import detect_emerging_hotspots

    reports = _reports(1, 5, DOWNTOWN, timedelta(days=10))

    assert detect_emerging_hotspots(reports, days_back=7, now=NOW) == []
    hotspots = detect_emerging_hotspots(reports, days_back=14, now=NOW)
    assert hotspots[0].timeframe == "14 days"


def test_reports_without_coordinates_are_ignored():
    from analytics import detect_emerging_hotspots

    reports = [make_report(i, lat=None, lng=None, created_at=NOW) for i in range(10)]
    reports += [make_report(100 + i, lat=0.0, lng=None, created_at=NOW) for i in range(10)]

    assert detect_emerging_hotspots(reports, now=NOW) == []


def test_centroid_center_mode():
    from analytics import HotspotDetector

    reports = [
        make_report(1, lat=40.7120, lng=-74.0060, created_at=NOW),
        make_report(2, lat=40.7130, lng=-74.0060, created_at=NOW),
        make_report(3, lat=40.7140, lng=-74.0060, created_at=NOW),
    ]

    first = HotspotDetector(center_mode="first").detect(reports, now=NOW)[0]
    centroid = HotspotDetector(center_mode="centroid").detect(reports, now=NOW)[0]

    assert first.latitude == 40.7120
    assert centroid.latitude == pytest.approx(40.7130)


def test_unknown_center_mode_rejected():
    from analytics import HotspotDetector

    with pytest.raises(ValueError):
        HotspotDetector(center_mode="median")


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_coordinates_are_skipped(bad):
    from analytics import detect_emerging_hotspots

    reports = _reports(1, 3, DOWNTOWN, timedelta(days=1)) + [
        make_report(10, lat=bad, lng=-74.0060, created_at=NOW - timedelta(days=1)),
        make_report(11, lat=40.7128, lng=bad, created_at=NOW - timedelta(days=1)),
    ]

    hotspots = detect_emerging_hotspots(reports, now=NOW)

    assert len(hotspots) == 1
    assert hotspots[0].current_reports == 3
    assert (hotspots[0].latitude, hotspots[0].longitude) == DOWNTOWN
