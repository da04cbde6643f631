"""
Tests for safety scoring, trends and levels.
"""

import math
from datetime import timedelta, timezone

import pytest

from conftest import NOW, make_report


def _points(*scores):
    from api.analytics_models import SafetyDataPoint

    return [
        SafetyDataPoint(
            time=NOW - timedelta(hours=len(scores) - i),
            safety_score=score,
            total_reports=1,
            positive_reports=0,
            negative_reports=0,
            hour_label="",
        )
        for i, score in enumerate(scores)
    ]


# ============================================================================
# SNAPSHOT SCORE
# ============================================================================

def test_empty_reports_score_neutral():
    from analytics import calculate_safety_score

    assert calculate_safety_score([]) == 50


def test_one_positive_one_negative():
    from analytics import calculate_safety_score

    reports = [make_report(1, vibe="safe"), make_report(2, vibe="dangerous")]

    assert calculate_safety_score(reports) == 50


def test_rounds_halves_up():
    from analytics import calculate_safety_score

    reports = [make_report(1, vibe="quiet")] + [make_report(i, vibe="noisy") for i in range(2, 9)]

    # 1/8 = 12.5%
    assert calculate_safety_score(reports) == 13


def test_only_positive_vibes_count():
    from analytics import calculate_safety_score

    negative_only = [make_report(i, vibe="dangerous") for i in range(3)]
    neutral_only = [make_report(i, vibe="crowded") for i in range(3)]
    mixed = [make_report(1, vibe="calm"), make_report(2, vibe="safe"), make_report(3, vibe="lively")]

    assert calculate_safety_score(negative_only) == 0
    assert calculate_safety_score(neutral_only) == 0
    assert calculate_safety_score(mixed) == 67


# ============================================================================
# HOURLY TRENDS
# ============================================================================

def test_trends_without_reports():
    from analytics import calculate_safety_trends

    points = calculate_safety_trends([], 24, now=NOW, tz=timezone.utc)

    assert len(points) == 24
    assert all(p.safety_score == 50 and p.total_reports == 0 for p in points)
    assert points[0].time == NOW - timedelta(hours=23)
    assert points[-1].time == NOW
    assert points[-1].hour_label == "12 PM"
    assert points[-13].hour_label == "12 AM"
    assert points[-10].hour_label == "3 AM"


def test_trend_windows_are_half_open():
    from analytics import calculate_safety_trends

    reports = [
        make_report(1, vibe="safe", created_at=NOW - timedelta(minutes=30)),
        make_report(2, vibe="dangerous", created_at=NOW - timedelta(hours=1)),
        make_report(3, vibe="suspicious", created_at=NOW + timedelta(minutes=10)),
        make_report(4, vibe="safe", created_at=NOW - timedelta(days=3)),
    ]

    points = calculate_safety_trends(reports, 6, now=NOW, tz=timezone.utc)

    assert len(points) == 6
    previous, last = points[-2], points[-1]
    assert previous.total_reports == 2
    assert previous.positive_reports == 1
    assert previous.negative_reports == 1
    assert previous.safety_score == 50
    assert last.total_reports == 1
    assert last.safety_score == 0
    assert sum(p.total_reports for p in points) == 3


def test_calculator_summary():
    from analytics import SafetyScoreCalculator

    reports = [
        make_report(1, vibe="dangerous", created_at=NOW - timedelta(hours=2)),
        make_report(2, vibe="safe", created_at=NOW),
    ]

    summary = SafetyScoreCalculator(hours_back=12, tz=timezone.utc).summarize(reports, now=NOW)

    assert summary.score == 50
    assert summary.level.level == "moderate"
    assert len(summary.data_points) == 12
    # 0 -> 50 -> 100 over the last three hours
    assert summary.trend == "improving"


# ============================================================================
# LEVELS
# ============================================================================

@pytest.mark.parametrize(
    "score,level,color",
    [
        (100, "safe", "#10b981"),
        (70, "safe", "#10b981"),
        (69.9, "moderate", "#f59e0b"),
        (40, "moderate", "#f59e0b"),
        (39, "caution", "#ef4444"),
        (0, "caution", "#ef4444"),
        (-1, "unknown", "#6b7280"),
        (math.nan, "unknown", "#6b7280"),
    ],
)
def test_safety_level(score, level, color):
    from analytics import get_safety_level

    result = get_safety_level(score)

    assert result.level == level
    assert result.color == color
    assert result.description == level.capitalize()


# ============================================================================
# TREND DIRECTION
# ============================================================================

@pytest.mark.parametrize(
    "scores,expected",
    [
        ((50, 60, 70), "improving"),
        ((70, 50, 60), "declining"),
        ((50, 52, 55), "stable"),
        ((55, 80, 50), "stable"),
        ((10, 10, 50, 60, 80), "improving"),
        ((50, 60), "unknown"),
        ((), "unknown"),
    ],
)
def test_safety_trend(scores, expected):
    from analytics import get_safety_trend

    assert get_safety_trend(_points(*scores)) == expected


def test_calculator_respects_explicit_zero_hours():
    from analytics import SafetyScoreCalculator, calculate_safety_trends

    calculator = SafetyScoreCalculator(hours_back=12, tz=timezone.utc)
    reports = [make_report(1, vibe="safe", created_at=NOW)]

    assert calculator.trends(reports, hours_back=0, now=NOW) == []
    assert calculator.trends(reports, hours_back=0, now=NOW) == calculate_safety_trends(reports, 0, now=NOW)
    assert len(calculator.trends(reports, now=NOW)) == 12

    summary = calculator.summarize(reports, hours_back=0, now=NOW)
    assert summary.data_points == []
    assert summary.trend == "unknown"
    assert summary.score == 100
