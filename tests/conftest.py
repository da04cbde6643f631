"""
Shared test fixtures for the analytics service test suite.
"""

import os
import sys
from datetime import datetime, timedelta, timezone

import pytest

# Ensure the project root is on the path so imports work
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

# Set env vars before any application imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("SUPABASE_URL", "")
os.environ.pop("ANALYTICS_TIMEZONE", None)

# Sunday 2026-10-18 12:00 UTC
NOW = datetime(2026, 10, 18, 12, 0, tzinfo=timezone.utc)


def make_report(
    report_id: int = 1,
    vibe: str = "safe",
    lat: float | None = 40.7128,
    lng: float | None = -74.0060,
    created_at: datetime = NOW,
    **extra,
):
    from api.analytics_models import Report

    return Report(
        id=report_id,
        vibe_type=vibe,
        latitude=lat,
        longitude=lng,
        created_at=created_at,
        **extra,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def report_factory():
    """Build Report objects with sensible defaults and unique ids."""
    counter = {"next": 1}

    def _factory(**kwargs):
        report_id = kwargs.pop("report_id", None) or counter["next"]
        counter["next"] = max(counter["next"], report_id) + 1
        return make_report(report_id=report_id, **kwargs)

    return _factory


@pytest.fixture
def mixed_reports(report_factory):
    """A small realistic mix: two neighbourhoods, one unlocated report, a week of history."""
    reports = []
    for i in range(4):
        reports.append(report_factory(vibe="safe", created_at=NOW - timedelta(hours=i)))
        reports.append(report_factory(vibe="calm", created_at=NOW - timedelta(hours=i, minutes=20)))
    for i in range(3):
        reports.append(report_factory(
            vibe="dangerous", lat=40.8000, lng=-73.9500,
            created_at=NOW - timedelta(days=10 + i),
        ))
    reports.append(report_factory(vibe="noisy", lat=None, lng=None, created_at=NOW - timedelta(days=2)))
    return reports


@pytest.fixture
def app_client():
    """FastAPI test client."""
    from httpx import AsyncClient, ASGITransport
    from main import app

    transport = ASGITransport(app=app)
    return AsyncClient(transport=transport, base_url="http://test")
