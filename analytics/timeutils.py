"""
Time and rounding helpers shared by the analyzers.
"""

import math
from datetime import datetime, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity (-2.5 -> -2)."""
    return math.floor(value + 0.5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def resolve_timezone(name: Optional[str]) -> Optional[tzinfo]:
    """Map an IANA zone name to a tzinfo. None means local time."""
    if not name:
        return None
    return ZoneInfo(name)


def to_zone(dt: datetime, tz: Optional[tzinfo] = None) -> datetime:
    """Convert an aware datetime to ``tz``, or to the machine's local zone."""
    return dt.astimezone(tz)


def day_of_week(dt: datetime) -> int:
    """Day index with 0 = Sunday ... 6 = Saturday."""
    return (dt.weekday() + 1) % 7


def hour_label(dt: datetime) -> str:
    """12-hour clock label such as "12 AM" or "3 PM"."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour} {suffix}"
