"""
Time helpers shared by the shift lifecycle and statistics

All timestamps are timezone-aware UTC.
"""

from datetime import datetime, timezone
from typing import Optional
import math

SECONDS_PER_HOUR = 3600


def utcnow() -> datetime:
    """Current time as an aware UTC datetime"""
    return datetime.now(timezone.utc)


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Normalize to aware UTC; naive values are taken to be UTC already"""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def weekday_name(moment: datetime) -> str:
    """English weekday name, e.g. 'Monday'"""
    return ("Monday", "Tuesday", "Wednesday", "Thursday",
            "Friday", "Saturday", "Sunday")[moment.weekday()]


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero"""
    scaled = math.floor(abs(value) * 100 + 0.5)
    return math.copysign(scaled, value) / 100


def hours_between(start: datetime, end: datetime) -> float:
    """Elapsed hours between two datetimes, rounded to 2 decimals"""
    return round2((as_utc(end) - as_utc(start)).total_seconds() / SECONDS_PER_HOUR)
