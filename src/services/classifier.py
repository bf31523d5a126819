"""
Compensable unit classification.

A classifier turns an on-call interval into weekday and weekend
day-equivalents in a given timezone. The attribution engine treats it as an
opaque, pure function; swap in a stricter classifier (out-of-hours windows,
minimum durations) without touching the engine.
"""

from datetime import datetime, time, timedelta, timezone as dt_timezone
from typing import Callable
from zoneinfo import ZoneInfo

from core.config import DEFAULT_TIMEZONE, WEEKEND_DAYS
from models.schedules import UnitCounts

SECONDS_PER_DAY = 24 * 60 * 60

Classifier = Callable[[datetime, datetime, str], UnitCounts]


def classify_day_equivalents(start: datetime, end: datetime, timezone: str) -> UnitCounts:
    """
    Count day-equivalents covered by [start, end) in the local calendar of timezone.

    The interval is cut at local midnights. Each piece contributes its elapsed
    hours / 24 to the weekend bucket (Fri-Sun) or the weekday bucket (Mon-Thu).
    Elapsed time is measured in UTC so DST days are 23 or 25 hours long.

    Returns:
        UnitCounts(weekday_units, weekend_units); both 0.0 for empty intervals
    """
    if end <= start:
        return UnitCounts(0.0, 0.0)

    tz = ZoneInfo(timezone or DEFAULT_TIMEZONE)
    weekday_seconds = 0.0
    weekend_seconds = 0.0

    cursor = start.astimezone(tz)
    local_end = end.astimezone(tz)
    while cursor < local_end:
        next_midnight = datetime.combine(cursor.date() + timedelta(days=1), time.min, tzinfo=tz)
        piece_end = min(next_midnight, local_end)

        # Same-tzinfo subtraction ignores offsets, so compare in UTC
        elapsed = (
            piece_end.astimezone(dt_timezone.utc) - cursor.astimezone(dt_timezone.utc)
        ).total_seconds()

        if cursor.weekday() in WEEKEND_DAYS:
            weekend_seconds += elapsed
        else:
            weekday_seconds += elapsed
        cursor = piece_end

    return UnitCounts(weekday_seconds / SECONDS_PER_DAY, weekend_seconds / SECONDS_PER_DAY)
