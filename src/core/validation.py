"""
Assignment validation and request input parsing.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from core.config import RATE_MAX, RATE_MIN
from models.schedules import AssignmentInterval


def validate_intervals(
    intervals: list[AssignmentInterval],
) -> tuple[list[AssignmentInterval], list[str]]:
    """
    Split assignment intervals into usable ones and rejection messages.

    Checks:
    1. Person id is present
    2. Interval does not end before it starts

    Zero-length intervals are dropped without an error: they carry no time.

    Returns:
        Tuple of (valid intervals, error messages)
    """
    valid = []
    errors = []

    for interval in intervals:
        if not interval.person_id:
            errors.append(
                f"Schedule {interval.schedule_id}: assignment at {interval.start.isoformat()} has no person id"
            )
        elif interval.end < interval.start:
            errors.append(
                f"Schedule {interval.schedule_id}: assignment for {interval.person_display_name or interval.person_id} "
                f"ends before it starts ({interval.start.isoformat()} > {interval.end.isoformat()})"
            )
        elif interval.end > interval.start:
            valid.append(interval)

    return valid, errors


def clip_to_window(
    intervals: list[AssignmentInterval], since: datetime, until: datetime
) -> list[AssignmentInterval]:
    """Trim intervals to [since, until), dropping those entirely outside it."""
    clipped = []
    for interval in intervals:
        start = max(interval.start, since)
        end = min(interval.end, until)
        if start >= end:
            continue
        if start == interval.start and end == interval.end:
            clipped.append(interval)
        else:
            clipped.append(
                AssignmentInterval(
                    person_id=interval.person_id,
                    person_display_name=interval.person_display_name,
                    schedule_id=interval.schedule_id,
                    start=start,
                    end=end,
                )
            )
    return clipped


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO 8601 date or datetime into an aware datetime.

    Dates mean midnight UTC; naive datetimes are taken as UTC.

    Raises:
        ValueError: If value is not ISO 8601
    """
    parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_period(start_date: str, end_date: str) -> tuple[datetime, datetime]:
    """
    Parse and check a reporting window.

    Raises:
        ValueError: If either bound is not ISO 8601 or the window is empty
    """
    try:
        since = parse_instant(start_date)
    except ValueError:
        raise ValueError(f"Invalid startDate '{start_date}': expected ISO 8601") from None
    try:
        until = parse_instant(end_date)
    except ValueError:
        raise ValueError(f"Invalid endDate '{end_date}': expected ISO 8601") from None

    if until <= since:
        raise ValueError(f"endDate ({end_date}) must be after startDate ({start_date})")
    return since, until


def is_valid_rate(value) -> bool:
    """Check a rate is a number within RATE_MIN..RATE_MAX (inclusive)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    if value != value:  # NaN
        return False
    return RATE_MIN <= value <= RATE_MAX


def is_valid_timezone(name: str) -> bool:
    """Check name is an IANA timezone key zoneinfo can load."""
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, TypeError, ValueError):
        return False
    return True
