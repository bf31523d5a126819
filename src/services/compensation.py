"""
Multi-schedule compensation: fetch, validate, attribute.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from core.config import ATTRIBUTION_TIMEZONE_POLICY
from core.validation import clip_to_window, validate_intervals
from models.schedules import PaymentRates, ScheduleCompensationReport
from services.attribution import TimezonePolicy, attribute, get_timezone_policy
from services.schedules import PagerDutyScheduleSource

logger = logging.getLogger(__name__)


class NoSchedulesAvailableError(Exception):
    """Every requested schedule failed to load."""

    def __init__(self, failures: dict[str, str]):
        self.failures = failures
        super().__init__(f"None of the requested schedules could be fetched: {', '.join(failures)}")


@dataclass
class CompensationRun:
    """Reports plus what was dropped along the way."""

    reports: list[ScheduleCompensationReport]
    failures: dict[str, str] = field(default_factory=dict)  # schedule_id -> reason
    rejected_assignments: list[str] = field(default_factory=list)


async def build_compensation_reports(
    source: PagerDutyScheduleSource,
    schedule_ids: list[str],
    since: datetime,
    until: datetime,
    rates: PaymentRates | None = None,
    timezone_policy: TimezonePolicy | None = None,
) -> CompensationRun:
    """
    Compute per-schedule compensation for [since, until).

    Schedules that fail to load are omitted. Assignments that fail
    validation are dropped with a warning before attribution.

    Raises:
        NoSchedulesAvailableError: If no schedule could be fetched
    """
    schedules = await source.get_schedules(schedule_ids, since, until)
    if not schedules:
        raise NoSchedulesAvailableError(source.failures)

    intervals = [a for schedule in schedules for a in schedule.assignments]
    valid, errors = validate_intervals(intervals)
    for error in errors:
        logger.warning("Rejected assignment: %s", error)

    reports = attribute(
        [s.metadata for s in schedules],
        clip_to_window(valid, since, until),
        rates,
        timezone_policy=timezone_policy or get_timezone_policy(ATTRIBUTION_TIMEZONE_POLICY),
    )

    return CompensationRun(
        reports=reports,
        failures=dict(source.failures),
        rejected_assignments=errors,
    )
