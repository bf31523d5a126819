"""
Multi-schedule overlap attribution.

When one person is on call in several schedules at once, each stretch of
wall-clock time is classified once and its units are split equally between
exactly the schedules active during it. Summed across schedules, a person's
units always equal what a single non-overlapping assignment would earn.

The sweep runs per person, since overlaps never cross people:

    person U1   S1 |=========|
                S2      |=========|
    segments       [ 1/1  ][1/2][ 1/1 ]
"""

from collections import defaultdict
from datetime import datetime
from typing import Callable

from core.config import DEFAULT_TIMEZONE
from core.validation import is_valid_timezone
from models.schedules import (
    AssignmentInterval,
    EmployeeCompensationLine,
    PaymentRates,
    PersonScheduleAccrual,
    ScheduleCompensationReport,
    ScheduleMetadata,
    round_half_up,
)
from services.classifier import Classifier, classify_day_equivalents

TimezonePolicy = Callable[[list[ScheduleMetadata]], str]


class AttributionPreconditionError(RuntimeError):
    """Raised when the engine receives input its callers must never pass."""


# =============================================================================
# TIMEZONE POLICIES
# =============================================================================


def first_active_timezone(active: list[ScheduleMetadata]) -> str:
    """Timezone of the first active schedule, in requested-schedule order."""
    return active[0].timezone or DEFAULT_TIMEZONE


def shared_or_utc_timezone(active: list[ScheduleMetadata]) -> str:
    """The common timezone if every active schedule agrees, otherwise UTC."""
    zones = {s.timezone or DEFAULT_TIMEZONE for s in active}
    if len(zones) == 1:
        return zones.pop()
    return "UTC"


def fixed_timezone(timezone: str) -> TimezonePolicy:
    """
    Policy that classifies every segment in one timezone.

    Raises:
        ValueError: If timezone is not a known IANA key
    """
    if not is_valid_timezone(timezone):
        raise ValueError(f"Unknown time zone '{timezone}'")

    def policy(active: list[ScheduleMetadata]) -> str:
        return timezone

    return policy


TIMEZONE_POLICIES: dict[str, TimezonePolicy] = {
    "first_active": first_active_timezone,
    "shared_or_utc": shared_or_utc_timezone,
    "utc": fixed_timezone("UTC"),
}


def get_timezone_policy(name: str) -> TimezonePolicy:
    """Look up a timezone policy by its configured name."""
    try:
        return TIMEZONE_POLICIES[name]
    except KeyError:
        raise ValueError(
            f"Unknown timezone policy '{name}' (valid: {', '.join(sorted(TIMEZONE_POLICIES))})"
        ) from None


# =============================================================================
# PRECONDITIONS
# =============================================================================


def _check_preconditions(
    schedules: list[ScheduleMetadata],
    intervals: list[AssignmentInterval],
    rates: PaymentRates,
) -> None:
    if not schedules:
        raise AttributionPreconditionError("At least one schedule is required")

    schedule_ids = [s.id for s in schedules]
    if len(set(schedule_ids)) != len(schedule_ids):
        raise AttributionPreconditionError(f"Duplicate schedule ids: {schedule_ids}")

    if rates.weekday_rate <= 0 or rates.weekend_rate <= 0:
        raise AttributionPreconditionError(
            f"Rates must be positive, got weekday={rates.weekday_rate} weekend={rates.weekend_rate}"
        )

    for schedule in schedules:
        if schedule.timezone and not is_valid_timezone(schedule.timezone):
            raise AttributionPreconditionError(
                f"Schedule '{schedule.id}' has unknown time zone '{schedule.timezone}'"
            )

    known = set(schedule_ids)
    for interval in intervals:
        if not interval.person_id:
            raise AttributionPreconditionError(f"Interval without person id: {interval}")
        if interval.schedule_id not in known:
            raise AttributionPreconditionError(
                f"Interval references unknown schedule '{interval.schedule_id}'"
            )
        if interval.start > interval.end:
            raise AttributionPreconditionError(
                f"Interval ends before it starts: {interval.start.isoformat()} > {interval.end.isoformat()}"
            )


# =============================================================================
# SWEEP
# =============================================================================


def group_by_person(intervals: list[AssignmentInterval]) -> dict[str, list[AssignmentInterval]]:
    """
    Group non-empty intervals by person, in order of first appearance.

    Zero-length intervals are dropped here: they carry no time.
    """
    grouped = defaultdict(list)
    for interval in intervals:
        if interval.start < interval.end:
            grouped[interval.person_id].append(interval)
    return grouped


def sweep_segments(
    intervals: list[AssignmentInterval],
) -> list[tuple[datetime, datetime, list[AssignmentInterval]]]:
    """
    Partition one person's intervals into segments with a constant active set.

    Returns (segment_start, segment_end, active_intervals) for every segment
    covered by at least one interval. An interval is active in [t_i, t_i+1)
    when start <= t_i < end.
    """
    starts_at = defaultdict(list)
    ends_at = defaultdict(list)
    for idx, interval in enumerate(intervals):
        starts_at[interval.start].append(idx)
        ends_at[interval.end].append(idx)

    instants = sorted(set(starts_at) | set(ends_at))

    segments = []
    active: dict[int, AssignmentInterval] = {}
    for seg_start, seg_end in zip(instants, instants[1:]):
        for idx in ends_at.get(seg_start, []):
            active.pop(idx, None)
        for idx in starts_at.get(seg_start, []):
            active[idx] = intervals[idx]

        if active:
            segments.append((seg_start, seg_end, list(active.values())))

    return segments


def attribute(
    schedules: list[ScheduleMetadata],
    intervals: list[AssignmentInterval],
    rates: PaymentRates | None = None,
    classifier: Classifier = classify_day_equivalents,
    timezone_policy: TimezonePolicy = first_active_timezone,
) -> list[ScheduleCompensationReport]:
    """
    Attribute each person's on-call time across the schedules covering it.

    Args:
        schedules: Requested schedules; report order follows this list
        intervals: Assignments for those schedules (any person, any order)
        rates: Payment rates; standard rates when None
        classifier: (start, end, timezone) -> UnitCounts
        timezone_policy: Picks the classification timezone for a segment
            from its active schedules

    Returns:
        One ScheduleCompensationReport per schedule

    Raises:
        AttributionPreconditionError: If schedules are empty or duplicated,
            rates are not positive, or an interval is malformed
    """
    rates = rates or PaymentRates()
    _check_preconditions(schedules, intervals, rates)

    position = {s.id: i for i, s in enumerate(schedules)}
    metadata_by_id = {s.id: s for s in schedules}

    # (person_id, schedule_id) -> accrual, in creation order
    accruals: dict[tuple[str, str], PersonScheduleAccrual] = {}

    for person_id, person_intervals in group_by_person(intervals).items():
        for seg_start, seg_end, active in sweep_segments(person_intervals):
            # One share per schedule, even if a schedule repeats the person
            first_by_schedule: dict[str, AssignmentInterval] = {}
            for interval in sorted(active, key=lambda i: position[i.schedule_id]):
                first_by_schedule.setdefault(interval.schedule_id, interval)

            active_schedules = [metadata_by_id[sid] for sid in first_by_schedule]
            units = classifier(seg_start, seg_end, timezone_policy(active_schedules))

            k = len(first_by_schedule)
            weekday_share = units.weekday_units / k
            weekend_share = units.weekend_units / k

            for schedule_id, interval in first_by_schedule.items():
                key = (person_id, schedule_id)
                accrual = accruals.get(key)
                if accrual is None:
                    accrual = PersonScheduleAccrual(
                        person_id=person_id,
                        schedule_id=schedule_id,
                        person_display_name=interval.person_display_name,
                    )
                    accruals[key] = accrual
                accrual.weekday_units += weekday_share
                accrual.weekend_units += weekend_share

    return build_reports(schedules, accruals, rates)


def build_reports(
    schedules: list[ScheduleMetadata],
    accruals: dict[tuple[str, str], PersonScheduleAccrual],
    rates: PaymentRates,
) -> list[ScheduleCompensationReport]:
    """Apply rates to finished accruals and assemble per-schedule reports."""
    schedules_with_units: dict[str, int] = defaultdict(int)
    for accrual in accruals.values():
        if accrual.has_units:
            schedules_with_units[accrual.person_id] += 1

    reports = {s.id: ScheduleCompensationReport(metadata=s) for s in schedules}
    for accrual in accruals.values():
        if not accrual.has_units:
            continue

        compensation = (
            accrual.weekday_units * rates.weekday_rate + accrual.weekend_units * rates.weekend_rate
        )
        reports[accrual.schedule_id].employees.append(
            EmployeeCompensationLine(
                person_id=accrual.person_id,
                person_display_name=accrual.person_display_name,
                total_compensation=round_half_up(compensation),
                weekday_units=round_half_up(accrual.weekday_units),
                weekend_units=round_half_up(accrual.weekend_units),
                is_overlapping=schedules_with_units[accrual.person_id] > 1,
            )
        )

    return [reports[s.id] for s in schedules]
