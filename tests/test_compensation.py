"""Tests for the fetch-validate-attribute pipeline."""

import asyncio

import pytest

from conftest import FakeScheduleSource, utc
from models.schedules import PaymentRates, Schedule
from services.attribution import fixed_timezone
from services.compensation import NoSchedulesAvailableError, build_compensation_reports

SINCE = utc("2026-01-03T00:00")
UNTIL = utc("2026-01-10T00:00")


def build(source, schedule_ids, since=SINCE, until=UNTIL, **kwargs):
    return asyncio.run(build_compensation_reports(source, schedule_ids, since, until, **kwargs))


def test_reports_split_overlap(overlapping_schedules):
    source = FakeScheduleSource(overlapping_schedules)
    run = build(source, ["S1", "S2"], rates=PaymentRates(100, 200))

    s1, s2 = run.reports
    assert [e.person_id for e in s1.employees] == ["U1"]
    assert [e.person_id for e in s2.employees] == ["U1", "U2"]
    assert s1.employees[0].total_compensation == 100.0
    assert s2.employees[0].total_compensation == 100.0
    assert s2.employees[1].is_overlapping is False
    assert run.failures == {}


def test_failed_schedule_is_omitted(overlapping_schedules):
    source = FakeScheduleSource(overlapping_schedules[:1], failures={"S2": "404 Not Found"})
    run = build(source, ["S1", "S2"])

    assert [r.metadata.id for r in run.reports] == ["S1"]
    # Without S2 nothing overlaps
    assert run.reports[0].employees[0].weekend_units == 1.0
    assert run.reports[0].employees[0].is_overlapping is False
    assert run.failures == {"S2": "404 Not Found"}


def test_all_schedules_failing_raises():
    source = FakeScheduleSource(failures={"S1": "timeout", "S2": "timeout"})
    with pytest.raises(NoSchedulesAvailableError) as exc_info:
        build(source, ["S1", "S2"])
    assert set(exc_info.value.failures) == {"S1", "S2"}


def test_inverted_assignment_is_rejected_not_fatal(schedules, make_interval):
    schedule = Schedule(
        metadata=schedules[0],
        assignments=[
            make_interval("S1", "2026-01-05T00:00", "2026-01-06T00:00"),
            make_interval("S1", "2026-01-07T06:00", "2026-01-07T00:00", person_id="U2"),
        ],
    )
    run = build(FakeScheduleSource([schedule]), ["S1"])

    assert [e.person_id for e in run.reports[0].employees] == ["U1"]
    assert len(run.rejected_assignments) == 1


def test_assignments_clipped_to_window(schedules, make_interval):
    schedule = Schedule(
        metadata=schedules[0],
        assignments=[make_interval("S1", "2026-01-04T12:00", "2026-01-06T00:00")],
    )
    run = build(
        FakeScheduleSource([schedule]),
        ["S1"],
        since=utc("2026-01-05T00:00"),
        until=utc("2026-01-06T00:00"),
    )
    line = run.reports[0].employees[0]
    assert line.weekday_units == 1.0
    assert line.weekend_units == 0.0


def test_timezone_policy_is_passed_through(schedules, make_interval):
    # 03:00-05:00 UTC Friday is Thursday evening in New York
    schedule = Schedule(
        metadata=schedules[0],
        assignments=[make_interval("S1", "2026-01-09T03:00", "2026-01-09T05:00")],
    )
    run = build(
        FakeScheduleSource([schedule]),
        ["S1"],
        rates=PaymentRates(48, 48),
        timezone_policy=fixed_timezone("America/New_York"),
    )
    line = run.reports[0].employees[0]
    assert line.weekend_units == 0.0
    assert line.total_compensation == 4.0
