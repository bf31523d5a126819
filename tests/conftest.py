"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from models.schedules import AssignmentInterval, Schedule, ScheduleMetadata, UnitCounts  # noqa: E402


def utc(text: str) -> datetime:
    """Parse 'YYYY-MM-DDTHH:MM' as a UTC datetime."""
    return datetime.fromisoformat(text).replace(tzinfo=timezone.utc)


def hours_classifier(start: datetime, end: datetime, tz: str) -> UnitCounts:
    """Counts every hour as one weekday unit, so splits are easy to read."""
    return UnitCounts((end - start).total_seconds() / 3600, 0.0)


@pytest.fixture
def schedules():
    """Three UTC schedules S1, S2, S3."""
    return [
        ScheduleMetadata(id="S1", display_name="Platform", external_url="https://pd/S1", timezone="UTC"),
        ScheduleMetadata(id="S2", display_name="Payments", external_url="https://pd/S2", timezone="UTC"),
        ScheduleMetadata(id="S3", display_name="Search", external_url="https://pd/S3", timezone="UTC"),
    ]


@pytest.fixture
def make_interval():
    """Factory for assignment intervals with UTC 'YYYY-MM-DDTHH:MM' bounds."""

    def _make(schedule_id: str, start: str, end: str, person_id: str = "U1", name: str | None = None):
        return AssignmentInterval(
            person_id=person_id,
            person_display_name=name or f"User {person_id}",
            schedule_id=schedule_id,
            start=utc(start),
            end=utc(end),
        )

    return _make


@pytest.fixture
def raw_schedule():
    """PagerDuty schedule payload with one rendered entry per user."""

    def _raw(schedule_id: str = "S1", entries: list[dict] | None = None, time_zone: str = "UTC"):
        if entries is None:
            entries = [
                {
                    "start": "2026-01-03T00:00:00Z",
                    "end": "2026-01-04T00:00:00Z",
                    "user": {"id": "U1", "summary": "User 1"},
                }
            ]
        return {
            "id": schedule_id,
            "name": f"Schedule {schedule_id}",
            "html_url": f"https://example.pagerduty.com/schedules/{schedule_id}",
            "time_zone": time_zone,
            "final_schedule": {"rendered_schedule_entries": entries},
        }

    return _raw


class FakeScheduleSource:
    """In-memory stand-in for PagerDutyScheduleSource."""

    def __init__(self, schedules=None, failures=None, listing=None):
        self.schedules = schedules or []
        self.planned_failures = failures or {}
        self.listing = listing or []
        self.failures: dict[str, str] = {}
        self.calls = []

    async def get_schedules(self, schedule_ids, since, until):
        self.calls.append((list(schedule_ids), since, until))
        self.failures = {sid: reason for sid, reason in self.planned_failures.items() if sid in schedule_ids}
        return [s for s in self.schedules if s.metadata.id in schedule_ids]

    async def list_schedules(self, query=None, limit=100):
        return self.listing


@pytest.fixture
def overlapping_schedules(schedules, make_interval):
    """S1 and S2 both cover U1 for Saturday 2026-01-03; U2 is only in S2."""
    return [
        Schedule(
            metadata=schedules[0],
            assignments=[make_interval("S1", "2026-01-03T00:00", "2026-01-04T00:00", name="User 1")],
        ),
        Schedule(
            metadata=schedules[1],
            assignments=[
                make_interval("S2", "2026-01-03T00:00", "2026-01-04T00:00", name="User 1"),
                make_interval("S2", "2026-01-05T00:00", "2026-01-06T00:00", person_id="U2", name="User 2"),
            ],
        ),
    ]
