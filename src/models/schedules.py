"""
Data models for schedules, assignments and compensation reports.

Metadata and assignment intervals are frozen once loaded. Accruals are the
only mutable objects and never leave a single attribution pass.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import NamedTuple

from core.config import DEFAULT_WEEKDAY_RATE, DEFAULT_WEEKEND_RATE


def round_half_up(value: float, places: int = 2) -> float:
    """Round half away from zero on the decimal representation of value."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class ScheduleMetadata:
    """Schedule identity as reported by PagerDuty."""

    id: str
    display_name: str
    external_url: str = ""
    timezone: str = ""


@dataclass(frozen=True)
class AssignmentInterval:
    """One person on call for one schedule over [start, end)."""

    person_id: str
    person_display_name: str
    schedule_id: str
    start: datetime
    end: datetime


@dataclass
class Schedule:
    """A fetched schedule with its rendered on-call assignments."""

    metadata: ScheduleMetadata
    assignments: list[AssignmentInterval] = field(default_factory=list)


@dataclass(frozen=True)
class PaymentRates:
    """Compensation per weekday-equivalent and weekend-equivalent unit."""

    weekday_rate: float = DEFAULT_WEEKDAY_RATE
    weekend_rate: float = DEFAULT_WEEKEND_RATE


class UnitCounts(NamedTuple):
    """Compensable day-equivalents for an interval."""

    weekday_units: float
    weekend_units: float


@dataclass
class PersonScheduleAccrual:
    """Running unit totals for one (person, schedule) pair."""

    person_id: str
    schedule_id: str
    person_display_name: str
    weekday_units: float = 0.0
    weekend_units: float = 0.0

    @property
    def has_units(self) -> bool:
        return self.weekday_units > 0 or self.weekend_units > 0


@dataclass(frozen=True)
class EmployeeCompensationLine:
    """Final, rounded compensation for one person in one schedule."""

    person_id: str
    person_display_name: str
    total_compensation: float
    weekday_units: float
    weekend_units: float
    is_overlapping: bool


@dataclass
class ScheduleCompensationReport:
    """Compensation lines for every person with time in a schedule."""

    metadata: ScheduleMetadata
    employees: list[EmployeeCompensationLine] = field(default_factory=list)

    @property
    def total_compensation(self) -> float:
        return round_half_up(sum(e.total_compensation for e in self.employees))
