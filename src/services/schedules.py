"""
Schedule fetching from PagerDuty.

Schedules are fetched concurrently, one request per schedule id. A failure
for one schedule is logged and that schedule is left out; the rest of the
batch still comes back.
"""

import asyncio
import logging
from datetime import datetime

import httpx

from core.config import PAGERDUTY_SCHEDULE_LIST_LIMIT
from core.validation import is_valid_timezone, parse_instant
from models.schedules import AssignmentInterval, Schedule, ScheduleMetadata

logger = logging.getLogger(__name__)


class ScheduleFetchError(Exception):
    """A single schedule could not be fetched or parsed."""


def parse_metadata(raw: dict) -> ScheduleMetadata:
    """Build schedule metadata from a PagerDuty schedule object."""
    return ScheduleMetadata(
        id=raw["id"],
        display_name=raw.get("name") or raw.get("summary") or raw["id"],
        external_url=raw.get("html_url") or "",
        timezone=raw.get("time_zone") or "",
    )


def parse_schedule(raw: dict) -> Schedule:
    """
    Parse a PagerDuty schedule with its rendered final schedule.

    Entries without a user id are skipped. Interval sanity (ordering,
    zero length) is checked later by validate_intervals.

    Raises:
        ValueError: If the schedule's time zone is unknown
        TypeError: If an entry or its user is not an object
    """
    metadata = parse_metadata(raw)
    # Attribution classifies segments in this zone
    if metadata.timezone and not is_valid_timezone(metadata.timezone):
        raise ValueError(f"unknown time zone '{metadata.timezone}'")

    final_schedule = raw.get("final_schedule") or {}
    entries = final_schedule.get("rendered_schedule_entries") or []

    assignments = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise TypeError(f"schedule entry is {type(entry).__name__}, expected object")
        user = entry.get("user") or {}
        if not isinstance(user, dict):
            raise TypeError(f"entry user is {type(user).__name__}, expected object")
        if not user.get("id"):
            continue

        assignments.append(
            AssignmentInterval(
                person_id=user["id"],
                person_display_name=user.get("name") or user.get("summary") or user["id"],
                schedule_id=metadata.id,
                start=parse_instant(entry["start"]),
                end=parse_instant(entry["end"]),
            )
        )

    return Schedule(metadata=metadata, assignments=assignments)


def format_instant(value: datetime) -> str:
    """Format a datetime the way PagerDuty query parameters expect."""
    return value.isoformat().replace("+00:00", "Z")


class PagerDutyScheduleSource:
    """Reads schedules through an httpx.AsyncClient configured for PagerDuty."""

    def __init__(self, client: httpx.AsyncClient):
        self.client = client
        # schedule_id -> reason, for the last get_schedules() call
        self.failures: dict[str, str] = {}

    async def get_schedule(
        self, schedule_id: str, since: datetime, until: datetime, time_zone: str | None = None
    ) -> dict:
        """
        Fetch one schedule rendered over [since, until).

        overflow=false makes PagerDuty truncate entries to the window.

        Raises:
            ScheduleFetchError: If the response carries no schedule
            httpx.HTTPError: On transport or HTTP status errors
        """
        params = {
            "since": format_instant(since),
            "until": format_instant(until),
            "overflow": "false",
        }
        if time_zone:
            params["time_zone"] = time_zone

        response = await self.client.get(f"/schedules/{schedule_id}", params=params)
        response.raise_for_status()

        payload = response.json()
        if not payload or not payload.get("schedule"):
            raise ScheduleFetchError(f"Invalid API response for {schedule_id}: missing schedule data")
        return payload["schedule"]

    async def _fetch_parsed(self, schedule_id: str, since: datetime, until: datetime) -> Schedule:
        raw = await self.get_schedule(schedule_id, since, until)
        try:
            return parse_schedule(raw)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise ScheduleFetchError(f"Malformed schedule {schedule_id}: {e}") from e

    async def get_schedules(
        self, schedule_ids: list[str], since: datetime, until: datetime
    ) -> list[Schedule]:
        """
        Fetch several schedules concurrently.

        Returns:
            Schedules that were fetched successfully, in requested order.
            Failures are logged and recorded in self.failures.
        """
        unique_ids = list(dict.fromkeys(schedule_ids))
        self.failures = {}

        results = await asyncio.gather(
            *(self._fetch_parsed(sid, since, until) for sid in unique_ids),
            return_exceptions=True,
        )

        schedules = []
        for schedule_id, result in zip(unique_ids, results):
            if isinstance(result, (httpx.HTTPError, ScheduleFetchError, ValueError)):
                logger.warning("Failed to fetch schedule %s: %s", schedule_id, result)
                self.failures[schedule_id] = str(result) or type(result).__name__
                continue
            if isinstance(result, BaseException):
                raise result
            schedules.append(result)

        return schedules

    async def list_schedules(
        self, query: str | None = None, limit: int = PAGERDUTY_SCHEDULE_LIST_LIMIT
    ) -> list[ScheduleMetadata]:
        """
        List schedules visible to the token, optionally filtered by name.

        Raises:
            ScheduleFetchError: If the response carries no schedules list
            httpx.HTTPError: On transport or HTTP status errors
        """
        params: dict[str, str | int] = {"limit": limit}
        if query:
            params["query"] = query

        response = await self.client.get("/schedules", params=params)
        response.raise_for_status()

        payload = response.json()
        if not payload or "schedules" not in payload:
            raise ScheduleFetchError("Invalid API response: missing schedules data")
        return [parse_metadata(raw) for raw in payload["schedules"]]
