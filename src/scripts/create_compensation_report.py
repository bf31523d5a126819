#!/usr/bin/env python3
"""
Create a monthly on-call compensation report from PagerDuty schedules.

Fetches the given schedules for the month, attributes overlapping on-call
time across them, writes an Excel workbook (summary plus one sheet per
schedule) and records the run in SQLite.

Usage:
    uv run python src/scripts/create_compensation_report.py --schedule PABC123 --schedule PDEF456 --month 2025-11
"""

import argparse
import asyncio
import calendar
import sys
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import CURRENCY_SYMBOL, OUTPUT_DIR, RATE_MAX, RATE_MIN, REPORT_TYPE
from core.database import (
    create_report_record,
    generate_report_name,
    get_connection,
    insert_compensation_lines,
)
from core.pagerduty_client import create_pagerduty_client
from core.validation import is_valid_rate
from models.schedules import PaymentRates
from services.compensation import build_compensation_reports
from services.reports import save_compensation_workbook
from services.schedules import PagerDutyScheduleSource


# =============================================================================
# DATE UTILITIES
# =============================================================================


def get_monthly_date_range(month_str: str | None) -> tuple[date, date]:
    """
    Calculate date range for monthly report.

    Args:
        month_str: Optional month string (YYYY-MM). Uses previous month if None.

    Returns:
        Tuple of (first_of_month, last_of_month)
    """
    if month_str:
        year, month = map(int, month_str.split("-"))
        target_date = date(year, month, 1)
    else:
        # Default to previous month
        today = date.today()
        if today.month == 1:
            target_date = date(today.year - 1, 12, 1)
        else:
            target_date = date(today.year, today.month - 1, 1)

    first_of_month = target_date.replace(day=1)
    _, last_day = calendar.monthrange(target_date.year, target_date.month)
    last_of_month = target_date.replace(day=last_day)

    return first_of_month, last_of_month


def to_window(first_day: date, last_day: date) -> tuple[datetime, datetime]:
    """Turn inclusive dates into a UTC [since, until) window."""
    since = datetime.combine(first_day, time.min, tzinfo=timezone.utc)
    until = datetime.combine(last_day + timedelta(days=1), time.min, tzinfo=timezone.utc)
    return since, until


# =============================================================================
# MAIN
# =============================================================================


async def main(
    schedule_ids: list[str],
    month_str: str | None = None,
    rates: PaymentRates | None = None,
):
    """Main entry point for the compensation report."""
    first_day, last_day = get_monthly_date_range(month_str)
    since, until = to_window(first_day, last_day)
    print(f"Generating compensation report for {first_day} to {last_day}")

    print(f"\nFetching {len(schedule_ids)} schedule(s) from PagerDuty...")
    async with create_pagerduty_client() as client:
        source = PagerDutyScheduleSource(client)
        run = await build_compensation_reports(source, schedule_ids, since, until, rates)

    for schedule_id, reason in run.failures.items():
        print(f"  Skipped {schedule_id}: {reason}")
    for message in run.rejected_assignments:
        print(f"  Rejected: {message}")

    for report in run.reports:
        print(f"\n{report.metadata.display_name} ({report.metadata.timezone or 'UTC'})")
        for employee in report.employees:
            overlap = " [overlap]" if employee.is_overlapping else ""
            print(
                f"  {employee.person_display_name}: {CURRENCY_SYMBOL}{employee.total_compensation:.2f} "
                f"(weekday {employee.weekday_units:.2f}, weekend {employee.weekend_units:.2f}){overlap}"
            )

    conn = get_connection()
    try:
        report_name = generate_report_name(REPORT_TYPE, first_day, conn)
        report_id = create_report_record(
            conn, REPORT_TYPE, report_name, since.isoformat(), until.isoformat()
        )
        insert_compensation_lines(conn, report_id, run.reports)
    finally:
        conn.close()
    print(f"\nCreated report: {report_name} (ID: {report_id})")

    output_path = OUTPUT_DIR / "reports" / "compensation" / f"{report_name}.xlsx"
    save_compensation_workbook(run.reports, since, until, output_path)

    print("\nDone!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate on-call compensation report")
    parser.add_argument(
        "--schedule",
        dest="schedule_ids",
        action="append",
        required=True,
        help="PagerDuty schedule id (repeat for several schedules)",
    )
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to previous month.",
    )
    parser.add_argument("--weekday-rate", type=float, help="Rate per weekday unit")
    parser.add_argument("--weekend-rate", type=float, help="Rate per weekend unit")
    args = parser.parse_args()

    rates = None
    if args.weekday_rate is not None or args.weekend_rate is not None:
        defaults = PaymentRates()
        rates = PaymentRates(
            weekday_rate=args.weekday_rate if args.weekday_rate is not None else defaults.weekday_rate,
            weekend_rate=args.weekend_rate if args.weekend_rate is not None else defaults.weekend_rate,
        )
        for flag, value in (("--weekday-rate", rates.weekday_rate), ("--weekend-rate", rates.weekend_rate)):
            if not is_valid_rate(value):
                parser.error(f"{flag} must be between {RATE_MIN} and {RATE_MAX}, got {value}")

    try:
        asyncio.run(main(args.schedule_ids, args.month, rates))
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)
