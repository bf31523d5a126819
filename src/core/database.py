"""
SQLite database operations for compensation reports.
"""

import sqlite3
import string
from datetime import date
from pathlib import Path

from core.config import DB_PATH
from models.schedules import ScheduleCompensationReport


def get_connection(db_path: Path | None = None) -> sqlite3.Connection:
    """Get a database connection with foreign keys enforced."""
    conn = sqlite3.connect(db_path or DB_PATH)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


def generate_report_name(report_type: str, as_of_date: date, conn: sqlite3.Connection) -> str:
    """
    Name the next report of this type for the month of as_of_date.

    Runs within one month get suffixes a, b, c, ...:
    compensation_report_2025_11_a, compensation_report_2025_11_b

    Raises:
        ValueError: If the month already has 26 reports
    """
    prefix = f"{report_type}_{as_of_date.strftime('%Y_%m')}_"
    taken = {
        name[len(prefix):]
        for (name,) in conn.execute(
            "SELECT name FROM reports WHERE name LIKE ?", (f"{prefix}%",)
        )
    }

    for suffix in string.ascii_lowercase:
        if suffix not in taken:
            return prefix + suffix
    raise ValueError(f"No report names left for {prefix.rstrip('_')}")


def create_report_record(
    conn: sqlite3.Connection,
    report_type: str,
    report_name: str,
    period_start: str,
    period_end: str,
) -> int:
    """Create report record and return report_id."""
    cursor = conn.execute(
        "INSERT INTO reports (type, name, period_start, period_end) VALUES (?, ?, ?, ?)",
        (report_type, report_name, period_start, period_end),
    )
    conn.commit()
    return cursor.lastrowid


def insert_compensation_lines(
    conn: sqlite3.Connection, report_id: int, reports: list[ScheduleCompensationReport]
):
    """Insert one row per (schedule, employee) linked to report_id."""
    rows = [
        (
            report_id,
            report.metadata.id,
            report.metadata.display_name,
            report.metadata.timezone,
            employee.person_id,
            employee.person_display_name,
            employee.weekday_units,
            employee.weekend_units,
            employee.total_compensation,
            int(employee.is_overlapping),
        )
        for report in reports
        for employee in report.employees
    ]
    conn.executemany(
        """
        INSERT INTO compensation_lines (
            report_id, schedule_id, schedule_name, time_zone, person_id,
            person_name, weekday_units, weekend_units, total_compensation,
            is_overlapping
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )
    conn.commit()
