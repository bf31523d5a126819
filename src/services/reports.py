"""
Excel rendering of multi-schedule compensation reports.
"""

import re
from datetime import datetime
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from core.config import CURRENCY_SYMBOL, SCHEDULE_SHEET_HEADERS, SUMMARY_SHEET_HEADERS
from models.schedules import ScheduleCompensationReport

# Excel sheet name limit
MAX_SHEET_NAME_LENGTH = 31
INVALID_SHEET_CHARS = re.compile(r"[\[\]:*?/\\]")

CURRENCY_FORMAT = f'"{CURRENCY_SYMBOL}"#,##0.00'
UNITS_FORMAT = "0.00"


def format_period(since: datetime, until: datetime) -> str:
    """Format a reporting window as 'YYYY-MM-DD to YYYY-MM-DD'."""
    return f"{since.date().isoformat()} to {until.date().isoformat()}"


def make_sheet_name(name: str, used: set[str]) -> str:
    """
    Build a valid, unique worksheet title from a schedule name.

    Strips characters Excel rejects and truncates to 31 characters,
    appending ' (2)', ' (3)', ... on collisions.
    """
    base = INVALID_SHEET_CHARS.sub("", name).strip() or "Schedule"
    candidate = base[:MAX_SHEET_NAME_LENGTH]
    counter = 2
    while candidate.lower() in used:
        suffix = f" ({counter})"
        candidate = base[: MAX_SHEET_NAME_LENGTH - len(suffix)] + suffix
        counter += 1
    used.add(candidate.lower())
    return candidate


def write_header_row(ws, headers: list[str]):
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = Font(bold=True)


def write_schedule_sheet(ws, report: ScheduleCompensationReport):
    """
    Write one schedule's employees with a SUM total row.

    Columns: Employee, Weekday Units, Weekend Units, Total Compensation, Overlapping
    """
    write_header_row(ws, SCHEDULE_SHEET_HEADERS)

    for row_idx, employee in enumerate(report.employees, start=2):
        ws.cell(row=row_idx, column=1, value=employee.person_display_name)
        ws.cell(row=row_idx, column=2, value=employee.weekday_units).number_format = UNITS_FORMAT
        ws.cell(row=row_idx, column=3, value=employee.weekend_units).number_format = UNITS_FORMAT
        ws.cell(
            row=row_idx, column=4, value=employee.total_compensation
        ).number_format = CURRENCY_FORMAT
        ws.cell(row=row_idx, column=5, value="Yes" if employee.is_overlapping else "")

    total_row = len(report.employees) + 2
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    for col_idx in (2, 3, 4):
        col_letter = get_column_letter(col_idx)
        total = f"=SUM({col_letter}2:{col_letter}{total_row - 1})" if report.employees else 0
        cell = ws.cell(row=total_row, column=col_idx, value=total)
        cell.font = Font(bold=True)
        cell.number_format = CURRENCY_FORMAT if col_idx == 4 else UNITS_FORMAT

    ws.column_dimensions["A"].width = 32
    for col_letter in ("B", "C", "D", "E"):
        ws.column_dimensions[col_letter].width = 18


def write_summary_sheet(ws, reports: list[ScheduleCompensationReport], period_label: str):
    """
    Write the summary sheet: one row per schedule plus a grand total.

    Row 1 holds the period; the table starts on row 3.
    """
    ws.cell(row=1, column=1, value=f"Period: {period_label}").font = Font(bold=True)

    header_row = 3
    for col_idx, header in enumerate(SUMMARY_SHEET_HEADERS, start=1):
        cell = ws.cell(row=header_row, column=col_idx, value=header)
        cell.font = Font(bold=True)

    for row_idx, report in enumerate(reports, start=header_row + 1):
        ws.cell(row=row_idx, column=1, value=report.metadata.display_name)
        ws.cell(row=row_idx, column=2, value=report.metadata.timezone)
        ws.cell(row=row_idx, column=3, value=len(report.employees))
        ws.cell(
            row=row_idx, column=4, value=report.total_compensation
        ).number_format = CURRENCY_FORMAT

    total_row = header_row + len(reports) + 1
    ws.cell(row=total_row, column=1, value="Total").font = Font(bold=True)
    cell = ws.cell(
        row=total_row, column=4, value=f"=SUM(D{header_row + 1}:D{total_row - 1})"
    )
    cell.font = Font(bold=True)
    cell.number_format = CURRENCY_FORMAT

    ws.column_dimensions["A"].width = 32
    ws.column_dimensions["B"].width = 22
    ws.column_dimensions["C"].width = 12
    ws.column_dimensions["D"].width = 20


def create_compensation_workbook(
    reports: list[ScheduleCompensationReport], since: datetime, until: datetime
) -> Workbook:
    """
    Create a workbook with a Summary sheet and one sheet per schedule.
    """
    wb = Workbook()

    ws_summary = wb.active
    ws_summary.title = "Summary"
    write_summary_sheet(ws_summary, reports, format_period(since, until))

    used_names = {"summary"}
    for report in reports:
        ws = wb.create_sheet(title=make_sheet_name(report.metadata.display_name, used_names))
        write_schedule_sheet(ws, report)

    return wb


def workbook_to_bytes(wb: Workbook) -> bytes:
    """Serialize a workbook to xlsx bytes."""
    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def save_compensation_workbook(
    reports: list[ScheduleCompensationReport], since: datetime, until: datetime, output_path: Path
):
    """Create the compensation workbook and save it to output_path."""
    wb = create_compensation_workbook(reports, since, until)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    wb.save(str(output_path))
    print(f"Saved Excel report to: {output_path}")
