"""Per-request audit log kept in the SQLite database."""

import sqlite3
import uuid
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from core.config import DB_PATH


@dataclass
class RequestLog:
    """One report request: what was asked for, what came back, what was dropped."""

    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    endpoint: str = ""
    method: str = ""
    client_ip: str | None = None
    schedules_requested: int | None = None
    schedules_reported: int | None = None
    period_start: str | None = None
    period_end: str | None = None
    status_code: int = 0
    error_code: str | None = None
    error_message: str | None = None
    processing_time_ms: int = 0
    employees_reported: int | None = None
    total_compensation: float | None = None
    details: list[tuple[str, str]] = field(default_factory=list)  # (detail_type, message)

    def add_detail(self, detail_type: str, message: str):
        self.details.append((detail_type, message))


def log_request(log: RequestLog, db_path: Path | None = None) -> None:
    """Write the request row and its detail rows in one transaction."""
    row = asdict(log)
    details = row.pop("details")
    columns = ", ".join(row)
    placeholders = ", ".join("?" for _ in row)

    conn = sqlite3.connect(db_path or DB_PATH)
    try:
        with conn:
            conn.execute(
                f"INSERT INTO api_requests ({columns}) VALUES ({placeholders})",
                tuple(row.values()),
            )
            conn.executemany(
                "INSERT INTO api_request_details (request_id, detail_type, message) VALUES (?, ?, ?)",
                [(log.request_id, detail_type, message) for detail_type, message in details],
            )
    finally:
        conn.close()
