"""Health check endpoint."""

import sqlite3
from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from api.models.responses import HealthResponse
from core.config import API_VERSION, DB_PATH, PAGERDUTY_API_TOKEN

router = APIRouter()


def request_log_ready() -> bool:
    """True if the database exists and has the request log table."""
    if not DB_PATH.exists():
        return False
    conn = sqlite3.connect(DB_PATH)
    try:
        conn.execute("SELECT 1 FROM api_requests LIMIT 1")
    except sqlite3.Error:
        return False
    finally:
        conn.close()
    return True


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Report whether requests can be served and logged.

    503 when the request log is unusable. A missing server-side PagerDuty
    token is reported but is not unhealthy, since callers may send their own.
    """
    health = HealthResponse(
        status="healthy",
        version=API_VERSION,
        database_available=request_log_ready(),
        pagerduty_token_configured=bool(PAGERDUTY_API_TOKEN),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
    if health.database_available:
        return health

    health.status = "unhealthy"
    health.error = "Request log database not initialised; run scripts/init_db.py"
    return JSONResponse(status_code=503, content=health.model_dump())
