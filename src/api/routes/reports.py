"""Multi-schedule compensation report endpoints."""

import logging
import time
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import Response

from api.dependencies import get_schedule_source
from api.logging import RequestLog, log_request
from api.models.requests import MultiScheduleRequest, RatesPayload
from api.models.responses import (
    ErrorCodes,
    MultiScheduleReportResponse,
    ReportPeriod,
    ScheduleReportResponse,
)
from core.config import RATE_MAX, RATE_MIN
from core.validation import is_valid_rate, parse_period
from models.schedules import PaymentRates, round_half_up
from services.compensation import (
    CompensationRun,
    NoSchedulesAvailableError,
    build_compensation_reports,
)
from services.reports import create_compensation_workbook, workbook_to_bytes
from services.schedules import PagerDutyScheduleSource

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def get_client_ip(request: Request) -> str:
    """Extract client IP from request, handling proxies."""
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def invalid_request(error: str, details: list[str] | None = None) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": error,
            "code": ErrorCodes.INVALID_REQUEST,
            "details": details or [],
        },
    )


def resolve_rates(payload: RatesPayload | None) -> PaymentRates | None:
    """Validate caller rates; None means the standard rates."""
    if payload is None:
        return None

    errors = [
        f"{name} must be between {RATE_MIN} and {RATE_MAX}, got {value}"
        for name, value in (
            ("weekdayRate", payload.weekday_rate),
            ("weekendRate", payload.weekend_rate),
        )
        if not is_valid_rate(value)
    ]
    if errors:
        raise invalid_request("Invalid rates", errors)

    return PaymentRates(weekday_rate=payload.weekday_rate, weekend_rate=payload.weekend_rate)


async def generate_reports(
    request: Request,
    body: MultiScheduleRequest,
    source: PagerDutyScheduleSource,
    endpoint: str,
) -> tuple[CompensationRun, datetime, datetime]:
    """
    Validate the request, compute reports and log the request.

    Raises:
        HTTPException: 400 for invalid input, 502 if every schedule failed
            upstream, 500 for anything unexpected
    """
    start_time = time.time()

    request_log = RequestLog(
        endpoint=endpoint,
        method="POST",
        client_ip=get_client_ip(request),
        schedules_requested=len(body.schedule_ids or []),
        period_start=body.start_date,
        period_end=body.end_date,
    )

    try:
        if not body.schedule_ids or not all(sid.strip() for sid in body.schedule_ids):
            raise invalid_request("Invalid scheduleIds", ["scheduleIds must be a non-empty list of ids"])

        try:
            since, until = parse_period(body.start_date, body.end_date)
        except ValueError as e:
            raise invalid_request("Invalid reporting period", [str(e)])

        rates = resolve_rates(body.rates)

        run = await build_compensation_reports(source, body.schedule_ids, since, until, rates)

        for schedule_id, reason in run.failures.items():
            request_log.add_detail("schedule_failed", f"{schedule_id}: {reason}")
        for message in run.rejected_assignments:
            request_log.add_detail("warning", message)

        request_log.status_code = 200
        request_log.schedules_reported = len(run.reports)
        request_log.employees_reported = sum(len(r.employees) for r in run.reports)
        request_log.total_compensation = round_half_up(sum(r.total_compensation for r in run.reports))
        return run, since, until

    except HTTPException as e:
        request_log.status_code = e.status_code
        if isinstance(e.detail, dict):
            request_log.error_code = e.detail.get("code")
            request_log.error_message = e.detail.get("error")
            for detail in e.detail.get("details", []):
                request_log.add_detail("validation_error", detail)
        else:
            request_log.error_message = str(e.detail)
        raise

    except NoSchedulesAvailableError as e:
        request_log.status_code = 502
        request_log.error_code = ErrorCodes.UPSTREAM_UNAVAILABLE
        request_log.error_message = str(e)
        for schedule_id, reason in e.failures.items():
            request_log.add_detail("schedule_failed", f"{schedule_id}: {reason}")

        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Unable to fetch any of the requested schedules",
                "code": ErrorCodes.UPSTREAM_UNAVAILABLE,
                "details": list(e.failures),
            },
        )

    except Exception as e:
        # Full detail stays in the server log
        logger.exception("Multi-schedule report failed")
        request_log.status_code = 500
        request_log.error_code = ErrorCodes.INTERNAL_ERROR
        request_log.error_message = str(e)

        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail={
                "error": "Internal server error",
                "code": ErrorCodes.INTERNAL_ERROR,
                "details": [],
            },
        )

    finally:
        request_log.processing_time_ms = int((time.time() - start_time) * 1000)
        # Always log the request
        try:
            log_request(request_log)
        except Exception:
            logger.warning("Request log write failed for %s", request_log.request_id)


@router.post("/reports/multi-schedule", response_model=MultiScheduleReportResponse)
async def multi_schedule_report(
    request: Request,
    body: MultiScheduleRequest,
    source: PagerDutyScheduleSource = Depends(get_schedule_source),
):
    """
    Per-schedule compensation for people on call across several schedules.

    Time a person spends on call in k schedules at once is split equally
    between those k schedules.
    """
    run, _, _ = await generate_reports(request, body, source, "/v1/reports/multi-schedule")
    return MultiScheduleReportResponse(
        reports=[ScheduleReportResponse.from_report(r) for r in run.reports],
        period=ReportPeriod(start=body.start_date, end=body.end_date),
    )


@router.post("/reports/multi-schedule/export")
async def export_multi_schedule_report(
    request: Request,
    body: MultiScheduleRequest,
    source: PagerDutyScheduleSource = Depends(get_schedule_source),
):
    """Same report as an Excel workbook: a summary sheet plus one sheet per schedule."""
    run, since, until = await generate_reports(
        request, body, source, "/v1/reports/multi-schedule/export"
    )

    wb = create_compensation_workbook(run.reports, since, until)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    filename = f"oncall_compensation_{since:%Y_%m_%d}_{until:%Y_%m_%d}_{stamp}.xlsx"

    return Response(
        content=workbook_to_bytes(wb),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
