"""Schedule listing endpoint."""

import logging

import httpx
from fastapi import APIRouter, Depends, HTTPException, Query, status

from api.dependencies import get_schedule_source
from api.models.responses import ErrorCodes, ScheduleListResponse, ScheduleMetadataResponse
from core.config import PAGERDUTY_SCHEDULE_LIST_LIMIT
from services.schedules import PagerDutyScheduleSource, ScheduleFetchError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1")


@router.get("/schedules", response_model=ScheduleListResponse)
async def list_schedules(
    query: str | None = Query(None, description="Filter schedules by name"),
    limit: int = Query(PAGERDUTY_SCHEDULE_LIST_LIMIT, ge=1, le=100),
    source: PagerDutyScheduleSource = Depends(get_schedule_source),
):
    """List the schedules the PagerDuty token can see."""
    try:
        schedules = await source.list_schedules(query, limit)
    except (httpx.HTTPError, ScheduleFetchError, ValueError) as e:
        logger.warning("Schedule listing failed: %s", e)
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Unable to list schedules",
                "code": ErrorCodes.UPSTREAM_UNAVAILABLE,
                "details": [],
            },
        )

    return ScheduleListResponse(
        schedules=[ScheduleMetadataResponse.from_metadata(s) for s in schedules]
    )
