"""API Pydantic models."""

from .requests import MultiScheduleRequest, RatesPayload
from .responses import (
    EmployeeCompensationResponse,
    ErrorCodes,
    ErrorResponse,
    HealthResponse,
    MultiScheduleReportResponse,
    ScheduleListResponse,
    ScheduleMetadataResponse,
    ScheduleReportResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "MultiScheduleRequest",
    "RatesPayload",
    "MultiScheduleReportResponse",
    "ScheduleReportResponse",
    "ScheduleMetadataResponse",
    "EmployeeCompensationResponse",
    "ScheduleListResponse",
]
