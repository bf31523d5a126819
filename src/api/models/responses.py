"""Pydantic response models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field

from models.schedules import (
    EmployeeCompensationLine,
    ScheduleCompensationReport,
    ScheduleMetadata,
)


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    pagerduty_token_configured: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    UPSTREAM_UNAVAILABLE = "UPSTREAM_UNAVAILABLE"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class ScheduleMetadataResponse(BaseModel):
    """Schedule identity, in PagerDuty field names."""

    id: str
    name: str
    html_url: str
    time_zone: str

    @classmethod
    def from_metadata(cls, metadata: ScheduleMetadata) -> "ScheduleMetadataResponse":
        return cls(
            id=metadata.id,
            name=metadata.display_name,
            html_url=metadata.external_url,
            time_zone=metadata.timezone,
        )


class EmployeeCompensationResponse(BaseModel):
    """One person's share of a schedule's compensation."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    total_compensation: float = Field(alias="totalCompensation")
    weekday_hours: float = Field(alias="weekdayHours")
    weekend_hours: float = Field(alias="weekendHours")
    is_overlapping: bool = Field(alias="isOverlapping")

    @classmethod
    def from_line(cls, line: EmployeeCompensationLine) -> "EmployeeCompensationResponse":
        return cls(
            name=line.person_display_name,
            total_compensation=line.total_compensation,
            weekday_hours=line.weekday_units,
            weekend_hours=line.weekend_units,
            is_overlapping=line.is_overlapping,
        )


class ScheduleReportResponse(BaseModel):
    """Compensation report for one schedule."""

    metadata: ScheduleMetadataResponse
    employees: list[EmployeeCompensationResponse]

    @classmethod
    def from_report(cls, report: ScheduleCompensationReport) -> "ScheduleReportResponse":
        return cls(
            metadata=ScheduleMetadataResponse.from_metadata(report.metadata),
            employees=[EmployeeCompensationResponse.from_line(e) for e in report.employees],
        )


class ReportPeriod(BaseModel):
    start: str
    end: str


class MultiScheduleReportResponse(BaseModel):
    """Multi-schedule report response."""

    reports: list[ScheduleReportResponse]
    period: ReportPeriod


class ScheduleListResponse(BaseModel):
    """Schedules visible to the PagerDuty token."""

    schedules: list[ScheduleMetadataResponse]
