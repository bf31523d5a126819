"""Pydantic request models for API endpoints."""

from pydantic import BaseModel, ConfigDict, Field


class RatesPayload(BaseModel):
    """Caller-supplied payment rates."""

    model_config = ConfigDict(populate_by_name=True)

    weekday_rate: float = Field(alias="weekdayRate")
    weekend_rate: float = Field(alias="weekendRate")


class MultiScheduleRequest(BaseModel):
    """Body of the multi-schedule report endpoints."""

    model_config = ConfigDict(populate_by_name=True)

    # Emptiness is checked in the route for a descriptive 400
    schedule_ids: list[str] | None = Field(default=None, alias="scheduleIds")
    start_date: str = Field(alias="startDate")  # ISO 8601
    end_date: str = Field(alias="endDate")  # ISO 8601
    rates: RatesPayload | None = None
