# app/schemas/work_log.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date as date_type, datetime
from typing import List, Optional

from app.services.work_hours import AlertLevel


class WorkLogCreate(BaseModel):
    """Schema for logging a shift"""

    date: date_type = Field(..., description="Day the shift was worked")
    hours_worked: float = Field(
        ..., ge=0.25, le=24, description="Hours worked (0.25 - 24 per day)"
    )
    employer: str = Field(..., min_length=1, max_length=200, description="Employer name")
    notes: Optional[str] = Field(None, max_length=2000)


class WorkLogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    date: date_type
    hours_worked: float
    employer: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None


class WeekSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    week_start: date_type
    week_end: date_type
    total_hours: float
    remaining: float
    is_over_limit: bool
    is_near_limit: bool
    logs: List[WorkLogResponse] = []


class WorkHourAlertResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    level: AlertLevel
    message: str


class WorkLogCreateResponse(BaseModel):
    work_log: WorkLogResponse
    week_summary: WeekSummaryResponse
    alert: Optional[WorkHourAlertResponse] = None


class MonthSummary(BaseModel):
    total_hours: float
    log_count: int
    period: str


class WorkLogDashboardResponse(BaseModel):
    current_week: WeekSummaryResponse
    month: MonthSummary
    cap: float
    remaining_this_week: float


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int


class WorkLogHistoryResponse(BaseModel):
    logs: List[WorkLogResponse]
    pagination: Pagination
