from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from app.core.clock import local_now
from app.core.config import settings
from app.core.database import get_db
from app.models.user import User
from app.schemas.work_log import (
    WeekSummaryResponse,
    WorkHourAlertResponse,
    WorkLogCreate,
    WorkLogCreateResponse,
    WorkLogDashboardResponse,
    WorkLogHistoryResponse,
    WorkLogResponse,
)
from app.services.jwt_service import get_current_user
from app.services.work_hours import WorkHourService
from typing import Dict, Any
from datetime import date

router = APIRouter(prefix="/api/work-logs", tags=["Work Hours"])


@router.post(
    "", status_code=status.HTTP_201_CREATED, response_model=WorkLogCreateResponse
)
async def create_work_log(
    entry: WorkLogCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """
    Log work hours, then check the week total against the weekly cap.
    The alert (if any) is returned for immediate feedback.
    """
    service = WorkHourService(db)
    work_log = service.log_hours(
        user_id=current_user.id,
        day=entry.date,
        hours_worked=entry.hours_worked,
        employer=entry.employer,
        notes=entry.notes,
    )
    summary, alert = service.classify_after_log(current_user.id, work_log.date)

    return {
        "work_log": WorkLogResponse.model_validate(work_log),
        "week_summary": WeekSummaryResponse.model_validate(summary),
        "alert": WorkHourAlertResponse.model_validate(alert) if alert else None,
    }


@router.get("/week/{day}", response_model=WeekSummaryResponse)
async def get_week(
    day: date,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Work hours for the Monday-Sunday week containing `day`"""
    summary = WorkHourService(db).week_total(current_user.id, day)
    return WeekSummaryResponse.model_validate(summary)


@router.get("/history", response_model=WorkLogHistoryResponse)
async def get_history(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Work log history, newest first"""
    return WorkHourService(db).history(current_user.id, page=page, limit=limit)


@router.delete("/{log_id}")
async def delete_work_log(
    log_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, str]:
    if not WorkHourService(db).delete_log(current_user.id, log_id):
        raise HTTPException(status_code=404, detail="Work log not found")

    return {"message": "Work log deleted"}


@router.get("/dashboard", response_model=WorkLogDashboardResponse)
async def get_dashboard(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Current week plus calendar month summary"""
    today = local_now().date()
    service = WorkHourService(db)
    current_week = service.week_total(current_user.id, today)

    return {
        "current_week": WeekSummaryResponse.model_validate(current_week),
        "month": service.month_total(current_user.id, today),
        "cap": settings.work_hour_cap_per_week,
        "remaining_this_week": current_week.remaining,
    }
