from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from app.core.clock import local_now
from app.core.database import get_db
from app.models.user import User
from app.schemas.permit import (
    StudyPermitGetResponse,
    StudyPermitResponse,
    StudyPermitUpsert,
    StudyPermitUpsertResponse,
)
from app.services.jwt_service import get_current_user
from app.services.permit_service import PermitService, days_until_expiry
from typing import Dict, Any

router = APIRouter(prefix="/api/permits", tags=["Study Permit"])


@router.post("", response_model=StudyPermitUpsertResponse)
async def upsert_permit(
    data: StudyPermitUpsert,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Create or update the user's study permit"""
    permit, days, status = PermitService(db).upsert(
        user_id=current_user.id,
        expiry_date=data.expiry_date,
        now=local_now(),
        permit_number=data.permit_number,
        issue_date=data.issue_date,
        conditions=data.conditions,
    )

    return {
        "permit": StudyPermitResponse.model_validate(permit),
        "days_until_expiry": days,
        "status": status,
    }


@router.get("", response_model=StudyPermitGetResponse)
async def get_permit(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    permit = PermitService(db).get_permit(current_user.id)
    if not permit:
        return {"permit": None, "message": "No study permit on file"}

    return {
        "permit": StudyPermitResponse.model_validate(permit),
        "days_until_expiry": days_until_expiry(permit.expiry_date, local_now()),
    }
