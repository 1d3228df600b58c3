# app/schemas/permit.py
from pydantic import BaseModel, Field, ConfigDict
from datetime import date
from typing import List, Optional

from app.models.permit import PermitStatus


class StudyPermitUpsert(BaseModel):
    """Schema for creating or updating a study permit"""

    permit_number: Optional[str] = Field(None, max_length=50)
    issue_date: Optional[date] = None
    expiry_date: date = Field(..., description="Permit expiry date")
    conditions: Optional[List[str]] = None


class StudyPermitResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    permit_number: Optional[str] = None
    issue_date: Optional[date] = None
    expiry_date: date
    status: PermitStatus
    conditions: List[str] = []
    reminder_sent_90: bool
    reminder_sent_60: bool
    reminder_sent_30: bool


class StudyPermitUpsertResponse(BaseModel):
    permit: StudyPermitResponse
    days_until_expiry: int
    status: PermitStatus


class StudyPermitGetResponse(BaseModel):
    permit: Optional[StudyPermitResponse] = None
    days_until_expiry: Optional[int] = None
    message: Optional[str] = None
