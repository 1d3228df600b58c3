from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from app.core.clock import local_now
from app.core.database import get_db
from app.models.compliance import ComplianceStatus
from app.models.user import User
from app.schemas.compliance import (
    ChecklistInitializeResponse,
    ChecklistResponse,
    ComplianceItemResponse,
    ComplianceItemUpdate,
    ComplianceRuleResponse,
)
from app.services.checklist_service import (
    ChecklistService,
    ChecklistAlreadyInitialized,
    NoActiveRules,
)
from app.services.jwt_service import get_current_user
from app.services.rule_catalog import get_active_rules
from typing import Dict, Any, List

router = APIRouter(prefix="/api/compliance", tags=["Compliance"])


@router.get("/checklist", response_model=ChecklistResponse)
async def get_checklist(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Get the user's full compliance checklist with progress stats"""
    service = ChecklistService(db)
    items = service.get_checklist(current_user.id)

    return {"checklist": items, "stats": service.calculate_stats(items)}


@router.patch("/checklist/{item_id}")
async def update_checklist_item(
    item_id: int,
    update: ComplianceItemUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Update a compliance item status (completed_at is set only for COMPLETED)"""
    item = ChecklistService(db).update_item(
        user_id=current_user.id,
        item_id=item_id,
        status=ComplianceStatus(update.status),
        now=local_now(),
        notes=update.notes,
        document_id=update.document_id,
    )
    if not item:
        raise HTTPException(status_code=404, detail="Compliance item not found")

    return {"item": ComplianceItemResponse.model_validate(item)}


@router.post(
    "/initialize",
    status_code=status.HTTP_201_CREATED,
    response_model=ChecklistInitializeResponse,
)
async def initialize_checklist(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    """Create the user's checklist from the active rule catalog (once per user)"""
    try:
        count = ChecklistService(db).initialize(current_user.id, local_now())
    except ChecklistAlreadyInitialized as e:
        raise HTTPException(status_code=409, detail=str(e))
    except NoActiveRules as e:
        raise HTTPException(status_code=404, detail=str(e))

    return {"message": f"Checklist initialized with {count} items", "count": count}


@router.get("/rules")
async def get_rules(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, List[ComplianceRuleResponse]]:
    """All active compliance rules, most urgent first"""
    rules = get_active_rules(db)
    return {"rules": [ComplianceRuleResponse.model_validate(r) for r in rules]}
