from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from app.core.database import get_db
from app.models.user import User
from app.schemas.notification import NotificationListResponse
from app.services.jwt_service import get_current_user
from app.services.notification_service import NotificationService
from typing import Dict, Any

router = APIRouter(prefix="/api/notifications", tags=["Notifications"])


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    unread: bool = False,
    limit: int = Query(50, ge=1, le=200),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    service = NotificationService(db)
    return {
        "notifications": service.list_for_user(
            current_user.id, unread_only=unread, limit=limit
        ),
        "unread_count": service.unread_count(current_user.id),
    }


@router.patch("/{notification_id}/read")
async def mark_notification_read(
    notification_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> Dict[str, str]:
    if not NotificationService(db).mark_read(current_user.id, notification_id):
        raise HTTPException(status_code=404, detail="Notification not found")

    return {"message": "Marked as read"}


@router.post("/read-all")
async def mark_all_read(
    current_user: User = Depends(get_current_user), db: Session = Depends(get_db)
) -> Dict[str, Any]:
    updated = NotificationService(db).mark_all_read(current_user.id)
    return {"message": "All notifications marked as read", "updated": updated}
