from fastapi import APIRouter, Depends, Header, HTTPException
from sqlalchemy.orm import Session
from app.core.clock import local_now
from app.core.config import settings
from app.core.database import get_db
from app.services.deadline_sweep import run_deadline_sweep
from typing import Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cron", tags=["Scheduled Jobs"])


def verify_cron_secret(authorization: Optional[str] = Header(None)):
    """Scheduler calls must carry `Bearer <CRON_SECRET>`"""
    secret = settings.cron_secret.strip()
    if not secret or (authorization or "").strip() != f"Bearer {secret}":
        logger.warning("Cron auth failed for deadline sweep")
        raise HTTPException(status_code=403, detail="Forbidden")


@router.post("/deadline-sweep", dependencies=[Depends(verify_cron_secret)])
async def deadline_sweep(db: Session = Depends(get_db)) -> Dict[str, Any]:
    """
    Daily deadline sweep, triggered by an external scheduler at 08:00
    America/Winnipeg. Safe to call more than once a day.
    """
    result = run_deadline_sweep(db, local_now())
    return {"status": "ok", "result": result.as_dict()}
