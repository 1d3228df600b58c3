# app/services/checklist_service.py - Per-user compliance checklist

from datetime import datetime
from typing import Dict, Any, List, Optional
import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, joinedload

from app.models.compliance import ComplianceItem, ComplianceRule, ComplianceStatus
from app.models.permit import StudyPermit
from app.services.due_dates import compute_due_date
from app.services.rule_catalog import get_active_rules

logger = logging.getLogger(__name__)


class ChecklistAlreadyInitialized(Exception):
    """The user already has compliance items"""


class NoActiveRules(Exception):
    """The rule catalog has no active rules"""


class ChecklistService:
    def __init__(self, db: Session):
        self.db = db

    def initialize(self, user_id: int, now: datetime) -> int:
        """
        Create one PENDING item per active rule for the user.

        At most once per user: an existing item (or a concurrent
        initialization winning the unique (user, rule) constraint) raises
        ChecklistAlreadyInitialized. All items are written in one commit.
        """
        existing = (
            self.db.query(ComplianceItem)
            .filter(ComplianceItem.user_id == user_id)
            .count()
        )
        if existing > 0:
            raise ChecklistAlreadyInitialized("Checklist already initialized")

        rules = get_active_rules(self.db)
        if not rules:
            raise NoActiveRules("No compliance rules found. Please contact admin.")

        permit = (
            self.db.query(StudyPermit).filter(StudyPermit.user_id == user_id).first()
        )
        permit_expiry = permit.expiry_date if permit else None

        items = [
            ComplianceItem(
                user_id=user_id,
                rule_id=rule.id,
                status=ComplianceStatus.PENDING,
                due_date=compute_due_date(rule, permit_expiry, now),
            )
            for rule in rules
        ]

        try:
            self.db.add_all(items)
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Concurrent checklist initialization for user {user_id}")
            raise ChecklistAlreadyInitialized("Checklist already initialized")

        logger.info(f"Checklist initialized for user {user_id} with {len(items)} items")
        return len(items)

    def get_checklist(self, user_id: int) -> List[ComplianceItem]:
        """User's items, most urgent rule first, then earliest due date"""
        return (
            self.db.query(ComplianceItem)
            .join(ComplianceRule)
            .options(joinedload(ComplianceItem.rule))
            .filter(ComplianceItem.user_id == user_id)
            .order_by(
                ComplianceRule.priority.desc(),
                ComplianceItem.due_date.is_(None),
                ComplianceItem.due_date.asc(),
                ComplianceItem.id,
            )
            .all()
        )

    @staticmethod
    def calculate_stats(items: List[ComplianceItem]) -> Dict[str, Any]:
        total = len(items)
        completed = sum(1 for i in items if i.status == ComplianceStatus.COMPLETED)

        return {
            "total": total,
            "completed": completed,
            "pending": sum(1 for i in items if i.status == ComplianceStatus.PENDING),
            "overdue": sum(1 for i in items if i.status == ComplianceStatus.OVERDUE),
            "in_progress": sum(
                1 for i in items if i.status == ComplianceStatus.IN_PROGRESS
            ),
            "completion_rate": round(completed / total * 100) if total > 0 else 0,
        }

    def update_item(
        self,
        user_id: int,
        item_id: int,
        status: ComplianceStatus,
        now: datetime,
        notes: Optional[str] = None,
        document_id: Optional[str] = None,
    ) -> Optional[ComplianceItem]:
        """
        User-driven status change. Returns None when the item does not
        exist or belongs to another user.
        """
        item = (
            self.db.query(ComplianceItem)
            .filter(ComplianceItem.id == item_id, ComplianceItem.user_id == user_id)
            .first()
        )
        if not item:
            return None

        item.status = status
        if notes is not None:
            item.notes = notes
        if document_id is not None:
            item.document_id = document_id
        item.completed_at = now if status == ComplianceStatus.COMPLETED else None

        self.db.commit()
        self.db.refresh(item)
        return item
