# app/services/deadline_sweep.py - Daily reconciliation of deadlines against the clock
"""
Daily deadline sweep.

Three passes, each safe to re-run any number of times:

1. Permit expiry checkpoints (90/60/30 days out). The per-permit
   reminder flag is claimed with a conditional UPDATE in the same
   transaction as the notification, so a checkpoint fires once per permit
   even if two sweeps overlap. The email goes out after the commit and a
   failed send does not undo the flag.
2. Expired permits are moved to EXPIRED.
3. Open compliance items past their due date are moved to OVERDUE, with
   one in-app notification per transition. The status itself is the
   de-duplication guard.

Every record is processed in its own transaction; one failure is logged
and the sweep carries on.

Invoke with run_deadline_sweep(db, now) from any scheduler: the
/api/cron/deadline-sweep endpoint, `scheduled_jobs.py sweep` under OS cron
(08:00 America/Winnipeg), or a test with a fixed clock.
"""

import logging
from dataclasses import dataclass, field, asdict
from datetime import date, datetime, timedelta
from typing import Callable, Dict, Any, Optional

from sqlalchemy.orm import Session, joinedload

from app.core.clock import start_of_day
from app.models.compliance import ComplianceItem, OPEN_STATUSES, ComplianceStatus
from app.models.permit import StudyPermit, PermitStatus
from app.models.notification import NotificationType, NotificationChannel
from app.services.email_service import send_email
from app.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderCheckpoint:
    """A days-before-expiry reminder and the permit flag recording it"""
    days: int
    flag: Any  # StudyPermit boolean column


PERMIT_CHECKPOINTS = (
    ReminderCheckpoint(days=90, flag=StudyPermit.reminder_sent_90),
    ReminderCheckpoint(days=60, flag=StudyPermit.reminder_sent_60),
    ReminderCheckpoint(days=30, flag=StudyPermit.reminder_sent_30),
)


@dataclass
class SweepResult:
    started_at: datetime
    reminders_sent: Dict[int, int] = field(default_factory=dict)
    emails_failed: int = 0
    permits_expired: int = 0
    items_overdue: int = 0
    errors: int = 0

    def as_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["started_at"] = self.started_at.isoformat()
        return data


def last_expired_day(now: datetime) -> date:
    """
    Latest expiry date that is already in the past at `now`.

    A permit expires at the start of its expiry date, so it counts as
    expired from 00:00 onwards, except at exactly midnight.
    """
    today = now.date()
    if now > start_of_day(today):
        return today
    return today - timedelta(days=1)


def _reminder_email_html(first_name: str, expiry: str, days: int) -> str:
    return f"""
        <h2>Study Permit Expiry Reminder</h2>
        <p>Hi {first_name},</p>
        <p>Your study permit expires on <strong>{expiry}</strong> ({days} days from now).</p>
        <p>To maintain your legal status in Canada, you should begin the renewal process immediately.</p>
        <p><strong>What to do:</strong></p>
        <ul>
          <li>Log in to NorthStar Student to review your compliance checklist</li>
          <li>Gather required documents (enrollment letter, financial proof)</li>
          <li>Apply for renewal through IRCC at least 30 days before expiry</li>
        </ul>
        <p>- NorthStar Student Team</p>
    """


class DeadlineSweepService:
    def __init__(
        self,
        db: Session,
        email_sender: Optional[Callable[[str, str, str], bool]] = None,
    ):
        self.db = db
        self.send_email = email_sender or send_email
        self.notifications = NotificationService(db)

    def run(self, now: datetime) -> SweepResult:
        """Run all three passes for the given local time"""
        result = SweepResult(started_at=now)
        logger.info(f"[SWEEP] Running daily deadline sweep for {now.isoformat()}")

        passes = (
            ("permit reminders", self.send_permit_reminders),
            ("permit expiry", self.expire_permits),
            ("overdue items", self.mark_overdue_items),
        )
        for name, sweep_pass in passes:
            try:
                sweep_pass(now, result)
            except Exception as e:
                self.db.rollback()
                result.errors += 1
                logger.error(f"[SWEEP] {name} pass failed: {e}")

        if now.weekday() == 0:
            logger.info("[SWEEP] Monday - new work hour tracking week started")

        logger.info(f"[SWEEP] Complete: {result.as_dict()}")
        return result

    # ----- Pass 1: permit expiry checkpoints -----

    def send_permit_reminders(self, now: datetime, result: SweepResult):
        for checkpoint in PERMIT_CHECKPOINTS:
            target_date = now.date() + timedelta(days=checkpoint.days)

            permits = (
                self.db.query(StudyPermit)
                .options(joinedload(StudyPermit.user))
                .filter(
                    StudyPermit.expiry_date == target_date,
                    checkpoint.flag == False,
                    StudyPermit.status != PermitStatus.EXPIRED,
                )
                .all()
            )

            sent = 0
            for permit in permits:
                try:
                    if self._send_checkpoint_reminder(permit, checkpoint, result):
                        sent += 1
                except Exception as e:
                    self.db.rollback()
                    result.errors += 1
                    logger.error(
                        f"[SWEEP] {checkpoint.days}-day reminder failed for permit {permit.id}: {e}"
                    )

            result.reminders_sent[checkpoint.days] = sent

    def _send_checkpoint_reminder(
        self, permit: StudyPermit, checkpoint: ReminderCheckpoint, result: SweepResult
    ) -> bool:
        permit_id = permit.id
        user_id = permit.user_id
        email = permit.user.email
        first_name = permit.user.first_name
        expiry = permit.expiry_date.strftime("%B %d, %Y")

        claimed = (
            self.db.query(StudyPermit)
            .filter(StudyPermit.id == permit_id, checkpoint.flag == False)
            .update({checkpoint.flag: True}, synchronize_session=False)
        )
        if not claimed:
            # Another sweep got here first
            self.db.rollback()
            return False

        self.notifications.notify(
            user_id=user_id,
            type=NotificationType.PERMIT_EXPIRY,
            title=f"Study Permit Expires in {checkpoint.days} Days",
            message=(
                f"Your study permit expires on {expiry}. Start your renewal "
                "process now to maintain your status in Canada."
            ),
            channel=NotificationChannel.EMAIL,
            commit=False,
            sent_at=result.started_at,
        )
        self.db.commit()

        delivered = self.send_email(
            email,
            f"[NorthStar] Study Permit Expires in {checkpoint.days} Days",
            _reminder_email_html(first_name, expiry, checkpoint.days),
        )
        if not delivered:
            result.emails_failed += 1
            logger.warning(
                f"[SWEEP] {checkpoint.days}-day reminder email to {email} failed; in-app record kept"
            )
        else:
            logger.info(f"[SWEEP] Sent {checkpoint.days}-day permit reminder to {email}")

        return True

    # ----- Pass 2: expired permits -----

    def expire_permits(self, now: datetime, result: SweepResult):
        expired = (
            self.db.query(StudyPermit)
            .filter(
                StudyPermit.expiry_date <= last_expired_day(now),
                StudyPermit.status != PermitStatus.EXPIRED,
            )
            .update({StudyPermit.status: PermitStatus.EXPIRED}, synchronize_session=False)
        )
        self.db.commit()

        result.permits_expired = expired
        if expired:
            logger.info(f"[SWEEP] Marked {expired} study permits as expired")

    # ----- Pass 3: overdue compliance items -----

    def mark_overdue_items(self, now: datetime, result: SweepResult):
        overdue_items = (
            self.db.query(ComplianceItem)
            .options(joinedload(ComplianceItem.rule))
            .filter(
                ComplianceItem.due_date < now,
                ComplianceItem.status.in_(OPEN_STATUSES),
            )
            .all()
        )

        for item in overdue_items:
            item_id = item.id
            try:
                title = item.rule.title
                user_id = item.user_id

                transitioned = (
                    self.db.query(ComplianceItem)
                    .filter(
                        ComplianceItem.id == item_id,
                        ComplianceItem.status.in_(OPEN_STATUSES),
                    )
                    .update(
                        {ComplianceItem.status: ComplianceStatus.OVERDUE},
                        synchronize_session=False,
                    )
                )
                if not transitioned:
                    self.db.rollback()
                    continue

                self.notifications.notify(
                    user_id=user_id,
                    type=NotificationType.COMPLIANCE_OVERDUE,
                    title=f"Overdue: {title}",
                    message=(
                        f'Your compliance item "{title}" is now overdue. '
                        "Complete it immediately to maintain your status."
                    ),
                    commit=False,
                    sent_at=now,
                )
                self.db.commit()
                result.items_overdue += 1
            except Exception as e:
                self.db.rollback()
                result.errors += 1
                logger.error(f"[SWEEP] Overdue update failed for compliance item {item_id}: {e}")

        if result.items_overdue:
            logger.info(f"[SWEEP] Marked {result.items_overdue} compliance items as overdue")


def run_deadline_sweep(
    db: Session,
    now: datetime,
    email_sender: Optional[Callable[[str, str, str], bool]] = None,
) -> SweepResult:
    """Scheduler entry point; `now` is local time in the deployment timezone"""
    return DeadlineSweepService(db, email_sender=email_sender).run(now)
