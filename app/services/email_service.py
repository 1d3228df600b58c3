# app/services/email_service.py - SMTP delivery for reminder emails
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from app.core.config import settings

logger = logging.getLogger(__name__)


def send_email(
    to_email: str, subject: str, html_body: str, plain_body: Optional[str] = None
) -> bool:
    """
    Send an email via SMTP. Returns True on success.

    Without SMTP_HOST configured (development) the message is only logged.
    Failures are logged and reported as False, never raised.
    """
    if not settings.smtp_host:
        logger.info(f"[EMAIL-DEV] To: {to_email} | Subject: {subject}")
        return True

    try:
        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = settings.email_from
        msg["To"] = to_email

        msg.set_content(
            plain_body
            or f"{subject}\n\nLog in to NorthStar Student for details: {settings.frontend_url}"
        )
        msg.add_alternative(html_body, subtype="html")

        with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
            server.starttls()
            if settings.smtp_user:
                server.login(settings.smtp_user, settings.smtp_pass)
            server.send_message(msg)

        logger.info(f"[EMAIL] Sent to {to_email}: {subject}")
        return True
    except Exception as e:
        logger.error(f"[EMAIL] Failed to send to {to_email}: {e}")
        return False
