"""SMTP delivery: dev mode and failure reporting."""

from unittest.mock import MagicMock, patch

from app.core.config import settings
from app.services.email_service import send_email


def test_dev_mode_only_logs(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "")

    with patch("app.services.email_service.smtplib.SMTP") as smtp:
        assert send_email("amara@example.com", "Subject", "<p>Hi</p>") is True
        smtp.assert_not_called()


def test_sends_through_smtp(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_user", "")

    with patch("app.services.email_service.smtplib.SMTP") as smtp:
        server = MagicMock()
        smtp.return_value.__enter__.return_value = server

        assert send_email("amara@example.com", "Subject", "<p>Hi</p>") is True

        smtp.assert_called_once_with("smtp.example.com", settings.smtp_port)
        server.starttls.assert_called_once()
        server.login.assert_not_called()
        sent = server.send_message.call_args[0][0]
        assert sent["To"] == "amara@example.com"
        assert sent["Subject"] == "Subject"


def test_smtp_failure_returns_false(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")

    with patch(
        "app.services.email_service.smtplib.SMTP", side_effect=OSError("connection refused")
    ):
        assert send_email("amara@example.com", "Subject", "<p>Hi</p>") is False
