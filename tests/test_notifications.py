# tests/test_notifications.py
import logging
from types import SimpleNamespace

from quickbite.services import notification_service as notifications
from quickbite.services.notification_service import NotificationService


def smtp_config(**overrides):
    values = dict(
        SMTP_SERVER="smtp.test",
        SMTP_PORT=587,
        SMTP_USERNAME="mailer",
        SMTP_PASSWORD="secret",
        FROM_EMAIL="noreply@quickbite.app",
        OTP_EXPIRE_MINUTES=10,
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class FakeSMTP:
    sent = []

    def __init__(self, host, port, timeout=None):
        self.host = host

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        pass

    def login(self, username, password):
        pass

    def sendmail(self, sender, recipient, message):
        FakeSMTP.sent.append((sender, recipient))


class BrokenSMTP(FakeSMTP):
    def login(self, username, password):
        raise OSError("connection reset")


def test_unconfigured_service_logs_code(caplog):
    service = NotificationService(smtp_config(SMTP_USERNAME="", SMTP_PASSWORD=""))

    with caplog.at_level(logging.INFO, logger="quickbite.services.notification_service"):
        result = service.send_otp_email("bob@example.com", "482913", "bob")

    assert not service.is_configured
    assert result["sent"] is False
    assert result["method"] == "console"
    assert "482913" in caplog.text


def test_otp_email_delivered(monkeypatch):
    FakeSMTP.sent = []
    monkeypatch.setattr(notifications.smtplib, "SMTP", FakeSMTP)
    service = NotificationService(smtp_config())

    result = service.send_otp_email("bob@example.com", "482913", "bob")

    assert result["sent"] is True
    assert result["method"] == "email"
    assert FakeSMTP.sent == [("noreply@quickbite.app", "bob@example.com")]


def test_delivery_failure_falls_back_to_log(monkeypatch, caplog):
    monkeypatch.setattr(notifications.smtplib, "SMTP", BrokenSMTP)
    service = NotificationService(smtp_config())

    with caplog.at_level(logging.INFO, logger="quickbite.services.notification_service"):
        result = service.send_otp_email("bob@example.com", "482913", "bob")
        confirmed = service.send_order_confirmation(
            "bob@example.com", {"order_number": "QB1", "restaurant_name": "Pizza Palace", "total": 344.0}
        )

    assert result["method"] == "console"
    assert confirmed is False
    assert "482913" in caplog.text
