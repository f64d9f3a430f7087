"""
Tests for the mail transports.
"""

import pytest

from garment_pool.config import get_settings
from garment_pool.errors import TransportError
from garment_pool.services.notifier import (
    LoggingNotifier,
    Notifier,
    SmtpNotifier,
    get_notifier,
)


class TestSmtpNotifier:

    def test_sends_message(self, fake_smtp):
        sender = SmtpNotifier(
            "mail.example.com", 587, "pool@example.com",
            username="pool", password="pw",
        )
        message_id = sender.send("ops@example.com", "Garment 1000 overdue", "Body")

        server = fake_smtp.instances[0]
        assert server.calls == ["starttls", ("login", "pool"), "quit"]
        msg = server.sent[0]
        assert msg["To"] == "ops@example.com"
        assert msg["From"] == "pool@example.com"
        assert msg["Subject"] == "Garment 1000 overdue"
        assert msg["Message-ID"] == message_id

    def test_skips_login_without_username(self, fake_smtp):
        SmtpNotifier("mail.example.com", 25, "pool@example.com").send(
            "ops@example.com", "s", "b"
        )
        assert fake_smtp.instances[0].calls == ["starttls", "quit"]

    def test_connection_failure_raises_transport_error(self, fake_smtp):
        fake_smtp.refuse = True
        sender = SmtpNotifier("mail.example.com", 25, "pool@example.com")

        with pytest.raises(TransportError, match="ops@example.com"):
            sender.send("ops@example.com", "s", "b")

    def test_header_injection_raises_transport_error(self, fake_smtp):
        sender = SmtpNotifier("mail.example.com", 25, "pool@example.com")

        with pytest.raises(TransportError):
            sender.send("evil@example.com\nBcc: spy@example.com", "s", "b")
        assert fake_smtp.instances == []


class TestGetNotifier:

    def test_logging_notifier_without_smtp_host(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "SMTP_HOST", "")
        assert isinstance(get_notifier(), LoggingNotifier)

    def test_smtp_notifier_with_smtp_host(self, monkeypatch):
        monkeypatch.setattr(get_settings(), "SMTP_HOST", "mail.example.com")
        result = get_notifier()
        assert isinstance(result, SmtpNotifier)
        assert result.host == "mail.example.com"

    def test_logging_notifier_returns_message_id(self):
        assert LoggingNotifier().send("a@b", "s", "b").startswith("<")


class TestNotifierInterface:

    def test_send_must_be_implemented(self):
        class Incomplete(Notifier):
            pass

        with pytest.raises(TypeError):
            Incomplete()
