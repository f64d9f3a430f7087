"""
Outbound notifications.

The staleness sweep tells people about garments that never came
back. Delivery goes through a Notifier so the transport can be
swapped (SMTP in production, a logging stand-in when no mail
server is configured, a fake in tests).
"""

import logging
import smtplib
from abc import ABC, abstractmethod
from email.message import EmailMessage
from email.utils import make_msgid

from garment_pool.config import Settings, get_settings
from garment_pool.errors import TransportError

logger = logging.getLogger(__name__)


class Notifier(ABC):
    """Sends one message to one recipient."""

    @abstractmethod
    def send(self, to: str, subject: str, body: str) -> str:
        """Deliver the message and return its id, or raise TransportError."""


class LoggingNotifier(Notifier):
    """Writes the message to the log instead of sending it."""

    def send(self, to: str, subject: str, body: str) -> str:
        message_id = make_msgid()
        logger.info("Mail to %s (%s): %s", to, subject, body)
        return message_id


class SmtpNotifier(Notifier):
    """Plain SMTP delivery, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_ssl: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: Settings) -> "SmtpNotifier":
        return cls(
            host=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            sender=settings.MAIL_SENDER,
            username=settings.SMTP_USERNAME,
            password=settings.SMTP_PASSWORD,
            use_ssl=settings.SMTP_USE_SSL,
            timeout=settings.SMTP_TIMEOUT,
        )

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(
                self.host, self.port, timeout=self.timeout
            )
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
            server.starttls()
        if self.username:
            server.login(self.username, self.password)
        return server

    def send(self, to: str, subject: str, body: str) -> str:
        # Header values reject CR/LF with ValueError; a bad address
        # fails like any other undeliverable one.
        try:
            msg = EmailMessage()
            msg["From"] = self.sender
            msg["To"] = to
            msg["Subject"] = subject
            msg["Message-ID"] = make_msgid()
            msg.set_content(body)

            with self._connect() as server:
                server.send_message(msg)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise TransportError(f"Sending mail to {to} failed: {e}") from e

        return msg["Message-ID"]


def get_notifier() -> Notifier:
    """
    Notifier for the current configuration.

    Used as a FastAPI dependency so tests can override it.
    """
    settings = get_settings()
    if settings.SMTP_HOST:
        return SmtpNotifier.from_settings(settings)
    return LoggingNotifier()
