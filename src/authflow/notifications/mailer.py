from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Protocol

from ..core.exceptions import DeliveryFailedError

logger = logging.getLogger(__name__)


class Mailer(Protocol):
    def send(self, to_email: str, subject: str, body: str) -> None:
        """Deliver an HTML message; raise ``DeliveryFailedError`` on failure."""

        raise NotImplementedError


class SmtpMailer(Mailer):
    def __init__(
        self,
        *,
        host: str,
        port: int,
        sender: str,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 10.0,
    ):
        self._host = host
        self._port = int(port)
        self._sender = sender
        self._user = user
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout

    def send(self, to_email: str, subject: str, body: str) -> None:
        msg = EmailMessage()
        msg["From"] = self._sender
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.set_content("This message requires an HTML capable mail client.")
        msg.add_alternative(body, subtype="html")

        try:
            with smtplib.SMTP(self._host, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._user:
                    smtp.login(self._user, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Error sending email to %s: %s", to_email, exc)
            raise DeliveryFailedError() from exc

        logger.info("Email sent to %s", to_email)


class LoggingMailer(Mailer):
    """Development mailer: writes the message to the log instead of sending it."""

    def send(self, to_email: str, subject: str, body: str) -> None:
        logger.info("Mail to=%s subject=%r\n%s", to_email, subject, body)
