"""Password-reset notifiers.

``SmtpNotifier`` sends a plain-text email synchronously; ``LoggingNotifier``
only writes the reset request to the log and is used when no mail server is
configured (development, tests).
"""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage
from typing import Optional, Protocol

from ..common.privacy import mask_email
from ..core.exceptions import NotificationError

logger = logging.getLogger(__name__)

RESET_SUBJECT = "Password reset request"


class Notifier(Protocol):
    def send_password_reset(self, email: str) -> None:
        raise NotImplementedError


def build_reset_body(email: str, reset_url: Optional[str]) -> str:
    lines = [
        "Hello,",
        "",
        f"A password reset was requested for the account registered with {email}.",
    ]
    if reset_url:
        lines.append(f"Follow this link to choose a new password: {reset_url}")
    lines += ["", "If you did not request this, you can ignore this message."]
    return "\n".join(lines)


class LoggingNotifier(Notifier):
    def send_password_reset(self, email: str) -> None:
        logger.info("Password reset requested for %s (no mail server configured)", mask_email(email))


class SmtpNotifier(Notifier):
    def __init__(
        self,
        *,
        server: str,
        port: int,
        sender: str,
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        reset_url: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self._server = server
        self._port = int(port)
        self._sender = sender
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._reset_url = reset_url
        self._timeout = timeout

    def send_password_reset(self, email: str) -> None:
        msg = EmailMessage()
        msg["Subject"] = RESET_SUBJECT
        msg["From"] = self._sender
        msg["To"] = email
        msg.set_content(build_reset_body(email, self._reset_url))

        try:
            with smtplib.SMTP(self._server, self._port, timeout=self._timeout) as smtp:
                if self._use_tls:
                    smtp.starttls()
                if self._username:
                    smtp.login(self._username, self._password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Password reset email to %s failed: %s", mask_email(email), exc)
            raise NotificationError("Could not send password reset email") from exc

        logger.info("Password reset email sent to %s", mask_email(email))
