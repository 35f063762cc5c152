"""Outbound mail.

Two transports, picked by ``MAIL_BACKEND``:

- ``smtp``: delivers through the configured SMTP server (STARTTLS or SSL).
- ``console``: writes the message to the application log. Meant for local
  development, where the verification and reset links are read off the
  server console. Refused when ``APP_ENV`` is ``production``.

Delivery failures are raised as ``MailDeliveryError`` so callers can roll
back whatever the mail was announcing.
"""

import logging
import smtplib
from email.message import EmailMessage

from app.config import Settings, get_settings
from app.exceptions import MailDeliveryError

logger = logging.getLogger("finance_vision")

SMTP_TIMEOUT_SECONDS = 30


class Mailer:
    """Sends plain-text mail to a single recipient."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def send_email(self, email: str, subject: str, text: str) -> None:
        """Send ``text`` to ``email``. Raises MailDeliveryError on failure."""
        backend = self.settings.MAIL_BACKEND
        if backend == "console":
            if self.settings.APP_ENV == "production":
                raise MailDeliveryError("Console mail backend is disabled in production")
            logger.info("EMAIL to=%s subject=%r\n%s", email, subject, text)
            return
        if backend != "smtp":
            raise MailDeliveryError(f"Unknown mail backend '{backend}'")

        message = self._build_message(email, subject, text)
        try:
            server = self._connect()
            try:
                if self.settings.SMTP_USERNAME and self.settings.SMTP_PASSWORD:
                    server.login(self.settings.SMTP_USERNAME, self.settings.SMTP_PASSWORD)
                server.send_message(message)
            finally:
                try:
                    server.quit()
                except smtplib.SMTPException:
                    pass
        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send '%s' email to %s: %s", subject, email, e)
            raise MailDeliveryError() from e

        logger.info("Sent '%s' email to %s", subject, email)

    def _build_message(self, email: str, subject: str, text: str) -> EmailMessage:
        settings = self.settings
        msg = EmailMessage()
        sender = settings.SMTP_FROM_EMAIL or settings.SMTP_USERNAME or ""
        msg["From"] = f"{settings.SMTP_FROM_NAME} <{sender}>" if sender else settings.SMTP_FROM_NAME
        msg["To"] = email
        msg["Subject"] = subject
        msg.set_content(text)
        return msg

    def _connect(self) -> smtplib.SMTP:
        settings = self.settings
        if not settings.SMTP_HOST:
            raise MailDeliveryError("SMTP_HOST is not configured")

        if settings.SMTP_USE_SSL:
            return smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)

        server = smtplib.SMTP(settings.SMTP_HOST, settings.SMTP_PORT, timeout=SMTP_TIMEOUT_SECONDS)
        if settings.SMTP_USE_TLS:
            server.starttls()
        return server


_mailer: Mailer | None = None


def get_mailer() -> Mailer:
    """Get singleton mailer instance."""
    global _mailer
    if _mailer is None:
        _mailer = Mailer()
    return _mailer
