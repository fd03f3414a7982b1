"""
Checkout Gateway - Email Notification Helper
==============================================
Sends purchase-confirmation email over SMTP.
In dev mode (no SMTP_HOST), logs the message only.
"""

import logging
import smtplib
from email.message import EmailMessage

from config.settings import (
    MAIL_FROM,
    SMTP_HOST,
    SMTP_PASSWORD,
    SMTP_PORT,
    SMTP_TIMEOUT_SECONDS,
    SMTP_USE_TLS,
    SMTP_USERNAME,
)
from common.exceptions import DeliveryError

logger = logging.getLogger("checkout.notifications")


class EmailNotifier:
    """Single-shot SMTP sender. No retry, no queue."""

    def __init__(
        self,
        host: str = SMTP_HOST,
        port: int = SMTP_PORT,
        username: str = SMTP_USERNAME,
        password: str = SMTP_PASSWORD,
        sender: str = MAIL_FROM,
        use_tls: bool = SMTP_USE_TLS,
        timeout: float = SMTP_TIMEOUT_SECONDS,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender
        self.use_tls = use_tls
        self.timeout = timeout

    def send(self, recipient: str, subject: str, text: str, html: str) -> bool:
        """
        Send one email.

        Returns:
            True if delivered, False if skipped (no SMTP host configured)

        Raises:
            DeliveryError: the server refused the message or could not be reached
        """
        if not recipient:
            raise DeliveryError("No recipient address")

        if not self.host:
            logger.info(f"Email skipped (no SMTP host): {recipient} -> {subject}")
            return False

        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = recipient
        msg["Subject"] = subject
        msg.set_content(text)
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email to {recipient} failed: {e}")
            raise DeliveryError(f"Email delivery failed: {e}")

        logger.info(f"Email sent to {recipient}: {subject}")
        return True


# Singleton instance
email_notifier = EmailNotifier()
