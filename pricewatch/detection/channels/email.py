"""
Email notification channel.

Delivers notifications over SMTP. smtplib is blocking, so each send runs in
a worker thread to keep the scheduler's event loop responsive.
"""

import asyncio
import smtplib
from email.mime.text import MIMEText

import structlog

from pricewatch.config.models import SmtpConfig, SmtpSecurity
from pricewatch.models.alerts import Notification

logger = structlog.get_logger(__name__)


class NotificationError(Exception):
    """Raised when a channel fails to deliver a notification."""

    pass


class EmailChannel:
    """
    Channel that sends each notification as a plain-text email.

    Attributes:
        name: Always "email".
        config: SMTP settings.

    Example:
        >>> channel = EmailChannel(SmtpConfig(host="smtp.example.com"))
        >>> await channel.send(notification)
    """

    name = "email"

    def __init__(self, config: SmtpConfig) -> None:
        if not config.is_configured:
            raise ValueError("EmailChannel requires an SMTP host")
        self.config = config

        logger.info(
            "email_channel_initialized",
            host=config.host,
            port=config.port,
            security=config.security.value,
            sender=config.sender,
        )

    def _build_message(self, notification: Notification) -> MIMEText:
        msg = MIMEText(notification.body, "plain", "utf-8")
        msg["Subject"] = notification.subject
        msg["From"] = self.config.sender
        msg["To"] = notification.destination
        return msg

    def _connect(self) -> smtplib.SMTP:
        if self.config.security == SmtpSecurity.SSL:
            return smtplib.SMTP_SSL(
                self.config.host, self.config.port, timeout=self.config.timeout_seconds
            )
        return smtplib.SMTP(
            self.config.host, self.config.port, timeout=self.config.timeout_seconds
        )

    def _send_blocking(self, notification: Notification) -> None:
        msg = self._build_message(notification)
        with self._connect() as server:
            if self.config.security == SmtpSecurity.STARTTLS:
                server.starttls()
            if self.config.user and self.config.password:
                server.login(self.config.user, self.config.password)
            server.sendmail(self.config.sender, [notification.destination], msg.as_string())

    async def send(self, notification: Notification) -> None:
        """
        Send the notification.

        Raises:
            NotificationError: If the SMTP exchange fails.
        """
        try:
            await asyncio.to_thread(self._send_blocking, notification)
        except (smtplib.SMTPException, OSError) as e:
            raise NotificationError(
                f"Email to {notification.destination} failed: {e}"
            ) from e

        logger.info(
            "email_sent",
            kind=notification.kind.value,
            destination=notification.destination,
            asset=notification.asset,
        )
