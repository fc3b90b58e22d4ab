"""
Console notification channel.

Writes notifications to the structured log. Always available, so surge and
target notifications are visible even when no SMTP server is configured.
"""

from typing import List

import structlog

from pricewatch.models.alerts import Notification

logger = structlog.get_logger(__name__)


class ConsoleChannel:
    """
    Channel that logs each notification.

    Attributes:
        name: Always "console".
        keep_history: Whether sent notifications are retained in `sent`.

    Example:
        >>> channel = ConsoleChannel()
        >>> await channel.send(notification)
    """

    name = "console"

    def __init__(self, keep_history: bool = False) -> None:
        self.keep_history = keep_history
        self.sent: List[Notification] = []

    async def send(self, notification: Notification) -> None:
        """Log the notification."""
        logger.warning(
            "notification",
            kind=notification.kind.value,
            destination=notification.destination,
            asset=notification.asset,
            subject=notification.subject,
            body=notification.body,
        )
        if self.keep_history:
            self.sent.append(notification)
