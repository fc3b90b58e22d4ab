"""
Notification dispatcher for routing notifications to channels.

This module provides the NotificationDispatcher class which sends every
notification through each configured channel.

Key Features:
    - Fans out to multiple channels (console, email)
    - A failing channel is logged and does not stop the others
    - Delivery is best effort; nothing is queued or retried

Example:
    >>> dispatcher = NotificationDispatcher(
    ...     channels={"console": console_channel, "email": email_channel},
    ... )
    >>> await dispatcher.dispatch(notification)
"""

from typing import Dict, List, Protocol

import structlog

from pricewatch.config.models import NotificationsConfig
from pricewatch.models.alerts import Notification

logger = structlog.get_logger(__name__)


class NotificationChannel(Protocol):
    """
    Protocol for notification channels.

    Any channel implementation must support this async method.
    """

    async def send(self, notification: Notification) -> None:
        """Deliver a notification to its destination."""
        ...


class NotificationDispatcher:
    """
    Sends notifications through every registered channel.

    Attributes:
        channels: Dict mapping channel name to channel instance.

    Example:
        >>> dispatcher = NotificationDispatcher(channels={"console": ConsoleChannel()})
        >>> count = await dispatcher.dispatch(notification)
    """

    def __init__(self, channels: Dict[str, NotificationChannel]) -> None:
        """
        Initialize the notification dispatcher.

        Args:
            channels: Dict mapping channel name to channel instance.
        """
        self.channels = channels

        logger.info(
            "notification_dispatcher_initialized",
            available_channels=list(channels.keys()),
        )

    async def dispatch(self, notification: Notification) -> int:
        """
        Dispatch a notification through every registered channel.

        Args:
            notification: The Notification to send.

        Returns:
            int: Number of channels that accepted the notification.
        """
        dispatched_count = 0

        for channel_name, channel in self.channels.items():
            try:
                await channel.send(notification)
                dispatched_count += 1

                logger.debug(
                    "notification_dispatched_to_channel",
                    channel=channel_name,
                    kind=notification.kind.value,
                    destination=notification.destination,
                )

            except Exception as e:
                logger.error(
                    "channel_dispatch_failed",
                    channel=channel_name,
                    kind=notification.kind.value,
                    destination=notification.destination,
                    error=str(e),
                )

        logger.info(
            "notification_dispatch_complete",
            kind=notification.kind.value,
            asset=notification.asset,
            dispatched_to=dispatched_count,
            total_channels=len(self.channels),
        )

        return dispatched_count

    def get_available_channels(self) -> List[str]:
        """
        Get list of available channel names.

        Returns:
            List[str]: Available channel names.
        """
        return list(self.channels.keys())


def create_dispatcher(config: NotificationsConfig) -> NotificationDispatcher:
    """
    Factory function to create a NotificationDispatcher from configuration.

    Args:
        config: Notification settings. The email channel is skipped when
            SMTP is not configured.

    Returns:
        NotificationDispatcher: Configured dispatcher instance.
    """
    from pricewatch.detection.channels.console import ConsoleChannel
    from pricewatch.detection.channels.email import EmailChannel

    names = config.channels
    channels: Dict[str, NotificationChannel] = {}

    if "console" in names:
        channels["console"] = ConsoleChannel()

    if "email" in names:
        if config.smtp.is_configured:
            channels["email"] = EmailChannel(config.smtp)
        else:
            logger.warning(
                "email_not_configured",
                msg="SMTP_HOST not set -- email channel disabled",
            )

    if not channels:
        logger.warning("no_channels_configured", msg="falling back to console")
        channels["console"] = ConsoleChannel()

    return NotificationDispatcher(channels=channels)
