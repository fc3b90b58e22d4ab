"""
Notification channels.

This module contains implementations for different notification delivery
mechanisms: structured-log output and SMTP email.

Components:
    console: Log output for notifications
    email: SMTP email delivery

Example:
    >>> from pricewatch.detection.channels import ConsoleChannel, EmailChannel
    >>>
    >>> console = ConsoleChannel()
    >>> email = EmailChannel(smtp_config)
    >>>
    >>> await console.send(notification)
    >>> await email.send(notification)
"""

from pricewatch.detection.channels.console import ConsoleChannel
from pricewatch.detection.channels.email import (
    EmailChannel,
    NotificationError,
)

__all__ = [
    # Console
    "ConsoleChannel",
    # Email
    "EmailChannel",
    "NotificationError",
]
