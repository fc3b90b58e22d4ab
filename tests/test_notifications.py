"""Tests for notification dispatch and channels."""

from __future__ import annotations

import smtplib
from decimal import Decimal
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pricewatch.config.models import NotificationsConfig, SmtpConfig, SmtpSecurity
from pricewatch.detection.channels.console import ConsoleChannel
from pricewatch.detection.channels.email import EmailChannel, NotificationError
from pricewatch.detection.dispatcher import NotificationDispatcher, create_dispatcher
from pricewatch.models.alerts import Notification, PriceAlert


@pytest.fixture
def notification(tick_time) -> Notification:
    """Return a target-reached notification."""
    alert = PriceAlert(
        id=1, asset="ethereum", target_price=Decimal("2500"), destination="me@example.com"
    )
    return Notification.target_reached(alert, Decimal("2600"), created_at=tick_time)


@pytest.mark.asyncio
async def test_dispatch_sends_to_every_channel(notification):
    first = ConsoleChannel(keep_history=True)
    second = ConsoleChannel(keep_history=True)
    dispatcher = NotificationDispatcher(channels={"a": first, "b": second})

    sent = await dispatcher.dispatch(notification)

    assert sent == 2
    assert first.sent == [notification]
    assert second.sent == [notification]


@pytest.mark.asyncio
async def test_failing_channel_does_not_block_others(notification):
    broken = MagicMock()
    broken.send = AsyncMock(side_effect=NotificationError("smtp down"))
    console = ConsoleChannel(keep_history=True)
    dispatcher = NotificationDispatcher(channels={"email": broken, "console": console})

    sent = await dispatcher.dispatch(notification)

    assert sent == 1
    assert console.sent == [notification]


def test_create_dispatcher_skips_unconfigured_email():
    dispatcher = create_dispatcher(NotificationsConfig(channels=["console", "email"]))

    assert dispatcher.get_available_channels() == ["console"]


def test_create_dispatcher_falls_back_to_console():
    dispatcher = create_dispatcher(NotificationsConfig(channels=["email"]))

    assert dispatcher.get_available_channels() == ["console"]


def test_create_dispatcher_with_smtp():
    config = NotificationsConfig(
        channels=["console", "email"],
        smtp=SmtpConfig(host="smtp.example.com"),
    )

    dispatcher = create_dispatcher(config)

    assert sorted(dispatcher.get_available_channels()) == ["console", "email"]


# -----------------------------------------------------------------------
# Email channel
# -----------------------------------------------------------------------


def test_email_channel_requires_host():
    with pytest.raises(ValueError):
        EmailChannel(SmtpConfig())


@pytest.mark.asyncio
async def test_email_channel_sends_over_smtp(notification):
    config = SmtpConfig(
        host="smtp.example.com", port=587, user="bot", password="secret",
        sender="alerts@example.com",
    )

    with patch("pricewatch.detection.channels.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        await EmailChannel(config).send(notification)

    smtp_cls.assert_called_once_with("smtp.example.com", 587, timeout=10)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("bot", "secret")
    sender, recipients, message = server.sendmail.call_args.args
    assert sender == "alerts@example.com"
    assert recipients == ["me@example.com"]
    assert "Subject: ETHEREUM Price Alert" in message


@pytest.mark.asyncio
async def test_email_channel_wraps_smtp_errors(notification):
    config = SmtpConfig(host="smtp.example.com", port=25)

    with patch("pricewatch.detection.channels.email.smtplib.SMTP") as smtp_cls:
        smtp_cls.side_effect = smtplib.SMTPConnectError(421, "unavailable")
        with pytest.raises(NotificationError):
            await EmailChannel(config).send(notification)


@pytest.mark.asyncio
async def test_email_channel_starttls_on_any_port(notification):
    config = SmtpConfig(host="smtp.example.com", port=2525)

    with patch("pricewatch.detection.channels.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        await EmailChannel(config).send(notification)

    server.starttls.assert_called_once()
    server.login.assert_not_called()


@pytest.mark.asyncio
async def test_email_channel_implicit_tls(notification):
    config = SmtpConfig(host="smtp.example.com", port=465, security=SmtpSecurity.SSL)

    with patch("pricewatch.detection.channels.email.smtplib.SMTP_SSL") as ssl_cls, patch(
        "pricewatch.detection.channels.email.smtplib.SMTP"
    ) as smtp_cls:
        server = ssl_cls.return_value.__enter__.return_value
        await EmailChannel(config).send(notification)

    ssl_cls.assert_called_once_with("smtp.example.com", 465, timeout=10)
    smtp_cls.assert_not_called()
    server.starttls.assert_not_called()
    server.sendmail.assert_called_once()


@pytest.mark.asyncio
async def test_email_channel_plain_connection(notification):
    config = SmtpConfig(host="localhost", port=1025, security=SmtpSecurity.NONE)

    with patch("pricewatch.detection.channels.email.smtplib.SMTP") as smtp_cls:
        server = smtp_cls.return_value.__enter__.return_value
        await EmailChannel(config).send(notification)

    server.starttls.assert_not_called()
    server.sendmail.assert_called_once()
