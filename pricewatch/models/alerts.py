"""
Alert data models for the price monitor.

This module defines user-registered price alerts and the notifications the
engine sends when a surge is detected or a target price is reached.

Models:
    PriceAlert: Registered (asset, destination) -> target price
    NotificationKind: Surge or target-reached
    Notification: One outgoing message
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class PriceAlert(BaseModel):
    """
    A price-target registration.

    At most one alert exists per (asset, destination); re-registration
    overwrites the target price. Alerts are never deleted by the engine and
    fire on every tick where the target is at or below the current price.

    Attributes:
        id: Store-generated identifier (None before persistence).
        asset: Asset identifier (e.g., "ethereum").
        target_price: Price that triggers the alert when reached or exceeded.
        destination: Notification destination (an email address).

    Example:
        >>> alert = PriceAlert(
        ...     asset="ethereum",
        ...     target_price=Decimal("2500"),
        ...     destination="trader@example.com",
        ... )
        >>> alert.is_reached(Decimal("2500"))
        True
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[int] = Field(default=None, description="Store-generated identifier")
    asset: str = Field(..., min_length=1, max_length=100)
    target_price: Decimal = Field(..., ge=Decimal("0"))
    destination: str = Field(..., min_length=1, max_length=320)

    def is_reached(self, price: Decimal) -> bool:
        """Check if `price` has reached or exceeded the target."""
        return self.target_price <= price


class NotificationKind(str, Enum):
    """
    Why a notification was sent.

    Attributes:
        SURGE: Price rose above the surge threshold vs. the reference sample.
        TARGET: A registered target price was reached.
    """

    SURGE = "surge"
    TARGET = "target"


class Notification(BaseModel):
    """
    One outgoing notification.

    Attributes:
        kind: Surge or target-reached.
        destination: Where to deliver (an email address).
        subject: Short subject line.
        body: Message text.
        asset: Asset the notification is about.
        current_price: Price at the time of the tick.
        target_price: Registered target (target notifications only).
        reference_price: Reference sample price (surge notifications only).
        created_at: When the notification was built.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    kind: NotificationKind
    destination: str = Field(..., min_length=1)
    subject: str
    body: str
    asset: str
    current_price: Decimal
    target_price: Optional[Decimal] = None
    reference_price: Optional[Decimal] = None
    created_at: datetime

    @classmethod
    def surge(
        cls,
        destination: str,
        asset: str,
        current_price: Decimal,
        reference_price: Decimal,
        threshold: Decimal,
        created_at: datetime,
    ) -> "Notification":
        """Build the admin notification for a detected surge."""
        percent = (threshold * 100).normalize()
        return cls(
            kind=NotificationKind.SURGE,
            destination=destination,
            subject=f"{asset.upper()} Price Alert",
            body=(
                f"The price of {asset} has increased by more than {percent:f}%! "
                f"Current price: {current_price}"
            ),
            asset=asset,
            current_price=current_price,
            reference_price=reference_price,
            created_at=created_at,
        )

    @classmethod
    def target_reached(
        cls,
        alert: PriceAlert,
        current_price: Decimal,
        created_at: datetime,
    ) -> "Notification":
        """Build the user notification for a reached target."""
        return cls(
            kind=NotificationKind.TARGET,
            destination=alert.destination,
            subject=f"{alert.asset.upper()} Price Alert",
            body=(
                f"The price of {alert.asset} has reached your target price of "
                f"{alert.target_price}! Current price: {current_price}"
            ),
            asset=alert.asset,
            current_price=current_price,
            target_price=alert.target_price,
            created_at=created_at,
        )
