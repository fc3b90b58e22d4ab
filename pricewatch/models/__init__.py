"""
Shared Pydantic data models for the price monitor.

All models use Decimal for financial precision.

Modules:
    prices: Provider quotes, price samples, hourly peaks, swap quotes
    alerts: Price alerts and notifications

Example:
    >>> from pricewatch.models import PriceSample, PriceAlert, Notification
"""

from pricewatch.models.alerts import (
    Notification,
    NotificationKind,
    PriceAlert,
)
from pricewatch.models.prices import (
    HourlyPrice,
    MarketQuote,
    PriceSample,
    SwapQuote,
)

__all__: list[str] = [
    # Prices
    "MarketQuote",
    "PriceSample",
    "HourlyPrice",
    "SwapQuote",
    # Alerts
    "PriceAlert",
    "Notification",
    "NotificationKind",
]
