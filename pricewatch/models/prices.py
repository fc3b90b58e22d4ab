"""
Price data models for the price monitor.

This module defines provider quotes, persisted price samples and the
results of the on-demand price queries. All financial values use Decimal
for precision.

Models:
    MarketQuote: One normalized entry of the provider's ranked snapshot
    PriceSample: One persisted (asset, price, timestamp) observation
    HourlyPrice: Peak price of an asset within one hour bucket
    SwapQuote: Result of a cross-asset swap rate calculation
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime) -> datetime:
    """Return `value` in UTC, treating naive datetimes as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class MarketQuote(BaseModel):
    """
    Normalized entry from the provider's top-currencies snapshot.

    Attributes:
        name: Asset name as reported by the provider (e.g., "Ethereum").
        symbol: Ticker symbol (e.g., "ETH").
        rank: Market cap rank.
        usd_price: Spot price in USD.

    Example:
        >>> quote = MarketQuote(name="Ethereum", symbol="ETH", rank=2,
        ...                     usd_price=Decimal("2000.50"))
        >>> quote.matches("ethereum")
        True
    """

    model_config = {"frozen": True, "extra": "forbid"}

    name: str = Field(..., min_length=1, description="Asset name")
    symbol: Optional[str] = Field(default=None, description="Ticker symbol")
    rank: Optional[int] = Field(default=None, ge=1, description="Market cap rank")
    usd_price: Decimal = Field(..., ge=Decimal("0"), description="Spot price in USD")

    def matches(self, asset: str) -> bool:
        """Check whether this quote is for `asset`, ignoring case."""
        return self.name.lower() == asset.lower()


class PriceSample(BaseModel):
    """
    One persisted price observation.

    Immutable once written. The store assigns `id` on insert.

    Attributes:
        id: Store-generated identifier (None before persistence).
        asset: Asset identifier (e.g., "ethereum").
        price: Observed price.
        timestamp: Tick time of the observation (UTC).

    Example:
        >>> sample = PriceSample(
        ...     asset="ethereum",
        ...     price=Decimal("2000"),
        ...     timestamp=datetime(2025, 1, 26, 12, 5, tzinfo=timezone.utc),
        ... )
    """

    model_config = {"frozen": True, "extra": "forbid"}

    id: Optional[int] = Field(default=None, description="Store-generated identifier")
    asset: str = Field(..., min_length=1, max_length=100, description="Asset identifier")
    price: Decimal = Field(..., ge=Decimal("0"), description="Observed price")
    timestamp: datetime = Field(..., description="Observation time (UTC)")

    @field_validator("timestamp")
    @classmethod
    def ensure_utc(cls, v: datetime) -> datetime:
        """Naive timestamps are treated as UTC."""
        return as_utc(v)


class HourlyPrice(BaseModel):
    """
    Highest price of an asset within one hour bucket.

    Attributes:
        hour: Start of the hour bucket (UTC, truncated to the hour).
        asset: Asset identifier.
        highest_price: Maximum sampled price within the bucket.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    hour: datetime
    asset: str
    highest_price: Decimal


class SwapQuote(BaseModel):
    """
    Result of a cross-asset swap rate calculation.

    Formulas:
        target_amount = source_amount * source_rate / target_rate
        total_fee = source_amount * fee_rate * source_rate

    Attributes:
        source_asset: Asset swapped from.
        target_asset: Asset swapped into.
        source_amount: Amount of the source asset.
        source_rate: Live USD price of the source asset.
        target_rate: Live USD price of the target asset.
        fee_rate: Fee fraction applied to the source notional.
        target_amount: Amount of target asset received.
        total_fee: Fee in USD.
    """

    model_config = {"frozen": True, "extra": "forbid"}

    source_asset: str
    target_asset: str
    source_amount: Decimal
    source_rate: Decimal
    target_rate: Decimal
    fee_rate: Decimal
    target_amount: Decimal
    total_fee: Decimal
