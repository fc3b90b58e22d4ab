"""
Swap Rate Calculator for cross-asset conversions.

This module prices a swap from a source asset into a target asset using
live provider rates with full Decimal precision. Stored samples are never
used as a fallback: without both live rates there is no quote.

Key Formulas:
    target_amount = source_amount * source_rate / target_rate
    total_fee     = source_amount * fee_rate * source_rate

Classes:
    SwapRateCalculator: Quotes swaps from live prices
    MissingRateError: A live rate could not be obtained
"""

from decimal import Decimal

import structlog

from pricewatch.interfaces.price_source import PriceSource
from pricewatch.models.prices import SwapQuote

logger = structlog.get_logger(__name__)

DEFAULT_FEE_RATE = Decimal("0.03")


class MissingRateError(Exception):
    """
    Raised when a live rate for a swap leg is unavailable.

    Attributes:
        asset: The asset whose rate is missing.
    """

    def __init__(self, asset: str):
        self.asset = asset
        super().__init__(f"Live rate unavailable for {asset}")


class SwapRateCalculator:
    """
    Calculator for cross-asset swap quotes.

    Edge Cases Handled:
        - Missing live rate: Raises MissingRateError
        - Zero target rate: Raises MissingRateError (no meaningful quote)
        - Negative amount: Raises ValueError

    Example:
        >>> calc = SwapRateCalculator(price_source, "ethereum", "bitcoin")
        >>> quote = await calc.get_swap_rate(Decimal("10"))
        >>> # eth=2000, btc=40000:
        >>> # target_amount = 10 * 2000 / 40000 = 0.5
        >>> # total_fee = 10 * 0.03 * 2000 = 600

    Attributes:
        price_source: Live price source.
        source_asset: Asset swapped from.
        target_asset: Asset swapped into.
        fee_rate: Fee fraction of the source notional.
    """

    def __init__(
        self,
        price_source: PriceSource,
        source_asset: str = "ethereum",
        target_asset: str = "bitcoin",
        fee_rate: Decimal = DEFAULT_FEE_RATE,
    ) -> None:
        if fee_rate < 0:
            raise ValueError(f"fee_rate must be non-negative, got {fee_rate}")

        self.price_source = price_source
        self.source_asset = source_asset
        self.target_asset = target_asset
        self.fee_rate = fee_rate

    def calculate(
        self,
        source_amount: Decimal,
        source_rate: Decimal,
        target_rate: Decimal,
    ) -> SwapQuote:
        """
        Price a swap from known rates.

        Args:
            source_amount: Amount of the source asset.
            source_rate: USD price of the source asset.
            target_rate: USD price of the target asset.

        Returns:
            SwapQuote: Target amount and total fee.
        """
        if source_amount < 0:
            raise ValueError(f"source_amount must be non-negative, got {source_amount}")
        if target_rate == 0:
            raise MissingRateError(self.target_asset)

        target_amount = source_amount * source_rate / target_rate
        total_fee = source_amount * self.fee_rate * source_rate

        return SwapQuote(
            source_asset=self.source_asset,
            target_asset=self.target_asset,
            source_amount=source_amount,
            source_rate=source_rate,
            target_rate=target_rate,
            fee_rate=self.fee_rate,
            target_amount=target_amount,
            total_fee=total_fee,
        )

    async def get_swap_rate(self, source_amount: Decimal) -> SwapQuote:
        """
        Quote a swap using live rates for both assets.

        Args:
            source_amount: Amount of the source asset.

        Returns:
            SwapQuote: Target amount and total fee.

        Raises:
            MissingRateError: If either live rate is unavailable.
        """
        target_rate = await self.price_source.fetch_price(self.target_asset)
        source_rate = await self.price_source.fetch_price(self.source_asset)

        if source_rate is None:
            logger.warning("swap_rate_missing", asset=self.source_asset)
            raise MissingRateError(self.source_asset)
        if target_rate is None:
            logger.warning("swap_rate_missing", asset=self.target_asset)
            raise MissingRateError(self.target_asset)

        quote = self.calculate(source_amount, source_rate, target_rate)

        logger.info(
            "swap_rate_calculated",
            source_asset=self.source_asset,
            target_asset=self.target_asset,
            source_amount=str(source_amount),
            target_amount=str(quote.target_amount),
            total_fee=str(quote.total_fee),
        )
        return quote
