"""
Surge detection against recent price history.

A surge is a price more than `threshold` above the reference sample, where
the reference is the most recent stored sample of the same asset strictly
inside the open window (tick_time - window, tick_time). With a 5-minute
cadence that is normally the previous tick's sample, not a sample from
exactly one window ago.

Key Formulas:
    surge  <=>  current_price > reference_price * (1 + threshold)

The comparison is strict: a price of exactly 1.03x the reference is not a
surge at the default 3% threshold.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional

import structlog

from pricewatch.interfaces.stores import SampleStore
from pricewatch.models.prices import PriceSample

logger = structlog.get_logger(__name__)

DEFAULT_SURGE_THRESHOLD = Decimal("0.03")
DEFAULT_SURGE_WINDOW = timedelta(hours=1)


class SurgeDetector:
    """
    Compares a fresh price to the latest sample in the trailing window.

    No prices are cached between calls; every check queries the store.

    Attributes:
        sample_store: Store queried for the reference sample.
        threshold: Relative increase that counts as a surge.
        window: Look-back window for the reference sample.

    Example:
        >>> detector = SurgeDetector(store)
        >>> reference = await detector.check("ethereum", Decimal("2100"), tick_time)
        >>> if reference is not None:
        ...     print(f"surge vs {reference.price}")
    """

    def __init__(
        self,
        sample_store: SampleStore,
        threshold: Decimal = DEFAULT_SURGE_THRESHOLD,
        window: timedelta = DEFAULT_SURGE_WINDOW,
    ) -> None:
        if threshold <= 0:
            raise ValueError(f"threshold must be positive, got {threshold}")
        if window <= timedelta(0):
            raise ValueError(f"window must be positive, got {window}")

        self.sample_store = sample_store
        self.threshold = threshold
        self.window = window
        self._multiplier = Decimal("1") + threshold

    def is_surge(self, current_price: Decimal, reference_price: Decimal) -> bool:
        """Check if `current_price` is strictly above the surge level."""
        return current_price > reference_price * self._multiplier

    async def find_reference(
        self,
        asset: str,
        tick_time: datetime,
    ) -> Optional[PriceSample]:
        """
        Get the reference sample for a tick.

        Args:
            asset: Asset identifier.
            tick_time: Time of the current tick.

        Returns:
            Optional[PriceSample]: Latest sample with
                tick_time - window < timestamp < tick_time, or None.
        """
        return await self.sample_store.latest_sample_between(
            asset,
            after=tick_time - self.window,
            before=tick_time,
        )

    async def check(
        self,
        asset: str,
        current_price: Decimal,
        tick_time: datetime,
    ) -> Optional[PriceSample]:
        """
        Run the surge check for one asset on one tick.

        Args:
            asset: Asset identifier.
            current_price: Price fetched on this tick.
            tick_time: Time of the current tick.

        Returns:
            Optional[PriceSample]: The reference sample if a surge was
                detected, otherwise None (including when no reference exists).
        """
        reference = await self.find_reference(asset, tick_time)

        if reference is None:
            logger.debug(
                "surge_check_skipped",
                asset=asset,
                reason="no_reference_sample",
                window_seconds=int(self.window.total_seconds()),
            )
            return None

        if not self.is_surge(current_price, reference.price):
            logger.debug(
                "surge_check_passed",
                asset=asset,
                current_price=str(current_price),
                reference_price=str(reference.price),
            )
            return None

        logger.info(
            "surge_detected",
            asset=asset,
            current_price=str(current_price),
            reference_price=str(reference.price),
            reference_time=reference.timestamp.isoformat(),
            threshold=str(self.threshold),
        )
        return reference
