"""
Hourly price aggregation.

Computes the peak price per (hour, asset) over a trailing window. Every call
re-scans the sample store; results are not cached.
"""

from datetime import datetime, timedelta, timezone
from typing import List, Optional

import structlog

from pricewatch.interfaces.stores import SampleStore
from pricewatch.models.prices import HourlyPrice, as_utc

logger = structlog.get_logger(__name__)


class HourlyPriceQuery:
    """
    Peak price per hour bucket and asset.

    Attributes:
        sample_store: Store scanned on every call.
        window: Trailing window; samples with timestamp > now - window count.

    Example:
        >>> query = HourlyPriceQuery(sample_store)
        >>> for row in await query.get_hourly_prices():
        ...     print(row.hour, row.asset, row.highest_price)
    """

    def __init__(
        self,
        sample_store: SampleStore,
        window: timedelta = timedelta(hours=24),
    ) -> None:
        self.sample_store = sample_store
        self.window = window

    async def get_hourly_prices(self, now: Optional[datetime] = None) -> List[HourlyPrice]:
        """
        Get the hourly peaks over the trailing window.

        Args:
            now: End of the window (defaults to the current UTC time). Naive
                values are taken as UTC.

        Returns:
            List[HourlyPrice]: Ordered by hour ascending, then asset ascending.
        """
        now = as_utc(now or datetime.now(timezone.utc))
        since = now - self.window

        rows = await self.sample_store.hourly_peaks(since)

        logger.debug(
            "hourly_prices_computed",
            since=since.isoformat(),
            buckets=len(rows),
        )
        return rows
