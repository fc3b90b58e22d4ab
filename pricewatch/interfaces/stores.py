"""
Abstract stores for price samples and price alerts.

The engine only talks to these interfaces; PostgreSQL and in-memory
backends live in pricewatch.storage. Stores are treated as shared,
externally-synchronized resources: the engine performs no locking and
relies on the backend's own consistency guarantees.

Example:
    >>> class MyStore(SampleStore):
    ...     async def insert_sample(self, sample: PriceSample) -> PriceSample:
    ...         ...
"""

from abc import ABC, abstractmethod
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pricewatch.models.alerts import PriceAlert
from pricewatch.models.prices import HourlyPrice, PriceSample


class SampleStore(ABC):
    """
    Append-only time series of price samples.

    Samples are never updated or deleted through this interface.
    """

    @abstractmethod
    async def insert_sample(self, sample: PriceSample) -> PriceSample:
        """
        Persist a new price sample.

        Args:
            sample: Sample to persist (its `id` is ignored).

        Returns:
            PriceSample: The stored sample with its generated `id`.
        """

    @abstractmethod
    async def latest_sample_between(
        self,
        asset: str,
        after: datetime,
        before: datetime,
    ) -> Optional[PriceSample]:
        """
        Get the most recent sample strictly inside an open time window.

        Args:
            asset: Asset identifier.
            after: Exclusive lower bound.
            before: Exclusive upper bound.

        Returns:
            Optional[PriceSample]: The sample with the latest timestamp where
                after < timestamp < before, or None.
        """

    @abstractmethod
    async def query_samples(
        self,
        asset: str,
        start_time: datetime,
        end_time: datetime,
    ) -> List[PriceSample]:
        """
        Get samples of an asset with start_time <= timestamp <= end_time.

        Returns:
            List[PriceSample]: Samples ordered by timestamp ascending.
        """

    @abstractmethod
    async def hourly_peaks(self, since: datetime) -> List[HourlyPrice]:
        """
        Aggregate samples newer than `since` into hourly peaks.

        Groups samples with timestamp > since by (hour, asset) and takes the
        maximum price of each group.

        Returns:
            List[HourlyPrice]: Ordered by hour ascending, then asset ascending.
        """


class AlertStore(ABC):
    """
    Registry of price alerts keyed logically by (asset, destination).

    Uniqueness of the key is enforced by the caller at write time, not by
    the store.
    """

    @abstractmethod
    async def find_alert(self, asset: str, destination: str) -> Optional[PriceAlert]:
        """Get the alert registered for (asset, destination), if any."""

    @abstractmethod
    async def insert_alert(self, alert: PriceAlert) -> PriceAlert:
        """
        Persist a new alert.

        Returns:
            PriceAlert: The stored alert with its generated `id`.
        """

    @abstractmethod
    async def update_target_price(
        self,
        alert_id: int,
        target_price: Decimal,
    ) -> PriceAlert:
        """
        Overwrite the target price of an existing alert.

        Raises:
            KeyError: If no alert has `alert_id`.
        """

    @abstractmethod
    async def alerts_reached(self, asset: str, price: Decimal) -> List[PriceAlert]:
        """
        Get all alerts for `asset` whose target price is <= `price`.

        Returns:
            List[PriceAlert]: Matching alerts ordered by id.
        """

    @abstractmethod
    async def list_alerts(self) -> List[PriceAlert]:
        """Get every registered alert ordered by id."""
