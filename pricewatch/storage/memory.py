"""
In-memory sample and alert stores.

Process-local implementations of SampleStore and AlertStore with the same
query semantics as the PostgreSQL client. Used when `storage.backend` is
`memory` (local development, demos) and by the test suite.

Data does not survive a restart.
"""

from datetime import datetime
from decimal import Decimal
from itertools import count
from typing import Dict, List, Optional, Tuple

import structlog

from pricewatch.interfaces.stores import AlertStore, SampleStore
from pricewatch.models.alerts import PriceAlert
from pricewatch.models.prices import HourlyPrice, PriceSample

logger = structlog.get_logger(__name__)


def truncate_to_hour(ts: datetime) -> datetime:
    """Truncate a timestamp to the start of its hour."""
    return ts.replace(minute=0, second=0, microsecond=0)


class InMemorySampleStore(SampleStore):
    """
    Append-only list of price samples.

    Example:
        >>> store = InMemorySampleStore()
        >>> saved = await store.insert_sample(sample)
        >>> saved.id
        1
    """

    def __init__(self) -> None:
        self._samples: List[PriceSample] = []
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._samples)

    @property
    def samples(self) -> List[PriceSample]:
        """Snapshot of all samples in insertion order."""
        return list(self._samples)

    async def insert_sample(self, sample: PriceSample) -> PriceSample:
        stored = sample.model_copy(update={"id": next(self._ids)})
        self._samples.append(stored)
        logger.debug("price_sample_inserted", sample_id=stored.id, asset=stored.asset)
        return stored

    async def latest_sample_between(
        self,
        asset: str,
        after: datetime,
        before: datetime,
    ) -> Optional[PriceSample]:
        candidates = [
            s for s in self._samples
            if s.asset == asset and after < s.timestamp < before
        ]
        if not candidates:
            return None
        return max(candidates, key=lambda s: (s.timestamp, s.id or 0))

    async def query_samples(
        self,
        asset: str,
        start_time: datetime,
        end_time: datetime,
    ) -> List[PriceSample]:
        matched = [
            s for s in self._samples
            if s.asset == asset and start_time <= s.timestamp <= end_time
        ]
        return sorted(matched, key=lambda s: (s.timestamp, s.id or 0))

    async def hourly_peaks(self, since: datetime) -> List[HourlyPrice]:
        peaks: Dict[Tuple[datetime, str], Decimal] = {}
        for sample in self._samples:
            if sample.timestamp <= since:
                continue
            key = (truncate_to_hour(sample.timestamp), sample.asset)
            current = peaks.get(key)
            if current is None or sample.price > current:
                peaks[key] = sample.price

        return [
            HourlyPrice(hour=hour, asset=asset, highest_price=price)
            for (hour, asset), price in sorted(peaks.items())
        ]


class InMemoryAlertStore(AlertStore):
    """
    Dict-backed alert registry keyed by generated id.

    Like the PostgreSQL table, the store itself does not enforce
    (asset, destination) uniqueness.
    """

    def __init__(self) -> None:
        self._alerts: Dict[int, PriceAlert] = {}
        self._ids = count(1)

    def __len__(self) -> int:
        return len(self._alerts)

    async def find_alert(self, asset: str, destination: str) -> Optional[PriceAlert]:
        for alert_id in sorted(self._alerts):
            alert = self._alerts[alert_id]
            if alert.asset == asset and alert.destination == destination:
                return alert
        return None

    async def insert_alert(self, alert: PriceAlert) -> PriceAlert:
        stored = alert.model_copy(update={"id": next(self._ids)})
        self._alerts[stored.id] = stored
        logger.info("alert_inserted", alert_id=stored.id, asset=stored.asset)
        return stored

    async def update_target_price(
        self,
        alert_id: int,
        target_price: Decimal,
    ) -> PriceAlert:
        if alert_id not in self._alerts:
            raise KeyError(f"Alert {alert_id} not found")
        updated = self._alerts[alert_id].model_copy(update={"target_price": target_price})
        self._alerts[alert_id] = updated
        logger.info("alert_target_updated", alert_id=alert_id)
        return updated

    async def alerts_reached(self, asset: str, price: Decimal) -> List[PriceAlert]:
        return [
            self._alerts[alert_id]
            for alert_id in sorted(self._alerts)
            if self._alerts[alert_id].asset == asset
            and self._alerts[alert_id].is_reached(price)
        ]

    async def list_alerts(self) -> List[PriceAlert]:
        return [self._alerts[alert_id] for alert_id in sorted(self._alerts)]
