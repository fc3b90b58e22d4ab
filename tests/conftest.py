"""Shared pytest fixtures for the price monitor tests.

Provides in-memory stores, a scripted price source, and a dispatcher whose
console channel keeps every notification it sends.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, List, Optional

import pytest

from pricewatch.detection.channels.console import ConsoleChannel
from pricewatch.detection.dispatcher import NotificationDispatcher
from pricewatch.interfaces.price_source import PriceSource
from pricewatch.storage.memory import InMemoryAlertStore, InMemorySampleStore

TICK_TIME = datetime(2025, 1, 26, 12, 5, tzinfo=timezone.utc)


class FakePriceSource(PriceSource):
    """Price source serving scripted prices.

    Assets missing from `prices` return None. Assets in `errors` raise the
    given exception, which a real source never does; used to check that the
    monitor still contains it.
    """

    def __init__(
        self,
        prices: Optional[Dict[str, Decimal]] = None,
        errors: Optional[Dict[str, Exception]] = None,
    ) -> None:
        self.prices: Dict[str, Decimal] = dict(prices or {})
        self.errors: Dict[str, Exception] = dict(errors or {})
        self.calls: List[str] = []
        self.closed = False

    @property
    def provider_name(self) -> str:
        return "fake"

    async def fetch_price(self, asset: str) -> Optional[Decimal]:
        self.calls.append(asset)
        if asset in self.errors:
            raise self.errors[asset]
        return self.prices.get(asset)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def tick_time() -> datetime:
    """Return a fixed tick time on a five-minute boundary."""
    return TICK_TIME


@pytest.fixture
def sample_store() -> InMemorySampleStore:
    """Return an empty in-memory sample store."""
    return InMemorySampleStore()


@pytest.fixture
def alert_store() -> InMemoryAlertStore:
    """Return an empty in-memory alert store."""
    return InMemoryAlertStore()


@pytest.fixture
def price_source() -> FakePriceSource:
    """Return a price source with ethereum, polygon and bitcoin quotes."""
    return FakePriceSource(
        prices={
            "ethereum": Decimal("2000"),
            "polygon": Decimal("0.85"),
            "bitcoin": Decimal("40000"),
        }
    )


@pytest.fixture
def console_channel() -> ConsoleChannel:
    """Return a console channel that records sent notifications."""
    return ConsoleChannel(keep_history=True)


@pytest.fixture
def dispatcher(console_channel: ConsoleChannel) -> NotificationDispatcher:
    """Return a dispatcher routing to the recording console channel."""
    return NotificationDispatcher(channels={"console": console_channel})
