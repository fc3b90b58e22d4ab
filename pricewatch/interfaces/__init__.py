"""
Abstract interfaces for the price monitor.

Defines the contracts the engine consumes:
- PriceSource: live spot prices from a market data provider
- SampleStore: append-only price time series
- AlertStore: price-target registrations
"""

from pricewatch.interfaces.price_source import PriceSource
from pricewatch.interfaces.stores import AlertStore, SampleStore

__all__: list[str] = [
    "PriceSource",
    "SampleStore",
    "AlertStore",
]
