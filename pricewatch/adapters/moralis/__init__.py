"""
Moralis market data adapter module.

Implements the PriceSource interface against the Moralis market-data API.

Components:
    MoralisAdapter: PriceSource implementation with failure isolation
    MoralisRestClient: REST API client for the market-cap ranking
    MoralisNormalizer: Conversion of raw entries to MarketQuote models

Example:
    >>> from pricewatch.adapters.moralis import MoralisAdapter
    >>> adapter = MoralisAdapter.from_config(config.provider)
    >>> price = await adapter.fetch_price("polygon")
"""

from pricewatch.adapters.moralis.adapter import MoralisAdapter
from pricewatch.adapters.moralis.normalizer import MoralisNormalizer
from pricewatch.adapters.moralis.rest import (
    MarketDataError,
    MoralisRestClient,
    RateLimitError,
)

__all__ = [
    "MoralisAdapter",
    "MoralisRestClient",
    "MoralisNormalizer",
    "MarketDataError",
    "RateLimitError",
]
