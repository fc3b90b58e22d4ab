"""
Moralis market data adapter.

Implements the PriceSource interface on top of the Moralis REST client.
Every provider failure is contained here: it is logged and reported to the
caller as a missing price, never as an exception. There is no retry; the
next scheduled tick is the retry.

Example:
    >>> from pricewatch.adapters.moralis import MoralisAdapter
    >>> from pricewatch.config import load_config
    >>>
    >>> config = load_config()
    >>> adapter = MoralisAdapter.from_config(config.provider)
    >>> price = await adapter.fetch_price("ethereum")
"""

from decimal import Decimal
from typing import Optional

import structlog

from pricewatch.adapters.moralis.normalizer import MoralisNormalizer
from pricewatch.adapters.moralis.rest import MarketDataError, MoralisRestClient
from pricewatch.config.models import ProviderConfig
from pricewatch.interfaces.price_source import PriceSource

logger = structlog.get_logger(__name__)


class MoralisAdapter(PriceSource):
    """
    Live price source backed by the Moralis market-cap ranking.

    Each call fetches a fresh snapshot; nothing is cached between calls.

    Attributes:
        provider_name: Always returns "moralis".
    """

    def __init__(self, rest_client: MoralisRestClient):
        """
        Initialize Moralis adapter.

        Args:
            rest_client: REST client used to fetch the ranking.
        """
        self._rest = rest_client
        logger.info("moralis_adapter_initialized", rest_client=repr(rest_client))

    @classmethod
    def from_config(cls, config: ProviderConfig) -> "MoralisAdapter":
        """Build the adapter and its REST client from provider config."""
        return cls(
            MoralisRestClient(
                base_url=config.base_url,
                api_key=config.api_key,
                market_cap_endpoint=config.market_cap_endpoint,
                rate_limit_per_second=config.rate_limit_per_second,
                timeout_seconds=config.timeout_seconds,
            )
        )

    @property
    def provider_name(self) -> str:
        """Return provider identifier."""
        return "moralis"

    async def fetch_price(self, asset: str) -> Optional[Decimal]:
        """
        Fetch the current USD price of `asset`.

        Args:
            asset: Asset name, matched case-insensitively against entry names.

        Returns:
            Optional[Decimal]: Current price, or None if not listed or the
                provider failed.
        """
        try:
            entries = await self._rest.get_top_currencies()
        except MarketDataError as e:
            logger.error(
                "price_fetch_failed",
                provider=self.provider_name,
                asset=asset,
                error=str(e),
            )
            return None
        except Exception as e:
            logger.error(
                "price_fetch_unexpected_error",
                provider=self.provider_name,
                asset=asset,
                error=str(e),
                error_type=type(e).__name__,
            )
            return None

        quotes = MoralisNormalizer.normalize_ranking(entries)
        quote = MoralisNormalizer.find_quote(quotes, asset)
        if quote is None:
            logger.debug(
                "asset_not_in_ranking",
                provider=self.provider_name,
                asset=asset,
                ranking_size=len(quotes),
            )
            return None

        logger.debug(
            "price_fetched",
            provider=self.provider_name,
            asset=asset,
            price=str(quote.usd_price),
            rank=quote.rank,
        )
        return quote.usd_price

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self._rest.close()

    def __repr__(self) -> str:
        """Return string representation."""
        return f"MoralisAdapter(rest_client={self._rest!r})"
