"""
Moralis data normalizer.

Converts Moralis market-cap ranking entries to MarketQuote models.

Moralis Ranking Entry Format:
    {
        "rank": 2,
        "name": "Ethereum",
        "symbol": "ETH",
        "usd_price": 2000.5,
        "usd_price_24hr_percent_change": -1.2,
        "market_cap_usd": 240000000000,
        ...
    }

Prices arrive as JSON numbers; they are converted through str() so the
Decimal carries the provider's printed value rather than a binary float
expansion.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

import structlog
from pydantic import ValidationError

from pricewatch.models.prices import MarketQuote

logger = structlog.get_logger(__name__)


class MoralisNormalizer:
    """
    Normalizes Moralis ranking entries to MarketQuote models.

    Malformed entries are skipped with a warning so that one bad row does not
    hide every other asset in the snapshot.

    Example:
        >>> quotes = MoralisNormalizer.normalize_ranking(raw_entries)
        >>> quote = MoralisNormalizer.find_quote(quotes, "ethereum")
    """

    @staticmethod
    def normalize_entry(entry: Dict[str, Any]) -> MarketQuote:
        """
        Convert one raw entry.

        Raises:
            ValueError: If name or usd_price is missing or invalid.
        """
        name = entry.get("name")
        raw_price = entry.get("usd_price")
        if not name or raw_price is None:
            raise ValueError(f"Entry missing name or usd_price: {entry!r}")

        try:
            price = Decimal(str(raw_price))
        except InvalidOperation as e:
            raise ValueError(f"Invalid usd_price {raw_price!r}") from e

        rank = entry.get("rank")
        try:
            return MarketQuote(
                name=str(name),
                symbol=entry.get("symbol"),
                rank=int(rank) if rank is not None else None,
                usd_price=price,
            )
        except ValidationError as e:
            raise ValueError(f"Invalid entry for {name}: {e}") from e

    @classmethod
    def normalize_ranking(cls, entries: List[Dict[str, Any]]) -> List[MarketQuote]:
        """Convert a raw ranking, skipping malformed entries."""
        quotes: List[MarketQuote] = []
        for entry in entries:
            if not isinstance(entry, dict):
                logger.warning("moralis_entry_skipped", reason="not_an_object")
                continue
            try:
                quotes.append(cls.normalize_entry(entry))
            except (TypeError, ValueError) as e:
                logger.warning(
                    "moralis_entry_skipped",
                    name=entry.get("name"),
                    reason=str(e),
                )
        return quotes

    @staticmethod
    def find_quote(quotes: List[MarketQuote], asset: str) -> Optional[MarketQuote]:
        """Get the first quote whose name matches `asset` case-insensitively."""
        for quote in quotes:
            if quote.matches(asset):
                return quote
        return None
