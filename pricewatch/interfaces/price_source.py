"""
Abstract base class for live price sources.

The scheduler and the swap rate calculator depend on this interface rather
than on a specific provider, so a provider outage or a test double can be
swapped in without touching engine logic.
"""

from abc import ABC, abstractmethod
from decimal import Decimal
from typing import Optional


class PriceSource(ABC):
    """
    Source of current spot prices.

    Implementations must never raise for provider or transport failures:
    they log the failure and return None, exactly as for an unknown asset.
    Callers treat both cases the same way.
    """

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """
        Return the lowercase provider identifier.

        Used in logging context (e.g., "moralis").
        """

    @abstractmethod
    async def fetch_price(self, asset: str) -> Optional[Decimal]:
        """
        Fetch the current USD price of an asset.

        Args:
            asset: Asset name, matched case-insensitively.

        Returns:
            Optional[Decimal]: Current price, or None if the asset is not
                listed or the provider could not be reached.

        Example:
            >>> price = await source.fetch_price("ethereum")
            >>> if price is None:
            ...     print("skip this tick")
        """

    async def close(self) -> None:
        """Release any held resources. Safe to call multiple times."""
        return None
