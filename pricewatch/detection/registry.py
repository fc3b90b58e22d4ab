"""
Alert registration.

Keeps at most one alert per (asset, destination): registering again for the
same pair overwrites the target price in place. Last write wins; no history
of previous targets is kept.
"""

from decimal import Decimal

import structlog

from pricewatch.interfaces.stores import AlertStore
from pricewatch.models.alerts import PriceAlert

logger = structlog.get_logger(__name__)


def normalize_asset(asset: str) -> str:
    """Asset identifiers are stored trimmed and lowercase."""
    return asset.strip().lower()


class AlertRegistry:
    """
    Registers and updates price alerts.

    Example:
        >>> registry = AlertRegistry(alert_store)
        >>> alert = await registry.set_alert("ethereum", Decimal("2500"), "me@example.com")
    """

    def __init__(self, alert_store: AlertStore) -> None:
        self.alert_store = alert_store

    async def set_alert(
        self,
        asset: str,
        target_price: Decimal,
        destination: str,
    ) -> PriceAlert:
        """
        Register an alert or overwrite the target of the existing one.

        Args:
            asset: Asset identifier.
            target_price: Price that triggers the alert.
            destination: Notification destination.

        Returns:
            PriceAlert: The stored alert.
        """
        asset = normalize_asset(asset)
        destination = destination.strip()

        existing = await self.alert_store.find_alert(asset, destination)
        if existing is not None and existing.id is not None:
            updated = await self.alert_store.update_target_price(existing.id, target_price)
            logger.info(
                "alert_updated",
                alert_id=updated.id,
                asset=asset,
                previous_target=str(existing.target_price),
                target_price=str(target_price),
            )
            return updated

        created = await self.alert_store.insert_alert(
            PriceAlert(asset=asset, target_price=target_price, destination=destination)
        )
        logger.info(
            "alert_registered",
            alert_id=created.id,
            asset=asset,
            target_price=str(target_price),
        )
        return created
