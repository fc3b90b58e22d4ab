"""
Alert matching and firing.

Fires every registered alert whose target price has been reached. Firing
is unsuppressed: an alert whose target stays at or below the
current price fires again on every tick until its target is raised or the
registration changes.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional

import structlog

from pricewatch.detection.dispatcher import NotificationDispatcher
from pricewatch.interfaces.stores import AlertStore
from pricewatch.models.alerts import Notification, PriceAlert

logger = structlog.get_logger(__name__)


class AlertMatcher:
    """
    Looks up reached alerts and notifies their destinations.

    Attributes:
        alert_store: Store queried for reached alerts.
        dispatcher: Dispatcher used to deliver notifications.

    Example:
        >>> matcher = AlertMatcher(alert_store, dispatcher)
        >>> fired = await matcher.check_alerts("ethereum", Decimal("2500"))
        >>> print(f"{len(fired)} alerts fired")
    """

    def __init__(
        self,
        alert_store: AlertStore,
        dispatcher: NotificationDispatcher,
    ) -> None:
        self.alert_store = alert_store
        self.dispatcher = dispatcher

    async def check_alerts(
        self,
        asset: str,
        current_price: Decimal,
        now: Optional[datetime] = None,
    ) -> List[PriceAlert]:
        """
        Fire all alerts for `asset` with target_price <= current_price.

        Args:
            asset: Asset identifier.
            current_price: Price fetched on this tick.
            now: Notification timestamp (defaults to the current UTC time).

        Returns:
            List[PriceAlert]: Alerts that matched, in store order.
        """
        now = now or datetime.now(timezone.utc)
        alerts = await self.alert_store.alerts_reached(asset, current_price)

        for alert in alerts:
            notification = Notification.target_reached(alert, current_price, now)
            count = await self.dispatcher.dispatch(notification)
            logger.info(
                "price_alert_fired",
                alert_id=alert.id,
                asset=asset,
                target_price=str(alert.target_price),
                current_price=str(current_price),
                channels_notified=count,
            )

        if not alerts:
            logger.debug(
                "no_alerts_reached",
                asset=asset,
                current_price=str(current_price),
            )

        return alerts
