"""
Price monitor: the scheduled fetch -> persist -> surge -> alert cycle.

This module provides the PriceMonitor class which runs one tick across all
tracked assets, and the loop that repeats it on a wall-clock aligned
cadence for the lifetime of the process.

Key Features:
    - Assets processed strictly sequentially within a tick
    - Per-asset failure isolation: a missing price or an exception for one
      asset never stops the remaining assets
    - Ticks never overlap: the next fire time is computed only after the
      current tick completes
    - No prices carried in memory between ticks; history comes from the store

Example:
    >>> monitor = PriceMonitor(
    ...     assets=["ethereum", "polygon"],
    ...     price_source=adapter,
    ...     sample_store=store,
    ...     surge_detector=SurgeDetector(store),
    ...     alert_matcher=AlertMatcher(alert_store, dispatcher),
    ...     dispatcher=dispatcher,
    ...     admin_destination="ops@example.com",
    ... )
    >>> result = await monitor.run_tick()
    >>> print(result.samples_written)
"""

import asyncio
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional

import structlog
from pydantic import BaseModel, Field

from pricewatch.detection.dispatcher import NotificationDispatcher
from pricewatch.detection.matcher import AlertMatcher
from pricewatch.detection.surge import SurgeDetector
from pricewatch.interfaces.price_source import PriceSource
from pricewatch.interfaces.stores import SampleStore
from pricewatch.models.alerts import Notification
from pricewatch.models.prices import PriceSample, as_utc
from pricewatch.monitoring.schedule import CadenceSchedule

logger = structlog.get_logger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TickResult(BaseModel):
    """
    Outcome of one monitoring tick.

    Attributes:
        tick_time: Timestamp shared by every sample written on this tick.
        samples: Samples persisted, in processing order.
        skipped_assets: Assets with no price this tick (not listed or
            provider failure).
        failed_assets: Assets whose processing raised.
        surges: Assets for which a surge notification was sent.
        alerts_fired: Number of price-target alerts fired.
    """

    tick_time: datetime
    samples: List[PriceSample] = Field(default_factory=list)
    skipped_assets: List[str] = Field(default_factory=list)
    failed_assets: List[str] = Field(default_factory=list)
    surges: List[str] = Field(default_factory=list)
    alerts_fired: int = 0

    @property
    def samples_written(self) -> int:
        return len(self.samples)


class PriceMonitor:
    """
    Runs the monitoring cycle for a fixed set of assets.

    Attributes:
        assets: Tracked asset identifiers, processed in this order.
        price_source: Live price source.
        sample_store: Store receiving one sample per asset per tick.
        surge_detector: Surge check against the trailing window.
        alert_matcher: Fires reached price-target alerts.
        dispatcher: Delivers surge notifications.
        admin_destination: Where surge notifications go; surges are only
            logged when unset.
        schedule: Cadence used by `run_forever`.
    """

    def __init__(
        self,
        assets: List[str],
        price_source: PriceSource,
        sample_store: SampleStore,
        surge_detector: SurgeDetector,
        alert_matcher: AlertMatcher,
        dispatcher: NotificationDispatcher,
        admin_destination: Optional[str] = None,
        schedule: Optional[CadenceSchedule] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if not assets:
            raise ValueError("At least one asset must be tracked")

        self.assets = list(assets)
        self.price_source = price_source
        self.sample_store = sample_store
        self.surge_detector = surge_detector
        self.alert_matcher = alert_matcher
        self.dispatcher = dispatcher
        self.admin_destination = admin_destination
        self.schedule = schedule or CadenceSchedule(5)
        self._clock = clock
        self._tick_count = 0

        if not admin_destination:
            logger.warning(
                "admin_destination_missing",
                msg="ADMIN_EMAIL not set -- surges will only be logged",
            )

        logger.info(
            "price_monitor_initialized",
            assets=self.assets,
            schedule=self.schedule.expression,
            provider=price_source.provider_name,
        )

    @property
    def tick_count(self) -> int:
        return self._tick_count

    async def run_tick(self, tick_time: Optional[datetime] = None) -> TickResult:
        """
        Run one monitoring tick over all tracked assets.

        Args:
            tick_time: Timestamp for this tick (defaults to the clock). Naive
                values are taken as UTC.

        Returns:
            TickResult: What happened for each asset.
        """
        tick_time = as_utc(tick_time or self._clock())
        self._tick_count += 1
        result = TickResult(tick_time=tick_time)

        logger.info(
            "tick_started",
            tick=self._tick_count,
            tick_time=tick_time.isoformat(),
            assets=len(self.assets),
        )

        for asset in self.assets:
            try:
                await self._process_asset(asset, tick_time, result)
            except Exception as e:
                result.failed_assets.append(asset)
                logger.error(
                    "asset_processing_failed",
                    asset=asset,
                    tick_time=tick_time.isoformat(),
                    error=str(e),
                    error_type=type(e).__name__,
                )

        logger.info(
            "tick_completed",
            tick=self._tick_count,
            samples_written=result.samples_written,
            skipped=result.skipped_assets,
            failed=result.failed_assets,
            surges=result.surges,
            alerts_fired=result.alerts_fired,
        )
        return result

    async def _process_asset(
        self,
        asset: str,
        tick_time: datetime,
        result: TickResult,
    ) -> None:
        """Fetch, persist, surge-check and alert-check one asset."""
        price = await self.price_source.fetch_price(asset)
        if price is None:
            result.skipped_assets.append(asset)
            logger.warning("price_not_found", asset=asset)
            return

        sample = await self.sample_store.insert_sample(
            PriceSample(asset=asset, price=price, timestamp=tick_time)
        )
        result.samples.append(sample)
        logger.info(
            "price_sample_saved",
            asset=asset,
            price=str(price),
            sample_id=sample.id,
        )

        reference = await self.surge_detector.check(asset, price, tick_time)
        if reference is not None:
            result.surges.append(asset)
            await self._notify_surge(asset, price, reference.price, tick_time)

        fired = await self.alert_matcher.check_alerts(asset, price, now=tick_time)
        result.alerts_fired += len(fired)

    async def _notify_surge(
        self,
        asset: str,
        price: Decimal,
        reference_price: Decimal,
        tick_time: datetime,
    ) -> None:
        if not self.admin_destination:
            logger.warning("surge_not_notified", asset=asset, reason="no_admin_destination")
            return

        notification = Notification.surge(
            destination=self.admin_destination,
            asset=asset,
            current_price=price,
            reference_price=reference_price,
            threshold=self.surge_detector.threshold,
            created_at=tick_time,
        )
        await self.dispatcher.dispatch(notification)

    async def run_forever(self, shutdown_event: asyncio.Event) -> None:
        """
        Repeat ticks on the schedule until `shutdown_event` is set.

        The wait for the next boundary is interrupted by shutdown; a running
        tick is allowed to finish.
        """
        logger.info("monitor_loop_started", schedule=self.schedule.expression)

        while not shutdown_event.is_set():
            delay = self.schedule.seconds_until_next(self._clock())
            logger.debug("next_tick_scheduled", in_seconds=round(delay, 1))

            try:
                await asyncio.wait_for(shutdown_event.wait(), timeout=delay)
                break
            except asyncio.TimeoutError:
                pass

            await self.run_tick()

        logger.info("monitor_loop_stopped", ticks=self._tick_count)
