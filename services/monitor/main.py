"""
Price Monitor Service entry point.

This service is responsible for:
- Fetching the live price of every tracked asset on a */5 cadence
- Persisting one sample per asset per tick
- Notifying the administrator of price surges
- Firing registered price-target alerts

Usage:
    python -m services.monitor.main

Environment Variables:
    CONFIG_PATH: Path to config directory (default: config)
    MORALIS_API_KEY: Market data provider API key
    ADMIN_EMAIL: Destination for surge notifications
    DATABASE_URL: PostgreSQL connection URL
    LOG_LEVEL: Logging level (default: INFO)
    SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM: Email delivery
    MONITOR_RUN_ONCE: Set to 1 to run a single tick and exit
"""

from __future__ import annotations

import asyncio
import os
import sys
from datetime import timedelta
from typing import Optional

import structlog

from pricewatch.adapters.moralis import MoralisAdapter
from pricewatch.detection.dispatcher import NotificationDispatcher, create_dispatcher
from pricewatch.detection.matcher import AlertMatcher
from pricewatch.detection.surge import SurgeDetector
from pricewatch.interfaces.price_source import PriceSource
from pricewatch.monitoring import CadenceSchedule, PriceMonitor
from pricewatch.services import ServiceRunner, setup_logging

logger = structlog.get_logger(__name__)


class PriceMonitorService(ServiceRunner):
    """
    Scheduled price monitoring service.

    Attributes:
        price_source: Live price adapter.
        dispatcher: Notification dispatcher.
        monitor: The tick orchestrator.
        run_once: Run a single tick and exit instead of looping.
    """

    def __init__(self, config_path: str = "config", run_once: bool = False) -> None:
        """Initialize the price monitor service."""
        super().__init__(config_path)
        self.run_once = run_once
        self.price_source: Optional[PriceSource] = None
        self.dispatcher: Optional[NotificationDispatcher] = None
        self.monitor: Optional[PriceMonitor] = None

    @property
    def service_name(self) -> str:
        """Return service name."""
        return "price-monitor"

    async def _initialize(self) -> None:
        """Wire the adapter, detectors and monitor."""
        if self.config is None or self.sample_store is None or self.alert_store is None:
            raise RuntimeError("Service not properly initialized")

        if not self.config.provider.api_key:
            self.logger.warning(
                "provider_api_key_missing",
                msg="MORALIS_API_KEY not set -- provider requests will be rejected",
            )

        self.price_source = MoralisAdapter.from_config(self.config.provider)
        self.dispatcher = create_dispatcher(self.config.notifications)

        monitoring = self.config.monitoring
        surge_detector = SurgeDetector(
            self.sample_store,
            threshold=monitoring.surge_threshold,
            window=timedelta(minutes=monitoring.surge_window_minutes),
        )

        self.monitor = PriceMonitor(
            assets=monitoring.assets,
            price_source=self.price_source,
            sample_store=self.sample_store,
            surge_detector=surge_detector,
            alert_matcher=AlertMatcher(self.alert_store, self.dispatcher),
            dispatcher=self.dispatcher,
            admin_destination=self.config.notifications.admin_destination,
            schedule=CadenceSchedule(monitoring.interval_minutes),
        )

        self.logger.info(
            "monitor_components_initialized",
            assets=monitoring.assets,
            channels=self.dispatcher.get_available_channels(),
            run_once=self.run_once,
        )

    async def _run(self) -> None:
        """Run the scheduled loop, or a single tick in run-once mode."""
        if self.monitor is None:
            raise RuntimeError("Service not properly initialized")

        if self.run_once:
            await self.monitor.run_tick()
            return

        await self.monitor.run_forever(self.shutdown_event)

    async def _cleanup(self) -> None:
        """Close the provider session."""
        if self.price_source is not None:
            await self.price_source.close()
            self.logger.info(
                "cleanup_state",
                ticks=self.monitor.tick_count if self.monitor else 0,
                provider=self.price_source.provider_name,
            )


async def main() -> None:
    """Main entry point."""
    setup_logging()

    config_path = os.getenv("CONFIG_PATH", "config")
    run_once = os.getenv("MONITOR_RUN_ONCE", "0") == "1"

    logger.info(
        "price_monitor_service_starting",
        config_path=config_path,
        run_once=run_once,
    )

    service = PriceMonitorService(config_path=config_path, run_once=run_once)

    try:
        await service.run()
    except Exception as e:
        logger.error("service_failed", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    asyncio.run(main())
