"""
Surge detection, alert matching and notification dispatch.

Components:
    surge: SurgeDetector comparing fresh prices to the trailing window
    matcher: AlertMatcher firing reached price-target alerts
    registry: AlertRegistry upserting alerts by (asset, destination)
    dispatcher: NotificationDispatcher fanning out to channels
    channels: Console and email channels

Example:
    >>> from pricewatch.detection import AlertMatcher, SurgeDetector
    >>> detector = SurgeDetector(sample_store)
    >>> matcher = AlertMatcher(alert_store, dispatcher)
"""

from pricewatch.detection.dispatcher import (
    NotificationChannel,
    NotificationDispatcher,
    create_dispatcher,
)
from pricewatch.detection.matcher import AlertMatcher
from pricewatch.detection.registry import AlertRegistry, normalize_asset
from pricewatch.detection.surge import (
    DEFAULT_SURGE_THRESHOLD,
    DEFAULT_SURGE_WINDOW,
    SurgeDetector,
)

__all__ = [
    # Dispatcher
    "NotificationChannel",
    "NotificationDispatcher",
    "create_dispatcher",
    # Detection
    "SurgeDetector",
    "DEFAULT_SURGE_THRESHOLD",
    "DEFAULT_SURGE_WINDOW",
    "AlertMatcher",
    "AlertRegistry",
    "normalize_asset",
]
