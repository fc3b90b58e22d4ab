"""
Scheduled price monitoring.

Components:
    schedule: CadenceSchedule, wall-clock aligned fire times
    monitor: PriceMonitor and TickResult
"""

from pricewatch.monitoring.monitor import PriceMonitor, TickResult
from pricewatch.monitoring.schedule import CadenceSchedule

__all__: list[str] = [
    "PriceMonitor",
    "TickResult",
    "CadenceSchedule",
]
