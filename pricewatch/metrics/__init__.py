"""
On-demand price queries.

Components:
    hourly: HourlyPriceQuery for per-hour peak prices
    swap: SwapRateCalculator for cross-asset swap quotes
"""

from pricewatch.metrics.hourly import HourlyPriceQuery
from pricewatch.metrics.swap import (
    DEFAULT_FEE_RATE,
    MissingRateError,
    SwapRateCalculator,
)

__all__: list[str] = [
    "HourlyPriceQuery",
    "SwapRateCalculator",
    "MissingRateError",
    "DEFAULT_FEE_RATE",
]
