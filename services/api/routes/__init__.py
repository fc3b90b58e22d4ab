"""
REST API endpoints for the price monitor.

This package provides FastAPI routers for:
- Prices: Hourly peaks, alert registration and swap quotes
- Health: Store reachability
"""
