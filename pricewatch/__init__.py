"""
Crypto Price Monitoring & Alerting Engine.

Samples cryptocurrency spot prices on a fixed cadence, persists them as a
time series, detects short-term price surges and fires user-registered
price-target alerts.

This package provides:
- Data models for price samples, alerts and swap quotes
- A market data client for the Moralis market-data API
- Abstract sample/alert stores with PostgreSQL and in-memory backends
- Notification channels and dispatcher
- The monitoring scheduler and on-demand price queries
"""

__version__ = "0.1.0"
