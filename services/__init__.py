"""
Service entry points for the price monitor.

Services:
    monitor: Scheduled price sampling, surge detection and alert firing
    api: HTTP API for hourly prices, alert registration and swap quotes
"""
