"""
Configuration management for the price monitor.

This module handles loading and validating configuration from YAML.
All configuration values are validated using Pydantic models to ensure
type safety and catch configuration errors early.

The configuration system supports:
- Market data provider connection settings
- Tracked assets, cadence and surge thresholds
- Swap rate assets and fee
- Notification channels and SMTP settings
- Storage backend, API and logging settings

Environment variables override secrets and connection settings:
    - MORALIS_API_KEY, ADMIN_EMAIL, DATABASE_URL, LOG_LEVEL
    - SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM

Example:
    >>> from pricewatch.config import load_config
    >>> config = load_config()
    >>> config.monitoring.interval_minutes
    5
"""

from pricewatch.config.loader import ConfigLoadError, ConfigLoader, load_config
from pricewatch.config.models import (
    # Enums
    LogFormat,
    LogLevel,
    SmtpSecurity,
    StorageBackend,
    # Sections
    ApiConfig,
    LoggingConfig,
    MonitoringConfig,
    NotificationsConfig,
    PostgresConnectionConfig,
    ProviderConfig,
    SmtpConfig,
    StorageConfig,
    SwapConfig,
    # Root config
    AppConfig,
)

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "LogFormat",
    "LogLevel",
    "SmtpSecurity",
    "StorageBackend",
    # Sections
    "ApiConfig",
    "LoggingConfig",
    "MonitoringConfig",
    "NotificationsConfig",
    "PostgresConnectionConfig",
    "ProviderConfig",
    "SmtpConfig",
    "StorageConfig",
    "SwapConfig",
    # Root config
    "AppConfig",
]
