"""
Configuration loader for YAML-based application configuration.

This module provides utilities to load and validate configuration from a
YAML file. All configuration is validated using Pydantic models to ensure
type safety and catch configuration errors early.

Configuration file expected:
    - config/monitor.yaml

Environment variables override:
    - MORALIS_API_KEY: Market data provider credential
    - ADMIN_EMAIL: Destination for surge notifications
    - DATABASE_URL: PostgreSQL connection URL
    - LOG_LEVEL: Application log level
    - SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM: Email channel

Example:
    >>> from pricewatch.config.loader import load_config
    >>> config = load_config("config")
    >>> print(config.monitoring.assets)
    ['ethereum', 'polygon']
"""

import os
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from pricewatch.config.models import (
    ApiConfig,
    AppConfig,
    LoggingConfig,
    LogLevel,
    MonitoringConfig,
    NotificationsConfig,
    PostgresConnectionConfig,
    ProviderConfig,
    SmtpConfig,
    StorageConfig,
    SwapConfig,
)

CONFIG_FILENAME = "monitor.yaml"


class ConfigLoadError(Exception):
    """
    Raised when configuration loading fails.

    Attributes:
        message: Error message describing what went wrong.
        file_path: Path to the file that caused the error, if applicable.
        cause: Original exception that caused the error, if any.
    """

    def __init__(
        self,
        message: str,
        file_path: Optional[Path] = None,
        cause: Optional[Exception] = None,
    ):
        self.message = message
        self.file_path = file_path
        self.cause = cause
        super().__init__(message)


def _to_decimal(value: Any) -> Any:
    """YAML floats go through str() so 0.03 stays exactly 0.03."""
    if isinstance(value, float):
        return Decimal(str(value))
    return value


class ConfigLoader:
    """
    Loads and validates application configuration from YAML.

    Expects the following directory structure:
        config/
        └── monitor.yaml

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.swap.fee_rate
        Decimal('0.03')
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Initialize config loader.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Configuration directory not found: {self.config_dir}",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Configuration path is not a directory: {self.config_dir}",
                file_path=self.config_dir,
            )

    @property
    def config_file(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def _load_yaml(self) -> Dict[str, Any]:
        """
        Load the YAML file from the config directory.

        Returns:
            Dict containing parsed YAML content.

        Raises:
            ConfigLoadError: If file not found, empty, or invalid YAML.
        """
        file_path = self.config_file
        if not file_path.exists():
            raise ConfigLoadError(
                f"Configuration file not found: {file_path}",
                file_path=file_path,
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
                if data is None:
                    raise ConfigLoadError(
                        f"Configuration file is empty: {file_path}",
                        file_path=file_path,
                    )
                if not isinstance(data, dict):
                    raise ConfigLoadError(
                        f"Configuration root must be a mapping: {file_path}",
                        file_path=file_path,
                    )
                return data
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Invalid YAML syntax in {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Error reading {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

    def _load_provider(self, data: Dict[str, Any]) -> ProviderConfig:
        """
        Parse the provider section.

        Environment variables:
            - MORALIS_API_KEY: API credential (overrides YAML)
        """
        provider_data = data.get("provider") or {}
        defaults = ProviderConfig()
        return ProviderConfig(
            base_url=provider_data.get("base_url", defaults.base_url),
            market_cap_endpoint=provider_data.get(
                "market_cap_endpoint", defaults.market_cap_endpoint
            ),
            api_key=os.getenv("MORALIS_API_KEY", provider_data.get("api_key")),
            timeout_seconds=provider_data.get("timeout_seconds", 10),
            rate_limit_per_second=provider_data.get("rate_limit_per_second", 5),
        )

    def _load_monitoring(self, data: Dict[str, Any]) -> MonitoringConfig:
        """Parse the monitoring section."""
        monitoring_data = data.get("monitoring") or {}
        defaults = MonitoringConfig()
        return MonitoringConfig(
            assets=monitoring_data.get("assets", defaults.assets),
            interval_minutes=monitoring_data.get("interval_minutes", 5),
            surge_threshold=_to_decimal(
                monitoring_data.get("surge_threshold", defaults.surge_threshold)
            ),
            surge_window_minutes=monitoring_data.get("surge_window_minutes", 60),
        )

    def _load_swap(self, data: Dict[str, Any]) -> SwapConfig:
        """Parse the swap section."""
        swap_data = data.get("swap") or {}
        defaults = SwapConfig()
        return SwapConfig(
            source_asset=swap_data.get("source_asset", defaults.source_asset),
            target_asset=swap_data.get("target_asset", defaults.target_asset),
            fee_rate=_to_decimal(swap_data.get("fee_rate", defaults.fee_rate)),
        )

    def _load_notifications(self, data: Dict[str, Any]) -> NotificationsConfig:
        """
        Parse the notifications section.

        Environment variables:
            - ADMIN_EMAIL: Surge destination (overrides YAML)
            - SMTP_HOST, SMTP_PORT, SMTP_USER, SMTP_PASS, SMTP_FROM
            - SMTP_SECURITY: starttls, ssl or none
        """
        notif_data = data.get("notifications") or {}
        smtp_data = notif_data.get("smtp") or {}
        defaults = NotificationsConfig()

        smtp = SmtpConfig(
            host=os.getenv("SMTP_HOST", smtp_data.get("host")),
            port=int(os.getenv("SMTP_PORT", smtp_data.get("port", 587))),
            security=str(
                os.getenv(
                    "SMTP_SECURITY",
                    smtp_data.get("security", defaults.smtp.security.value),
                )
            ).lower(),
            user=os.getenv("SMTP_USER", smtp_data.get("user")),
            password=os.getenv("SMTP_PASS", smtp_data.get("password")),
            sender=os.getenv(
                "SMTP_FROM", smtp_data.get("sender", defaults.smtp.sender)
            ),
            timeout_seconds=smtp_data.get("timeout_seconds", 10),
        )

        return NotificationsConfig(
            admin_destination=os.getenv(
                "ADMIN_EMAIL", notif_data.get("admin_destination")
            ),
            channels=notif_data.get("channels", defaults.channels),
            smtp=smtp,
        )

    def _load_storage(self, data: Dict[str, Any]) -> StorageConfig:
        """Parse the storage section."""
        storage_data = data.get("storage") or {}
        return StorageConfig(
            backend=storage_data.get("backend", "postgres"),
            hourly_window_hours=storage_data.get("hourly_window_hours", 24),
        )

    def _load_api(self, data: Dict[str, Any]) -> ApiConfig:
        """Parse the api section."""
        api_data = data.get("api") or {}
        return ApiConfig(
            host=api_data.get("host", "0.0.0.0"),
            port=api_data.get("port", 8000),
        )

    def _load_logging(self, data: Dict[str, Any]) -> LoggingConfig:
        """Parse the logging section."""
        logging_data = data.get("logging") or {}
        return LoggingConfig(
            format=logging_data.get("format", "json"),
            level=logging_data.get("level", "INFO"),
        )

    def _load_postgres_connection(self, data: Dict[str, Any]) -> PostgresConnectionConfig:
        """
        Load PostgreSQL connection configuration.

        Environment variables:
            - DATABASE_URL: PostgreSQL connection URL

        Returns:
            PostgresConnectionConfig object.
        """
        postgres_data = data.get("postgres") or {}
        defaults = PostgresConnectionConfig()
        return PostgresConnectionConfig(
            url=os.getenv("DATABASE_URL", postgres_data.get("url", defaults.url)),
            pool_size=postgres_data.get("pool_size", 5),
            pool_timeout=postgres_data.get("pool_timeout", 30),
        )

    def _get_log_level(self, fallback: LogLevel) -> LogLevel:
        """
        Get log level from environment.

        Environment variables:
            - LOG_LEVEL: Log level (default: value from the logging section)

        Returns:
            LogLevel enum value.
        """
        level_str = os.getenv("LOG_LEVEL", fallback.value).upper()
        try:
            return LogLevel(level_str)
        except ValueError:
            return fallback

    def load(self) -> AppConfig:
        """
        Load and validate the configuration file.

        Returns:
            AppConfig: Validated application configuration.

        Raises:
            ConfigLoadError: If any configuration is invalid or missing.
        """
        data = self._load_yaml()

        try:
            logging_config = self._load_logging(data)
            return AppConfig(
                provider=self._load_provider(data),
                monitoring=self._load_monitoring(data),
                swap=self._load_swap(data),
                notifications=self._load_notifications(data),
                storage=self._load_storage(data),
                api=self._load_api(data),
                logging=logging_config,
                postgres=self._load_postgres_connection(data),
                log_level=self._get_log_level(logging_config.level),
            )

        except ValidationError as e:
            raise ConfigLoadError(
                f"Configuration validation failed: {e}",
                file_path=self.config_file,
                cause=e,
            ) from e
        except (TypeError, ValueError) as e:
            raise ConfigLoadError(
                f"Invalid configuration value in {self.config_file}: {e}",
                file_path=self.config_file,
                cause=e,
            ) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Convenience function to load application configuration.

    Args:
        config_dir: Path to configuration directory (default: 'config').

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.

    Example:
        >>> from pricewatch.config import load_config
        >>> config = load_config()
        >>> config.notifications.admin_destination
        'ops@example.com'
    """
    loader = ConfigLoader(config_dir)
    return loader.load()
