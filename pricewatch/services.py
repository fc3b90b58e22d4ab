"""
Shared service plumbing: logging setup, store wiring and the service runner.

Each entry point under `services/` subclasses ServiceRunner and implements
`_initialize`, `_run` and `_cleanup`. The runner owns configuration loading,
logging, storage connections and signal-driven shutdown.

Example:
    >>> class MyService(ServiceRunner):
    ...     @property
    ...     def service_name(self) -> str:
    ...         return "my-service"
    ...     async def _initialize(self) -> None: ...
    ...     async def _run(self) -> None:
    ...         await self.shutdown_event.wait()
    ...     async def _cleanup(self) -> None: ...
    >>> asyncio.run(MyService().run())
"""

from __future__ import annotations

import asyncio
import logging
import os
import signal
from abc import ABC, abstractmethod
from typing import Optional, Tuple

import structlog

from pricewatch.config import AppConfig, LogFormat, StorageBackend, load_config
from pricewatch.interfaces.stores import AlertStore, SampleStore
from pricewatch.storage.memory import InMemoryAlertStore, InMemorySampleStore
from pricewatch.storage.postgres_client import PostgresClient

logger = structlog.get_logger(__name__)


def setup_logging(
    level: Optional[str] = None,
    log_format: LogFormat = LogFormat.JSON,
) -> None:
    """
    Configure structlog and the standard logging module.

    Args:
        level: Log level name. Defaults to LOG_LEVEL or INFO.
        log_format: JSON for machine-readable output, TEXT for console output.
    """
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()

    renderer = (
        structlog.processors.JSONRenderer()
        if log_format == LogFormat.JSON
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, level, logging.INFO),
        force=True,
    )

    # Reduce noise from HTTP client and server access logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


async def create_stores(
    config: AppConfig,
) -> Tuple[SampleStore, AlertStore, Optional[PostgresClient]]:
    """
    Build the sample and alert stores for the configured backend.

    For PostgreSQL the client is connected and the schema is created if
    missing. Connection failures propagate.

    Args:
        config: Application configuration.

    Returns:
        Tuple of (sample store, alert store, postgres client or None).
    """
    if config.storage.backend == StorageBackend.MEMORY:
        logger.warning(
            "memory_storage_selected",
            msg="samples and alerts are lost on restart",
        )
        return InMemorySampleStore(), InMemoryAlertStore(), None

    client = PostgresClient(config.postgres)
    await client.connect()
    await client.ensure_schema()
    return client, client, client


class ServiceRunner(ABC):
    """
    Base class for long-running services.

    Attributes:
        config_path: Directory holding the YAML configuration.
        config: Loaded configuration (set by `run`).
        sample_store: Sample store (set by `run`).
        alert_store: Alert store (set by `run`).
        postgres_client: PostgreSQL client when that backend is selected.
        shutdown_event: Set on SIGINT/SIGTERM or by `request_shutdown`.
        logger: Logger bound with the service name.
    """

    def __init__(self, config_path: str = "config") -> None:
        self.config_path = config_path
        self.config: Optional[AppConfig] = None
        self.sample_store: Optional[SampleStore] = None
        self.alert_store: Optional[AlertStore] = None
        self.postgres_client: Optional[PostgresClient] = None
        self.shutdown_event = asyncio.Event()
        self.logger = structlog.get_logger(self.service_name)

    @property
    @abstractmethod
    def service_name(self) -> str:
        """Name used in logs."""

    @abstractmethod
    async def _initialize(self) -> None:
        """Build service-specific components."""

    @abstractmethod
    async def _run(self) -> None:
        """Main service loop; returns when the service should stop."""

    @abstractmethod
    async def _cleanup(self) -> None:
        """Release service-specific resources."""

    def request_shutdown(self) -> None:
        """Ask the main loop to stop."""
        if not self.shutdown_event.is_set():
            self.logger.info("shutdown_requested")
            self.shutdown_event.set()

    def _install_signal_handlers(self) -> None:
        loop = asyncio.get_running_loop()
        for sig in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(sig, self.request_shutdown)
            except (NotImplementedError, RuntimeError):
                # Signal handlers are unavailable off the main thread
                self.logger.debug("signal_handler_unavailable", signal=sig.name)

    async def run(self) -> None:
        """
        Load configuration, connect storage, run the service, clean up.

        Raises:
            ConfigLoadError: If the configuration is invalid.
            PostgresConnectionException: If the database is unreachable.
        """
        self.config = load_config(self.config_path)
        setup_logging(self.config.log_level.value, self.config.logging.format)
        self.logger = structlog.get_logger(self.service_name)

        self.logger.info(
            "service_starting",
            service=self.service_name,
            storage=self.config.storage.backend.value,
        )

        self._install_signal_handlers()

        try:
            (
                self.sample_store,
                self.alert_store,
                self.postgres_client,
            ) = await create_stores(self.config)

            await self._initialize()
            self.logger.info("service_started", service=self.service_name)

            await self._run()
        finally:
            try:
                await self._cleanup()
            finally:
                if self.postgres_client is not None:
                    await self.postgres_client.disconnect()
                self.logger.info("service_stopped", service=self.service_name)
