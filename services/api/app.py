"""
FastAPI application for the price monitor API.

This module creates and configures the FastAPI application with:
- Lifespan events for store and provider session management
- Router registration for the price and health endpoints
- Error mapping for missing live rates

Endpoints:
    GET  /prices/hourly               Peak price per hour and asset, last 24h
    POST /prices/alert                Register or update a price alert
    GET  /prices/swap-rate/{amount}   Live swap quote with fee
    GET  /health                      Store reachability
"""

import os
from contextlib import asynccontextmanager
from datetime import datetime, timedelta, timezone
from typing import AsyncIterator, Optional

import structlog
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from pricewatch.adapters.moralis import MoralisAdapter
from pricewatch.config import AppConfig, load_config
from pricewatch.detection.registry import AlertRegistry
from pricewatch.interfaces.price_source import PriceSource
from pricewatch.interfaces.stores import AlertStore, SampleStore
from pricewatch.metrics.hourly import HourlyPriceQuery
from pricewatch.metrics.swap import MissingRateError, SwapRateCalculator
from pricewatch.services import create_stores, setup_logging
from pricewatch.storage.postgres_client import PostgresClient

logger = structlog.get_logger(__name__)


class AppState:
    """
    Application state container.

    Holds the stores and engine components initialized during application
    startup and released on shutdown.
    """

    def __init__(self) -> None:
        self.config: Optional[AppConfig] = None
        self.sample_store: Optional[SampleStore] = None
        self.alert_store: Optional[AlertStore] = None
        self.postgres_client: Optional[PostgresClient] = None
        self.price_source: Optional[PriceSource] = None
        self.registry: Optional[AlertRegistry] = None
        self.hourly_query: Optional[HourlyPriceQuery] = None
        self.swap_calculator: Optional[SwapRateCalculator] = None
        self.start_time: datetime = datetime.now(timezone.utc)

    def wire(
        self,
        config: AppConfig,
        sample_store: SampleStore,
        alert_store: AlertStore,
        price_source: PriceSource,
    ) -> None:
        """Build the engine components on top of the given stores and source."""
        self.config = config
        self.sample_store = sample_store
        self.alert_store = alert_store
        self.price_source = price_source
        self.registry = AlertRegistry(alert_store)
        self.hourly_query = HourlyPriceQuery(
            sample_store,
            window=timedelta(hours=config.storage.hourly_window_hours),
        )
        self.swap_calculator = SwapRateCalculator(
            price_source,
            source_asset=config.swap.source_asset,
            target_asset=config.swap.target_asset,
            fee_rate=config.swap.fee_rate,
        )

    def reset(self) -> None:
        self.__init__()


# Global application state
app_state = AppState()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Manage application lifespan events.

    Loads configuration, connects the stores and opens the provider client
    on startup; closes them on shutdown. Startup failures propagate.

    Args:
        app: FastAPI application instance.

    Yields:
        None: Control flow returns to the application.
    """
    config = load_config(os.getenv("CONFIG_PATH", "config"))
    setup_logging(config.log_level.value, config.logging.format)
    logger.info("api_starting", storage=config.storage.backend.value)

    sample_store, alert_store, postgres_client = await create_stores(config)
    app_state.postgres_client = postgres_client
    app_state.wire(
        config,
        sample_store,
        alert_store,
        MoralisAdapter.from_config(config.provider),
    )
    app_state.start_time = datetime.now(timezone.utc)
    logger.info("api_ready")

    try:
        yield
    finally:
        logger.info("api_shutting_down")

        if app_state.price_source is not None:
            await app_state.price_source.close()

        if app_state.postgres_client is not None:
            await app_state.postgres_client.disconnect()

        app_state.reset()
        logger.info("api_shutdown_complete")


async def missing_rate_handler(request: Request, exc: MissingRateError) -> JSONResponse:
    """Map a missing live rate to 503."""
    logger.warning("swap_rate_unavailable", asset=exc.asset, path=request.url.path)
    return JSONResponse(
        status_code=503,
        content={"detail": f"Live rate unavailable for {exc.asset}"},
    )


def create_app(app_lifespan=lifespan) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        app_lifespan: Lifespan context manager. Tests pass a no-op lifespan
            and populate `app_state` themselves.

    Returns:
        FastAPI: Configured FastAPI application instance.

    Example:
        >>> app = create_app()
        >>> import uvicorn
        >>> uvicorn.run(app, host="0.0.0.0", port=8000)
    """
    app = FastAPI(
        title="Price Monitor API",
        description="Hourly price history, price alerts and swap quotes",
        version="0.1.0",
        lifespan=app_lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_exception_handler(MissingRateError, missing_rate_handler)

    # Register API routers
    from services.api.routes.health import router as health_router
    from services.api.routes.prices import router as prices_router

    app.include_router(prices_router, prefix="/prices", tags=["Prices"])
    app.include_router(health_router, tags=["Health"])

    logger.debug("fastapi_app_created")

    return app


# Create the application instance
app = create_app()
