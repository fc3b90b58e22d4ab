"""
Price monitor API entry point.

Usage:
    python -m services.api.main

    Or with uvicorn directly:
    uvicorn services.api.app:app --host 0.0.0.0 --port 8000

Environment Variables:
    CONFIG_PATH: Path to config directory (default: config)
    API_HOST: Host to bind to (overrides api.host)
    API_PORT: Port to run on (overrides api.port)
    LOG_LEVEL: Logging level (default: INFO)
"""

import os
import sys

import structlog
import uvicorn

from pricewatch.config import load_config
from pricewatch.services import setup_logging


def main() -> None:
    """
    Main entry point for the API service.

    Configures logging and starts the Uvicorn server with the FastAPI application.
    """
    config = load_config(os.getenv("CONFIG_PATH", "config"))
    setup_logging(config.log_level.value, config.logging.format)

    logger = structlog.get_logger(__name__)
    logger.info(
        "api_service_starting",
        python_version=sys.version,
    )

    host = os.getenv("API_HOST", config.api.host)
    port = int(os.getenv("API_PORT", str(config.api.port)))

    uvicorn.run(
        "services.api.app:app",
        host=host,
        port=port,
        log_level=config.log_level.value.lower(),
        reload=False,
        workers=1,
        access_log=False,
    )


if __name__ == "__main__":
    main()
