"""
Storage backends for the price monitor.

Components:
    postgres_client: Async PostgreSQL client (SampleStore + AlertStore)
    memory: Process-local stores with the same query semantics
"""

from pricewatch.storage.memory import InMemoryAlertStore, InMemorySampleStore
from pricewatch.storage.postgres_client import (
    PostgresClient,
    PostgresClientError,
    PostgresConnectionException,
    PostgresOperationError,
)

__all__: list[str] = [
    # PostgreSQL
    "PostgresClient",
    "PostgresClientError",
    "PostgresConnectionException",
    "PostgresOperationError",
    # In-memory
    "InMemorySampleStore",
    "InMemoryAlertStore",
]
