"""Tests for the service runner and the monitor service in run-once mode."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

import pytest

from pricewatch.config import StorageBackend, load_config
from pricewatch.services import create_stores
from pricewatch.storage.memory import InMemoryAlertStore, InMemorySampleStore
from services.monitor.main import PriceMonitorService
from tests.conftest import FakePriceSource

MEMORY_CONFIG = """\
monitoring:
  assets: [ethereum, polygon]
storage:
  backend: memory
notifications:
  channels: [console]
logging:
  format: text
"""


@pytest.fixture
def config_dir(tmp_path: Path, monkeypatch) -> Path:
    """Write a memory-backed config and clear environment overrides."""
    for name in ("ADMIN_EMAIL", "DATABASE_URL", "LOG_LEVEL", "MORALIS_API_KEY", "SMTP_HOST"):
        monkeypatch.delenv(name, raising=False)
    (tmp_path / "monitor.yaml").write_text(MEMORY_CONFIG, encoding="utf-8")
    return tmp_path


@pytest.mark.asyncio
async def test_create_stores_memory_backend(config_dir):
    config = load_config(config_dir)
    assert config.storage.backend == StorageBackend.MEMORY

    sample_store, alert_store, postgres_client = await create_stores(config)

    assert isinstance(sample_store, InMemorySampleStore)
    assert isinstance(alert_store, InMemoryAlertStore)
    assert postgres_client is None


@pytest.mark.asyncio
async def test_monitor_service_run_once(config_dir):
    source = FakePriceSource(prices={"ethereum": Decimal("2000"), "polygon": Decimal("0.85")})
    service = PriceMonitorService(config_path=str(config_dir), run_once=True)

    with patch(
        "services.monitor.main.MoralisAdapter.from_config", return_value=source
    ):
        await service.run()

    assert service.monitor is not None
    assert service.monitor.tick_count == 1
    assert [s.asset for s in service.sample_store.samples] == ["ethereum", "polygon"]
    assert source.closed


@pytest.mark.asyncio
async def test_monitor_service_stops_when_shutdown_requested(config_dir):
    source = FakePriceSource(prices={"ethereum": Decimal("2000")})
    service = PriceMonitorService(config_path=str(config_dir))
    service.request_shutdown()

    with patch(
        "services.monitor.main.MoralisAdapter.from_config", return_value=source
    ):
        await service.run()

    assert service.monitor.tick_count == 0
    assert source.closed
