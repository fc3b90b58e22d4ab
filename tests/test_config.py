"""Tests for YAML configuration loading and validation."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest
from pydantic import ValidationError

from pricewatch.config import (
    AppConfig,
    ConfigLoadError,
    ConfigLoader,
    LogLevel,
    MonitoringConfig,
    SmtpSecurity,
    StorageBackend,
    SwapConfig,
    load_config,
)

REPO_CONFIG_DIR = Path(__file__).parent.parent / "config"

ENV_VARS = (
    "MORALIS_API_KEY",
    "ADMIN_EMAIL",
    "DATABASE_URL",
    "LOG_LEVEL",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_FROM",
    "SMTP_SECURITY",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove environment overrides so only the YAML is read."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, text: str) -> Path:
    (tmp_path / "monitor.yaml").write_text(text, encoding="utf-8")
    return tmp_path


def test_repository_config_loads():
    config = load_config(REPO_CONFIG_DIR)

    assert config.monitoring.assets == ["ethereum", "polygon"]
    assert config.monitoring.interval_minutes == 5
    assert config.monitoring.surge_threshold == Decimal("0.03")
    assert config.swap.fee_rate == Decimal("0.03")
    assert config.storage.backend == StorageBackend.POSTGRES


def test_minimal_file_uses_defaults(tmp_path):
    config = load_config(_write(tmp_path, "monitoring:\n  assets: [Ethereum]\n"))

    assert config.monitoring.assets == ["ethereum"]
    assert config.swap.source_asset == "ethereum"
    assert config.swap.target_asset == "bitcoin"
    assert config.notifications.admin_destination is None


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("MORALIS_API_KEY", "key-123")
    monkeypatch.setenv("ADMIN_EMAIL", "ops@example.com")
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/prices")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    monkeypatch.setenv("SMTP_HOST", "smtp.example.com")

    config = load_config(_write(tmp_path, "storage:\n  backend: memory\n"))

    assert config.provider.api_key == "key-123"
    assert config.notifications.admin_destination == "ops@example.com"
    assert config.postgres.url == "postgresql://u:p@db:5432/prices"
    assert config.log_level == LogLevel.DEBUG
    assert config.notifications.smtp.is_configured
    assert config.storage.backend == StorageBackend.MEMORY


def test_empty_sections_use_defaults(tmp_path):
    config = load_config(
        _write(
            tmp_path,
            "provider:\nmonitoring:\n  assets: [ethereum]\nswap:\n"
            "notifications:\n  smtp:\nstorage:\napi:\nlogging:\npostgres:\n",
        )
    )

    assert config.monitoring.assets == ["ethereum"]
    assert config.notifications.smtp.port == 587
    assert config.notifications.smtp.security == SmtpSecurity.STARTTLS
    assert not config.notifications.smtp.is_configured
    assert config.storage.backend == StorageBackend.POSTGRES


def test_smtp_security_from_file_and_environment(tmp_path, monkeypatch):
    config_dir = _write(
        tmp_path, "notifications:\n  smtp:\n    port: 465\n    security: ssl\n"
    )

    assert load_config(config_dir).notifications.smtp.security == SmtpSecurity.SSL

    monkeypatch.setenv("SMTP_SECURITY", "NONE")

    assert load_config(config_dir).notifications.smtp.security == SmtpSecurity.NONE


def test_unknown_smtp_security_rejected(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, "notifications:\n  smtp:\n    security: tls13\n"))


def test_missing_directory(tmp_path):
    with pytest.raises(ConfigLoadError):
        ConfigLoader(tmp_path / "nope")


def test_missing_file(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(tmp_path)


def test_empty_file(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, ""))


def test_invalid_yaml(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, "monitoring: [unclosed\n"))


def test_interval_must_divide_hour(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, "monitoring:\n  interval_minutes: 7\n"))


def test_unknown_channel_rejected(tmp_path):
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, "notifications:\n  channels: [pager]\n"))


def test_duplicate_assets_rejected():
    with pytest.raises(ValidationError):
        MonitoringConfig(assets=["ethereum", "Ethereum"])


def test_swap_assets_must_differ():
    with pytest.raises(ValidationError):
        SwapConfig(source_asset="bitcoin", target_asset="Bitcoin")


def test_config_is_frozen():
    config = AppConfig()

    with pytest.raises(ValidationError):
        config.log_level = LogLevel.DEBUG
