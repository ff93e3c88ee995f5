"""Tests for settings and logging configuration."""

from decimal import Decimal
from pathlib import Path

import pytest
import structlog
import structlog.testing

from batchledger.config import (
    bind_operation,
    configure_logging,
    get_logger,
    get_settings,
    render_decimals,
    reset_settings,
)
from batchledger.config.settings import LedgerSettings


class TestSettings:
    def test_defaults(self, tmp_path: Path):
        settings = get_settings()
        assert settings.storage.db_path == tmp_path / "data" / "batchledger.db"
        assert settings.storage.data_dir.exists()
        assert settings.ledger.quantity_places == 3
        assert settings.ledger.cost_places == 4
        assert settings.ledger.location_fallback is False

    def test_env_prefixes(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("LEDGER_CONFLICT_RETRIES", "7")
        monkeypatch.setenv("LEDGER_LOCATION_FALLBACK", "true")
        monkeypatch.setenv("STORAGE_POOL_SIZE", "2")
        reset_settings()

        settings = get_settings()
        assert settings.ledger.conflict_retries == 7
        assert settings.ledger.location_fallback is True
        assert settings.storage.pool_size == 2

    def test_singleton(self):
        assert get_settings() is get_settings()

    def test_invalid_places_rejected(self):
        with pytest.raises(ValueError):
            LedgerSettings(cost_places=12)


class TestLogging:
    @pytest.mark.parametrize("environment", ["development", "production"])
    def test_configure_logging(self, monkeypatch: pytest.MonkeyPatch, environment: str):
        monkeypatch.setenv("ENVIRONMENT", environment)
        reset_settings()

        configure_logging()
        get_logger("batchledger.test").info("logging_configured", environment=environment)

        structlog.reset_defaults()

    def test_render_decimals(self):
        event = render_decimals(None, "info", {"quantity": Decimal("1.500"), "batch_id": 3})
        assert event == {"quantity": "1.500", "batch_id": 3}

    def test_bind_operation(self):
        with bind_operation("allocate_stock", material_id="MAT-001"):
            bound = structlog.contextvars.get_contextvars()
            assert bound == {"operation": "allocate_stock", "material_id": "MAT-001"}
        assert "operation" not in structlog.contextvars.get_contextvars()

    def test_events_capturable(self):
        with structlog.testing.capture_logs() as logs:
            get_logger("batchledger.test").info("batch_created", quantity=Decimal("2.5"))
        assert logs[0]["event"] == "batch_created"
