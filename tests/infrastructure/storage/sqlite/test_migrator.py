"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from batchledger.core.exceptions import ConfigurationError
from batchledger.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    MigrationResult,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    pending_migrations,
    restore_backup,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v001_initial_schema.sql"
        migration_file.write_text("-- Test migration\nSELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "001"
        assert info.name == "initial_schema"
        assert len(info.checksum) == 16

    def test_from_file_invalid_filename_raises(self, tmp_path: Path):
        invalid_file = tmp_path / "invalid_migration.sql"
        invalid_file.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(invalid_file)

    def test_result_defaults(self):
        result = MigrationResult(version="001", name="x", success=True, execution_time_ms=1)
        assert result.error is None


class TestDiscoverMigrations:
    def test_finds_ledger_schema(self):
        versions = [m.version for m in discover_migrations()]
        assert "001" in versions

    def test_returns_empty_when_no_migrations(self, tmp_path: Path):
        with patch(
            "batchledger.infrastructure.storage.sqlite.migrations.migrator.MIGRATIONS_DIR",
            tmp_path,
        ):
            assert discover_migrations() == []


class TestGetAppliedMigrations:
    async def test_returns_empty_when_no_table(self, temp_db_path: Path):
        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_applied_migrations(conn) == {}
            assert await get_current_version(conn) is None


class TestInitializeDatabase:
    async def test_applies_schema(self, temp_db_path: Path):
        results = await initialize_database(temp_db_path, create_backup_before=False)

        assert results
        assert all(r.success for r in results)

        async with aiosqlite.connect(temp_db_path) as conn:
            assert await get_current_version(conn) == "001"

    async def test_second_run_is_noop(self, ledger_db: Path):
        results = await initialize_database(ledger_db, create_backup_before=False)
        assert results == []

    async def test_status(self, ledger_db: Path, tmp_path: Path):
        status = await get_migration_status(ledger_db)
        assert status["exists"] is True
        assert status["pending_migrations"] == []

        missing = await get_migration_status(tmp_path / "missing.db")
        assert missing["exists"] is False

    async def test_verify_schema_integrity(self, ledger_db: Path):
        checks = await verify_schema_integrity(ledger_db)
        assert {c["check"] for c in checks} == {
            "foreign_keys",
            "integrity",
            "required_tables",
            "append_only_triggers",
            "batch_balances",
        }
        assert all(c["status"] == "PASS" for c in checks)


class TestPendingMigrations:
    def test_unapplied_are_pending(self):
        discovered = discover_migrations()
        assert pending_migrations(discovered, {}) == discovered

    def test_edited_migration_refused(self):
        discovered = discover_migrations()
        applied = {discovered[0].version: "0" * 16}

        with pytest.raises(ConfigurationError, match="changed after it was applied"):
            pending_migrations(discovered, applied)


class TestMigrationFailure:
    async def test_failed_migration_leaves_nothing_behind(self, tmp_path: Path):
        (tmp_path / "v001_broken.sql").write_text(
            "CREATE TABLE schema_migrations (version TEXT PRIMARY KEY, name TEXT, "
            "checksum TEXT, execution_time_ms INTEGER);\n"
            "CREATE TABLE half_done (id INTEGER);\n"
            "INSERT INTO no_such_table VALUES (1);\n"
        )
        db_path = tmp_path / "broken.db"

        with patch(
            "batchledger.infrastructure.storage.sqlite.migrations.migrator.MIGRATIONS_DIR",
            tmp_path,
        ):
            with pytest.raises(ConfigurationError):
                await initialize_database(db_path, create_backup_before=False)

        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            assert await cursor.fetchall() == []


class TestBatchBalances:
    async def test_detects_unbalanced_batch(self, ledger_db: Path):
        async with aiosqlite.connect(ledger_db) as conn:
            await conn.execute(
                """
                INSERT INTO inventory_batches (
                    material_id, batch_number, supplier_id, receipt_date,
                    quantity_received, remaining_quantity, unit_cost, is_depleted,
                    version, created_at, updated_at
                ) VALUES ('MAT-001', 'B-1', 'SUP-1', '2026-01-01', '10', '10', '1', 0,
                          1, '2026-01-01T00:00:00', '2026-01-01T00:00:00')
                """
            )
            await conn.commit()

        checks = {c["check"]: c for c in await verify_schema_integrity(ledger_db)}

        assert checks["batch_balances"]["status"] == "FAIL"
        assert checks["batch_balances"]["batch_ids"] == [1]


class TestBackup:
    def test_backup_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "ledger.db"
        db_path.write_bytes(b"original")

        backup = create_backup(db_path)
        db_path.write_bytes(b"changed")
        restore_backup(db_path, backup)

        assert db_path.read_bytes() == b"original"
