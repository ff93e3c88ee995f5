"""
Ledger schema migrator.

Migrations are ``vNNN_name.sql`` files in this package, applied in version
order. Each file runs in one write transaction together with its
``schema_migrations`` row, so a failed migration leaves no partial schema
behind. A file whose checksum differs from the recorded one is refused.
"""

import asyncio
import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from batchledger.config import configure_logging, get_logger, get_settings
from batchledger.core.exceptions import ConfigurationError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

FILENAME_PATTERN = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = (
    "inventory_batches",
    "batch_movements",
    "material_aggregates",
    "schema_migrations",
)

APPEND_ONLY_TRIGGERS = (
    "trg_batch_movements_no_update",
    "trg_batch_movements_no_delete",
    "trg_inventory_batches_no_delete",
)

# Batches whose remaining quantity disagrees with their movement sum
UNBALANCED_BATCHES_SQL = """
    SELECT b.id
    FROM inventory_batches b
    LEFT JOIN batch_movements m ON m.batch_id = b.id
    GROUP BY b.id
    HAVING ABS(
        CAST(b.remaining_quantity AS REAL) - COALESCE(SUM(CAST(m.quantity AS REAL)), 0)
    ) > 1e-9
"""


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = FILENAME_PATTERN.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")

        checksum = hashlib.sha256(path.read_bytes()).hexdigest()[:16]
        return cls(version=match.group(1), name=match.group(2), path=path, checksum=checksum)

    def script(self, elapsed_ms: int = 0) -> str:
        """The migration wrapped in a transaction that also records it."""
        body = self.path.read_text(encoding="utf-8")
        return (
            "BEGIN IMMEDIATE;\n"
            f"{body}\n"
            "INSERT INTO schema_migrations (version, name, checksum, execution_time_ms) "
            f"VALUES ('{self.version}', '{self.name}', '{self.checksum}', {elapsed_ms});\n"
            "COMMIT;\n"
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order; badly named files are skipped."""
    migrations = []
    for path in sorted(MIGRATIONS_DIR.glob("v*.sql")):
        try:
            migrations.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return migrations


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to their recorded checksums."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        return {}
    return {row[0]: row[1] for row in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


def pending_migrations(
    discovered: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo]:
    """
    Migrations not yet applied.

    Raises:
        ConfigurationError: An applied migration file was edited afterwards
    """
    pending = []
    for migration in discovered:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            raise ConfigurationError(
                f"Migration v{migration.version} ({migration.name}) changed after it "
                f"was applied: checksum {migration.checksum}, recorded {recorded}",
                details={"version": migration.version},
            )
    return pending


async def apply_migration(
    conn: aiosqlite.Connection, migration: MigrationInfo
) -> MigrationResult:
    """Apply one migration atomically; failures are reported, not raised."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    try:
        await conn.executescript(migration.script())
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        elapsed = int((time.perf_counter() - started) * 1000)
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=elapsed,
            error=str(e),
        )

    elapsed = int((time.perf_counter() - started) * 1000)
    await conn.execute(
        "UPDATE schema_migrations SET execution_time_ms = ? WHERE version = ?",
        (elapsed, migration.version),
    )
    await conn.commit()
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed,
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed,
    )


def create_backup(db_path: Path) -> Path:
    """Copy the database file aside before migrating."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.name}.bak-{stamp}")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def restore_backup(db_path: Path, backup_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the ledger database up to the latest schema.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Copy an existing database aside first; the copy
            is restored if a migration fails and removed otherwise

    Returns:
        Results for the migrations applied by this call, in order
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending = pending_migrations(
                discover_migrations(), await get_applied_migrations(conn)
            )
            for migration in pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break

        if not all(r.success for r in results):
            failed = results[-1]
            raise ConfigurationError(
                f"Migration v{failed.version} ({failed.name}) failed: {failed.error}",
                details={"version": failed.version},
            )
    except BaseException:
        if backup_path is not None:
            restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        backup_path.unlink()

    logger.info(
        "database_initialized",
        applied=[r.version for r in results],
    )
    return results


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Current version plus applied and pending migration versions."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in discovered],
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    return {
        "exists": True,
        "current_version": max(applied) if applied else None,
        "applied_migrations": list(applied),
        "pending_migrations": [m.version for m in discovered if m.version not in applied],
        "total_migrations": len(discovered),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict]:
    """
    Check the database file, the ledger schema and batch balances.

    Every check reports ``PASS`` or ``FAIL``; ``batch_balances`` lists
    batches whose remaining quantity no longer equals their movement sum.
    """
    db_path = db_path or get_settings().storage.db_path
    checks: list[dict] = []

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA integrity_check")
        integrity = (await cursor.fetchone())[0]
        checks.append({
            "check": "integrity",
            "status": "PASS" if integrity == "ok" else "FAIL",
            "result": integrity,
        })

        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()
        checks.append({
            "check": "foreign_keys",
            "status": "FAIL" if violations else "PASS",
            "violations": len(violations),
        })

        cursor = await conn.execute("SELECT name, type FROM sqlite_master")
        objects = {(row[0], row[1]) for row in await cursor.fetchall()}

        missing_tables = [t for t in REQUIRED_TABLES if (t, "table") not in objects]
        checks.append({
            "check": "required_tables",
            "status": "FAIL" if missing_tables else "PASS",
            "missing": missing_tables,
        })

        missing_triggers = [t for t in APPEND_ONLY_TRIGGERS if (t, "trigger") not in objects]
        checks.append({
            "check": "append_only_triggers",
            "status": "FAIL" if missing_triggers else "PASS",
            "missing": missing_triggers,
        })

        if not missing_tables:
            cursor = await conn.execute(UNBALANCED_BATCHES_SQL)
            unbalanced = [row[0] for row in await cursor.fetchall()]
            checks.append({
                "check": "batch_balances",
                "status": "FAIL" if unbalanced else "PASS",
                "batch_ids": unbalanced,
            })

    return checks


def main() -> None:
    """CLI entry point for database migration."""
    import argparse

    parser = argparse.ArgumentParser(description="Batch ledger schema migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show migration status")
    group.add_argument("--verify", action="store_true", help="Verify schema integrity")
    parser.add_argument(
        "--no-backup", action="store_true", help="Skip backup before migrations"
    )
    args = parser.parse_args()

    configure_logging()

    async def run() -> int:
        if args.status:
            status = await get_migration_status(args.db_path)
            print(f"Database exists:  {status['exists']}")
            print(f"Current version:  {status['current_version'] or '-'}")
            print(f"Applied:          {', '.join(status['applied_migrations']) or '-'}")
            print(f"Pending:          {', '.join(status['pending_migrations']) or '-'}")
            return 0

        if args.verify:
            checks = await verify_schema_integrity(args.db_path)
            for check in checks:
                extra = {k: v for k, v in check.items() if k not in ("check", "status")}
                print(f"[{check['status']}] {check['check']} {extra}")
            return 0 if all(c["status"] == "PASS" for c in checks) else 1

        results = await initialize_database(
            args.db_path, create_backup_before=not args.no_backup
        )
        for result in results:
            print(f"[OK] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if not results:
            print("Schema is up to date")
        return 0

    raise SystemExit(asyncio.run(run()))


if __name__ == "__main__":
    main()
