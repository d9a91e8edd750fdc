"""
Versioned schema migrations for the invoicing database.

Migration files are named ``vNNN_<name>.sql`` and live next to this
module. Every applied file is recorded in ``schema_migrations`` together
with a checksum of its contents; a file edited after it was applied runs
again on the next start.

Each migration runs in its own transaction. An existing database is
copied with SQLite's online backup API before a run and restored when the
run aborts on a database or filesystem error.
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from facturacion.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_FILENAME = re.compile(r"^v(\d+)_(\w+)\.sql$")

REQUIRED_TABLES = ("clientes", "facturas", "schema_migrations")

TRACKING_TABLE = """
    CREATE TABLE IF NOT EXISTS schema_migrations (
        version TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        checksum TEXT NOT NULL,
        execution_time_ms INTEGER,
        applied_at TEXT DEFAULT (datetime('now'))
    )
"""


@dataclass(frozen=True)
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILENAME.match(path.name)
        if match is None:
            raise ValueError(f"Not a migration file: {path.name}")
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=hashlib.sha256(path.read_bytes()).hexdigest()[:16],
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``directory``, lowest version first."""
    found = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("migration_file_ignored", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum they were applied with."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    """Highest applied version, or None for an unmigrated database."""
    applied = await get_applied_migrations(conn)
    if not applied:
        return None
    return max(applied, key=int)


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration file and record it, all in a single transaction."""
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        script = migration.path.read_text(encoding="utf-8")
        # executescript commits anything pending first; the explicit BEGIN
        # keeps the script and its bookkeeping row together.
        await conn.executescript(f"BEGIN;\n{script}\n")
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations
                (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
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
            execution_time_ms=elapsed_ms(),
            error=str(e),
        )

    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=elapsed_ms(),
    )
    return MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=elapsed_ms(),
    )


async def create_backup(db_path: Path) -> Path:
    """Copy the live database next to itself and return the copy's path."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_name(f"{db_path.stem}.backup_{stamp}{db_path.suffix}")
    async with aiosqlite.connect(db_path) as source, aiosqlite.connect(backup_path) as target:
        await source.backup(target)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    """Overwrite the database with a backup taken by ``create_backup``."""
    async with aiosqlite.connect(backup_path) as source, aiosqlite.connect(db_path) as target:
        await source.backup(target)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


def _resolve_db_path(db_path: Path | None) -> Path:
    return Path(db_path) if db_path is not None else get_settings().storage.db_path


async def _pending(
    conn: aiosqlite.Connection, migrations: list[MigrationInfo]
) -> list[MigrationInfo]:
    applied = await get_applied_migrations(conn)
    pending = []
    for migration in migrations:
        checksum = applied.get(migration.version)
        if checksum == migration.checksum:
            continue
        if checksum is not None:
            logger.warning("migration_changed_since_applied", version=migration.version)
        pending.append(migration)
    return pending


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> list[MigrationResult]:
    """
    Apply every pending migration, stopping at the first failure.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Back up an existing database first
        migrations_dir: Directory holding the migration files

    Returns:
        Results for the migrations that were attempted; empty when the
        schema was already current
    """
    db_path = _resolve_db_path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    migrations = discover_migrations(migrations_dir)
    if not migrations:
        logger.warning("no_migrations_found", directory=str(migrations_dir))
        return []

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = await create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")
            await conn.execute(TRACKING_TABLE)
            await conn.commit()

            for migration in await _pending(conn, migrations):
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break

                cursor = await conn.execute("PRAGMA foreign_key_check")
                violations = await cursor.fetchall()
                if violations:
                    logger.error(
                        "migration_left_foreign_key_violations",
                        version=migration.version,
                        violations=len(violations),
                    )
                    break
    except (aiosqlite.Error, OSError) as e:
        logger.error("database_initialization_failed", db_path=str(db_path), error=str(e))
        if backup_path is not None:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path is not None and all(r.success for r in results):
        backup_path.unlink()

    logger.info(
        "database_initialized",
        db_path=str(db_path),
        applied=[r.version for r in results if r.success],
    )
    return results


run_migrations = initialize_database


async def get_migration_status(
    db_path: Path | None = None,
    migrations_dir: Path = MIGRATIONS_DIR,
) -> dict[str, Any]:
    """Applied and pending versions of a database."""
    db_path = _resolve_db_path(db_path)
    migrations = discover_migrations(migrations_dir)

    if not db_path.exists():
        return {
            "exists": False,
            "current_version": None,
            "applied_migrations": [],
            "pending_migrations": [m.version for m in migrations],
            "total_migrations": len(migrations),
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        pending = await _pending(conn, migrations)
        current = await get_current_version(conn)

    return {
        "exists": True,
        "current_version": current,
        "applied_migrations": sorted(applied, key=int),
        "pending_migrations": [m.version for m in pending],
        "total_migrations": len(migrations),
    }


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict[str, Any]]:
    """Foreign key, page integrity and required-table checks."""
    db_path = _resolve_db_path(db_path)

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        {
            "check": "foreign_keys",
            "status": "FAIL" if violations else "PASS",
            "violations": len(violations),
        },
        {
            "check": "integrity",
            "status": "PASS" if integrity == "ok" else "FAIL",
            "result": integrity,
        },
        {
            "check": "required_tables",
            "status": "FAIL" if missing else "PASS",
            "missing": missing,
        },
    ]


async def _run_cli(args: argparse.Namespace) -> int:
    if args.status:
        status = await get_migration_status(args.db_path)
        print(f"Database exists:    {status['exists']}")
        print(f"Current version:    {status['current_version'] or '-'}")
        print(f"Applied migrations: {', '.join(status['applied_migrations']) or '-'}")
        print(f"Pending migrations: {', '.join(status['pending_migrations']) or '-'}")
        return 0

    if args.verify:
        checks = await verify_schema_integrity(args.db_path)
        for check in checks:
            details = {k: v for k, v in check.items() if k not in ("check", "status")}
            print(f"[{check['status']}] {check['check']} {details}")
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
    if not results:
        print("Schema is up to date")
    for result in results:
        outcome = "OK" if result.success else "FAILED"
        print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms} ms)")
        if result.error:
            print(f"    {result.error}")
    return 0 if all(r.success for r in results) else 1


def main() -> None:
    """Entry point of ``facturacion-migrate``."""
    parser = argparse.ArgumentParser(description="Facturacion database migrations")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    parser.add_argument("--status", action="store_true", help="Show applied and pending migrations")
    parser.add_argument("--verify", action="store_true", help="Run schema integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration backup")
    args = parser.parse_args()

    configure_logging()
    raise SystemExit(asyncio.run(_run_cli(args)))


if __name__ == "__main__":
    main()
