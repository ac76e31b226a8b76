"""
Schema migration runner.

Migrations are plain SQL files named NNN_description.sql, applied in
version order and recorded in schema_migrations. A file carrying
``-- requires-table: <name>`` lines is recorded without running its body
when any listed table is missing.
"""

import re
import sqlite3
from pathlib import Path

import aiosqlite
from pydantic import BaseModel

from tagging_rugby.utils.exceptions import MigrationError
from tagging_rugby.utils.logger import get_logger

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent / "sql" / "migrations"

_FILENAME_RE = re.compile(r"^(\d+)_(.+)\.sql$")
_REQUIRES_TABLE_RE = re.compile(r"^--\s*requires-table:\s*(\S+)\s*$")


class Migration(BaseModel):
    """One migration file."""

    version: int
    name: str
    sql: str

    @property
    def required_tables(self) -> list[str]:
        """Tables named by requires-table directives."""
        tables = []
        for line in self.sql.splitlines():
            match = _REQUIRES_TABLE_RE.match(line.strip())
            if match:
                tables.append(match.group(1))
        return tables

    def statements(self) -> list[str]:
        """Split the file into executable statements, dropping comment-only fragments."""
        result = []
        for fragment in self.sql.split(";"):
            code_lines = [
                line
                for line in fragment.splitlines()
                if line.strip() and not line.strip().startswith("--")
            ]
            if code_lines:
                result.append(fragment.strip())
        return result


def load_migrations(migrations_dir: Path | None = None) -> list[Migration]:
    """
    Read migration files from a directory.

    Args:
        migrations_dir: Directory to scan, defaults to the packaged migrations

    Returns:
        Migrations sorted by version

    Raises:
        MigrationError: If two files share a version number
    """
    directory = Path(migrations_dir) if migrations_dir else MIGRATIONS_DIR
    migrations: dict[int, Migration] = {}

    for path in directory.glob("*.sql"):
        match = _FILENAME_RE.match(path.name)
        if not match:
            logger.warning(f"Ignoring migration file with unexpected name: {path.name}")
            continue
        version = int(match.group(1))
        if version in migrations:
            raise MigrationError(
                f"duplicate migration version {version}",
                {"files": [migrations[version].name, path.name]},
            )
        migrations[version] = Migration(
            version=version,
            name=path.name,
            sql=path.read_text(encoding="utf-8"),
        )

    return [migrations[v] for v in sorted(migrations)]


async def table_exists(conn: aiosqlite.Connection, table: str) -> bool:
    cursor = await conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?", (table,)
    )
    return await cursor.fetchone() is not None


async def applied_versions(conn: aiosqlite.Connection) -> set[int]:
    cursor = await conn.execute("SELECT version FROM schema_migrations")
    rows = await cursor.fetchall()
    return {row[0] for row in rows}


async def run_migrations(
    conn: aiosqlite.Connection,
    migrations_dir: Path | None = None,
) -> list[int]:
    """
    Apply pending migrations.

    Each migration runs in its own transaction together with its version
    row. "duplicate column" errors from ALTER TABLE are tolerated so that
    column additions can be replayed against databases that already have
    the column.

    Args:
        conn: Open connection in autocommit mode
        migrations_dir: Override for the migration directory

    Returns:
        Versions recorded by this call, skipped ones included

    Raises:
        MigrationError: If a statement fails for any other reason
    """
    await conn.execute(
        """
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version INTEGER PRIMARY KEY,
            applied_at DATETIME DEFAULT CURRENT_TIMESTAMP
        )
        """
    )

    done = await applied_versions(conn)
    applied: list[int] = []

    for migration in load_migrations(migrations_dir):
        if migration.version in done:
            continue

        missing = [t for t in migration.required_tables if not await table_exists(conn, t)]
        skipped = bool(missing)

        await conn.execute("BEGIN")
        try:
            for statement in [] if skipped else migration.statements():
                try:
                    await conn.execute(statement)
                except sqlite3.OperationalError as e:
                    if "duplicate column" in str(e).lower():
                        logger.warning(f"{migration.name}: {e}")
                        continue
                    raise
            await conn.execute(
                "INSERT INTO schema_migrations (version) VALUES (?)", (migration.version,)
            )
            await conn.commit()
        except sqlite3.Error as e:
            await conn.rollback()
            raise MigrationError(
                f"migration {migration.name} failed: {e}",
                {"version": migration.version},
            ) from e

        applied.append(migration.version)
        if skipped:
            logger.info(f"Skipped migration {migration.name}: missing table(s) {', '.join(missing)}")
        else:
            logger.info(f"Applied migration {migration.name}")

    return applied
