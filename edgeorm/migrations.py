"""Schema migrations and their execution history."""

from __future__ import annotations

import contextlib
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable

from edgeorm.database import Database
from edgeorm.errors import DatabaseError, OrmError

_CREATE_TABLE_SQL = """
    CREATE TABLE IF NOT EXISTS migrations (
        id TEXT PRIMARY KEY,
        name TEXT NOT NULL,
        sql TEXT NOT NULL,
        created_at TEXT NOT NULL,
        executed_at TEXT
    )
"""

_SELECT_SQL = "SELECT id, name, sql, created_at, executed_at FROM migrations ORDER BY created_at"

_INSERT_SQL = """
    INSERT INTO migrations (id, name, sql, created_at, executed_at)
    VALUES (?, ?, ?, ?, ?)
"""

_RFC3339 = re.compile(
    r"^(?P<base>\d{4}-\d{2}-\d{2})[Tt ](?P<time>\d{2}:\d{2}:\d{2})"
    r"(?:\.(?P<frac>\d+))?(?P<offset>[Zz]|[+-]\d{2}:\d{2})$"
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(text: object) -> datetime:
    """Parse an RFC 3339 timestamp into an aware UTC datetime."""
    if not isinstance(text, str):
        raise DatabaseError("Invalid datetime format")
    match = _RFC3339.match(text.strip())
    if match is None:
        raise DatabaseError("Invalid datetime format")
    frac = (match["frac"] or "")[:6].ljust(6, "0")
    offset = "+00:00" if match["offset"] in ("Z", "z") else match["offset"]
    try:
        parsed = datetime.fromisoformat(f"{match['base']}T{match['time']}.{frac}{offset}")
    except ValueError as exc:
        raise DatabaseError("Invalid datetime format") from exc
    return parsed.astimezone(timezone.utc)


@dataclass
class Migration:
    """A schema change with the metadata used to track it."""

    id: str
    name: str
    sql: str
    created_at: datetime = field(default_factory=_now)
    executed_at: datetime | None = None


class MigrationManager:
    """Initialises the history table and executes and tracks migrations."""

    def __init__(self, db: Database) -> None:
        self._db = db

    def init(self) -> None:
        """Create the migration history table if it does not exist."""
        self._db.execute(_CREATE_TABLE_SQL)

    @staticmethod
    def create_migration(name: str, sql: str) -> Migration:
        """Make a new, not yet executed migration with a fresh id."""
        return Migration(id=str(uuid.uuid4()), name=name, sql=sql, created_at=_now())

    def get_migrations(self) -> list[Migration]:
        """All recorded migrations, oldest first."""
        migrations = []
        for row in self._db.query(_SELECT_SQL):
            executed = row[4]
            migrations.append(
                Migration(
                    id=row[0],
                    name=row[1],
                    sql=row[2],
                    created_at=_parse_timestamp(row[3]),
                    executed_at=_parse_timestamp(executed) if isinstance(executed, str) else None,
                )
            )
        return migrations

    def execute_migration(self, migration: Migration) -> None:
        """Run the migration and record it, all in one transaction."""
        self._db.execute("BEGIN")
        try:
            self._db.execute(migration.sql)
            self._db.execute(
                _INSERT_SQL,
                [
                    migration.id,
                    migration.name,
                    migration.sql,
                    migration.created_at.isoformat(),
                    _now().isoformat(),
                ],
            )
        except OrmError:
            with contextlib.suppress(OrmError):
                self._db.execute("ROLLBACK")
            raise
        self._db.execute("COMMIT")

    def rollback_migration(self, migration_id: str) -> None:
        """Remove the record of a migration from the history."""
        self._db.execute("DELETE FROM migrations WHERE id = ?", [migration_id])

    def get_pending_migrations(self) -> list[Migration]:
        return [m for m in self.get_migrations() if m.executed_at is None]

    def get_executed_migrations(self) -> list[Migration]:
        return [m for m in self.get_migrations() if m.executed_at is not None]

    def run_migrations(self, migrations: Iterable[Migration]) -> None:
        """Execute, in order, every migration that has not been executed yet."""
        for migration in migrations:
            if migration.executed_at is not None:
                continue
            self.execute_migration(migration)

    @staticmethod
    def create_migration_from_file(name: str, file_path: str | Path) -> Migration:
        """Make a migration whose SQL is the content of ``file_path``."""
        try:
            sql = Path(file_path).read_text(encoding="utf-8")
        except OSError as exc:
            raise DatabaseError(f"Failed to read migration file: {exc}") from exc
        return MigrationManager.create_migration(name, sql)

    @staticmethod
    def generate_migration_name(description: str) -> str:
        """A UTC timestamp followed by ``description`` reduced to ``[a-z0-9_]``."""
        timestamp = _now().strftime("%Y%m%d_%H%M%S")
        cleaned = description.lower().replace(" ", "_").replace("-", "_")
        sanitized = "".join(c for c in cleaned if c.isalnum() or c == "_")
        return f"{timestamp}_{sanitized}"

    @property
    def database(self) -> Database:
        return self._db


class MigrationBuilder:
    """Fluent construction of a migration from up and down SQL."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.up_sql = ""
        self.down_sql: str | None = None

    def up(self, sql: str) -> MigrationBuilder:
        self.up_sql = sql
        return self

    def down(self, sql: str) -> MigrationBuilder:
        self.down_sql = sql
        return self

    def build(self) -> Migration:
        return Migration(id=str(uuid.uuid4()), name=self.name, sql=self.up_sql, created_at=_now())