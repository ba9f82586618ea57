"""Ready-made migrations for common schema changes."""

from __future__ import annotations

from typing import Iterable, Mapping

from edgeorm.migrations import Migration, MigrationBuilder


def create_table(
    table_name: str, columns: Iterable[tuple[str, str]] | Mapping[str, str]
) -> Migration:
    """Create ``table_name`` from ``(name, definition)`` pairs."""
    pairs = columns.items() if isinstance(columns, Mapping) else columns
    definitions = ", ".join(f"{name} {definition}" for name, definition in pairs)
    sql = f"CREATE TABLE {table_name} ({definitions})"
    return MigrationBuilder(f"create_table_{table_name}").up(sql).build()


def add_column(table_name: str, column_name: str, definition: str) -> Migration:
    sql = f"ALTER TABLE {table_name} ADD COLUMN {column_name} {definition}"
    return MigrationBuilder(f"add_column_{table_name}_{column_name}").up(sql).build()


def drop_column(table_name: str, column_name: str) -> Migration:
    sql = f"ALTER TABLE {table_name} DROP COLUMN {column_name}"
    return MigrationBuilder(f"drop_column_{table_name}_{column_name}").up(sql).build()


def create_index(index_name: str, table_name: str, columns: Iterable[str]) -> Migration:
    column_list = ", ".join(columns)
    sql = f"CREATE INDEX {index_name} ON {table_name} ({column_list})"
    return MigrationBuilder(f"create_index_{index_name}").up(sql).build()


def drop_index(index_name: str) -> Migration:
    sql = f"DROP INDEX {index_name}"
    return MigrationBuilder(f"drop_index_{index_name}").up(sql).build()