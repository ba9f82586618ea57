"""Database connection wrapper and statement execution."""

from __future__ import annotations

import sqlite3
from typing import Any, Iterable

from edgeorm.errors import ConnectionFailed, SqlError
from edgeorm.types import Value


def _bind(params: Iterable[Any]) -> tuple[Any, ...]:
    return tuple(Value.from_python(p).to_sql() for p in params)


class Database:
    """A connection to a SQLite-compatible database."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    @classmethod
    def connect(cls, path: str) -> Database:
        """Open ``path`` and check the connection with ``SELECT 1``."""
        try:
            connection = sqlite3.connect(str(path), isolation_level=None)
        except sqlite3.Error as exc:
            raise ConnectionFailed(str(exc)) from exc
        try:
            connection.execute("SELECT 1")
        except sqlite3.Error as exc:
            connection.close()
            raise ConnectionFailed(str(exc)) from exc
        return cls(connection)

    @property
    def connection(self) -> sqlite3.Connection:
        """The underlying connection."""
        return self._connection

    def query(self, sql: str, params: Iterable[Any] = ()) -> list[sqlite3.Row]:
        """Run a query and return its rows, addressable by index or column name."""
        bound = _bind(params)
        try:
            cursor = self._connection.cursor()
            cursor.row_factory = sqlite3.Row
            cursor.execute(sql, bound)
            return cursor.fetchall()
        except sqlite3.Error as exc:
            raise SqlError(str(exc)) from exc

    def execute(self, sql: str, params: Iterable[Any] = ()) -> int:
        """Run a statement and return the number of rows it changed."""
        bound = _bind(params)
        try:
            cursor = self._connection.execute(sql, bound)
            return cursor.rowcount
        except sqlite3.Error as exc:
            raise SqlError(str(exc)) from exc

    def close(self) -> None:
        self._connection.close()

    def __enter__(self) -> Database:
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()