import sqlite3

import pytest

from edgeorm.database import Database
from edgeorm.errors import ConnectionFailed, SqlError
from edgeorm.types import Value


@pytest.fixture
def db():
    database = Database.connect(":memory:")
    database.execute("CREATE TABLE users (id INTEGER PRIMARY KEY, name TEXT, age INTEGER, is_active INTEGER)")
    yield database
    database.close()


def test_select_one():
    with Database.connect(":memory:") as database:
        rows = database.query("SELECT 1")
    assert rows[0][0] == 1


def test_insert_and_query_round_trip(db):
    db.execute(
        "INSERT INTO users (name, age, is_active) VALUES (?, ?, ?)",
        [Value.text("Alice"), 30, Value.boolean(True)],
    )
    rows = db.query("SELECT name, age, is_active FROM users WHERE age > ?", [Value.integer(18)])
    assert len(rows) == 1
    assert rows[0]["name"] == "Alice"
    assert rows[0]["age"] == 30
    assert rows[0]["is_active"] == 1
    assert rows[0].keys() == ["name", "age", "is_active"]


def test_execute_returns_changed_rows(db):
    db.execute("INSERT INTO users (name) VALUES (?)", ["a"])
    db.execute("INSERT INTO users (name) VALUES (?)", ["b"])
    changed = db.execute("UPDATE users SET age = ?", [None])
    assert changed == len(db.query("SELECT id FROM users"))


def test_bad_sql_raises_sql_error(db):
    with pytest.raises(SqlError) as info:
        db.query("SELECT * FROM missing_table")
    assert str(info.value).startswith("SQL error: ")
    with pytest.raises(SqlError):
        db.execute("NOT A STATEMENT")


def test_unbindable_parameter_is_rejected(db):
    with pytest.raises(TypeError):
        db.execute("INSERT INTO users (name) VALUES (?)", [object()])


def test_connect_to_missing_directory_fails(tmp_path):
    with pytest.raises(ConnectionFailed):
        Database.connect(str(tmp_path / "missing" / "db.sqlite"))


def test_wraps_given_connection():
    raw = sqlite3.connect(":memory:")
    database = Database(raw)
    assert database.connection is raw
    assert database.query("SELECT 1")[0][0] == 1
    database.close()


def test_context_manager_closes(tmp_path):
    path = str(tmp_path / "db.sqlite")
    with Database.connect(path) as database:
        database.execute("CREATE TABLE t (x INTEGER)")
    with pytest.raises(SqlError):
        database.query("SELECT * FROM t")


def test_manual_transaction_rollback(db):
    db.execute("BEGIN")
    db.execute("INSERT INTO users (name) VALUES (?)", ["temp"])
    db.execute("ROLLBACK")
    assert db.query("SELECT COUNT(*) FROM users")[0][0] == 0


def test_manual_transaction_commit_persists(tmp_path):
    path = str(tmp_path / "db.sqlite")
    with Database.connect(path) as database:
        database.execute("CREATE TABLE t (x INTEGER)")
        database.execute("BEGIN")
        database.execute("INSERT INTO t (x) VALUES (?)", [7])
        database.execute("COMMIT")
    with Database.connect(path) as reopened:
        assert [row["x"] for row in reopened.query("SELECT x FROM t")] == [7]