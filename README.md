# edgeorm

Building blocks for working with SQLite from Python, with no dependencies beyond
the standard library:

- `edgeorm.database.Database`: a thin connection wrapper with error translation
- `edgeorm.query.QueryBuilder`: a fluent builder for SELECT statements, joins,
  grouping, aggregates, ordering and pagination
- `edgeorm.filters`: composable filter expressions (`Condition`, `And`, `Or`,
  `Not`, `Custom`), text search (`SearchFilter`) and sorting (`Sort`)
- `edgeorm.schema`: table schemas and row conversion derived from dataclasses
- `edgeorm.migrations` and `edgeorm.templates`: migrations with a tracked history
- `edgeorm.pagination`: offset and cursor pagination metadata
- `edgeorm.shortcuts`: short constructors for filters, sorts, searches, pages and queries

## Installation

```
pip install edgeorm
```

The `test` extra installs pytest for running the test suite.

## Connecting

`Database.connect(path)` opens the database in autocommit mode and checks it with
`SELECT 1`; a failure raises `ConnectionFailed`. `query` returns the rows (as
`sqlite3.Row`, addressable by index or column name) and `execute` returns the number
of changed rows. Parameters may be plain Python values or `Value` objects; booleans
are bound as `1`/`0`. SQL failures raise `SqlError`.

```python
from edgeorm.database import Database

with Database.connect("app.db") as db:
    rows = db.query("SELECT name FROM sqlite_master WHERE type = ?", ["table"])
```

## Describing a table with a dataclass

The table name is the class attribute `__table_name__` when set, otherwise the
lower-cased class name. `column(...)` attaches SQL column options to a field.
Without options, bare `int`, `float`, `bool` and `str` annotations map to `INTEGER`,
`REAL`, `BOOLEAN` and `TEXT`; every other annotation maps to `TEXT`.

```python
from dataclasses import dataclass
from edgeorm.schema import column, migration_sql


@dataclass
class User:
    __table_name__ = "users"

    id: int | None = column(sql_type="INTEGER PRIMARY KEY AUTOINCREMENT", default=None)
    name: str = ""
    email: str = column(not_null=True, unique=True, default="")
    is_active: bool = True


print(migration_sql(User))
# CREATE TABLE IF NOT EXISTS users (
#     id INTEGER PRIMARY KEY AUTOINCREMENT,
#     name TEXT,
#     email TEXT NOT NULL UNIQUE,
#     is_active BOOLEAN
# )
```

`to_map(instance)` turns an instance into a dict of column name to `Value`, and
`from_map(cls, mapping)` builds an instance back. `from_map` ignores unknown
columns, turns integers stored in plain `bool` fields back into booleans, and fills
missing optional fields that have no default with `None`. Conversion problems raise
`SerializationError`.

## Migrations

```python
from edgeorm import templates
from edgeorm.migrations import MigrationBuilder, MigrationManager
from edgeorm.schema import generate_migration

manager = MigrationManager(db)
manager.init()                                   # creates the "migrations" table
manager.execute_migration(generate_migration(User))

index = (
    MigrationBuilder("add_email_index")
    .up("CREATE INDEX idx_users_email ON users(email)")
    .down("DROP INDEX idx_users_email")
    .build()
)
manager.run_migrations([index, templates.add_column("users", "created_at", "TEXT")])

print([m.name for m in manager.get_executed_migrations()])
```

`execute_migration` runs the migration's SQL (a single statement) and records it in
one transaction, rolling back on failure. `run_migrations` skips migrations whose
`executed_at` is already set. `rollback_migration(id)` removes a record from the
history; it does not run any down SQL. Other helpers:
`MigrationManager.create_migration(name, sql)`,
`MigrationManager.create_migration_from_file(name, path)` and
`MigrationManager.generate_migration_name(description)`, which gives a UTC timestamp
followed by the description reduced to letters, digits and underscores.

`edgeorm.templates` offers `create_table`, `add_column`, `drop_column`,
`create_index` and `drop_index`.

## Writing and reading rows

```python
from functools import partial
from edgeorm.schema import from_map, to_map

values = to_map(User(name="Alice", email="alice@example.com"))
columns = ", ".join(values)
marks = ", ".join("?" for _ in values)
db.execute(f"INSERT INTO users ({columns}) VALUES ({marks})", values.values())
```

## Query builder

Every builder method changes the builder and returns it; `copy()` gives an
independent one. `build()` returns the SQL text and its parameter list.

```python
from edgeorm.filters import Condition, Filter, Sort
from edgeorm.query import QueryBuilder
from edgeorm.types import Aggregate, JoinType

sql, params = (
    QueryBuilder("users")
    .select(["id", "name", "email"])
    .where(Condition(Filter.like("email", "%@example.com")))
    .order_by(Sort.asc("name"))
    .limit(10)
    .offset(20)
    .build()
)
# SELECT id, name, email FROM users WHERE email LIKE ? ORDER BY name ASC LIMIT 10 OFFSET 20

totals = (
    QueryBuilder("orders")
    .join(JoinType.INNER, "users", "users.id = orders.user_id")
    .aggregate(Aggregate.SUM, "amount", "total_amount")
    .group_by(["user_id"])
)
```

Running queries:

- `execute(db)` returns each row as a dict of JSON-like values (blobs become lists
  of byte values). Given a `model` with a `from_map` method, that method receives a
  dict of `Value`; any other callable receives the JSON-like dict.
- `execute_count(db)` runs `build_count()` and returns the count.
- `execute_aggregate(db)` returns the raw rows.
- `execute_paginated(db, pagination, model)` returns a `PaginatedResult`. Its
  total is the row count of the whole table, without the builder's filters.

```python
active_users = (
    QueryBuilder("users")
    .where(Condition(Filter.eq("is_active", True)))
    .execute(db, partial(from_map, User))
)
```

`where_condition` and `having_condition` add raw SQL conditions; their `params`
argument is not bound. `search(field, query)` adds an unparameterised
`field LIKE '%query%'` condition, so it must not be given untrusted input.

## Filters

```python
from edgeorm.filters import Condition, Custom, Filter, SearchFilter

adult = Condition(Filter.ge("age", 18))
staff = Condition(Filter.in_values("role", ["admin", "moderator"]))
expr = adult.and_with(~staff).or_with(Custom("deleted_at IS NULL"))

search = SearchFilter.multiple_fields(["name", "email"], "ali").to_filter_operator()
# one column gives a single LIKE '%ali%' condition, several give an Or of them
```

`Filter` has `eq`, `ne`, `lt`, `le`, `gt`, `ge`, `like`, `not_like`, `in_values`,
`not_in_values`, `is_null`, `is_not_null`, `between` and `not_between`.
`Sort` has `asc`, `desc` and `from_bool`.

## Pagination

```python
from edgeorm.pagination import Pagination

page = Pagination(page=2, per_page=10)
page.set_total(45)
page.offset(), page.total_pages, page.has_next(), page.prev_page()   # 10, 5, True, 1
```

`PaginatedResult` is iterable, has a length and a `map(func)` method.
`CursorPagination.with_cursor(limit, cursor)` holds cursor metadata; building
cursor queries is up to the caller.

## Shortcuts

```python
from edgeorm.shortcuts import make_filter, make_filter_op, make_pagination, make_sort

make_filter("age", ">", 18)
make_filter("role", "in", ["admin", "user"])
make_filter("score", "between", 80, 100)
make_filter_op("and", make_filter_op(make_filter("deleted_at", "is_null")))
make_sort("created_at", "desc")
make_pagination(3)            # 20 items per page
```

## Values and errors

`edgeorm.types.Value` is a database value tagged with its kind (`Value.integer(1)`,
`Value.text("a")`, `Value.from_python(obj)`, `Value.from_json(obj)`).
`deserialize_bool` reads booleans stored as numbers or words such as `"yes"`/`"off"`.

Every failure raised by the package derives from `edgeorm.errors.OrmError`:
`ConnectionFailed`, `SqlError`, `SerializationError`, `ValidationError`,
`NotFoundError`, `PaginationError`, `QueryError`, `DatabaseError` and `GenericError`.

## What the package does not do

There is no model base class with record-level operations: no create, find,
update, delete, upsert or bulk methods on a class. Rows are written with
`Database.execute` and `schema.to_map`, and read with `QueryBuilder.execute` and
`schema.from_map`, as shown above.