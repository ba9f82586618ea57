"""SQLite building blocks: connection, query builder, filters, pagination, schemas and migrations."""

__version__ = "0.1.1"

__all__ = [
    "database",
    "errors",
    "filters",
    "migrations",
    "pagination",
    "query",
    "schema",
    "shortcuts",
    "templates",
    "types",
]