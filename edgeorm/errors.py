"""Exception hierarchy used throughout the ORM."""

from __future__ import annotations


class OrmError(Exception):
    """Base class for every error raised by the ORM."""

    prefix = "Error: "

    def __init__(self, message: str = "") -> None:
        super().__init__(message)
        self.message = str(message)

    def __str__(self) -> str:
        return f"{self.prefix}{self.message}"


class ConnectionFailed(OrmError):
    """The database connection could not be established or used."""

    prefix = "Connection error: "


class SqlError(OrmError):
    """A SQL statement failed to execute."""

    prefix = "SQL error: "


class SerializationError(OrmError, ValueError):
    """Data could not be converted to or from its stored form."""

    prefix = "Serialization error: "


class ValidationError(OrmError, ValueError):
    """Data failed validation before reaching the database."""

    prefix = "Validation error: "


class NotFoundError(OrmError, LookupError):
    """A requested resource does not exist."""

    prefix = "Not found: "


class PaginationError(OrmError, ValueError):
    """Pagination parameters are invalid."""

    prefix = "Pagination error: "


class QueryError(OrmError):
    """A query could not be built or its result could not be read."""

    prefix = "Query error: "


class DatabaseError(OrmError):
    """A general database failure."""

    prefix = "Database error: "


class GenericError(OrmError):
    """Any other failure."""

    prefix = "Error: "