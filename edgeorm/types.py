"""Core value and keyword types shared by the query and model layers."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass
from typing import Any

from edgeorm.errors import SerializationError

_I64_MIN = -(2**63)
_I64_MAX = 2**63 - 1


class ValueKind(enum.Enum):
    """The storage class of a :class:`Value`."""

    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"
    BOOLEAN = "boolean"


def _check_i64(value: int) -> int:
    if not _I64_MIN <= value <= _I64_MAX:
        raise OverflowError(f"integer {value} does not fit in 64 bits")
    return value


@dataclass(frozen=True)
class Value:
    """A database value tagged with its storage class."""

    kind: ValueKind
    payload: Any = None

    @classmethod
    def null(cls) -> Value:
        return cls(ValueKind.NULL, None)

    @classmethod
    def integer(cls, value: int) -> Value:
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"expected int, got {type(value).__name__}")
        return cls(ValueKind.INTEGER, _check_i64(value))

    @classmethod
    def real(cls, value: float) -> Value:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise TypeError(f"expected float, got {type(value).__name__}")
        return cls(ValueKind.REAL, float(value))

    @classmethod
    def text(cls, value: str) -> Value:
        if not isinstance(value, str):
            raise TypeError(f"expected str, got {type(value).__name__}")
        return cls(ValueKind.TEXT, value)

    @classmethod
    def blob(cls, value: bytes | bytearray | memoryview) -> Value:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise TypeError(f"expected bytes, got {type(value).__name__}")
        return cls(ValueKind.BLOB, bytes(value))

    @classmethod
    def boolean(cls, value: bool) -> Value:
        if not isinstance(value, bool):
            raise TypeError(f"expected bool, got {type(value).__name__}")
        return cls(ValueKind.BOOLEAN, value)

    @classmethod
    def from_python(cls, obj: Any) -> Value:
        """Convert a plain Python object; ``None`` becomes NULL."""
        if isinstance(obj, Value):
            return obj
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            return cls.integer(obj)
        if isinstance(obj, float):
            return cls.real(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(obj)
        raise TypeError(f"cannot convert {type(obj).__name__} to a database value")

    @classmethod
    def from_json(cls, obj: Any) -> Value:
        """Convert a decoded JSON value; arrays and objects become JSON text."""
        if obj is None:
            return cls.null()
        if isinstance(obj, bool):
            return cls.boolean(obj)
        if isinstance(obj, int):
            if _I64_MIN <= obj <= _I64_MAX:
                return cls.integer(obj)
            return cls.real(float(obj))
        if isinstance(obj, float):
            return cls.real(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (list, tuple, dict)):
            return cls.text(
                json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False)
            )
        raise TypeError(f"{type(obj).__name__} is not a JSON value")

    @classmethod
    def from_sql(cls, obj: Any) -> Value:
        """Convert a value read from a database row."""
        if obj is None:
            return cls.null()
        if isinstance(obj, int):
            return cls.integer(int(obj))
        if isinstance(obj, float):
            return cls.real(obj)
        if isinstance(obj, str):
            return cls.text(obj)
        if isinstance(obj, (bytes, bytearray, memoryview)):
            return cls.blob(obj)
        raise TypeError(f"unsupported SQL value of type {type(obj).__name__}")

    def to_sql(self) -> Any:
        """Return the object to bind as a statement parameter."""
        if self.kind is ValueKind.BOOLEAN:
            return 1 if self.payload else 0
        return self.payload

    def __repr__(self) -> str:
        if self.kind is ValueKind.NULL:
            return "Value.null()"
        return f"Value.{self.kind.value}({self.payload!r})"


Row = dict[str, Value]


class SortOrder(enum.Enum):
    """Direction of an ORDER BY term."""

    ASC = "ASC"
    DESC = "DESC"

    def __str__(self) -> str:
        return self.value


class Aggregate(enum.Enum):
    """SQL aggregate functions."""

    COUNT = "COUNT"
    SUM = "SUM"
    AVG = "AVG"
    MIN = "MIN"
    MAX = "MAX"

    def __str__(self) -> str:
        return self.value


class JoinType(enum.Enum):
    """SQL join kinds."""

    INNER = "INNER JOIN"
    LEFT = "LEFT JOIN"
    RIGHT = "RIGHT JOIN"
    FULL = "FULL JOIN"

    def __str__(self) -> str:
        return self.value


class Operator(enum.Enum):
    """Comparison operators usable in filters."""

    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IN = "IN"
    NOT_IN = "NOT IN"
    IS_NULL = "IS NULL"
    IS_NOT_NULL = "IS NOT NULL"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"

    def __str__(self) -> str:
        return self.value


_TRUE_WORDS = frozenset({"true", "1", "yes", "on"})
_FALSE_WORDS = frozenset({"false", "0", "no", "off"})


def deserialize_bool(value: Any) -> bool:
    """Read a boolean stored as a bool, a number or a word such as ``"yes"``."""
    if isinstance(value, Value):
        value = value.payload
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return value != 0
    if isinstance(value, float):
        return value != 0.0
    if isinstance(value, str):
        word = value.lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise SerializationError(f"Invalid string value for boolean: {value}")
    raise SerializationError("Expected boolean, integer, or string")