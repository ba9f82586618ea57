"""Table schema and row conversion derived from dataclass models.

A model is a dataclass. Its table name is the class attribute
``__table_name__`` when set, otherwise the lower-cased class name. Column
options are attached with :func:`column`.
"""

from __future__ import annotations

import dataclasses
import enum
import json
import math
import types
import uuid
from dataclasses import MISSING
from datetime import date, datetime, time
from typing import Any, Mapping, Optional, Union, get_args, get_origin

from edgeorm.errors import SerializationError
from edgeorm.migrations import Migration, MigrationManager
from edgeorm.types import Value, ValueKind

_META_KEY = "edgeorm"

_SQL_TYPES = {
    "int": "INTEGER",
    "float": "REAL",
    "bool": "BOOLEAN",
    "str": "TEXT",
}

_BUILTIN_NAMES: dict[str, type] = {
    "int": int,
    "float": float,
    "bool": bool,
    "str": str,
    "bytes": bytes,
    "list": list,
    "dict": dict,
}

_NAMED_TYPES: dict[str, Any] = {
    **_BUILTIN_NAMES,
    "List": list,
    "typing.List": list,
    "Dict": dict,
    "typing.Dict": dict,
    "datetime": datetime,
    "datetime.datetime": datetime,
    "date": date,
    "datetime.date": date,
    "time": time,
    "datetime.time": time,
    "UUID": uuid.UUID,
    "uuid.UUID": uuid.UUID,
    "Any": Any,
    "typing.Any": Any,
    "None": type(None),
    "NoneType": type(None),
}


@dataclasses.dataclass(frozen=True)
class _ColumnOptions:
    sql_type: str | None
    not_null: bool
    unique: bool
    primary_key: bool
    auto_increment: bool


def column(
    *,
    sql_type: str | None = None,
    not_null: bool = False,
    unique: bool = False,
    primary_key: bool = False,
    auto_increment: bool = False,
    default: Any = MISSING,
    default_factory: Any = MISSING,
) -> Any:
    """A dataclass field carrying SQL column options."""
    options = _ColumnOptions(sql_type, not_null, unique, primary_key, auto_increment)
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata={_META_KEY: options},
    )


def _require_dataclass(cls: Any) -> None:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise TypeError(f"{cls!r} is not a dataclass type")


def default_table_name(cls: type) -> str:
    """The table name used when none is given: the lower-cased class name."""
    return cls.__name__.lower()


def _table_name(cls: type) -> str:
    return vars(cls).get("__table_name__") or default_table_name(cls)


def _type_name(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation.strip()
    if isinstance(annotation, type):
        return annotation.__name__
    return ""


def column_definition(field: dataclasses.Field) -> str:
    """The SQL column definition of a dataclass field.

    Only bare ``int``, ``float``, ``bool`` and ``str`` annotations get a
    specific type; anything else, optional types included, is TEXT.
    """
    base_type = _SQL_TYPES.get(_type_name(field.type), "TEXT")
    options = field.metadata.get(_META_KEY)
    if options is None:
        return f"{field.name} {base_type}"
    definition = f"{field.name} {options.sql_type if options.sql_type is not None else base_type}"
    if options.primary_key:
        definition += " PRIMARY KEY"
    if options.auto_increment:
        definition += " AUTOINCREMENT"
    if options.not_null:
        definition += " NOT NULL"
    if options.unique:
        definition += " UNIQUE"
    return definition


def column_names(cls: type) -> list[str]:
    """Field names of the model, in declaration order."""
    _require_dataclass(cls)
    return [f.name for f in dataclasses.fields(cls)]


def migration_sql(cls: type) -> str:
    """The ``CREATE TABLE IF NOT EXISTS`` statement for the model."""
    _require_dataclass(cls)
    definitions = ",\n    ".join(column_definition(f) for f in dataclasses.fields(cls))
    return f"CREATE TABLE IF NOT EXISTS {_table_name(cls)} (\n    {definitions}\n)"


def generate_migration(cls: type) -> Migration:
    """A migration that creates the model's table."""
    return MigrationManager.create_migration(
        f"create_table_{_table_name(cls)}", migration_sql(cls)
    )


def _jsonable(obj: Any) -> Any:
    if obj is None or isinstance(obj, (bool, int, str)):
        return obj
    if isinstance(obj, float):
        return obj if math.isfinite(obj) else None
    if isinstance(obj, enum.Enum):
        return _jsonable(obj.value)
    if isinstance(obj, (datetime, date, time)):
        return obj.isoformat()
    if isinstance(obj, uuid.UUID):
        return str(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return list(bytes(obj))
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [_jsonable(item) for item in obj]
    if isinstance(obj, Mapping):
        return {str(key): _jsonable(val) for key, val in obj.items()}
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name: _jsonable(getattr(obj, f.name)) for f in dataclasses.fields(obj)}
    raise TypeError(f"cannot serialize {type(obj).__name__}")


def to_map(instance: Any) -> dict[str, Value]:
    """Column name to :class:`Value` for every field of a model instance."""
    if not dataclasses.is_dataclass(instance) or isinstance(instance, type):
        raise TypeError(f"{instance!r} is not a dataclass instance")
    result: dict[str, Value] = {}
    for f in dataclasses.fields(instance):
        raw = getattr(instance, f.name)
        try:
            result[f.name] = raw if isinstance(raw, Value) else Value.from_json(_jsonable(raw))
        except (TypeError, ValueError, OverflowError) as exc:
            raise SerializationError(f"field {f.name}: {exc}") from exc
    return result


def _split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    for char in text:
        if char == "[":
            depth += 1
        elif char == "]":
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current).strip())
            current = []
        else:
            current.append(char)
    parts.append("".join(current).strip())
    return parts


def _bracket_body(text: str, prefixes: tuple[str, ...]) -> str | None:
    for prefix in prefixes:
        if text.startswith(prefix) and text.endswith("]"):
            return text[len(prefix):-1]
    return None


def _resolve_annotation(annotation: Any) -> Any:
    """Turn a string annotation into a type object; unknown names become Any."""
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    if len(text) >= 2 and text[0] == text[-1] and text[0] in "'\"":
        text = text[1:-1].strip()
    inner = _bracket_body(text, ("Optional[", "typing.Optional["))
    if inner is not None:
        return Optional[_resolve_annotation(inner)]
    inner = _bracket_body(text, ("Union[", "typing.Union["))
    if inner is not None:
        return Union[tuple(_resolve_annotation(p) for p in _split_top_level(inner, ","))]
    members = _split_top_level(text, "|")
    if len(members) > 1:
        return Union[tuple(_resolve_annotation(p) for p in members)]
    base = text.split("[", 1)[0].strip()
    return _NAMED_TYPES.get(base, Any)


def _type_hints(cls: type) -> dict[str, Any]:
    return {f.name: _resolve_annotation(f.type) for f in dataclasses.fields(cls)}


def _is_optional(hint: Any) -> bool:
    if get_origin(hint) in (Union, types.UnionType):
        return type(None) in get_args(hint)
    return False


def _from_value(raw: Any, is_bool: bool) -> Any:
    value = raw if isinstance(raw, Value) else Value.from_python(raw)
    if value.kind is ValueKind.INTEGER and is_bool:
        return value.payload != 0
    if value.kind is ValueKind.BLOB:
        return list(value.payload)
    return value.payload


def _parse_datetime(text: str) -> datetime:
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _mismatch(name: str, value: Any, expected: str) -> SerializationError:
    return SerializationError(
        f"field {name}: expected {expected}, got {type(value).__name__}"
    )


def _coerce(name: str, value: Any, hint: Any) -> Any:
    if isinstance(hint, str):
        hint = _BUILTIN_NAMES.get(hint.strip())
    if hint is None or hint is Any:
        return value
    origin = get_origin(hint)
    if origin in (Union, types.UnionType):
        members = [a for a in get_args(hint) if a is not type(None)]
        if value is None and len(members) < len(get_args(hint)):
            return None
        return _coerce(name, value, members[0]) if len(members) == 1 else value
    target = origin or hint
    if not isinstance(target, type):
        return value
    if value is None:
        if target in (bool, int, float, str, bytes, datetime, date, uuid.UUID, list, dict):
            raise SerializationError(f"field {name}: null is not a valid value")
        return value
    try:
        if target is bool:
            if isinstance(value, bool):
                return value
            raise _mismatch(name, value, "bool")
        if target is int:
            if isinstance(value, int) and not isinstance(value, bool):
                return value
            raise _mismatch(name, value, "int")
        if target is float:
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                return float(value)
            raise _mismatch(name, value, "float")
        if target is str:
            if isinstance(value, str):
                return value
            raise _mismatch(name, value, "str")
        if target is bytes:
            if isinstance(value, (bytes, bytearray)):
                return bytes(value)
            if isinstance(value, list):
                return bytes(value)
            raise _mismatch(name, value, "bytes")
        if target is datetime:
            return value if isinstance(value, datetime) else _parse_datetime(value)
        if target is date:
            return value if isinstance(value, date) else date.fromisoformat(value)
        if target is uuid.UUID:
            return value if isinstance(value, uuid.UUID) else uuid.UUID(value)
        if issubclass(target, enum.Enum):
            return target(value)
        if target in (list, dict):
            decoded = json.loads(value) if isinstance(value, str) else value
            if not isinstance(decoded, target):
                raise _mismatch(name, value, target.__name__)
            return decoded
    except SerializationError:
        raise
    except (TypeError, ValueError, AttributeError) as exc:
        raise SerializationError(f"field {name}: {exc}") from exc
    return value


def from_map(cls: type, mapping: Mapping[str, Any]) -> Any:
    """Build a model instance from column values; unknown columns are ignored.

    Integers stored in plain ``bool`` fields become booleans, and missing
    optional fields without a default become ``None``.
    """
    _require_dataclass(cls)
    hints = _type_hints(cls)
    init_fields = {f.name: f for f in dataclasses.fields(cls) if f.init}
    kwargs: dict[str, Any] = {}
    for key, raw in mapping.items():
        f = init_fields.get(key)
        if f is None:
            continue
        hint = hints.get(key, f.type)
        is_bool = hint is bool or _type_name(f.type) == "bool"
        kwargs[key] = _coerce(key, _from_value(raw, is_bool), hint)
    for name, f in init_fields.items():
        if name in kwargs or f.default is not MISSING or f.default_factory is not MISSING:
            continue
        if _is_optional(hints.get(name)):
            kwargs[name] = None
    try:
        return cls(**kwargs)
    except TypeError as exc:
        raise SerializationError(str(exc)) from exc