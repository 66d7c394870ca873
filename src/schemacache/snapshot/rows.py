"""Cached metadata rows and cursor materialization."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from contextlib import closing
from typing import Any

import structlog

from schemacache.core.errors import InternalError

log = structlog.get_logger(__name__)

_TRUE_STRINGS = frozenset({"yes", "y", "true", "t", "1"})
_FALSE_STRINGS = frozenset({"no", "n", "false", "f", "0"})


class CachedRow(Mapping[str, Any]):
    """Immutable column-name -> value mapping for one fetched record.

    Lookups try the exact column name first, then fall back to a
    case-insensitive match since drivers disagree on identifier case.
    """

    __slots__ = ("_values", "_folded")

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values: dict[str, Any] = dict(values)
        self._folded: dict[str, str] = {}
        for name in self._values:
            self._folded.setdefault(name.lower(), name)

    def _resolve(self, column: str) -> str | None:
        if column in self._values:
            return column
        return self._folded.get(column.lower())

    def __getitem__(self, column: str) -> Any:
        name = self._resolve(column)
        if name is None:
            raise KeyError(column)
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __contains__(self, column: object) -> bool:
        return isinstance(column, str) and self._resolve(column) is not None

    def contains_column(self, column: str) -> bool:
        return column in self

    def get_string(self, column: str) -> str | None:
        value = self.get(column)
        if value is None:
            return None
        return str(value)

    def get_int(self, column: str) -> int | None:
        value = self.get(column)
        if value is None:
            return None
        return int(value)

    def get_bool(self, column: str) -> bool | None:
        """Boolean view of a column, accepting the YES/NO strings catalogs use."""
        value = self.get(column)
        if value is None or isinstance(value, bool):
            return value
        if isinstance(value, int | float):
            return value != 0
        text = str(value).strip().lower()
        if text in _TRUE_STRINGS:
            return True
        if text in _FALSE_STRINGS:
            return False
        raise ValueError(f"Column {column!r} is not a boolean value: {value!r}")

    def __repr__(self) -> str:
        return f"CachedRow({self._values!r})"


def _column_names(cursor: Any) -> list[str]:
    keys = getattr(cursor, "keys", None)
    if callable(keys):
        return list(keys())
    description = getattr(cursor, "description", None)
    if description is not None:
        return [column[0] for column in description]
    raise InternalError.unexpected(
        "cursor exposes neither keys() nor description",
        cursor_type=type(cursor).__name__,
    )


def materialize(cursor: Any) -> list[CachedRow]:
    """Read every row of a cursor into CachedRows, in cursor order.

    Accepts a SQLAlchemy result or a DB-API cursor. The cursor is closed
    exactly once whether or not reading succeeds.
    """
    with closing(cursor):
        columns = _column_names(cursor)
        rows = [CachedRow(dict(zip(columns, record, strict=True))) for record in cursor]
    log.debug("result_set_materialized", rows=len(rows), columns=len(columns))
    return rows
