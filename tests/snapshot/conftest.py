"""Shared fixtures for snapshot tests.

Provides a capability-flag stand-in for the inspected database, a SQLite
database with a small catalog table, and counting extractors over both.
"""

from __future__ import annotations

import sqlite3
from collections.abc import Generator
from dataclasses import dataclass, field
from typing import Any

import pytest
from sqlalchemy import create_engine, text

from schemacache.snapshot.database import EngineDatabase
from schemacache.snapshot.extractor import ResultSetExtractor
from schemacache.snapshot.keys import RowKey
from schemacache.snapshot.rows import CachedRow


@dataclass
class FakeDatabase:
    """Capability flags only; queries are answered by FakeCursor."""

    supports_catalogs: bool = False
    supports_schemas: bool = True
    is_case_sensitive: bool = False

    def execute_query(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        raise AssertionError(f"unexpected query: {sql} {params}")


@dataclass
class FakeCursor:
    """DB-API style cursor over fixed rows that records close() calls."""

    columns: list[str]
    records: list[tuple[Any, ...]]
    fail_after: int | None = None
    close_count: int = 0

    @property
    def description(self) -> list[tuple[Any, ...]]:
        return [(name, None, None, None, None, None, None) for name in self.columns]

    def __iter__(self) -> Any:
        for i, record in enumerate(self.records):
            if self.fail_after is not None and i >= self.fail_after:
                raise sqlite3.OperationalError("connection reset")
            yield record

    def close(self) -> None:
        self.close_count += 1


TABLE_COLUMNS = ["TABLE_SCHEM", "TABLE_NAME", "TABLE_TYPE"]


@dataclass
class TableExtractor(ResultSetExtractor):
    """Looks up one table; counts the fetches it issues."""

    database: Any
    schema: str | None
    table: str | None
    catalog_rows: list[tuple[Any, ...]] = field(default_factory=list)
    fast_calls: int = 0
    bulk_calls: int = 0
    fail_after: int | None = None
    cursors: list[FakeCursor] = field(default_factory=list)

    def _cursor(self, records: list[tuple[Any, ...]]) -> FakeCursor:
        cursor = FakeCursor(TABLE_COLUMNS, records, fail_after=self.fail_after)
        self.cursors.append(cursor)
        return cursor

    def fast_fetch(self) -> FakeCursor:
        self.fast_calls += 1
        return self._cursor(
            [
                r
                for r in self.catalog_rows
                if r[0].lower() == (self.schema or "").lower()
                and r[1].lower() == (self.table or "").lower()
            ]
        )

    def bulk_fetch(self) -> FakeCursor:
        self.bulk_calls += 1
        return self._cursor(
            [r for r in self.catalog_rows if r[0].lower() == (self.schema or "").lower()]
        )

    def row_key_parameters(self, row: CachedRow) -> RowKey:
        return self.row_key(None, row["TABLE_SCHEM"], row["TABLE_SCHEM"], row["TABLE_NAME"])

    def wanted_key_parameters(self) -> RowKey:
        return self.row_key(None, self.schema, self.schema, self.table)


CATALOG_ROWS = [
    ("PUBLIC", "ORDERS", "TABLE"),
    ("PUBLIC", "CUSTOMERS", "TABLE"),
    ("PUBLIC", "PRODUCTS", "TABLE"),
    ("PUBLIC", "INVOICES", "TABLE"),
    ("PUBLIC", "ORDER_TOTALS", "VIEW"),
    ("AUDIT", "EVENTS", "TABLE"),
]


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def make_cursor() -> type[FakeCursor]:
    return FakeCursor


@pytest.fixture
def make_table_extractor(fake_db: FakeDatabase) -> Any:
    """Factory for table extractors over CATALOG_ROWS."""

    def _make(schema: str | None, table: str | None, **kwargs: Any) -> TableExtractor:
        kwargs.setdefault("database", fake_db)
        return TableExtractor(schema=schema, table=table, catalog_rows=CATALOG_ROWS, **kwargs)

    return _make


@pytest.fixture
def sqlite_db() -> Generator[EngineDatabase, None, None]:
    """In-memory SQLite database with a column catalog table."""
    db = EngineDatabase(create_engine("sqlite:///:memory:"))
    conn = db.connection
    conn.execute(
        text(
            "CREATE TABLE catalog_columns ("
            "table_name TEXT, column_name TEXT, data_type TEXT, is_nullable TEXT)"
        )
    )
    conn.execute(
        text(
            "INSERT INTO catalog_columns VALUES "
            "('orders', 'id', 'INTEGER', 'NO'), "
            "('orders', 'customer_id', 'INTEGER', 'NO'), "
            "('orders', 'note', 'TEXT', 'YES'), "
            "('customers', 'id', 'INTEGER', 'NO'), "
            "('customers', 'name', 'TEXT', 'YES'), "
            "('products', 'sku', 'TEXT', 'NO')"
        )
    )
    yield db
    db.close()
