"""Extractor base class: how one kind of metadata lookup talks to the database."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from schemacache.snapshot.keys import RowKey, values_equal

if TYPE_CHECKING:
    from schemacache.snapshot.cache import ResultSetCache
    from schemacache.snapshot.database import SnapshotDatabase
    from schemacache.snapshot.rows import CachedRow


class ResultSetExtractor(ABC):
    """One metadata lookup target (e.g. the columns of table X).

    Subclasses supply a narrow query for exactly the wanted object, a bulk
    query for everything in its scope, and the keys that tie rows to lookups.
    ``bulk_threshold`` overrides the cache's promotion threshold for this
    extractor when set.
    """

    bulk_threshold: int | None = None

    def __init__(self, database: SnapshotDatabase) -> None:
        self.database = database

    @abstractmethod
    def fast_fetch(self) -> Any:
        """Return a cursor over the rows for exactly the wanted object."""

    @abstractmethod
    def bulk_fetch(self) -> Any:
        """Return a cursor over every row in the wanted object's scope."""

    @abstractmethod
    def row_key_parameters(self, row: CachedRow) -> RowKey:
        """Key identifying a fetched row."""

    @abstractmethod
    def wanted_key_parameters(self) -> RowKey:
        """Key of the object this extractor is looking up."""

    def should_bulk_select(self, cache: ResultSetCache) -> bool:
        threshold = self.bulk_threshold
        if threshold is None:
            threshold = cache.bulk_threshold
        return cache.single_query_count >= threshold

    def execute_query(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        return self.database.execute_query(sql, params)

    def row_key(self, catalog: str | None, schema: str | None, *parameters: str | None) -> RowKey:
        return RowKey(catalog, schema, self.database, *parameters)

    @staticmethod
    def values_equal(expected: Any, found: Any, equal_if_either_none: bool = True) -> bool:
        return values_equal(expected, found, equal_if_either_none)
