"""Result set caching for database metadata snapshots."""

from schemacache.snapshot.cache import ResultSetCache
from schemacache.snapshot.database import EngineDatabase, SnapshotDatabase
from schemacache.snapshot.extractor import ResultSetExtractor
from schemacache.snapshot.keys import (
    RowKey,
    create_key,
    key_permutations,
    resolve_scope_key,
    values_equal,
)
from schemacache.snapshot.rows import CachedRow, materialize

__all__ = [
    "CachedRow",
    "EngineDatabase",
    "ResultSetCache",
    "ResultSetExtractor",
    "RowKey",
    "SnapshotDatabase",
    "create_key",
    "key_permutations",
    "materialize",
    "resolve_scope_key",
    "values_equal",
]
