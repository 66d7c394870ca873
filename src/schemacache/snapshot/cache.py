"""Per-session result set cache for database metadata queries.

Design:
- Buckets keyed by scope (catalog/schema), then by row key string
- Every fetched row is indexed under all wildcard permutations of its own key
- Narrow (fast) fetches until the session has issued ``bulk_threshold`` of
  them; the next miss runs one bulk fetch for the whole scope instead
- After a bulk fetch, misses in any scope are answered empty without I/O
- Promotion state is per cache instance, shared by all scopes it touches
- No locking; one cache per inspection session, used from one thread
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, TypeVar, overload
from uuid import uuid4

import structlog

from schemacache.config.constants import DEFAULT_BULK_THRESHOLD
from schemacache.core.errors import QueryError, SchemaCacheError
from schemacache.core.logging import get_session_id
from schemacache.snapshot.rows import CachedRow, materialize

if TYPE_CHECKING:
    from schemacache.config.models import CacheConfig
    from schemacache.snapshot.extractor import ResultSetExtractor

log = structlog.get_logger(__name__)

T = TypeVar("T")


class ResultSetCache:
    """Caches metadata rows for one inspection session."""

    def __init__(self, config: CacheConfig | None = None, *, session_id: str | None = None) -> None:
        self.bulk_threshold = config.bulk_threshold if config else DEFAULT_BULK_THRESHOLD
        self.session_id = session_id or get_session_id() or uuid4().hex[:12]
        self._single_query_count = 0
        self._did_bulk_query = False
        self._cache_by_scope: dict[str, dict[str, list[CachedRow]]] = {}
        self._info: dict[str, Any] = {}
        self._log = log.bind(session_id=self.session_id)

    @property
    def single_query_count(self) -> int:
        """Narrow fetches issued so far in this session."""
        return self._single_query_count

    @property
    def did_bulk_query(self) -> bool:
        return self._did_bulk_query

    def scopes(self) -> list[str]:
        return list(self._cache_by_scope)

    def get(self, extractor: ResultSetExtractor) -> list[CachedRow]:
        """Rows matching the extractor's wanted key, querying at most once.

        Each fetched row is stored once under every distinct permutation of
        its key. A row with a None parameter produces the same key string
        from several masks and still appears only once in that bucket.

        Raises:
            QueryError: The fetch or reading its cursor failed, whatever the
                driver raised. SchemaCacheError subclasses, such as a
                QueryError from the extractor, propagate unchanged. Nothing
                is cached and the session state is unchanged.
        """
        wanted = extractor.wanted_key_parameters()
        wanted_key = wanted.params_key()
        scope_key = wanted.scope_key()

        cache = self._cache_by_scope.setdefault(scope_key, {})
        if wanted_key in cache:
            self._log.debug("result_set_cache_hit", scope=scope_key, key=wanted_key)
            return list(cache[wanted_key])

        if self._did_bulk_query:
            self._log.debug("result_set_cache_miss_after_bulk", scope=scope_key, key=wanted_key)
            return []

        bulk = extractor.should_bulk_select(self)
        try:
            results = materialize(extractor.bulk_fetch() if bulk else extractor.fast_fetch())
        except SchemaCacheError:
            raise
        except Exception as e:
            self._log.warning(
                "result_set_query_failed",
                scope=scope_key,
                key=wanted_key,
                bulk=bulk,
                error=str(e),
            )
            raise QueryError.query_failed(
                str(e),
                extractor=type(extractor).__name__,
                scope=scope_key,
                key=wanted_key,
                bulk=bulk,
            ) from e

        indexed = [(row, extractor.row_key_parameters(row).key_permutations()) for row in results]

        if bulk:
            # Bulk rows are authoritative for the scope; drop narrow duplicates
            cache.clear()
            self._did_bulk_query = True
            self._log.debug("result_set_bulk_fetch", scope=scope_key, rows=len(results))
        else:
            self._single_query_count += 1
            self._log.debug(
                "result_set_fast_fetch",
                scope=scope_key,
                key=wanted_key,
                rows=len(results),
                single_queries=self._single_query_count,
            )

        for row, row_keys in indexed:
            for row_key in dict.fromkeys(row_keys):
                cache.setdefault(row_key, []).append(row)

        return list(cache.get(wanted_key, []))

    @overload
    def get_info(self, key: str) -> Any: ...

    @overload
    def get_info(self, key: str, expected_type: type[T]) -> T | None: ...

    def get_info(self, key: str, expected_type: type[Any] | None = None) -> Any:
        """Side value stored with put_info, or None if never stored.

        Raises:
            TypeError: The stored value is not an ``expected_type``.
        """
        value = self._info.get(key)
        if expected_type is not None and value is not None and not isinstance(value, expected_type):
            raise TypeError(
                f"Info {key!r} is {type(value).__name__}, expected {expected_type.__name__}"
            )
        return value

    def put_info(self, key: str, value: Any) -> None:
        self._info[key] = value
