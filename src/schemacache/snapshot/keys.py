"""Cache keys for metadata rows.

A row is identified by an ordered tuple of parameters (for example catalog,
schema, table, column). Every row is stored under all 2^n variants of its key
in which any subset of the parameters is replaced by a wildcard, so a later
lookup that leaves some parameters unspecified finds it without a query.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from schemacache.config.constants import ALL_SCOPE, KEY_DELIMITER

if TYPE_CHECKING:
    from schemacache.snapshot.database import SnapshotDatabase

WILDCARD = None


def _render(value: str | None) -> str:
    return "" if value is None else str(value)


def create_key(parameters: Sequence[str | None], *, case_sensitive: bool) -> str:
    """Join parameters into a key, lower-cased unless the database is case-sensitive.

    Wildcard (None) parameters render as empty segments.
    """
    key = KEY_DELIMITER.join(_render(p) for p in parameters)
    return key if case_sensitive else key.lower()


def key_permutations(parameters: Sequence[str | None], *, case_sensitive: bool) -> list[str]:
    """All 2^n wildcard variants of a key, fully specified first.

    Bit i of the mask (counted from the last parameter) replaces that
    parameter with the wildcard, so the last parameter varies fastest.
    """
    params = tuple(parameters)
    n = len(params)
    permutations = []
    for mask in range(1 << n):
        variant = tuple(
            WILDCARD if mask & (1 << (n - 1 - i)) else value for i, value in enumerate(params)
        )
        permutations.append(create_key(variant, case_sensitive=case_sensitive))
    return permutations


def resolve_scope_key(
    catalog: str | None,
    schema: str | None,
    *,
    supports_catalogs: bool,
    supports_schemas: bool,
) -> str:
    """Scope key grouping cache buckets by catalog and/or schema.

    The result is always lower-cased. When the one supported component is
    missing the other is used, and "all" when both are missing.
    """
    if not supports_catalogs and not supports_schemas:
        return ALL_SCOPE
    if supports_catalogs and supports_schemas:
        # A missing component renders empty, so (None, "public") scopes to ".public"
        return f"{_render(catalog)}.{_render(schema)}".lower()
    if supports_schemas:
        scope = schema if schema is not None else catalog
    else:
        scope = catalog if catalog is not None else schema
    if scope is None:
        return ALL_SCOPE
    return scope.lower()


def values_equal(expected: Any, found: Any, equal_if_either_none: bool = True) -> bool:
    """Compare two metadata values, treating a single missing side as a wildcard.

    Both None is always equal. Exactly one None returns ``equal_if_either_none``.
    """
    if expected is None and found is None:
        return True
    if expected is None or found is None:
        return equal_if_either_none
    return bool(expected == found)


class RowKey:
    """Identifying parameters of a cached row or of a wanted lookup.

    ``catalog`` and ``schema`` pick the scope bucket; ``parameters`` are the
    ordered key components within it (they usually repeat catalog and schema).
    """

    __slots__ = ("_database", "catalog", "schema", "parameters", "_permutations")

    def __init__(
        self,
        catalog: str | None,
        schema: str | None,
        database: SnapshotDatabase,
        *parameters: str | None,
    ) -> None:
        self._database = database
        self.catalog = catalog
        self.schema = schema
        self.parameters: tuple[str | None, ...] = parameters
        self._permutations: list[str] | None = None

    def params_key(self) -> str:
        """Canonical key for the exact parameters."""
        return create_key(self.parameters, case_sensitive=self._database.is_case_sensitive)

    def key_permutations(self) -> list[str]:
        if self._permutations is None:
            self._permutations = key_permutations(
                self.parameters, case_sensitive=self._database.is_case_sensitive
            )
        return self._permutations

    def scope_key(self) -> str:
        return resolve_scope_key(
            self.catalog,
            self.schema,
            supports_catalogs=self._database.supports_catalogs,
            supports_schemas=self._database.supports_schemas,
        )

    def __repr__(self) -> str:
        return (
            f"RowKey(catalog={self.catalog!r}, schema={self.schema!r}, "
            f"parameters={self.parameters!r})"
        )
