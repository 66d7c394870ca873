"""Database handle used by extractors to run metadata queries.

This module provides:
- SnapshotDatabase: the capability flags and query primitive the cache needs
- EngineDatabase: a SQLAlchemy implementation holding one connection per session
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog
from sqlalchemy import create_engine, text

if TYPE_CHECKING:
    from types import TracebackType

    from sqlalchemy import Connection, CursorResult, Engine

    from schemacache.config.models import DatabaseConfig

logger = structlog.get_logger(__name__)

# (supports_catalogs, supports_schemas) per SQLAlchemy dialect name
_DIALECT_CAPABILITIES: dict[str, tuple[bool, bool]] = {
    "sqlite": (False, False),
    "mysql": (True, False),
    "mariadb": (True, False),
    "oracle": (False, True),
    "postgresql": (True, True),
    "mssql": (True, True),
}
_DEFAULT_CAPABILITIES = (True, True)


class SnapshotDatabase(Protocol):
    """What the result set cache needs to know about the inspected database."""

    @property
    def supports_catalogs(self) -> bool: ...

    @property
    def supports_schemas(self) -> bool: ...

    @property
    def is_case_sensitive(self) -> bool: ...

    def execute_query(self, sql: str, params: dict[str, Any] | None = None) -> Any:
        """Run SQL and return an open cursor over its rows."""
        ...


class EngineDatabase:
    """SQLAlchemy-backed database handle for one inspection session.

    Capability flags default to what the dialect implies and can be
    overridden per instance.
    """

    def __init__(
        self,
        engine: Engine,
        *,
        supports_catalogs: bool | None = None,
        supports_schemas: bool | None = None,
        case_sensitive: bool | None = None,
    ) -> None:
        self.engine = engine
        default_catalogs, default_schemas = _DIALECT_CAPABILITIES.get(
            engine.dialect.name, _DEFAULT_CAPABILITIES
        )
        self._supports_catalogs = (
            default_catalogs if supports_catalogs is None else supports_catalogs
        )
        self._supports_schemas = default_schemas if supports_schemas is None else supports_schemas
        self._case_sensitive = bool(case_sensitive)
        self._conn: Connection | None = None

    @classmethod
    def from_config(cls, config: DatabaseConfig) -> EngineDatabase:
        return cls(
            create_engine(config.url),
            supports_catalogs=config.supports_catalogs,
            supports_schemas=config.supports_schemas,
            case_sensitive=config.case_sensitive,
        )

    @property
    def supports_catalogs(self) -> bool:
        return self._supports_catalogs

    @property
    def supports_schemas(self) -> bool:
        return self._supports_schemas

    @property
    def is_case_sensitive(self) -> bool:
        return self._case_sensitive

    @property
    def connection(self) -> Connection:
        """The session connection, opened on first use."""
        if self._conn is None:
            self._conn = self.engine.connect()
            logger.debug("snapshot_connection_opened", dialect=self.engine.dialect.name)
        return self._conn

    def execute_query(self, sql: str, params: dict[str, Any] | None = None) -> CursorResult[Any]:
        """Execute raw SQL and return the open result cursor."""
        return self.connection.execute(text(sql), params or {})

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("snapshot_connection_closed")

    def __enter__(self) -> EngineDatabase:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()
