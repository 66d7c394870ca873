"""Core module exports."""

from schemacache.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    QueryError,
    SchemaCacheError,
)
from schemacache.core.logging import (
    LOGGER_NAME,
    clear_session_id,
    configure_logging,
    get_session_id,
    set_session_id,
)

__all__ = [
    # Errors
    "SchemaCacheError",
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "QueryError",
    # Logging
    "LOGGER_NAME",
    "clear_session_id",
    "configure_logging",
    "get_session_id",
    "set_session_id",
]
