"""Config module exports."""

from schemacache.config.loader import load_config
from schemacache.config.models import (
    CacheConfig,
    DatabaseConfig,
    LoggingConfig,
    LogOutputConfig,
    SchemaCacheConfig,
)

__all__ = [
    "load_config",
    "SchemaCacheConfig",
    "CacheConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "LogOutputConfig",
]
