"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (SCHEMACACHE__SECTION__KEY)
3. YAML config file passed to load_config()
4. Built-in defaults (this file)

Environment Variable Format:
    SCHEMACACHE__<SECTION>__<KEY>=<VALUE>

Examples:
    SCHEMACACHE__LOGGING__LEVEL=DEBUG
    SCHEMACACHE__CACHE__BULK_THRESHOLD=5
    SCHEMACACHE__DATABASE__URL=postgresql+psycopg://localhost/app
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from schemacache.config.constants import DEFAULT_BULK_THRESHOLD

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration."""

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        SCHEMACACHE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every cache hit and miss.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class CacheConfig(BaseModel):
    """Result set cache configuration.

    Env vars:
        SCHEMACACHE__CACHE__BULK_THRESHOLD: Narrow fetches before promoting to bulk
    """

    bulk_threshold: int = Field(
        default=DEFAULT_BULK_THRESHOLD,
        description="Narrow fetches issued by a session before the next miss runs one "
        "bulk query instead. TRADEOFF: Lower = fewer round trips for large snapshots; "
        "higher = less data pulled for small ones. 0 always bulk-selects.",
    )

    @field_validator("bulk_threshold")
    @classmethod
    def validate_bulk_threshold(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"Bulk threshold must be >= 0, got {v}")
        return v


class DatabaseConfig(BaseModel):
    """Database connection configuration.

    Capability flags default to what the SQLAlchemy dialect implies; set them
    only for databases whose catalog/schema handling differs.

    Env vars:
        SCHEMACACHE__DATABASE__URL: SQLAlchemy database URL
        SCHEMACACHE__DATABASE__CASE_SENSITIVE: Identifier case sensitivity
    """

    url: str = Field(
        default="sqlite:///:memory:",
        description="SQLAlchemy database URL of the database being inspected.",
    )
    supports_catalogs: bool | None = Field(
        default=None,
        description="Override catalog support detected from the dialect.",
    )
    supports_schemas: bool | None = Field(
        default=None,
        description="Override schema support detected from the dialect.",
    )
    case_sensitive: bool | None = Field(
        default=None,
        description="Override identifier case sensitivity. "
        "RISK: Marking a case-insensitive database sensitive causes cache misses.",
    )


class SchemaCacheConfig(BaseModel):
    """Root configuration for SchemaCache.

    All settings can be configured via:
    1. Environment variables: SCHEMACACHE__SECTION__KEY
    2. A YAML config file
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
