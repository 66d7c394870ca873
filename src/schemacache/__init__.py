"""SchemaCache: per-session caching of database metadata queries."""

__version__ = "0.1.0"
