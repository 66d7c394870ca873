"""Configuration constants.

This module contains truly constant values that should NOT be user-configurable.
Changing them would alter the shape of cache keys shared between extractors.

For configurable values, see models.py (CacheConfig, DatabaseConfig, etc.).
"""

# =============================================================================
# Cache Keys
# =============================================================================

KEY_DELIMITER = ":"
"""Separator between identifying parameters in a row key."""

ALL_SCOPE = "all"
"""Scope key used when the database has no catalog/schema grouping."""

# =============================================================================
# Promotion
# =============================================================================

DEFAULT_BULK_THRESHOLD = 3
"""Narrow fetches allowed per session before the next miss promotes to bulk."""
