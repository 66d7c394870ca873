"""Tests for load_config() and how loaded settings reach the cache.

Precedence under test: kwargs > SCHEMACACHE__ env vars > YAML file > defaults.
"""

from __future__ import annotations

from collections.abc import Callable, Generator
from pathlib import Path
from unittest.mock import patch

import pytest

from schemacache.config.loader import load_config
from schemacache.config.models import CacheConfig
from schemacache.core.errors import ConfigError, ErrorCode
from schemacache.snapshot.cache import ResultSetCache
from schemacache.snapshot.database import EngineDatabase

WriteConfig = Callable[[str], Path]


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path) -> Generator[None, None, None]:
    """Keep the developer's own config file out of every test."""
    with patch("schemacache.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "absent.yaml"):
        yield


@pytest.fixture
def write_config(tmp_path: Path) -> WriteConfig:
    def _write(body: str) -> Path:
        path = tmp_path / "schemacache.yaml"
        path.write_text(body)
        return path

    return _write


class TestYamlFile:
    """YAML config file handling."""

    def test_given_no_file_when_loaded_then_defaults(self) -> None:
        config = load_config()

        assert config.cache.bulk_threshold == 3
        assert config.database.url == "sqlite:///:memory:"
        assert config.database.case_sensitive is None

    def test_given_database_section_when_loaded_then_capabilities_read(
        self, write_config: WriteConfig
    ) -> None:
        # Given
        path = write_config(
            "database:\n"
            "  url: sqlite:///inventory.db\n"
            "  supports_schemas: true\n"
            "  case_sensitive: true\n"
        )

        # When
        config = load_config(path)

        # Then
        assert config.database.url == "sqlite:///inventory.db"
        assert config.database.supports_schemas is True
        assert config.database.supports_catalogs is None
        assert config.database.case_sensitive is True

    def test_given_global_file_when_no_path_then_used(self, tmp_path: Path) -> None:
        global_file = tmp_path / "global.yaml"
        global_file.write_text("cache:\n  bulk_threshold: 7\n")

        with patch("schemacache.config.loader.GLOBAL_CONFIG_PATH", global_file):
            config = load_config()

        assert config.cache.bulk_threshold == 7

    def test_given_missing_explicit_path_then_file_not_found(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path / "missing.yaml")

        assert exc_info.value.code == ErrorCode.CONFIG_FILE_NOT_FOUND

    @pytest.mark.parametrize(
        "body",
        [
            "cache:\n  bulk_threshold: [unclosed\n",
            "- cache\n- database\n",
        ],
        ids=["invalid-yaml", "top-level-list"],
    )
    def test_given_unparseable_file_then_parse_error(
        self, write_config: WriteConfig, body: str
    ) -> None:
        with pytest.raises(ConfigError) as exc_info:
            load_config(write_config(body))

        assert exc_info.value.code == ErrorCode.CONFIG_PARSE_ERROR

    def test_given_negative_threshold_then_invalid_value(self, write_config: WriteConfig) -> None:
        # Given
        path = write_config("cache:\n  bulk_threshold: -1\n")

        # When
        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        # Then
        assert exc_info.value.code == ErrorCode.CONFIG_INVALID_VALUE
        assert exc_info.value.details["field"] == "cache.bulk_threshold"


class TestPrecedence:
    """Environment variables and kwargs over the file."""

    def test_given_env_var_when_file_sets_value_then_env_wins(
        self, write_config: WriteConfig, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        path = write_config("cache:\n  bulk_threshold: 10\n")
        monkeypatch.setenv("SCHEMACACHE__CACHE__BULK_THRESHOLD", "1")

        assert load_config(path).cache.bulk_threshold == 1

    def test_given_env_case_sensitivity_then_parsed_as_bool(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SCHEMACACHE__DATABASE__CASE_SENSITIVE", "false")

        assert load_config().database.case_sensitive is False

    def test_given_kwargs_when_env_set_then_kwargs_win(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("SCHEMACACHE__CACHE__BULK_THRESHOLD", "1")

        config = load_config(cache=CacheConfig(bulk_threshold=8))

        assert config.cache.bulk_threshold == 8


class TestLoadedConfigInUse:
    """Loaded sections configure the cache and the database handle."""

    def test_given_threshold_in_file_when_cache_built_then_applied(
        self, write_config: WriteConfig
    ) -> None:
        config = load_config(write_config("cache:\n  bulk_threshold: 0\n"))

        cache = ResultSetCache(config.cache)

        assert cache.bulk_threshold == 0

    def test_given_capability_overrides_when_database_built_then_applied(
        self, write_config: WriteConfig
    ) -> None:
        # Given
        config = load_config(
            write_config(
                "database:\n"
                "  url: sqlite:///:memory:\n"
                "  supports_catalogs: true\n"
                "  case_sensitive: true\n"
            )
        )

        # When
        with EngineDatabase.from_config(config.database) as db:
            # Then
            assert db.supports_catalogs is True
            assert db.supports_schemas is False
            assert db.is_case_sensitive is True
