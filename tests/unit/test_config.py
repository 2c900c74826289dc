"""Unit tests for configuration defaults, overrides and validation."""

from __future__ import annotations

import platformdirs
import pytest
from pydantic import ValidationError

from dexcache.config import _DEFAULT_CONFIG_DIR, CacheSettings, SearchSettings, Settings


class TestDefaults:
    def test_config_dir_matches_platformdirs(self) -> None:
        assert platformdirs.user_config_dir("dexcache") == _DEFAULT_CONFIG_DIR

    def test_cache_capacities(self) -> None:
        settings = CacheSettings()
        assert (settings.entry_capacity, settings.summary_capacity, settings.index_capacity) == (
            300,
            1000,
            10,
        )

    def test_transport_defaults(self) -> None:
        settings = Settings()
        assert settings.fetcher.timeout_seconds == 10.0
        assert settings.fetcher.max_retries == 3
        assert settings.catalog.base_url == "https://pokeapi.co/api/v2"
        assert settings.catalog.index_limit == 1010

    def test_search_defaults(self) -> None:
        settings = SearchSettings()
        assert settings.debounce_ms == 300
        assert settings.max_results == 20


class TestOverrides:
    def test_env_overrides_nested_field(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEXCACHE__BATCH__CONCURRENCY", "4")
        assert Settings().batch.concurrency == 4

    def test_init_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("DEXCACHE__SEARCH__DEBOUNCE_MS", "50")
        assert Settings(search={"debounce_ms": 10}).search.debounce_ms == 10


class TestConfigValidation:
    def test_wrong_type_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(fetcher={"timeout_seconds": "soon"})  # type: ignore[arg-type]

    def test_unknown_top_level_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(completely_unknown_field="oops")  # type: ignore[call-arg]

    def test_unknown_nested_field_raises_validation_error(self) -> None:
        """A typo like 'entry_capacty' is caught instead of silently using the default."""
        with pytest.raises(ValidationError):
            CacheSettings(entry_capacty=5)  # type: ignore[call-arg]

    def test_zero_capacity_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CacheSettings(entry_capacity=0)

    def test_zero_concurrency_rejected(self) -> None:
        with pytest.raises(ValidationError):
            Settings(batch={"concurrency": 0})
