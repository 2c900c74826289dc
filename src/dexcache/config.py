"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (DEXCACHE__FETCHER__TIMEOUT_SECONDS=5)
  2. dexcache.yaml          (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_CONFIG_DIR = platformdirs.user_config_dir("dexcache")

# Frequently viewed entries warmed by Catalog.prefetch_popular()
_DEFAULT_POPULAR_IDS = [1, 4, 7, 25, 39, 52, 54, 104, 115, 131, 134, 135, 136, 150, 151]


def _find_config_file() -> str | None:
    """Return the path of the first dexcache.yaml found, or None."""
    candidates = [
        Path("dexcache.yaml"),
        Path(_DEFAULT_CONFIG_DIR) / "dexcache.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class CatalogSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    base_url: str = "https://pokeapi.co/api/v2"
    index_limit: int = Field(default=1010, ge=1)
    popular_ids: list[int] = Field(default_factory=lambda: list(_DEFAULT_POPULAR_IDS))


class FetcherSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    timeout_seconds: float = Field(default=10.0, gt=0)
    max_retries: int = Field(default=3, ge=0)
    # Delay before retry n is backoff_base_seconds * 2**n
    backoff_base_seconds: float = Field(default=1.0, ge=0)


class CacheSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    entry_capacity: int = Field(default=300, ge=1)
    summary_capacity: int = Field(default=1000, ge=1)
    index_capacity: int = Field(default=10, ge=1)


class BatchSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    concurrency: int = Field(default=10, ge=1)


class SearchSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    debounce_ms: int = Field(default=300, ge=0)
    max_results: int = Field(default=20, ge=1)


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "json"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: DEXCACHE__BATCH__CONCURRENCY=4
        env_prefix="DEXCACHE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
    )

    catalog: CatalogSettings = CatalogSettings()
    fetcher: FetcherSettings = FetcherSettings()
    cache: CacheSettings = CacheSettings()
    batch: BatchSettings = BatchSettings()
    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
