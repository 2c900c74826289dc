from __future__ import annotations

from dexcache.models.catalog import (
    MOVE_LIMIT,
    AbilitySlot,
    CatalogEntry,
    CatalogSummary,
    FormattedEntry,
    FormattedStat,
    IndexReference,
    MoveSlot,
    NamedResource,
    Sprites,
    SpriteSet,
    StatSlot,
    TypeSlot,
    format_entry,
    id_from_locator,
)
from dexcache.models.stats import CacheStats

__all__ = [
    # catalog records
    "CatalogEntry",
    "CatalogSummary",
    "IndexReference",
    "NamedResource",
    "Sprites",
    "SpriteSet",
    "TypeSlot",
    "AbilitySlot",
    "StatSlot",
    "MoveSlot",
    # display
    "FormattedEntry",
    "FormattedStat",
    "MOVE_LIMIT",
    "format_entry",
    "id_from_locator",
    # stats
    "CacheStats",
]
