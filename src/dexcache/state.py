"""Shared data-access context.

``AppState`` is constructed once by whoever owns the application root and
handed to every component that reads from the catalog. It replaces what
would otherwise be process-wide singletons: the HTTP client, the three
caches and the in-flight registry all live here, so two contexts never share
state and tests can build as many isolated ones as they like.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from dexcache.config import Settings
from dexcache.inflight import InFlightRegistry
from dexcache.lru import BoundedCache
from dexcache.models import CacheStats, CatalogEntry, CatalogSummary, IndexReference

if TYPE_CHECKING:
    import httpx

    from dexcache.fetcher import Fetcher


@dataclass
class AppState:
    settings: Settings
    fetcher: Fetcher
    http_client: httpx.AsyncClient | None = None
    entries: BoundedCache[CatalogEntry] = field(init=False)
    summaries: BoundedCache[CatalogSummary] = field(init=False)
    index_pages: BoundedCache[tuple[IndexReference, ...]] = field(init=False)
    pending: InFlightRegistry = field(default_factory=InFlightRegistry)

    def __post_init__(self) -> None:
        caps = self.settings.cache
        self.entries = BoundedCache(caps.entry_capacity, name="entries")
        self.summaries = BoundedCache(caps.summary_capacity, name="summaries")
        self.index_pages = BoundedCache(caps.index_capacity, name="index_pages")

    def stats(self) -> CacheStats:
        return CacheStats(
            entries=self.entries.size(),
            summaries=self.summaries.size(),
            index_pages=self.index_pages.size(),
            pending_count=self.pending.pending_count(),
        )

    def clear(self) -> None:
        """Drop every cached value and forget pending registrations."""
        self.entries.clear()
        self.summaries.clear()
        self.index_pages.clear()
        self.pending.clear()
