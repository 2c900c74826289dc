"""Public entry point used by presentation code.

``Catalog`` bundles an ``AppState`` with the client, batch fetcher and a
search session, and exposes the operations presentation code calls.
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator, Iterable, Sequence
from contextlib import asynccontextmanager

import structlog

from dexcache.batch import batch_fetch
from dexcache.client import CatalogClient
from dexcache.config import Settings
from dexcache.errors import CatalogError
from dexcache.fetcher import Fetcher, build_http_client
from dexcache.models import (
    CacheStats,
    CatalogEntry,
    CatalogSummary,
    FormattedEntry,
    IndexReference,
    format_entry,
)
from dexcache.search import SearchPipeline
from dexcache.state import AppState

log = structlog.get_logger()


class Catalog:
    def __init__(self, state: AppState) -> None:
        self.state = state
        self.client = CatalogClient(state)
        self.search_session = SearchPipeline(
            self.client,
            state.summaries,
            debounce_seconds=state.settings.search.debounce_ms / 1000,
            max_results=state.settings.search.max_results,
        )

    @classmethod
    @asynccontextmanager
    async def open(cls, settings: Settings | None = None) -> AsyncIterator[Catalog]:
        """Build a Catalog that owns its HTTP client for the block's duration."""
        settings = settings or Settings()
        async with build_http_client(settings.fetcher) as http_client:
            state = AppState(
                settings=settings,
                fetcher=Fetcher(http_client, settings.fetcher),
                http_client=http_client,
            )
            yield cls(state)

    async def preload(self, limit: int | None = None) -> tuple[IndexReference, ...]:
        """Fetch the full index and warm the cache with popular entries."""
        index, _ = await asyncio.gather(self.client.fetch_index(limit), self.prefetch_popular())
        log.info("preload_complete", index_size=len(index), **self.cache_stats().model_dump())
        return index

    async def prefetch_popular(self, ids: Iterable[int] | None = None) -> None:
        """Warm the entry cache. Individual failures are logged, never raised."""
        ids = list(self.state.settings.catalog.popular_ids if ids is None else ids)
        results = await asyncio.gather(
            *(self.client.fetch_by_id(entry_id) for entry_id in ids), return_exceptions=True
        )
        for entry_id, result in zip(ids, results, strict=True):
            if isinstance(result, CatalogError):
                log.warning("prefetch_failed", id=entry_id, code=result.code.value)
            elif isinstance(result, BaseException):
                raise result

    async def fetch_details(self, id_or_name: int | str) -> CatalogEntry:
        return await self.client.fetch_by_id(id_or_name)

    async def fetch_by_url(self, locator: str) -> CatalogEntry:
        return await self.client.fetch_by_url(locator)

    async def format_details(self, id_or_name: int | str) -> FormattedEntry:
        return format_entry(await self.client.fetch_by_id(id_or_name))

    async def batch_fetch(
        self,
        refs: Sequence[IndexReference],
        concurrency: int | None = None,
        *,
        skip_failures: bool = False,
    ) -> list[CatalogEntry]:
        if concurrency is None:
            concurrency = self.state.settings.batch.concurrency
        return await batch_fetch(self.client, refs, concurrency, skip_failures=skip_failures)

    async def search(
        self,
        query: str,
        index: Sequence[IndexReference],
        max_results: int | None = None,
    ) -> list[CatalogSummary] | None:
        return await self.search_session.search(query, index, max_results)

    def cache_stats(self) -> CacheStats:
        return self.state.stats()

    def clear_all(self) -> None:
        self.state.clear()
