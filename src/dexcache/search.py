"""Debounced incremental search over the catalog index.

A ``SearchPipeline`` is one search session, typically bound to one search
box. Each call to ``search`` moves the session through
IDLE → DEBOUNCING → FILTERING → RESOLVING → SETTLED. A newer call cancels
the pending debounce timer of the previous one and makes any result the
previous call is still resolving stale: stale results are discarded and
never replace what a newer query settled with. Network reads started by a
superseded query are not aborted; they still warm the caches.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from enum import StrEnum
from itertools import islice
from typing import TYPE_CHECKING

import structlog

from dexcache.errors import CatalogError
from dexcache.models import CatalogSummary, IndexReference

if TYPE_CHECKING:
    from dexcache.client import CatalogClient
    from dexcache.lru import BoundedCache

log = structlog.get_logger()


class SearchState(StrEnum):
    IDLE = "idle"
    DEBOUNCING = "debouncing"
    FILTERING = "filtering"
    RESOLVING = "resolving"
    SETTLED = "settled"


def summary_key(name: str) -> str:
    return f"summary:{name}"


def filter_index(
    query: str, index: Sequence[IndexReference], max_results: int
) -> list[IndexReference]:
    """Case-insensitive substring match, first ``max_results`` in index order."""
    needle = query.strip().lower()
    if not needle:
        return []
    return list(islice((ref for ref in index if needle in ref.name.lower()), max_results))


def _release(waiter: asyncio.Future[bool], fire: bool) -> None:
    if not waiter.done():
        waiter.set_result(fire)


class SearchPipeline:
    """One search session: debounce, filter, resolve, order."""

    def __init__(
        self,
        client: CatalogClient,
        summaries: BoundedCache[CatalogSummary],
        *,
        debounce_seconds: float = 0.3,
        max_results: int = 20,
    ) -> None:
        if max_results < 1:
            raise ValueError(f"max_results must be >= 1, got {max_results}")
        self._client = client
        self._summaries = summaries
        self._debounce_seconds = debounce_seconds
        self._max_results = max_results
        self._generation = 0
        self._timer: asyncio.TimerHandle | None = None
        self._waiter: asyncio.Future[bool] | None = None
        self.state = SearchState.IDLE
        self.query = ""
        self.results: list[CatalogSummary] = []

    async def search(
        self,
        query: str,
        index: Sequence[IndexReference],
        max_results: int | None = None,
    ) -> list[CatalogSummary] | None:
        """Run ``query`` against ``index`` once input has been quiet long enough.

        Returns the ordered summaries, or ``None`` when a newer call
        superseded this one before it settled.
        """
        limit = max_results if max_results is not None else self._max_results
        if limit < 1:
            raise ValueError(f"max_results must be >= 1, got {limit}")

        self._generation += 1
        generation = self._generation
        self._cancel_pending_timer()

        if not query.strip():
            return self._settle(query, [])

        self.state = SearchState.DEBOUNCING
        if not await self._debounce():
            return None

        self.state = SearchState.FILTERING
        matches = filter_index(query, index, limit)

        self.state = SearchState.RESOLVING
        summaries = await self._resolve(matches)
        if generation != self._generation:
            log.debug("search_discarded", query=query)
            return None
        return self._settle(query, summaries)

    async def _debounce(self) -> bool:
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[bool] = loop.create_future()
        self._waiter = waiter
        self._timer = loop.call_later(self._debounce_seconds, _release, waiter, True)
        return await waiter

    def _cancel_pending_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self._waiter is not None:
            _release(self._waiter, False)
            self._waiter = None

    def _settle(self, query: str, results: list[CatalogSummary]) -> list[CatalogSummary]:
        self.query = query
        self.results = results
        self.state = SearchState.SETTLED
        return results

    async def _resolve(self, matches: list[IndexReference]) -> list[CatalogSummary]:
        ranked: list[tuple[int, CatalogSummary]] = []
        misses: list[tuple[int, IndexReference]] = []
        for position, ref in enumerate(matches):
            cached = self._summaries.get(summary_key(ref.name))
            if cached is not None:
                ranked.append((position, cached))
            else:
                misses.append((position, ref))

        if misses:
            fetched = await asyncio.gather(*(self._summarize(ref) for _, ref in misses))
            ranked.extend(zip((position for position, _ in misses), fetched, strict=True))

        ranked.sort(key=lambda item: (item[0], item[1].id))
        return [summary for _, summary in ranked]

    async def _summarize(self, ref: IndexReference) -> CatalogSummary:
        try:
            entry = await self._client.fetch_by_url(ref.url)
        except CatalogError as exc:
            log.warning("search_fallback", name=ref.name, url=ref.url, code=exc.code.value)
            return CatalogSummary.placeholder(ref)
        summary = CatalogSummary.from_entry(entry, ref.url)
        self._summaries.set(summary_key(ref.name), summary)
        return summary
