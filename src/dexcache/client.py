"""Cache-first, deduplicated reads against the remote catalog.

Each read follows the same path: return the cached value if there is one,
otherwise join the in-flight operation for the same logical key, otherwise
start one. The operation fetches, validates, writes the cache and only then
resolves every waiter.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, TypeVar

import structlog
from pydantic import ValidationError

from dexcache.errors import CatalogError, ErrorCode
from dexcache.models import CatalogEntry, IndexReference

if TYPE_CHECKING:
    from dexcache.lru import BoundedCache
    from dexcache.state import AppState

log = structlog.get_logger()

V = TypeVar("V")


def entry_key(id_or_name: int | str) -> str:
    return f"entry:{normalize_id_or_name(id_or_name)}"


def url_key(locator: str) -> str:
    return f"url:{locator}"


def index_key(limit: int) -> str:
    return f"index:{limit}"


def normalize_id_or_name(id_or_name: int | str) -> str:
    """``25``, ``"25"`` and ``" Pikachu "`` style inputs map to one path segment."""
    return str(id_or_name).strip().lower()


def _parse_index(payload: Any) -> tuple[IndexReference, ...]:
    results = payload.get("results") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        raise ValueError("index payload has no 'results' list")
    return tuple(IndexReference.model_validate(item) for item in results)


class CatalogClient:
    """Reads entries and index pages through the shared AppState."""

    def __init__(self, state: AppState) -> None:
        self._state = state

    @property
    def base_url(self) -> str:
        return self._state.settings.catalog.base_url.rstrip("/")

    async def fetch_by_id(self, id_or_name: int | str) -> CatalogEntry:
        """Fetch one entry by numeric id or by name."""
        segment = normalize_id_or_name(id_or_name)
        if not segment:
            raise ValueError("id_or_name must not be empty")
        return await self._read(
            entry_key(segment),
            f"{self.base_url}/pokemon/{segment}",
            self._state.entries,
            CatalogEntry.model_validate,
        )

    async def fetch_by_url(self, locator: str) -> CatalogEntry:
        """Fetch one entry from its absolute locator."""
        return await self._read(
            url_key(locator),
            locator,
            self._state.entries,
            CatalogEntry.model_validate,
        )

    async def fetch_index(self, limit: int | None = None) -> tuple[IndexReference, ...]:
        """Fetch the first ``limit`` (name, locator) pairs of the catalog index."""
        if limit is None:
            limit = self._state.settings.catalog.index_limit
        if limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        return await self._read(
            index_key(limit),
            f"{self.base_url}/pokemon?limit={limit}",
            self._state.index_pages,
            _parse_index,
        )

    async def _read(
        self,
        key: str,
        url: str,
        cache: BoundedCache[V],
        parse: Callable[[Any], V],
    ) -> V:
        cached = cache.get(key)
        if cached is not None:
            return cached

        async def load() -> V:
            try:
                payload = await self._state.fetcher.get_json(url)
                try:
                    value = parse(payload)
                except (ValidationError, ValueError) as exc:
                    raise CatalogError(
                        ErrorCode.INVALID_RESPONSE,
                        f"Unexpected payload from {url}: {exc}",
                        url=url,
                    ) from exc
            except CatalogError as exc:
                log.warning("fetch_failed", key=key, code=exc.code.value, url=url)
                raise
            cache.set(key, value)
            return value

        return await self._state.pending.begin_or_join(key, load)
