"""Concurrency-limited batch fetching.

References are processed in consecutive chunks of ``concurrency`` items.
All fetches in a chunk run concurrently and the whole chunk settles before
the next one starts, so no more than ``concurrency`` reads are ever in
flight. The returned entries are sorted by ascending id, independent of
input order and of the order in which responses arrive.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog

from dexcache.errors import CatalogError

if TYPE_CHECKING:
    from dexcache.client import CatalogClient
    from dexcache.models import CatalogEntry, IndexReference

log = structlog.get_logger()


def chunked(refs: Sequence[IndexReference], size: int) -> list[Sequence[IndexReference]]:
    return [refs[i : i + size] for i in range(0, len(refs), size)]


async def batch_fetch(
    client: CatalogClient,
    refs: Sequence[IndexReference],
    concurrency: int,
    *,
    skip_failures: bool = False,
) -> list[CatalogEntry]:
    """Fetch the details for every reference in ``refs``.

    By default the first unrecoverable item failure fails the whole batch,
    once the chunk it belongs to has settled. With ``skip_failures=True``
    failed items are logged and left out of the result instead.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    entries: list[CatalogEntry] = []
    for chunk in chunked(refs, concurrency):
        results = await asyncio.gather(
            *(client.fetch_by_url(ref.url) for ref in chunk),
            return_exceptions=True,
        )
        for ref, result in zip(chunk, results, strict=True):
            if isinstance(result, BaseException):
                if skip_failures and isinstance(result, CatalogError):
                    log.warning(
                        "batch_item_skipped", name=ref.name, url=ref.url, code=result.code.value
                    )
                    continue
                raise result
            entries.append(result)

    entries.sort(key=lambda entry: entry.id)
    return entries
