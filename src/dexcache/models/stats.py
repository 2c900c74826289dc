from __future__ import annotations

from pydantic import BaseModel


class CacheStats(BaseModel):
    """Point-in-time sizes of the shared caches and the in-flight registry."""

    entries: int
    summaries: int
    index_pages: int
    pending_count: int
