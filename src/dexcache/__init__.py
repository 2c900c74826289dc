"""Async caching and request-deduplicating access layer for a read-only catalog."""

from __future__ import annotations

from dexcache.catalog import Catalog
from dexcache.config import Settings
from dexcache.errors import CatalogError, ErrorCode
from dexcache.log_setup import configure_logging

__version__ = "0.1.0"

__all__ = [
    "Catalog",
    "CatalogError",
    "ErrorCode",
    "Settings",
    "configure_logging",
    "__version__",
]
