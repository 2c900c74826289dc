"""HTTP transport for the remote catalog.

``Fetcher.get_json`` performs one logical read: an HTTP GET with a fixed
timeout, retried with exponential backoff while the failure is transient
(5xx, connection-level network error, timeout). Malformed locators and
other deterministic request errors fail on the first attempt. Every failure
leaves this module as a ``CatalogError``; raw httpx exceptions never cross
the Fetcher boundary.
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from dexcache.config import FetcherSettings
from dexcache.errors import CatalogError, ErrorCode

log = structlog.get_logger()

_HEADERS = {"Accept": "application/json"}


def build_http_client(settings: FetcherSettings | None = None) -> httpx.AsyncClient:
    """Create the shared AsyncClient. One per process, owned by AppState."""
    settings = settings or FetcherSettings()
    return httpx.AsyncClient(
        headers=_HEADERS,
        timeout=httpx.Timeout(settings.timeout_seconds),
        follow_redirects=True,
    )


def backoff_delay(attempt: int, base_seconds: float) -> float:
    """Seconds to wait before retry number ``attempt`` (1-based)."""
    return base_seconds * (2**attempt)


class Fetcher:
    """Issues GET requests against the catalog and classifies failures."""

    def __init__(self, client: httpx.AsyncClient, settings: FetcherSettings | None = None) -> None:
        self._client = client
        self._settings = settings or FetcherSettings()

    async def get_json(self, url: str) -> Any:
        """GET ``url`` and return its decoded JSON body.

        Raises:
            CatalogError: NOT_FOUND and REQUEST_FAILED immediately; TRANSIENT
                and TIMEOUT once ``max_retries`` retries are exhausted;
                INVALID_RESPONSE when the body is not JSON.
        """
        attempt = 0
        while True:
            try:
                return await self._get_once(url)
            except CatalogError as exc:
                if not exc.recoverable or attempt >= self._settings.max_retries:
                    raise
                attempt += 1
                delay = backoff_delay(attempt, self._settings.backoff_base_seconds)
                log.warning(
                    "fetch_retry",
                    url=url,
                    code=exc.code.value,
                    attempt=attempt,
                    delay_seconds=delay,
                )
                await asyncio.sleep(delay)

    async def _get_once(self, url: str) -> Any:
        try:
            response = await self._client.get(
                url, timeout=httpx.Timeout(self._settings.timeout_seconds)
            )
        except httpx.TimeoutException as exc:
            raise CatalogError(
                ErrorCode.TIMEOUT,
                f"Request timed out after {self._settings.timeout_seconds}s: {url}",
                url=url,
            ) from exc
        except (httpx.NetworkError, httpx.RemoteProtocolError) as exc:
            raise CatalogError(
                ErrorCode.TRANSIENT, f"Network error fetching {url}: {exc}", url=url
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            # Bad locator, unsupported scheme, redirect loop: retrying cannot help
            raise CatalogError(
                ErrorCode.REQUEST_FAILED, f"Cannot fetch {url}: {exc}", url=url
            ) from exc

        status = response.status_code
        if status == 404:
            raise CatalogError(ErrorCode.NOT_FOUND, f"Not found: {url}", url=url)
        if status >= 500:
            raise CatalogError(ErrorCode.TRANSIENT, f"HTTP {status} fetching {url}", url=url)
        if not response.is_success:
            raise CatalogError(ErrorCode.REQUEST_FAILED, f"HTTP {status} fetching {url}", url=url)

        try:
            return response.json()
        except ValueError as exc:
            raise CatalogError(
                ErrorCode.INVALID_RESPONSE, f"Response from {url} is not valid JSON", url=url
            ) from exc
