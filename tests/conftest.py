"""Shared fixtures: sample catalog payloads and a scriptable fake fetcher."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from dexcache.client import CatalogClient
from dexcache.config import Settings
from dexcache.errors import CatalogError, ErrorCode
from dexcache.models import IndexReference
from dexcache.state import AppState

BASE = "https://pokeapi.co/api/v2"

SAMPLE = [
    (1, "bulbasaur", ["grass", "poison"]),
    (4, "charmander", ["fire"]),
    (7, "squirtle", ["water"]),
    (10, "caterpie", ["bug"]),
    (25, "pikachu", ["electric"]),
    (26, "raichu", ["electric"]),
    (39, "jigglypuff", ["normal", "fairy"]),
    (150, "mewtwo", ["psychic"]),
    (151, "mew", ["psychic"]),
    (172, "pichu", ["electric"]),
]


def make_entry_payload(entry_id: int, name: str, types: list[str]) -> dict[str, Any]:
    """Detail document shaped like the live API, trimmed to what matters."""
    return {
        "id": entry_id,
        "name": name,
        "height": entry_id % 20 + 3,
        "weight": entry_id * 10,
        "base_experience": 64,  # not modelled, must be ignored
        "sprites": {
            "front_default": f"https://img.example/{entry_id}.png",
            "other": {
                "official-artwork": {"front_default": f"https://img.example/art/{entry_id}.png"},
                "showdown": {"front_default": None, "back_default": None},
            },
        },
        "types": [
            {"slot": i + 1, "type": {"name": t, "url": f"{BASE}/type/{t}/"}}
            for i, t in enumerate(types)
        ],
        "abilities": [{"ability": {"name": "static"}, "is_hidden": False, "slot": 1}],
        "stats": [
            {"base_stat": 35, "effort": 0, "stat": {"name": "hp"}},
            {"base_stat": 55, "effort": 0, "stat": {"name": "attack"}},
        ],
        "moves": [{"move": {"name": f"move-{n}"}} for n in range(12)],
    }


def make_index_payload(limit: int) -> dict[str, Any]:
    return {
        "count": len(SAMPLE),
        "results": [
            {"name": name, "url": f"{BASE}/pokemon/{entry_id}/"}
            for entry_id, name, _ in SAMPLE[:limit]
        ],
    }


class FakeFetcher:
    """Stands in for ``Fetcher``: serves canned payloads and records traffic."""

    def __init__(self, payloads: dict[str, Any], *, delay: float = 0.0) -> None:
        self.payloads = payloads
        self.delay = delay
        self.delays: dict[str, float] = {}
        self.errors: dict[str, CatalogError] = {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def get_json(self, url: str) -> Any:
        self.calls.append(url)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(url, self.delay))
            if url in self.errors:
                raise self.errors[url]
            if url not in self.payloads:
                raise CatalogError(ErrorCode.NOT_FOUND, f"Not found: {url}", url=url)
            return self.payloads[url]
        finally:
            self.in_flight -= 1

    def fail(self, url: str, code: ErrorCode = ErrorCode.TRANSIENT) -> None:
        self.errors[url] = CatalogError(code, f"{code.value} for {url}", url=url)


@pytest.fixture()
def entry_payloads() -> dict[str, Any]:
    payloads: dict[str, Any] = {}
    for entry_id, name, types in SAMPLE:
        body = make_entry_payload(entry_id, name, types)
        payloads[f"{BASE}/pokemon/{entry_id}"] = body
        payloads[f"{BASE}/pokemon/{entry_id}/"] = body
        payloads[f"{BASE}/pokemon/{name}"] = body
    for limit in (len(SAMPLE), 1010):
        payloads[f"{BASE}/pokemon?limit={limit}"] = make_index_payload(limit)
    return payloads


@pytest.fixture()
def index() -> tuple[IndexReference, ...]:
    return tuple(
        IndexReference(name=name, url=f"{BASE}/pokemon/{entry_id}/")
        for entry_id, name, _ in SAMPLE
    )


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        catalog={"popular_ids": [1, 25]},
        fetcher={"backoff_base_seconds": 0},
        search={"debounce_ms": 20},
    )


@pytest.fixture()
def fake_fetcher(entry_payloads: dict[str, Any]) -> FakeFetcher:
    return FakeFetcher(entry_payloads)


@pytest.fixture()
def state(settings: Settings, fake_fetcher: FakeFetcher) -> AppState:
    return AppState(settings=settings, fetcher=fake_fetcher)  # type: ignore[arg-type]


@pytest.fixture()
def client(state: AppState) -> CatalogClient:
    return CatalogClient(state)
