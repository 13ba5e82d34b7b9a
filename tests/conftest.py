"""Shared fixtures: a scripted fake network built on `httpx.MockTransport`.

Routes map a URL without its query string to what the fake server does:

- ``dict`` / ``list``      -> 200 with that JSON body
- ``int``                  -> empty response with that status code
- ``str``                  -> 200 with that raw (usually non-JSON) text body
- ``Exception`` instance   -> raised, as a transport error would be
- ``(seconds, value)``     -> sleep, then behave as ``value``

Unknown URLs raise `httpx.ConnectError`, like a refused connection.
"""

from __future__ import annotations

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

import httpx
import pytest

from bragi_probe.core.settings import Settings

STARTED_AT = datetime(2026, 10, 18, 12, 0, 0, tzinfo=UTC)
INDEX_CREATED_AT = datetime(2020, 6, 12, 9, 30, 15, tzinfo=UTC)

DEV_STATUS: dict[str, Any] = {
    "version": "v1.14.0",
    "es": "http://es.dev.example:9200/munin",
    "status": "good",
}
ES_INFO: dict[str, Any] = {
    "name": "node-1",
    "cluster_name": "dev-cluster",
    "version": {"number": "7.10.2"},
}
MUNIN_ADMIN_FR: dict[str, Any] = {
    "health": "green",
    "status": "open",
    "index": "munin_admin_fr",
    "docs.count": "1234",
    "creation.date": str(int(INDEX_CREATED_AT.timestamp() * 1000)),
}
OTHER_ADMIN_FR: dict[str, Any] = {**MUNIN_ADMIN_FR, "index": "other_admin_fr"}


def route_transport(routes: Mapping[str, Any]) -> httpx.MockTransport:
    """Build a MockTransport that serves ``routes`` (see module docstring)."""

    async def respond(request: httpx.Request, value: Any) -> httpx.Response:
        if isinstance(value, tuple):
            delay, value = value
            await asyncio.sleep(delay)
            return await respond(request, value)
        if isinstance(value, Exception):
            raise value
        if isinstance(value, int):
            return httpx.Response(value)
        if isinstance(value, str):
            return httpx.Response(200, text=value)
        return httpx.Response(200, json=value)

    async def handler(request: httpx.Request) -> httpx.Response:
        key = str(request.url).split("?", 1)[0]
        if key not in routes:
            raise httpx.ConnectError(f"connection refused: {key}", request=request)
        return await respond(request, routes[key])

    return httpx.MockTransport(handler)


def healthy_routes(
    base_url: str = "http://bragi.dev.example:4000",
    es_url: str = "http://es.dev.example:9200",
    indices: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    """Routes for one environment where frontend and backend both answer."""
    return {
        f"{base_url}/status": {**DEV_STATUS, "es": f"{es_url}/munin"},
        f"{es_url}/": ES_INFO,
        f"{es_url}/_cat/indices": indices if indices is not None else [MUNIN_ADMIN_FR],
    }


@pytest.fixture  # type: ignore[misc]
def settings() -> Settings:
    """Settings with short timeouts, independent of the process environment."""
    return make_settings(deadline=2.0)


def make_settings(deadline: float = 2.0) -> Settings:
    overrides: dict[str, Any] = {
        "BRAGI_PROBE_TIMEOUT": 1.0,
        "BRAGI_PROBE_DEADLINE": deadline,
        "BRAGI_PROBE_INDEX_PREFIX": "munin",
    }
    return Settings(_env_file=None, **overrides)
