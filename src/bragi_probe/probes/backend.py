"""
Backend (Elasticsearch) probe.

Two independent requests, each with its own timeout:

1. ``GET {url}/`` for cluster identity and version.
2. ``GET {url}/_cat/indices?format=json`` for the index listing.

If either fails the backend is reported `Unreachable` as a whole; a cluster
that answers one request but not the other is not modeled as half-available.
"""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import ValidationError

from bragi_probe.core.settings import get_logger

from .outcomes import (
    BackendLocation,
    BackendOutcome,
    BackendReachable,
    RawIndexDescription,
    Unreachable,
)

logger = get_logger(__name__)

# Columns requested from `_cat/indices`; `creation.date` is epoch milliseconds.
CAT_INDICES_COLUMNS = "health,status,index,docs.count,creation.date"

# `InvalidURL` is raised while building the request and is not an `HTTPError`.
_REQUEST_ERRORS = (httpx.HTTPError, httpx.InvalidURL)


class _MalformedPayload(ValueError):
    pass


class BackendProbe:
    """Bounded-time identity and index-listing check against one cluster."""

    def __init__(self, client: httpx.AsyncClient, *, timeout_seconds: float) -> None:
        self._client = client
        self._timeout = timeout_seconds

    async def probe(self, location: BackendLocation) -> BackendOutcome:
        """Query the cluster at ``location``; fold every failure into `Unreachable`."""
        info_url = f"{location.url}/"
        indices_url = f"{location.url}/_cat/indices"
        try:
            info = await self._get_json(info_url)
            name, version = _read_cluster_info(info)
            listing = await self._get_json(
                indices_url, params={"format": "json", "h": CAT_INDICES_COLUMNS}
            )
            indices = _read_listing(listing)
        except _REQUEST_ERRORS as exc:
            return self._unreachable(location.url, f"{type(exc).__name__}: {exc}")
        except ValueError as exc:
            return self._unreachable(location.url, f"response not readable: {exc}")

        logger.debug("Backend %s lists %d indices", location.url, len(indices))
        return BackendReachable(
            name=name,
            version=version,
            index_prefix=location.index_prefix,
            indices=tuple(indices),
        )

    async def _get_json(self, url: str, params: dict[str, str] | None = None) -> Any:
        resp = await self._client.get(url, params=params, timeout=self._timeout)
        resp.raise_for_status()
        return resp.json()

    @staticmethod
    def _unreachable(url: str, reason: str) -> Unreachable:
        logger.warning("Backend %s not available: %s", url, reason)
        return Unreachable(url=url, reason=reason)


def _read_cluster_info(info: Any) -> tuple[str, str]:
    """Extract ``(cluster name, version number)`` from the cluster root document."""
    if not isinstance(info, dict):
        raise _MalformedPayload("cluster info is not a JSON object")
    name = info.get("cluster_name") or info.get("name")
    version = info.get("version")
    number = version.get("number") if isinstance(version, dict) else None
    if not isinstance(name, str) or not isinstance(number, str):
        raise _MalformedPayload("cluster info lacks cluster_name or version.number")
    return name, number


def _read_listing(listing: Any) -> list[RawIndexDescription]:
    """Validate the listing row by row, dropping rows that do not parse."""
    if not isinstance(listing, list):
        raise _MalformedPayload("index listing is not a JSON array")
    rows: list[RawIndexDescription] = []
    for position, row in enumerate(listing):
        try:
            rows.append(RawIndexDescription.model_validate(row))
        except ValidationError as exc:
            logger.debug("Dropping unreadable index row %d: %s", position, exc)
    return rows


__all__ = ["BackendProbe", "CAT_INDICES_COLUMNS"]
