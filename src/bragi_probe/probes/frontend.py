"""
Frontend (Bragi) status probe.

Queries ``GET {base_url}/status`` and extracts the service version plus the
location of the Elasticsearch cluster behind it. A typical body::

    {"version": "v1.14.0", "es": "http://es.dev.example:9200/munin", "status": "good"}

The ``es`` URL carries the backend address (scheme, host and port) and, in
its first path segment, the index prefix the frontend searches under.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import urlsplit

import httpx

from bragi_probe.core.settings import get_logger

from .outcomes import BackendLocation, FrontendOutcome, FrontendReachable, Unreachable

logger = get_logger(__name__)


def parse_backend_location(raw: str, default_prefix: str) -> BackendLocation:
    """Split a frontend's ``es`` URL into a base URL and an index prefix.

    Raises
    ------
    ValueError
        If ``raw`` is not an absolute http(s) URL with a host.
    """
    parts = urlsplit(raw)
    if parts.scheme not in ("http", "https") or not parts.hostname:
        raise ValueError(f"elasticsearch url not parsable {raw!r}")
    host = parts.hostname
    # IPv6 literals lose their brackets in `hostname`.
    if ":" in host:
        host = f"[{host}]"
    url = f"{parts.scheme}://{host}"
    if parts.port is not None:
        url = f"{url}:{parts.port}"
    segments = [s for s in parts.path.split("/") if s]
    prefix = segments[0] if segments else default_prefix
    return BackendLocation(url=url, index_prefix=prefix)


class FrontendProbe:
    """Bounded-time status check against one frontend."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout_seconds: float,
        default_index_prefix: str,
    ) -> None:
        self._client = client
        self._timeout = timeout_seconds
        self._default_prefix = default_index_prefix

    async def probe(self, base_url: str) -> FrontendOutcome:
        """Return what the frontend at ``base_url`` reports, or `Unreachable`."""
        status_url = f"{base_url.rstrip('/')}/status"
        try:
            resp = await self._client.get(status_url, timeout=self._timeout)
            resp.raise_for_status()
            body = resp.json()
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            return self._unreachable(status_url, f"{type(exc).__name__}: {exc}")
        except ValueError as exc:
            return self._unreachable(status_url, f"status not readable: {exc}")

        return self._read_status(status_url, body)

    def _read_status(self, status_url: str, body: Any) -> FrontendOutcome:
        if not isinstance(body, dict):
            return self._unreachable(status_url, "status body is not a JSON object")
        version = body.get("version")
        if not isinstance(version, str):
            return self._unreachable(status_url, "status body has no version")

        es = body.get("es")
        if not es:
            logger.info("Frontend %s reports no backend location", status_url)
            return FrontendReachable(version=version)
        if not isinstance(es, str):
            return self._unreachable(status_url, "backend location is not a string")
        try:
            location = parse_backend_location(es, self._default_prefix)
        except ValueError as exc:
            return self._unreachable(status_url, str(exc))
        return FrontendReachable(version=version, backend=location)

    @staticmethod
    def _unreachable(url: str, reason: str) -> Unreachable:
        logger.warning("Frontend %s not available: %s", url, reason)
        return Unreachable(url=url, reason=reason)


__all__ = ["FrontendProbe", "parse_backend_location"]
