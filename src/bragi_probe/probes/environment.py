"""
Per-environment probe chain.

One run walks frontend -> backend -> indices, each stage feeding the next,
and always ends in exactly one `EnvironmentInfo`:

    frontend unreachable              -> BRAGI_NOT_AVAILABLE, no elasticsearch
    frontend up, no backend location  -> AVAILABLE, no elasticsearch
    frontend up, backend unreachable  -> AVAILABLE, elasticsearch NOT_AVAILABLE
    frontend up, backend up           -> AVAILABLE, elasticsearch AVAILABLE + indices

Every timestamp in the result is the run's ``started_at`` so that snapshots
from the same run compare equal on time.
"""

from __future__ import annotations

from datetime import datetime

import httpx

from bragi_probe.core.contracts.snapshot import (
    BackendInfo,
    EnvironmentInfo,
    EnvironmentStatus,
    ServerStatus,
)
from bragi_probe.core.environments import EnvironmentSpec
from bragi_probe.core.settings import get_logger

from .backend import BackendProbe
from .frontend import FrontendProbe
from .inspector import inspect_indices
from .outcomes import BackendLocation, Unreachable

logger = get_logger(__name__)


def frontend_unavailable(spec: EnvironmentSpec, observed_at: datetime) -> EnvironmentInfo:
    """The snapshot reported when an environment's frontend could not be reached."""
    return EnvironmentInfo(
        label=spec.name,
        url=spec.base_url,
        status=EnvironmentStatus.BRAGI_NOT_AVAILABLE,
        updated_at=observed_at,
    )


def backend_label(spec: EnvironmentSpec) -> str:
    return f"elasticsearch_{spec.name}"


class EnvironmentProber:
    """Runs the frontend/backend/index chain for one environment."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        timeout_seconds: float,
        default_index_prefix: str,
    ) -> None:
        self._frontend = FrontendProbe(
            client,
            timeout_seconds=timeout_seconds,
            default_index_prefix=default_index_prefix,
        )
        self._backend = BackendProbe(client, timeout_seconds=timeout_seconds)

    async def run(self, spec: EnvironmentSpec, started_at: datetime) -> EnvironmentInfo:
        """Probe ``spec`` end to end and return its snapshot."""
        frontend = await self._frontend.probe(spec.base_url)
        if isinstance(frontend, Unreachable):
            return frontend_unavailable(spec, started_at)

        backend = None
        if frontend.backend is not None:
            backend = await self._probe_backend(spec, frontend.backend, started_at)

        info = EnvironmentInfo(
            # Same label whether or not the frontend answered; status carries the outcome.
            label=spec.name,
            url=spec.base_url,
            version=frontend.version,
            status=EnvironmentStatus.AVAILABLE,
            updated_at=started_at,
            elasticsearch=backend,
        )
        logger.info(
            "Environment %s: frontend %s, backend %s",
            spec.name,
            frontend.version,
            backend.status.value if backend else "unknown",
        )
        return info

    async def _probe_backend(
        self,
        spec: EnvironmentSpec,
        location: BackendLocation,
        started_at: datetime,
    ) -> BackendInfo:
        outcome = await self._backend.probe(location)
        if isinstance(outcome, Unreachable):
            return BackendInfo(
                label=backend_label(spec),
                url=location.url,
                status=ServerStatus.NOT_AVAILABLE,
                index_prefix=location.index_prefix,
                updated_at=started_at,
            )
        return BackendInfo(
            label=backend_label(spec),
            url=location.url,
            name=outcome.name,
            status=ServerStatus.AVAILABLE,
            version=outcome.version,
            indices=inspect_indices(outcome.indices, outcome.index_prefix, started_at),
            index_prefix=outcome.index_prefix,
            updated_at=started_at,
        )


__all__ = ["EnvironmentProber", "backend_label", "frontend_unavailable"]
