"""
API Routes for environment snapshots.

Endpoints
---------
- `GET /environments`: probe every configured environment and return the aggregate.
- `GET /environments/{name}`: probe a single configured environment.

Every request triggers a fresh probe run; nothing is cached between calls.
Degraded environments come back as status values inside a 200 response.
"""

from __future__ import annotations

from fastapi import APIRouter, Request

from bragi_probe.core.contracts.snapshot import AggregateSnapshot, EnvironmentInfo
from bragi_probe.probes.coordinator import ProbeCoordinator

router = APIRouter(tags=["Environments"])


def _coordinator(request: Request) -> ProbeCoordinator:
    coordinator: ProbeCoordinator = request.app.state.coordinator
    return coordinator


@router.get(
    "/environments",
    response_model=AggregateSnapshot,
    summary="List all environments",
)
async def list_environments(request: Request) -> AggregateSnapshot:
    """
    Return a list of all environments.

    The response has the shape ``{environments: [...], environmentsCount: n}``
    with one entry per configured environment, in configured order.
    """
    return await _coordinator(request).collect()


@router.get(
    "/environments/{name}",
    response_model=EnvironmentInfo,
    summary="Probe one environment",
)
async def get_environment(name: str, request: Request) -> EnvironmentInfo:
    """Probe the environment called ``name``; unknown names yield 404."""
    return await _coordinator(request).collect_one(name)


__all__ = ["router"]
