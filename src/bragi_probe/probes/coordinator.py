"""
Probe coordinator: concurrent fan-out over every configured environment.

One asyncio task per environment, each with its own HTTP client and its own
snapshot value. Nothing is shared between tasks; the aggregate is assembled
only after the join, in configured order, whatever order the tasks finished
in.

Failure isolation
-----------------
- An environment whose probe chain degrades is reported as data (status
  values), never as an exception.
- A task that still raises unexpectedly is logged and reported as
  BRAGI_NOT_AVAILABLE.
- Tasks still running when the run deadline expires are cancelled and
  reported as BRAGI_NOT_AVAILABLE.

There is no retry and no caching: every `collect()` is a fresh, single
best-effort attempt.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Sequence
from datetime import UTC, datetime

import httpx

from bragi_probe.core.contracts.snapshot import (
    AggregateSnapshot,
    EnvironmentInfo,
    EnvironmentStatus,
)
from bragi_probe.core.environments import EnvironmentSpec, find_environment
from bragi_probe.core.settings import Settings, get_logger, load_settings

from .environment import EnvironmentProber, frontend_unavailable

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(UTC)


class ProbeCoordinator:
    """Probe a fixed list of environments concurrently and aggregate the results.

    Parameters
    ----------
    environments:
        The configured environments, in the order they must appear in the output.
    settings:
        Timeouts and defaults; falls back to the cached process settings.
    transport:
        Optional httpx transport for every client the coordinator opens. Tests
        pass an `httpx.MockTransport` here.
    clock:
        Source of the run's ``started_at`` timestamp.
    """

    def __init__(
        self,
        environments: Sequence[EnvironmentSpec],
        *,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Clock = utc_now,
    ) -> None:
        self._environments = tuple(environments)
        self._settings = settings or load_settings()
        self._transport = transport
        self._clock = clock

    @property
    def environments(self) -> tuple[EnvironmentSpec, ...]:
        return self._environments

    async def collect(self) -> AggregateSnapshot:
        """Run one probe per environment and return the complete aggregate."""
        started_at = self._clock()
        if not self._environments:
            return AggregateSnapshot.of([])

        logger.info("Probing %d environments", len(self._environments))
        snapshots = await self._gather(self._environments, started_at)
        logger.info(
            "Probe run finished: %d/%d environments available",
            sum(1 for s in snapshots if s.status is EnvironmentStatus.AVAILABLE),
            len(snapshots),
        )
        return AggregateSnapshot.of(snapshots)

    async def collect_one(self, name: str) -> EnvironmentInfo:
        """Probe the environment called ``name``.

        Raises
        ------
        UnknownEnvironmentError
            If ``name`` is not configured.
        """
        spec = find_environment(self._environments, name)
        (snapshot,) = await self._gather((spec,), self._clock())
        return snapshot

    async def _gather(
        self,
        environments: Sequence[EnvironmentSpec],
        started_at: datetime,
    ) -> list[EnvironmentInfo]:
        tasks = [
            asyncio.create_task(self._probe(spec, started_at), name=f"probe:{spec.name}")
            for spec in environments
        ]
        _, pending = await asyncio.wait(tasks, timeout=self._settings.probe_deadline_seconds)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

        snapshots: list[EnvironmentInfo] = []
        for spec, task in zip(environments, tasks, strict=True):
            snapshots.append(self._settle(spec, task, started_at, timed_out=task in pending))
        return snapshots

    def _settle(
        self,
        spec: EnvironmentSpec,
        task: asyncio.Task[EnvironmentInfo],
        started_at: datetime,
        *,
        timed_out: bool,
    ) -> EnvironmentInfo:
        if timed_out or task.cancelled():
            logger.warning(
                "Environment %s did not finish within %.1fs",
                spec.name,
                self._settings.probe_deadline_seconds,
            )
            return frontend_unavailable(spec, started_at)

        exc = task.exception()
        if exc is None:
            return task.result()
        if isinstance(exc, MemoryError):
            raise exc
        logger.error("Probe of environment %s failed", spec.name, exc_info=exc)
        return frontend_unavailable(spec, started_at)

    async def _probe(self, spec: EnvironmentSpec, started_at: datetime) -> EnvironmentInfo:
        async with httpx.AsyncClient(transport=self._transport, follow_redirects=True) as client:
            prober = EnvironmentProber(
                client,
                timeout_seconds=self._settings.probe_timeout_seconds,
                default_index_prefix=self._settings.default_index_prefix,
            )
            return await prober.run(spec, started_at)


__all__ = ["Clock", "ProbeCoordinator", "utc_now"]
