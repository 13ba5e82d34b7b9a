"""Explicit success/failure values returned by the network probes.

Probes never raise on transport or parse problems. Each one returns either a
`...Reachable` value carrying what was learned, or `Unreachable` carrying a
short reason for logs. Callers branch with ``isinstance`` (or ``match``)
instead of ``try``/``except``.

    >>> outcome = Unreachable(url="http://dev.example:4000/status", reason="timeout")
    >>> outcome.is_reachable()
    False
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field


class RawIndexDescription(BaseModel):
    """One row of the cluster's `_cat/indices?format=json` listing.

    Every column is optional: the index inspector decides which ones are
    required. The backend probe validates rows one at a time and drops the
    ones whose columns have the wrong type, so one odd row never fails the
    whole listing.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    index: str | None = None
    health: str | None = None
    status: str | None = None
    docs_count: str | int | None = Field(default=None, alias="docs.count")
    creation_date: str | int | None = Field(default=None, alias="creation.date")


@dataclass(frozen=True, slots=True)
class BackendLocation:
    """Where a frontend's backend cluster lives, as reported by `/status`."""

    url: str
    index_prefix: str


class _Outcome:
    def is_reachable(self) -> bool:
        """Return ``True`` unless this is an :class:`Unreachable` value."""
        return not isinstance(self, Unreachable)


@dataclass(frozen=True, slots=True)
class Unreachable(_Outcome):
    """The endpoint could not be queried: transport error, timeout, bad status or body."""

    url: str
    reason: str


@dataclass(frozen=True, slots=True)
class FrontendReachable(_Outcome):
    """The frontend answered `/status` with a usable body."""

    version: str
    backend: BackendLocation | None = None


@dataclass(frozen=True, slots=True)
class BackendReachable(_Outcome):
    """Both backend requests (cluster info and index listing) succeeded."""

    name: str
    version: str
    index_prefix: str
    indices: Sequence[RawIndexDescription] = field(default_factory=tuple)


FrontendOutcome = FrontendReachable | Unreachable
BackendOutcome = BackendReachable | Unreachable


__all__ = [
    "BackendLocation",
    "BackendOutcome",
    "BackendReachable",
    "FrontendOutcome",
    "FrontendReachable",
    "RawIndexDescription",
    "Unreachable",
]
