"""Snapshot contracts returned by a probe run.

This module defines the Pydantic v2 models that make up one aggregate
snapshot, leaves first:

- `IndexInfo`        : one managed index on a backend cluster.
- `BackendInfo`      : the Elasticsearch cluster behind a frontend.
- `EnvironmentInfo`  : one configured environment (frontend + optional backend).
- `AggregateSnapshot`: every configured environment, in configured order.

Wire names
----------
Python attributes are snake_case; the external contract is camelCase
(`updatedAt`, `indexPrefix`, `environmentsCount`, ...). An alias generator
maps between the two, and FastAPI serializes by alias.

Immutability
------------
All models are frozen and use tuples for sequences. A snapshot is built once
by the probe step that owns it and is never mutated after it enters the
aggregate.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class EnvironmentStatus(str, Enum):
    """Availability of an environment as seen from its frontend."""

    AVAILABLE = "AVAILABLE"
    BRAGI_NOT_AVAILABLE = "BRAGI_NOT_AVAILABLE"
    ELASTICSEARCH_NOT_AVAILABLE = "ELASTICSEARCH_NOT_AVAILABLE"


class ServerStatus(str, Enum):
    """Availability of a backend cluster."""

    AVAILABLE = "AVAILABLE"
    NOT_AVAILABLE = "NOT_AVAILABLE"


class PrivateStatus(str, Enum):
    """Whether an index holds a private or a public source of places."""

    PRIVATE = "PRIVATE"
    PUBLIC = "PUBLIC"


class _Snapshot(BaseModel):
    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class IndexInfo(_Snapshot):
    """Structured metadata derived from one raw index description."""

    label: str = Field(description="Full index name, e.g. 'munin_admin_fr'.")
    place_type: str = Field(description="Place-type segment of the name, e.g. 'admin'.")
    coverage: str = Field(description="Coverage identifier, without any 'priv.' marker.")
    private: PrivateStatus = Field(description="PRIVATE when the coverage is marked 'priv.'.")
    count: Annotated[int, Field(ge=0, description="Number of documents in the index.")]
    created_at: datetime = Field(description="UTC creation time of the index.")
    updated_at: datetime = Field(description="UTC time the index was observed.")


class BackendInfo(_Snapshot):
    """The Elasticsearch cluster a frontend reported.

    When `status` is NOT_AVAILABLE the cluster could not be queried, so
    `indices` is empty and `name` / `version` are empty strings.
    """

    label: str
    url: str
    name: str = ""
    status: ServerStatus
    version: str = ""
    indices: tuple[IndexInfo, ...] = ()
    index_prefix: str
    updated_at: datetime

    @model_validator(mode="after")
    def _unavailable_is_empty(self) -> BackendInfo:
        empty = not (self.indices or self.name or self.version)
        if self.status is ServerStatus.NOT_AVAILABLE and not empty:
            raise ValueError("an unavailable backend carries no name, version or indices")
        return self


class EnvironmentInfo(_Snapshot):
    """Probe result for one configured environment."""

    label: str
    url: str
    version: str = ""
    status: EnvironmentStatus
    updated_at: datetime
    elasticsearch: BackendInfo | None = None


class AggregateSnapshot(_Snapshot):
    """Every configured environment, in configured order."""

    environments: tuple[EnvironmentInfo, ...] = ()
    environments_count: int = 0

    @classmethod
    def of(cls, environments: Sequence[EnvironmentInfo]) -> AggregateSnapshot:
        """Build an aggregate whose count always matches its environments."""
        return cls(environments=tuple(environments), environments_count=len(environments))

    @model_validator(mode="after")
    def _count_matches(self) -> AggregateSnapshot:
        if self.environments_count != len(self.environments):
            raise ValueError(
                f"environments_count={self.environments_count} "
                f"but {len(self.environments)} environments given"
            )
        return self


__all__ = [
    "AggregateSnapshot",
    "BackendInfo",
    "EnvironmentInfo",
    "EnvironmentStatus",
    "IndexInfo",
    "PrivateStatus",
    "ServerStatus",
]
