"""Public snapshot contracts."""

from __future__ import annotations

from .snapshot import (
    AggregateSnapshot,
    BackendInfo,
    EnvironmentInfo,
    EnvironmentStatus,
    IndexInfo,
    PrivateStatus,
    ServerStatus,
)

__all__ = [
    "AggregateSnapshot",
    "BackendInfo",
    "EnvironmentInfo",
    "EnvironmentStatus",
    "IndexInfo",
    "PrivateStatus",
    "ServerStatus",
]
