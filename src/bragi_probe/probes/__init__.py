"""Probe pipeline: frontend and backend probes, index inspection, orchestration.

Currently exposed:

- :class:`ProbeCoordinator`: concurrent probe of every configured environment.
- :class:`EnvironmentProber`: the frontend -> backend -> indices chain for one.
- :func:`inspect_index`: pure derivation of one index's metadata.
"""

from __future__ import annotations

from .coordinator import ProbeCoordinator
from .environment import EnvironmentProber
from .inspector import inspect_index, inspect_indices

__all__ = ["EnvironmentProber", "ProbeCoordinator", "inspect_index", "inspect_indices"]
