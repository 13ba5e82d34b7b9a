"""Core package initializer for bragi-probe.

Holds configuration, the environment list loader, the error hierarchy and
the snapshot contracts shared by probes and query surfaces.
"""

from __future__ import annotations

__all__ = ["__doc__"]
