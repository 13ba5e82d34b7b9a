"""bragi-probe error hierarchy.

Probe runs never raise: transport and parse failures are folded into status
values inside the snapshot. The exceptions below only surface at
configuration and lookup time, where the API and CLI boundaries catch them.

Hierarchy:
    BragiProbeError
    ├── EnvironmentConfigError   # unreadable or invalid environments file
    └── UnknownEnvironmentError  # lookup of a name that is not configured
"""

from __future__ import annotations

from collections.abc import Sequence


class BragiProbeError(Exception):
    """Base class for all bragi-probe errors."""


class EnvironmentConfigError(BragiProbeError):
    """The environments file could not be read or did not validate."""


class UnknownEnvironmentError(BragiProbeError):
    """A single-environment lookup named an environment that is not configured."""

    def __init__(self, name: str, known: Sequence[str]) -> None:
        self.name = name
        self.known = tuple(known)
        listing = ", ".join(self.known) or "<none>"
        super().__init__(f"{name} is not a known environment. Use one of {listing}")


__all__ = ["BragiProbeError", "EnvironmentConfigError", "UnknownEnvironmentError"]
