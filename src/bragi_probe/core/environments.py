"""
Environment list loader.

The probed environments come from a JSON file shaped like::

    [
        {"env": "dev", "url": "http://bragi.dev.example:4000"},
        {"env": "prod", "url": "http://bragi.prod.example:4000"}
    ]

The list is read once at startup and handed to the coordinator as an
explicit value, so tests can fabricate their own lists without touching disk.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from bragi_probe.core.errors import EnvironmentConfigError, UnknownEnvironmentError


@dataclass(frozen=True, slots=True)
class EnvironmentSpec:
    """One configured environment: a human-readable name and the frontend base URL."""

    name: str
    base_url: str


class _EnvironmentEntry(BaseModel):
    """On-disk shape of one entry in the environments file."""

    env: str = Field(min_length=1)
    url: str = Field(min_length=1)


_ENTRIES = TypeAdapter(list[_EnvironmentEntry])


def parse_environments(raw: str | bytes) -> list[EnvironmentSpec]:
    """Parse the JSON text of an environments file, preserving its order."""
    try:
        entries = _ENTRIES.validate_json(raw)
    except ValidationError as exc:
        raise EnvironmentConfigError(f"Invalid environments definition: {exc}") from exc
    return [EnvironmentSpec(name=e.env, base_url=e.url.rstrip("/")) for e in entries]


def load_environments(path: Path) -> list[EnvironmentSpec]:
    """Read and parse the environments file at ``path``.

    Raises
    ------
    EnvironmentConfigError
        If the file is missing, unreadable, or does not match the expected shape.
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise EnvironmentConfigError(f"Could not open {path}: {exc}") from exc
    return parse_environments(raw)


def find_environment(environments: Sequence[EnvironmentSpec], name: str) -> EnvironmentSpec:
    """Return the first environment called ``name`` or raise `UnknownEnvironmentError`."""
    for spec in environments:
        if spec.name == name:
            return spec
    raise UnknownEnvironmentError(name, [spec.name for spec in environments])


def dump_environments(environments: Sequence[EnvironmentSpec]) -> str:
    """Render environments back to the on-disk JSON shape."""
    return json.dumps([{"env": s.name, "url": s.base_url} for s in environments], indent=2)


__all__ = [
    "EnvironmentSpec",
    "dump_environments",
    "find_environment",
    "load_environments",
    "parse_environments",
]
