"""
Index inspector: raw `_cat/indices` rows -> `IndexInfo`.

Managed index names follow the layout::

    <prefix>_<placeType>_<coverage>[_<YYYYMMDD>_<HHMMSS>]

e.g. ``munin_admin_fr`` or ``munin_poi_priv.acme_20200612_093015``. A coverage
starting with ``priv.`` marks a private index; the marker is stripped.

Everything here is pure: same row and prefix in, same result out. A row that
cannot be fully derived yields ``None`` and is dropped on its own, without
affecting its siblings or the backend's availability.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, datetime

from bragi_probe.core.contracts.snapshot import IndexInfo, PrivateStatus
from bragi_probe.core.settings import get_logger

from .outcomes import RawIndexDescription

logger = get_logger(__name__)

PRIVATE_MARKER = "priv."


def inspect_index(
    raw: RawIndexDescription,
    index_prefix: str,
    observed_at: datetime,
) -> IndexInfo | None:
    """Derive an `IndexInfo` from one listing row, or ``None`` if it does not qualify.

    ``None`` covers both indices outside the ``index_prefix`` namespace and
    managed indices with a missing or malformed name, document count, or
    creation time.
    """
    name = raw.index
    if not name or not name.startswith(f"{index_prefix}_"):
        return None

    segments = name[len(index_prefix) + 1 :].split("_")
    if len(segments) < 2 or not segments[0] or not segments[1]:
        return _skip(name, "name lacks place type or coverage")
    place_type, coverage = segments[0], segments[1]

    private = PrivateStatus.PUBLIC
    if coverage.startswith(PRIVATE_MARKER):
        private = PrivateStatus.PRIVATE
        coverage = coverage[len(PRIVATE_MARKER) :]
        if not coverage:
            return _skip(name, "empty private coverage")

    count = _parse_count(raw.docs_count)
    if count is None:
        return _skip(name, f"bad docs.count {raw.docs_count!r}")

    created_at = _created_from_name(segments[2:]) or _created_from_epoch_ms(raw.creation_date)
    if created_at is None:
        return _skip(name, "no creation time")

    return IndexInfo(
        label=name,
        place_type=place_type,
        coverage=coverage,
        private=private,
        count=count,
        created_at=created_at,
        updated_at=observed_at,
    )


def inspect_indices(
    listing: Iterable[RawIndexDescription],
    index_prefix: str,
    observed_at: datetime,
) -> tuple[IndexInfo, ...]:
    """Apply `inspect_index` over a listing, keeping source order."""
    found = (inspect_index(raw, index_prefix, observed_at) for raw in listing)
    return tuple(info for info in found if info is not None)


def _parse_count(value: str | int | None) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        count = int(value)
    except ValueError:
        return None
    return count if count >= 0 else None


def _created_from_name(suffix: list[str]) -> datetime | None:
    if len(suffix) < 2:
        return None
    date_part, time_part = suffix[0], suffix[1]
    if len(date_part) != 8 or len(time_part) != 6:
        return None
    try:
        stamp = datetime.strptime(date_part + time_part, "%Y%m%d%H%M%S")
    except ValueError:
        return None
    return stamp.replace(tzinfo=UTC)


def _created_from_epoch_ms(value: str | int | None) -> datetime | None:
    if isinstance(value, bool) or value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value) / 1000, tz=UTC)
    except (ValueError, OverflowError, OSError):
        return None


def _skip(name: str, reason: str) -> None:
    logger.debug("Skipping index %s: %s", name, reason)
    return None


__all__ = ["PRIVATE_MARKER", "inspect_index", "inspect_indices"]
