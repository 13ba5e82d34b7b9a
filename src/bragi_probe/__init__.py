"""bragi-probe: availability and index inventory for Bragi/Elasticsearch environments."""

from __future__ import annotations

__all__ = ["__version__"]
__version__ = "0.3.0"
