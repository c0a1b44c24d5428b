"""General utility functions."""

from __future__ import annotations

from .constants import EXTERNAL_SERVICE_SUFFIX

__all__ = ["external_service_name"]


def external_service_name(name: str) -> str:
    """Name of the external ``Service`` for a ``PlexMediaServer``."""
    return name + EXTERNAL_SERVICE_SUFFIX
