"""Well-known ports and volumes of a Plex Media Server."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from .kubernetes import PortProtocol

__all__ = [
    "DISCOVERY_PORTS",
    "DLNA_PORTS",
    "PLEX_PORT",
    "ROKU_PORT",
    "WELL_KNOWN_PORTS",
    "PlexPort",
    "VolumeRole",
]


@dataclass(frozen=True)
class PlexPort:
    """Canonical definition of a port with fixed meaning to Plex.

    Ports in existing objects are matched against these definitions by port
    number, not by name, so an operator renaming a port does not cause a
    duplicate to be added.
    """

    name: str
    """Canonical name of the port."""

    port: int
    """Port number, used as the merge key."""

    protocol: PortProtocol
    """Canonical protocol of the port."""


PLEX_PORT = PlexPort("plex", 32400, PortProtocol.TCP)
"""Main Plex Media Server port, always exposed."""

ROKU_PORT = PlexPort("roku", 8324, PortProtocol.TCP)
"""Port used by Roku clients."""

DLNA_PORTS = (
    PlexPort("dlna-udp", 1900, PortProtocol.UDP),
    PlexPort("dlna-tcp", 32469, PortProtocol.TCP),
)
"""Ports used by the Plex DLNA server."""

DISCOVERY_PORTS = (
    PlexPort("discovery-0", 32410, PortProtocol.UDP),
    PlexPort("discovery-1", 32412, PortProtocol.UDP),
    PlexPort("discovery-2", 32413, PortProtocol.UDP),
    PlexPort("discovery-3", 32414, PortProtocol.UDP),
)
"""Ports used for GDM network discovery."""

WELL_KNOWN_PORTS = (PLEX_PORT, ROKU_PORT, *DLNA_PORTS, *DISCOVERY_PORTS)
"""Every port with a fixed meaning, enabled or not."""


class VolumeRole(StrEnum):
    """Volumes used by the Plex Media Server.

    The value is both the volume name and the name of the corresponding
    claim template.
    """

    CONFIG = "config"
    TRANSCODE = "transcode"
    DATA = "data"

    @property
    def mount_path(self) -> str:
        """Path at which the volume is mounted in the Plex container."""
        return f"/{self.value}"
