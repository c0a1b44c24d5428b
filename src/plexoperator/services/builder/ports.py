"""Merging of well-known Plex ports into existing port lists."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import TypeVar

from kubernetes_asyncio.client import V1ContainerPort, V1ServicePort

from ...models.domain.kubernetes import PortProtocol
from ...models.domain.plex import (
    DISCOVERY_PORTS,
    DLNA_PORTS,
    PLEX_PORT,
    ROKU_PORT,
    WELL_KNOWN_PORTS,
    PlexPort,
)
from ...models.v1.plex import PlexNetworkSpec

#: Kubernetes port model being merged.
P = TypeVar("P", V1ContainerPort, V1ServicePort)

__all__ = [
    "enabled_ports",
    "merge_container_ports",
    "merge_service_ports",
]


def enabled_ports(
    networking: PlexNetworkSpec, *, load_balancer: bool = False
) -> list[PlexPort]:
    """Determine which well-known ports should be exposed.

    Parameters
    ----------
    networking
        Network options of the ``PlexMediaServer``.
    load_balancer
        Whether the ports are for a ``LoadBalancer`` service. Load balancers
        cannot mix TCP and UDP listeners, so only the TCP ports are exposed
        through one.

    Returns
    -------
    list of PlexPort
        Enabled ports, sorted by port number.
    """
    ports = [PLEX_PORT]
    if networking.enable_roku:
        ports.append(ROKU_PORT)
    if networking.enable_dlna:
        ports.extend(DLNA_PORTS)
    if networking.enable_discovery:
        ports.extend(DISCOVERY_PORTS)
    if load_balancer:
        ports = [p for p in ports if p.protocol == PortProtocol.TCP]
    return sorted(ports, key=lambda p: p.port)


def merge_container_ports(
    existing: Iterable[V1ContainerPort] | None, enabled: Iterable[PlexPort]
) -> list[V1ContainerPort]:
    """Merge the enabled ports into the ports of the Plex container.

    See `_merge_ports` for the merge rules.
    """
    return _merge_ports(
        existing or [],
        enabled,
        get_number=lambda p: p.container_port,
        create=lambda d: V1ContainerPort(container_port=d.port),
    )


def merge_service_ports(
    existing: Iterable[V1ServicePort] | None, enabled: Iterable[PlexPort]
) -> list[V1ServicePort]:
    """Merge the enabled ports into the ports of a ``Service``.

    Ports the API server filled in on an existing entry, such as the node
    port or target port, are kept.
    """
    return _merge_ports(
        existing or [],
        enabled,
        get_number=lambda p: p.port,
        create=lambda d: V1ServicePort(port=d.port),
    )


def _merge_ports(
    existing: Iterable[P],
    enabled: Iterable[PlexPort],
    *,
    get_number: Callable[[P], int],
    create: Callable[[PlexPort], P],
) -> list[P]:
    """Merge well-known ports into an existing list of ports.

    Ports with a well-known number are taken out of the list, and the
    enabled ones are added back at the end in port number order with their
    canonical name and protocol, on top of the existing entry for that
    number if there was one. All other ports are kept, in their existing
    order, ahead of the well-known ones. Unknown ports are never merged
    with each other, so one number may appear once per protocol. If an
    unknown port has the name of an enabled well-known port, the well-known
    port wins and the unknown one is dropped. If the same well-known number
    appears more than once, the last entry wins.

    The existing port objects are modified in place, so callers should pass
    a copy.
    """
    well_known = {p.port for p in WELL_KNOWN_PORTS}
    found: dict[int, P] = {}
    unknown: list[P] = []
    for port in existing:
        number = get_number(port)
        if number in well_known:
            found[number] = port
        else:
            unknown.append(port)

    enabled = list(enabled)
    names = {p.name for p in enabled}
    result = [p for p in unknown if p.name not in names]
    for definition in enabled:
        port = found.get(definition.port) or create(definition)
        port.name = definition.name
        port.protocol = definition.protocol.value
        result.append(port)
    return result
