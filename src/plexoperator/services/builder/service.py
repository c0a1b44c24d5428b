"""Construction of the ``Service`` objects in front of Plex."""

from __future__ import annotations

import copy

from kubernetes_asyncio.client import V1Service, V1ServiceSpec

from ...constants import INSTANCE_LABEL
from ...models.domain.kubernetes import ExternalServiceType
from ...models.v1.plex import PlexMediaServer
from ...util import external_service_name
from .metadata import build_metadata
from .ports import enabled_ports, merge_service_ports

__all__ = ["ServiceBuilder"]


class ServiceBuilder:
    """Construct the internal and external services for Plex.

    The internal service is headless and governs the network identity of the
    ``StatefulSet`` pods. The external service is optional and exposes Plex
    outside the cluster as a ``NodePort`` or ``LoadBalancer`` service.
    """

    def build_service(self, plex: PlexMediaServer) -> V1Service:
        """Construct a new internal service."""
        return V1Service(
            api_version="v1",
            kind="Service",
            metadata=build_metadata(plex, plex.metadata.name),
            spec=self.render_service_spec(plex, None),
        )

    def build_external_service(self, plex: PlexMediaServer) -> V1Service:
        """Construct a new external service."""
        name = external_service_name(plex.metadata.name)
        return V1Service(
            api_version="v1",
            kind="Service",
            metadata=build_metadata(plex, name),
            spec=self.render_external_service_spec(plex, None),
        )

    def render_service_spec(
        self, plex: PlexMediaServer, existing: V1ServiceSpec | None
    ) -> V1ServiceSpec:
        """Render the internal service spec on top of an existing one.

        The existing spec is not modified.

        Parameters
        ----------
        plex
            Owning ``PlexMediaServer``.
        existing
            Spec of the existing service, or `None` to render from scratch.

        Returns
        -------
        kubernetes_asyncio.client.V1ServiceSpec
            Desired spec.
        """
        spec = copy.deepcopy(existing) if existing else V1ServiceSpec()
        spec.selector = {INSTANCE_LABEL: plex.metadata.name}
        spec.cluster_ip = "None"
        ports = enabled_ports(plex.spec.networking)
        spec.ports = merge_service_ports(spec.ports, ports)
        return spec

    def render_external_service_spec(
        self, plex: PlexMediaServer, existing: V1ServiceSpec | None
    ) -> V1ServiceSpec:
        """Render the external service spec on top of an existing one.

        The existing spec is not modified. ``LoadBalancer`` services never
        get the DLNA or discovery ports.

        Parameters
        ----------
        plex
            Owning ``PlexMediaServer``.
        existing
            Spec of the existing service, or `None` to render from scratch.

        Returns
        -------
        kubernetes_asyncio.client.V1ServiceSpec
            Desired spec.

        Raises
        ------
        ValueError
            Raised if no external service type is set.
        """
        service_type = plex.spec.networking.external_service_type
        if not service_type:
            raise ValueError("No external service type set")
        spec = copy.deepcopy(existing) if existing else V1ServiceSpec()
        spec.selector = {INSTANCE_LABEL: plex.metadata.name}
        spec.type = service_type.value
        load_balancer = service_type == ExternalServiceType.LOAD_BALANCER
        networking = plex.spec.networking
        ports = enabled_ports(networking, load_balancer=load_balancer)
        spec.ports = merge_service_ports(spec.ports, ports)
        return spec
