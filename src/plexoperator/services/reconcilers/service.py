"""Driver for the headless ``Service`` of a Plex server."""

from __future__ import annotations

from datetime import timedelta

from kubernetes_asyncio.client import V1Service, V1ServiceSpec
from structlog.stdlib import BoundLogger

from ...models.v1.plex import PlexMediaServer
from ...storage.kubernetes.deleter import ServiceStorage
from ..builder.service import ServiceBuilder
from .base import ObjectReconciler

__all__ = ["ServiceReconciler"]


class ServiceReconciler(ObjectReconciler[V1Service]):
    """Converge the headless ``Service`` of a Plex server.

    The service has the same name as the ``PlexMediaServer``.

    Parameters
    ----------
    builder
        Builder for ``Service`` objects.
    storage
        Storage for ``Service`` objects.
    request_timeout
        Timeout for the Kubernetes calls of one pass.
    logger
        Logger to use.
    """

    kind = "Service"

    def __init__(
        self,
        *,
        builder: ServiceBuilder,
        storage: ServiceStorage,
        request_timeout: timedelta,
        logger: BoundLogger,
    ) -> None:
        super().__init__(
            storage=storage, request_timeout=request_timeout, logger=logger
        )
        self._builder = builder

    def build(self, plex: PlexMediaServer) -> V1Service:
        return self._builder.build_service(plex)

    def name(self, plex: PlexMediaServer) -> str:
        return plex.metadata.name

    def render_spec(
        self, plex: PlexMediaServer, existing: V1ServiceSpec | None
    ) -> V1ServiceSpec:
        return self._builder.render_service_spec(plex, existing)
