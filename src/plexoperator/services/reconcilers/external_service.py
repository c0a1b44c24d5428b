"""Driver for the optional external ``Service`` of a Plex server."""

from __future__ import annotations

from datetime import timedelta

from kubernetes_asyncio.client import V1Service, V1ServiceSpec
from structlog.stdlib import BoundLogger

from ...models.domain.kubernetes import PropagationPolicy
from ...models.v1.plex import PlexMediaServer
from ...storage.kubernetes.deleter import ServiceStorage
from ...timeout import Timeout
from ...util import external_service_name
from ..builder.service import ServiceBuilder
from .base import ObjectReconciler

__all__ = ["ExternalServiceReconciler"]


class ExternalServiceReconciler(ObjectReconciler[V1Service]):
    """Converge the external ``Service`` of a Plex server.

    The service exists only while an external service type is set, and is
    named after the ``PlexMediaServer`` with an ``-ext`` suffix. Once the type
    is cleared, the service is deleted.

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

    kind = "external Service"

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
        return self._builder.build_external_service(plex)

    def name(self, plex: PlexMediaServer) -> str:
        return external_service_name(plex.metadata.name)

    def render_spec(
        self, plex: PlexMediaServer, existing: V1ServiceSpec | None
    ) -> V1ServiceSpec:
        return self._builder.render_external_service_spec(plex, existing)

    async def reconcile(self, plex: PlexMediaServer) -> bool:
        if plex.spec.networking.external_service_type:
            return await super().reconcile(plex)

        # No external service wanted. Delete it if it is still there.
        timeout = Timeout(self._request_timeout)
        name = self.name(plex)
        namespace = plex.metadata.namespace
        if not await self._storage.read(name, namespace, timeout):
            return False
        self._bind_logger(plex).info("Deleting object")
        await self._storage.delete(
            name,
            namespace,
            timeout,
            propagation_policy=PropagationPolicy.BACKGROUND,
        )
        return True
